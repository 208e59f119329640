"""
Pure ASGI middleware that logs API requests and responses.

Logs method, path, status, duration and (sanitized, truncated) bodies.
Chat messages carry personal health questions, so bodies are only written
at DEBUG level.
"""

import json
import logging
import time
from typing import Optional
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.logging_config import filter_sensitive_data, truncate_large_data

logger = logging.getLogger(__name__)

MAX_BODY_LOG_LENGTH = 2000


def _sanitize_body(data: bytes) -> str:
    """Decode a body, mask credential-like JSON keys and truncate it."""
    text = data.decode("utf-8", errors="ignore")
    try:
        text = json.dumps(filter_sensitive_data(json.loads(text)), ensure_ascii=False)
    except json.JSONDecodeError:
        pass
    return truncate_large_data(text, max_length=MAX_BODY_LOG_LENGTH)


def _extract_error_reason(body_text: str) -> Optional[str]:
    """Pull FastAPI's ``detail`` (or a similar field) out of an error body."""
    try:
        payload = json.loads(body_text)
    except json.JSONDecodeError:
        return truncate_large_data(body_text, max_length=500) if body_text else None
    if isinstance(payload, dict):
        for key in ("detail", "message", "error"):
            if payload.get(key):
                return truncate_large_data(str(payload[key]), max_length=500)
    return None


class RequestLoggingMiddleware:
    """Log every HTTP request passing through the app."""

    def __init__(self, app: ASGIApp, exclude_paths: Optional[list] = None):
        """
        Args:
            app: The ASGI application
            exclude_paths: Paths that are passed through without logging
        """
        self.app = app
        self.exclude_paths = exclude_paths or ["/health", "/"]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("path", "") in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "")
        client = scope.get("client")
        request_chunks: list = []
        response_chunks: list = []
        status_code = 0

        async def logging_receive() -> Message:
            message = await receive()
            if message["type"] == "http.request":
                request_chunks.append(message.get("body", b""))
            return message

        async def logging_send(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
            elif message["type"] == "http.response.body":
                response_chunks.append(message.get("body", b""))
            await send(message)

        logger.info(
            f"Request started: {method} {path}",
            extra={"extra_fields": {
                "method": method,
                "path": path,
                "client": client[0] if client else None,
            }}
        )

        try:
            await self.app(scope, logging_receive, logging_send)
        except Exception as e:
            logger.error(
                f"Request failed: {method} {path} - {e}",
                exc_info=True,
                extra={"extra_fields": {"method": method, "path": path, "error": str(e)}}
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        response_text = _sanitize_body(b"".join(response_chunks))

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Request body: {_sanitize_body(b''.join(request_chunks)) or '-'} | "
                f"Response body: {response_text or '-'}"
            )

        if status_code < 400:
            log_level = logging.INFO
        elif status_code < 500:
            log_level = logging.WARNING
        else:
            log_level = logging.ERROR

        error_reason = _extract_error_reason(response_text) if status_code >= 400 else None
        message = f"Request completed: {method} {path} - {status_code} ({duration_ms:.2f}ms)"
        if error_reason:
            message += f" | error_reason={error_reason}"

        logger.log(
            log_level,
            message,
            extra={"extra_fields": {
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": duration_ms,
                "error_reason": error_reason,
            }}
        )
