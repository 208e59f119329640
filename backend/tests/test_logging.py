"""
Unit tests for logging configuration and the request logging middleware.
"""

import json
import logging
from types import SimpleNamespace

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from app.core.logging_config import (
    ColoredFormatter, JSONFormatter, filter_sensitive_data, setup_logging, truncate_large_data,
)
from app.middleware import RequestLoggingMiddleware


def _record(message="hello", level=logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord("app.test", level, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    """Tests for the console and JSON formatters."""

    def test_json_formatter(self):
        line = JSONFormatter().format(_record(extra_fields={"intent": "steps"}))
        data = json.loads(line)
        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["intent"] == "steps"

    def test_json_formatter_static_fields(self):
        formatter = JSONFormatter({"service": "HealthChat", "version": None})
        data = json.loads(formatter.format(_record()))
        assert data["service"] == "HealthChat"
        assert "version" not in data

    def test_colored_formatter_restores_levelname(self):
        record = _record(level=logging.WARNING)
        output = ColoredFormatter("%(levelname)s %(message)s").format(record)
        assert "\033[33m" in output
        assert record.levelname == "WARNING"


class TestHelpers:
    """Tests for sensitive data filtering and truncation."""

    def test_filter_nested(self):
        data = {"user": {"api_key": "abc", "name": "x"}, "items": [{"Token": "t"}]}
        assert filter_sensitive_data(data) == {
            "user": {"api_key": "***FILTERED***", "name": "x"},
            "items": [{"Token": "***FILTERED***"}],
        }

    def test_truncate(self):
        assert truncate_large_data("abc", max_length=5) == "abc"
        assert truncate_large_data("abcdef", max_length=3).startswith("abc... (truncated, total length: 6)")


class TestSetupLogging:
    """Tests for handler configuration."""

    def test_file_handler_writes_json(self, tmp_path):
        config = SimpleNamespace(
            log_level="debug",
            log_console_enabled=False,
            log_file_enabled=True,
            log_file_path=str(tmp_path / "logs" / "app.log"),
            log_json_format=True,
            app_name="HealthChat",
            app_version="1.0.0",
        )
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging(config)
            assert root.level == logging.DEBUG
            logging.getLogger("app.test").info("ready", extra={"extra_fields": {"k": 1}})
            for handler in root.handlers:
                handler.flush()
            lines = (tmp_path / "logs" / "app.log").read_text(encoding="utf-8").splitlines()
            record = json.loads(lines[-1])
            assert record["k"] == 1
            assert record["service"] == "HealthChat"

            uvicorn_error = logging.getLogger("uvicorn.error")
            assert uvicorn_error.handlers == []
            assert uvicorn_error.propagate is True
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers = saved_handlers
            root.setLevel(saved_level)


class TestRequestLoggingMiddleware:
    """Tests for the ASGI request logger."""

    @staticmethod
    def _client():
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)

        @app.get("/ok")
        async def ok():
            return {"status": "ok"}

        @app.get("/missing")
        async def missing():
            raise HTTPException(status_code=404, detail="nothing here")

        return TestClient(app)

    def test_success_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="app.middleware.logging_middleware"):
            response = self._client().get("/ok")
        assert response.status_code == 200
        assert any("Request completed: GET /ok - 200" in r.getMessage() for r in caplog.records)

    def test_error_reason_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="app.middleware.logging_middleware"):
            self._client().get("/missing")
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert warnings
        assert "error_reason=nothing here" in warnings[-1].getMessage()
