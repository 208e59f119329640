"""
Health Assistant - Coordinates interpretation, data fetch and response composition.
"""

import logging
from datetime import datetime
from typing import Awaitable, Callable, Dict

from .query_interpreter import QueryInterpreter
from .response_composer import compose, compose_error, intercept_small_talk
from ..core.exceptions import HealthDataError
from ..models import DateRange, Intent, RawMetricResult
from ..storage import HealthDataStore

logger = logging.getLogger(__name__)


class HealthAssistant:
    """
    Answers natural-language questions about the user's health data.

    Stateless between calls: the same (text, now) against the same data
    always yields the same reply.
    """

    def __init__(self, store: HealthDataStore, first_weekday: int = 0):
        """
        Initialize the assistant.

        Args:
            store: Health data source
            first_weekday: First day of the week for week ranges (0 = Monday)
        """
        self.store = store
        self.interpreter = QueryInterpreter(first_weekday)
        self._fetchers: Dict[Intent, Callable[[DateRange], Awaitable[RawMetricResult]]] = {
            Intent.STEPS: store.get_steps,
            Intent.HEART_RATE: store.get_heart_rate,
            Intent.SLEEP: store.get_sleep,
            Intent.ACTIVE_ENERGY: store.get_active_energy,
        }

    async def answer(self, user_text: str, now: datetime) -> str:
        """
        Reply to a user message. Never raises.

        Args:
            user_text: Raw message as typed by the user
            now: Current time, used to resolve relative dates

        Returns:
            Displayable reply text
        """
        logger.info(f"Answering message: {user_text[:100]}")

        reply = intercept_small_talk(user_text)
        if reply is not None:
            logger.debug("Message handled as small talk, no data fetch")
            return reply

        intent, date_range = self.interpreter.interpret(user_text, now)
        if intent == Intent.UNKNOWN:
            logger.debug("Unknown intent, replying with help")
            return compose(intent, text=user_text)

        try:
            metric = await self._fetchers[intent](date_range)
            reply = compose(intent, metric)
        except Exception as e:
            reply = self._handle_fetch_error(intent, e)

        logger.info(f"Answer completed: intent={intent.value}, response_length={len(reply)} chars")
        return reply

    def _handle_fetch_error(self, intent: Intent, error: Exception) -> str:
        if isinstance(error, HealthDataError):
            logger.warning(
                f"Health data unavailable for {intent.value}: {error}",
                extra={"extra_fields": {"intent": intent.value, "error_type": type(error).__name__}}
            )
        else:
            logger.error(
                f"Answering {intent.value} query failed: {error}",
                exc_info=True,
                extra={"extra_fields": {"intent": intent.value, "error": str(error)}}
            )
        return compose_error(intent, error)
