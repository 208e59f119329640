"""
Response Composer - Turns fetched health data into conversational replies.

Also owns the canned replies: small talk, help, unknown questions and the
messages shown when the health data could not be read.
"""

import logging
import re
from datetime import datetime
from typing import List, Optional, Union

from ..core.exceptions import AuthorizationError, NoDataError
from ..models import HeartRateData, Intent, RawMetricResult, SleepSession

logger = logging.getLogger(__name__)

STEP_GOAL = 10000

EMPTY_MESSAGE_REPLY = "I'm here to help! Ask me about your health data."

GREETING_REPLY = (
    "Hello! I'm your health assistant. I can help you understand your health data. "
    "Try asking about your steps, heart rate, sleep, or calories burned."
)

HELP_REPLY = """I can help you with:
• Steps: "How many steps today?"
• Heart rate: "What's my heart rate?"
• Sleep: "How did I sleep?"
• Calories: "How many calories did I burn?"

Just ask me in natural language! If you haven't granted access to your health data yet, I'll help you do that."""

CLARIFY_REPLY = (
    "I'd love to help! Could you be more specific? For example:\n"
    "• 'How many steps today?'\n"
    "• 'What's my heart rate?'\n"
    "• 'How did I sleep?'\n"
    "• 'How many calories did I burn?'\n\n"
    "Or type 'help' to see all the things I can help with!"
)

UNKNOWN_REPLY = (
    "I'm not sure I understood that. I'm great at answering questions about your health data! "
    "Try asking:\n\n"
    "• 'How many steps today?'\n"
    "• 'What's my heart rate?'\n"
    "• 'How did I sleep?'\n"
    "• 'How many calories did I burn?'\n\n"
    "Or type 'help' for more options!"
)

AUTHORIZATION_REPLY = (
    "I need access to your health data to answer that question. "
    "Please grant access in Settings > Privacy & Security > Health, then ask me again."
)

ACCESS_FAILED_REPLY = (
    "I had trouble accessing your health data. Make sure health data permissions are granted "
    "and that you have health data available for that time period."
)

NO_DATA_REPLIES = {
    Intent.STEPS: "I don't have step data for that period.",
    Intent.HEART_RATE: (
        "I don't have heart rate data for that period. "
        "Make sure your Apple Watch is recording your heart rate."
    ),
    Intent.SLEEP: (
        "I don't have sleep data for that period. "
        "Make sure your Apple Watch is tracking your sleep."
    ),
    Intent.ACTIVE_ENERGY: "I don't have active calorie data for that period.",
}

GREETINGS = {"hello", "hi", "hey"}

# Word that follows the number in pre-formatted data sentences
NUMBER_ANCHORS = {
    Intent.STEPS: "steps",
    Intent.HEART_RATE: "bpm",
    Intent.ACTIVE_ENERGY: "calories",
}

_DIGITS = re.compile(r"\d+")


def intercept_small_talk(text: str) -> Optional[str]:
    """
    Reply to messages that need no health data.

    Returns:
        The reply, or None when the message should be interpreted as a query
    """
    lowered = text.strip().lower()
    if not lowered:
        return EMPTY_MESSAGE_REPLY
    if lowered in GREETINGS:
        return GREETING_REPLY
    if "help" in lowered:
        return HELP_REPLY
    return None


def unknown_query_reply(text: str) -> str:
    lowered = text.strip().lower()
    if any(phrase in lowered for phrase in ("what", "tell me", "show me")):
        return CLARIFY_REPLY
    return UNKNOWN_REPLY


def extract_number_before(text: str, anchor: str) -> Optional[int]:
    """
    Return the last run of digits before the first occurrence of ``anchor``.

    >>> extract_number_before("The user took 8500 steps between Oct 1 and Oct 2.", "steps")
    8500
    """
    index = text.lower().find(anchor.lower())
    if index < 0:
        return None
    runs = _DIGITS.findall(text[:index])
    if not runs:
        return None
    return int(runs[-1])


def steps_context(count: int) -> str:
    if count >= STEP_GOAL:
        return "Great job hitting your 10,000 step goal! 🎉"
    if count >= 8000:
        return f"You're doing well! Just {STEP_GOAL - count} more steps to reach your goal."
    return "Keep moving! Try to reach 10,000 steps today."


def heart_rate_context(bpm: float) -> str:
    if bpm < 60:
        return "Your heart rate is on the lower side, which is normal for well-trained athletes."
    if bpm > 100:
        return "Your heart rate is elevated. This could be from exercise or stress."
    return "Your heart rate is in a healthy range."


def calories_context(calories: float) -> str:
    if calories >= 500:
        return "Excellent activity level today! 💪"
    if calories >= 300:
        return "Good activity! Keep it up."
    return "Try to get more movement in today."


def format_short_datetime(moment: datetime) -> str:
    """Short date and time, e.g. ``10/18/26, 11:05 PM``."""
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{moment.month}/{moment.day}/{moment:%y}, {hour}:{moment:%M} {meridiem}"


def _compose_steps(count: int) -> str:
    return f"You've taken {count} steps. {steps_context(count)}"


def _compose_heart_rate(data: HeartRateData) -> str:
    if data.average is None:
        return NO_DATA_REPLIES[Intent.HEART_RATE]
    return f"Your average heart rate is {round(data.average)} bpm. {heart_rate_context(data.average)}"


def _compose_active_energy(calories: float) -> str:
    return f"You've burned {round(calories)} active calories. {calories_context(calories)}"


def _compose_sleep(sessions: List[SleepSession]) -> str:
    if not sessions:
        return NO_DATA_REPLIES[Intent.SLEEP]

    lines = []
    for index, session in enumerate(sorted(sessions, key=lambda s: s.start), 1):
        seconds = int(session.duration)
        hours, minutes = seconds // 3600, (seconds % 3600) // 60
        lines.append(
            f"Night {index}: {hours}h {minutes}m of sleep from "
            f"{format_short_datetime(session.start)} to {format_short_datetime(session.end)}."
        )
    return "Here's your sleep data:\n\n" + "\n".join(lines)


def _compose_from_text(intent: Intent, text: str) -> str:
    """Re-extract the number from a sentence produced by a data layer."""
    if intent == Intent.SLEEP:
        if "no sleep data" in text.lower():
            return NO_DATA_REPLIES[Intent.SLEEP]
        return text

    value = extract_number_before(text, NUMBER_ANCHORS[intent])
    if value is None:
        logger.debug(f"No number before '{NUMBER_ANCHORS[intent]}' in data text, returning it as is")
        return text

    if intent == Intent.STEPS:
        return _compose_steps(value)
    if intent == Intent.HEART_RATE:
        return f"Your average heart rate is {value} bpm. {heart_rate_context(value)}"
    return _compose_active_energy(value)


def compose(intent: Intent, metric: Union[RawMetricResult, str, None] = None, text: str = "") -> str:
    """
    Render the reply for ``intent`` from the value fetched for it.

    Args:
        intent: Classified intent of the question
        metric: Raw value from the health-data store (int steps, HeartRateData,
            list of SleepSession, float kcal) or a pre-formatted data sentence
        text: Original user message, only used to pick the unknown-query reply

    Returns:
        Reply text
    """
    if intent == Intent.UNKNOWN:
        return unknown_query_reply(text)

    if isinstance(metric, str):
        return _compose_from_text(intent, metric)

    if intent == Intent.STEPS:
        return _compose_steps(int(metric or 0))
    if intent == Intent.HEART_RATE:
        return _compose_heart_rate(metric if metric is not None else HeartRateData())
    if intent == Intent.SLEEP:
        return _compose_sleep(metric or [])
    return _compose_active_energy(float(metric or 0.0))


def compose_error(intent: Intent, error: Exception) -> str:
    """Render the apology for a failed health data fetch."""
    if isinstance(error, AuthorizationError):
        return AUTHORIZATION_REPLY
    if isinstance(error, NoDataError):
        return NO_DATA_REPLIES.get(intent, ACCESS_FAILED_REPLY)
    return ACCESS_FAILED_REPLY
