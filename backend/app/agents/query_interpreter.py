"""
Query Interpreter - Maps a free-text question to an intent and a date range.

Classification is keyword based. Both the intent rules and the date rules are
ordered tables: the first rule whose predicate matches wins, so the order of
the entries is part of the behaviour. "how active was my heart rate" is a
steps question (the how+active combination sits in the first rule), while
"active heart rate" is a heart rate question because that rule is checked
before the energy rule's "active" clause.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, List, NamedTuple

from ..models import DateRange, Intent, Interpretation

logger = logging.getLogger(__name__)


class IntentRule(NamedTuple):
    name: str
    matches: Callable[[str], bool]
    intent: Intent


class DateRule(NamedTuple):
    name: str
    matches: Callable[[str], bool]
    resolve: Callable[[datetime, int], DateRange]


def _contains_any(text: str, *keywords: str) -> bool:
    return any(keyword in text for keyword in keywords)


def _normalize(text: str) -> str:
    return text.strip().lower()


INTENT_RULES: List[IntentRule] = [
    IntentRule(
        "steps",
        lambda t: (_contains_any(t, "step", "walk", "distance")
                   or ("how" in t and "active" in t)
                   or ("much" in t and "move" in t)),
        Intent.STEPS,
    ),
    IntentRule(
        "heart_rate",
        lambda t: _contains_any(t, "heart", "bpm", "pulse", "heartbeat", "cardiac"),
        Intent.HEART_RATE,
    ),
    IntentRule(
        "sleep",
        lambda t: _contains_any(t, "sleep", "rest", "bedtime", "nap"),
        Intent.SLEEP,
    ),
    IntentRule(
        "active_energy",
        lambda t: ("calorie" in t
                   or ("energy" in t and "heart" not in t)
                   or "burn" in t
                   or ("active" in t and "step" not in t)),
        Intent.ACTIVE_ENERGY,
    ),
]


# Calendar helpers. All arithmetic is wall-clock in now's own tzinfo.

def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(moment: datetime, first_weekday: int = 0) -> datetime:
    """First instant of the week containing ``moment`` (0 = Monday, ISO-8601)."""
    offset = (moment.weekday() - first_weekday) % 7
    return start_of_day(moment) - timedelta(days=offset)


def start_of_month(moment: datetime) -> datetime:
    return start_of_day(moment).replace(day=1)


def start_of_previous_month(moment: datetime) -> datetime:
    return start_of_month(start_of_month(moment) - timedelta(days=1))


def _today(now: datetime, first_weekday: int) -> DateRange:
    start = start_of_day(now)
    return DateRange(start=start, end=start + timedelta(days=1))


def _yesterday(now: datetime, first_weekday: int) -> DateRange:
    return DateRange(start=start_of_day(now - timedelta(days=1)), end=start_of_day(now))


def _this_week(now: datetime, first_weekday: int) -> DateRange:
    return DateRange(start=start_of_week(now, first_weekday), end=now)


def _last_week(now: datetime, first_weekday: int) -> DateRange:
    start = start_of_week(now - timedelta(weeks=1), first_weekday)
    return DateRange(start=start, end=start + timedelta(days=7))


def _this_month(now: datetime, first_weekday: int) -> DateRange:
    return DateRange(start=start_of_month(now), end=now)


def _last_month(now: datetime, first_weekday: int) -> DateRange:
    return DateRange(start=start_of_previous_month(now), end=start_of_month(now))


def _so_far_today(now: datetime, first_weekday: int) -> DateRange:
    return DateRange(start=start_of_day(now), end=now)


DATE_RULES: List[DateRule] = [
    DateRule("today", lambda t: "today" in t, _today),
    DateRule("yesterday", lambda t: "yesterday" in t, _yesterday),
    DateRule("this_week", lambda t: "this week" in t or ("week" in t and "last" not in t), _this_week),
    DateRule("last_week", lambda t: "last week" in t, _last_week),
    DateRule("this_month", lambda t: "this month" in t or ("month" in t and "last" not in t), _this_month),
    DateRule("last_month", lambda t: "last month" in t, _last_month),
]


class QueryInterpreter:
    """
    Turns a user message into an (intent, date range) pair.

    Pure: the result depends only on the text, ``now`` and the week-start
    policy given at construction.
    """

    def __init__(self, first_weekday: int = 0):
        if not 0 <= first_weekday <= 6:
            raise ValueError(f"first_weekday must be between 0 and 6, got {first_weekday}")
        self.first_weekday = first_weekday

    def classify_intent(self, text: str) -> Intent:
        lowered = _normalize(text)
        for rule in INTENT_RULES:
            if rule.matches(lowered):
                return rule.intent
        return Intent.UNKNOWN

    def resolve_date_range(self, text: str, now: datetime) -> DateRange:
        lowered = _normalize(text)
        for rule in DATE_RULES:
            if rule.matches(lowered):
                return rule.resolve(now, self.first_weekday)
        return _so_far_today(now, self.first_weekday)

    def interpret(self, text: str, now: datetime) -> Interpretation:
        interpretation = Interpretation(
            intent=self.classify_intent(text),
            date_range=self.resolve_date_range(text, now),
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Interpreted query: intent={interpretation.intent.value}, "
                f"range={interpretation.date_range.start.isoformat()}..{interpretation.date_range.end.isoformat()}"
            )
        return interpretation


def interpret(text: str, now: datetime, first_weekday: int = 0) -> Interpretation:
    """Interpret ``text`` relative to ``now``; see ``QueryInterpreter``."""
    return QueryInterpreter(first_weekday).interpret(text, now)
