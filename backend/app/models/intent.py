"""
Query intents - the coarse category of health metric a question is about.
"""

from enum import Enum
from typing import NamedTuple

from .health import DateRange


class Intent(str, Enum):
    """Exactly one intent is assigned per query."""
    STEPS = "steps"
    HEART_RATE = "heart_rate"
    SLEEP = "sleep"
    ACTIVE_ENERGY = "active_energy"
    UNKNOWN = "unknown"


class Interpretation(NamedTuple):
    """Result of interpreting a user message."""
    intent: Intent
    date_range: DateRange
