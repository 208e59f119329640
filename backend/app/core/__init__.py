"""Core module - error taxonomy, logging and clock helpers."""

from .exceptions import HealthDataError, AuthorizationError, NoDataError, UnknownError
from .clock import current_time, localize, reference_time

__all__ = [
    'HealthDataError',
    'AuthorizationError',
    'NoDataError',
    'UnknownError',
    'current_time',
    'localize',
    'reference_time',
]
