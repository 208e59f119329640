"""Storage module - health data store interface and implementations."""

from .interface import HealthDataStore
from .memory_store import InMemoryHealthStore, group_sleep_sessions, SLEEP_SESSION_GAP_SECONDS
from .local_storage import LocalHealthStore

__all__ = [
    'HealthDataStore',
    'InMemoryHealthStore',
    'LocalHealthStore',
    'group_sleep_sessions',
    'SLEEP_SESSION_GAP_SECONDS',
]
