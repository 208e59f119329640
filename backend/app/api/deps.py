"""
Shared dependencies for the API routers.
"""

from functools import lru_cache

from fastapi import Depends

from ..agents import HealthAssistant
from ..config import settings
from ..storage import HealthDataStore, InMemoryHealthStore, LocalHealthStore


@lru_cache
def get_health_store() -> HealthDataStore:
    """Process-wide health data store selected by ``settings.storage_type``."""
    if settings.storage_type == "local":
        return LocalHealthStore(
            settings.local_storage_path,
            settings.health_data_file,
            authorize_all=settings.authorize_by_default,
        )
    return InMemoryHealthStore(authorize_all=settings.authorize_by_default)


def get_assistant(store: HealthDataStore = Depends(get_health_store)) -> HealthAssistant:
    return HealthAssistant(store, first_weekday=settings.week_start_day)
