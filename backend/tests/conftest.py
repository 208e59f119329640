"""
Shared test fixtures and configuration.
"""

import pytest
import os
from datetime import datetime, timezone

# Set test environment variables before importing app modules
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("STORAGE_TYPE", "memory")
os.environ.setdefault("TIMEZONE", "UTC")
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("LOG_API_REQUESTS", "false")

from app.models import (  # noqa: E402
    HealthSampleBatch, HeartRateSample, QuantitySample, SleepStage, SleepStageKind,
)
from app.storage import InMemoryHealthStore  # noqa: E402


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Wednesday 14 October 2026, 15:30 UTC."""
    return utc(2026, 10, 14, 15, 30)


@pytest.fixture
def sample_batch():
    """A day and a night of device samples around ``now``."""
    return HealthSampleBatch(
        steps=[
            QuantitySample(value=4000, start=utc(2026, 10, 14, 8), end=utc(2026, 10, 14, 9)),
            QuantitySample(value=4500, start=utc(2026, 10, 14, 12), end=utc(2026, 10, 14, 13)),
            # Yesterday
            QuantitySample(value=12000, start=utc(2026, 10, 13, 10), end=utc(2026, 10, 13, 18)),
        ],
        heart_rate=[
            HeartRateSample(value=70, timestamp=utc(2026, 10, 14, 9)),
            HeartRateSample(value=74, timestamp=utc(2026, 10, 14, 11)),
        ],
        sleep=[
            SleepStage(kind=SleepStageKind.IN_BED, start=utc(2026, 10, 13, 22, 30), end=utc(2026, 10, 13, 23)),
            SleepStage(kind=SleepStageKind.ASLEEP_CORE, start=utc(2026, 10, 13, 23), end=utc(2026, 10, 14, 3)),
            SleepStage(kind=SleepStageKind.ASLEEP_DEEP, start=utc(2026, 10, 14, 3), end=utc(2026, 10, 14, 6, 45)),
        ],
        active_energy=[
            QuantitySample(value=320.4, start=utc(2026, 10, 14, 8), end=utc(2026, 10, 14, 9)),
            QuantitySample(value=200.2, start=utc(2026, 10, 14, 12), end=utc(2026, 10, 14, 13)),
        ],
    )


@pytest.fixture
def memory_store(sample_batch):
    store = InMemoryHealthStore()
    store.add_samples(sample_batch)
    return store
