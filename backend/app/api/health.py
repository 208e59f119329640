"""
Health API endpoints - Sample sync from the mobile app, access grants and the daily summary.
"""

import logging
from datetime import datetime
from typing import Callable, Optional, TypeVar

from fastapi import APIRouter, HTTPException, Depends, Query, status

from .deps import get_health_store
from ..agents.query_interpreter import start_of_day
from ..config import settings
from ..core import HealthDataError, UnknownError, reference_time
from ..models import AuthorizationRequest, DateRange, HealthSampleBatch, HealthSummary
from ..storage import HealthDataStore, InMemoryHealthStore, LocalHealthStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

router = APIRouter(prefix="/health", tags=["health"])


def _writable_store(store: HealthDataStore) -> InMemoryHealthStore:
    if not isinstance(store, InMemoryHealthStore):
        raise HTTPException(
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            detail="The configured health data store is read-only"
        )
    return store


async def _apply(store: InMemoryHealthStore, change: Callable[[], T]) -> T:
    """Apply a change, persisting it when the store is file backed."""
    if not isinstance(store, LocalHealthStore):
        return change()
    try:
        return await store.apply_and_save(change)
    except UnknownError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Health data could not be saved: {e}"
        )


@router.post("/samples", status_code=status.HTTP_201_CREATED)
async def sync_samples(
    batch: HealthSampleBatch,
    store: HealthDataStore = Depends(get_health_store)
):
    """
    Sync health samples from the mobile app.

    Args:
        batch: Samples recorded by the device
        store: Health data store

    Returns:
        Number of samples stored per metric
    """
    writable = _writable_store(store)
    counts = await _apply(writable, lambda: writable.add_samples(batch))

    logger.info(f"Health samples synced: {counts}")
    return {"status": "success", "added": counts}


@router.post("/authorize")
async def authorize(
    request: AuthorizationRequest,
    store: HealthDataStore = Depends(get_health_store)
):
    """Grant read access to the requested metrics."""
    writable = _writable_store(store)
    granted = await _apply(writable, lambda: writable.request_authorization(request.metrics))

    return {"status": "success", "authorized": sorted(m.value for m in granted)}


@router.get("/summary", response_model=HealthSummary)
async def get_summary(
    store: HealthDataStore = Depends(get_health_store),
    now: Optional[datetime] = Query(None, description="Reference time (defaults to now)")
):
    """
    Today's metrics from midnight until now, as shown on the dashboard.
    A metric that cannot be read is returned as null. A ``now`` without an
    offset is read in the configured timezone.
    """
    end = reference_time(now, settings.timezone)
    date_range = DateRange(start=start_of_day(end), end=end)
    summary = HealthSummary(date_range=date_range)

    try:
        summary.steps = await store.get_steps(date_range)
    except HealthDataError as e:
        logger.debug(f"Summary without steps: {e}")

    try:
        summary.heart_rate_avg = (await store.get_heart_rate(date_range)).average
    except HealthDataError as e:
        logger.debug(f"Summary without heart rate: {e}")

    try:
        sessions = await store.get_sleep(date_range)
        summary.sleep_minutes = int(sum(s.duration for s in sessions) // 60)
    except HealthDataError as e:
        logger.debug(f"Summary without sleep: {e}")

    try:
        summary.active_energy = await store.get_active_energy(date_range)
    except HealthDataError as e:
        logger.debug(f"Summary without active energy: {e}")

    return summary
