"""
In-Memory Health Data Store.
Holds raw device samples and performs the aggregation the platform health
store would: step sums, heart rate averages, cumulative active energy and
grouping of sleep stages into sessions.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

from .interface import HealthDataStore
from ..core.exceptions import AuthorizationError, NoDataError
from ..models import (
    DateRange, HealthSampleBatch, HeartRateData, HeartRateSample, MetricType,
    QuantitySample, SleepSession, SleepStage,
)

logger = logging.getLogger(__name__)

# A gap longer than this between stages starts a new sleep session
SLEEP_SESSION_GAP_SECONDS = 3600


def group_sleep_sessions(
    stages: Iterable[SleepStage],
    gap_seconds: float = SLEEP_SESSION_GAP_SECONDS
) -> List[SleepSession]:
    """
    Group sleep stage intervals into sessions.

    Stages are taken in start order. A stage starting more than ``gap_seconds``
    after the current session's end opens a new session; otherwise it extends
    the current one.

    Args:
        stages: Stage intervals in any order
        gap_seconds: Largest gap still considered the same session

    Returns:
        List[SleepSession]: Sessions in chronological order
    """
    sessions: List[SleepSession] = []
    current: Optional[SleepSession] = None

    for stage in sorted(stages, key=lambda s: s.start):
        if current is None or (stage.start - current.end).total_seconds() > gap_seconds:
            if current is not None:
                sessions.append(current)
            current = SleepSession(
                duration=(stage.end - stage.start).total_seconds(),
                start=stage.start,
                end=stage.end,
                stages=[stage],
            )
        else:
            end = max(current.end, stage.end)
            current = SleepSession(
                duration=(end - current.start).total_seconds(),
                start=current.start,
                end=end,
                stages=current.stages + [stage],
            )

    if current is not None:
        sessions.append(current)
    return sessions


class InMemoryHealthStore(HealthDataStore):
    """
    Health data store backed by process memory.

    Samples are selected with strict-start semantics: a sample belongs to a
    range when its start lies in ``[range.start, range.end)``.
    """

    def __init__(self, authorize_all: bool = True):
        """
        Initialize an empty store.

        Args:
            authorize_all: Grant read access to every metric up front
        """
        self._steps: List[QuantitySample] = []
        self._heart_rate: List[HeartRateSample] = []
        self._sleep: List[SleepStage] = []
        self._active_energy: List[QuantitySample] = []
        self._authorized: Set[MetricType] = set(MetricType) if authorize_all else set()

    # Authorization

    def request_authorization(self, metrics: Iterable[MetricType]) -> Set[MetricType]:
        """Grant read access to ``metrics``; returns everything granted so far."""
        self._authorized.update(metrics)
        logger.info(f"Authorization granted: {sorted(m.value for m in self._authorized)}")
        return set(self._authorized)

    def revoke_authorization(self, metrics: Iterable[MetricType]) -> None:
        self._authorized.difference_update(metrics)

    def is_authorized(self, metric: MetricType) -> bool:
        return metric in self._authorized

    # Ingestion

    def add_samples(self, batch: HealthSampleBatch) -> Dict[str, int]:
        """
        Record a batch of device samples.

        Returns:
            Dict[str, int]: Number of samples added per metric
        """
        self._steps.extend(batch.steps)
        self._heart_rate.extend(batch.heart_rate)
        self._sleep.extend(batch.sleep)
        self._active_energy.extend(batch.active_energy)

        counts = {
            MetricType.STEPS.value: len(batch.steps),
            MetricType.HEART_RATE.value: len(batch.heart_rate),
            MetricType.SLEEP.value: len(batch.sleep),
            MetricType.ACTIVE_ENERGY.value: len(batch.active_energy),
        }
        logger.debug(f"Samples added: {counts}")
        return counts

    def snapshot(self) -> HealthSampleBatch:
        """All recorded samples as a single batch."""
        return HealthSampleBatch(
            steps=list(self._steps),
            heart_rate=list(self._heart_rate),
            sleep=list(self._sleep),
            active_energy=list(self._active_energy),
        )

    def restore(self, batch: HealthSampleBatch, authorized: Iterable[MetricType]) -> None:
        """Replace every sample and grant with the given state."""
        self._steps, self._heart_rate = list(batch.steps), list(batch.heart_rate)
        self._sleep, self._active_energy = list(batch.sleep), list(batch.active_energy)
        self._authorized = set(authorized)

    # Queries

    def _check_access(self, metric: MetricType, samples: list) -> None:
        if not self.is_authorized(metric):
            raise AuthorizationError(
                f"Read access to {metric.value} has not been granted", metric=metric.value
            )
        if not samples:
            raise NoDataError(f"No {metric.value} data has been recorded", metric=metric.value)

    @staticmethod
    def _starts_in(start: datetime, date_range: DateRange) -> bool:
        return date_range.contains(start)

    async def get_steps(self, date_range: DateRange) -> int:
        self._check_access(MetricType.STEPS, self._steps)
        total = sum(s.value for s in self._steps if self._starts_in(s.start, date_range))
        return int(total)

    async def get_heart_rate(self, date_range: DateRange) -> HeartRateData:
        self._check_access(MetricType.HEART_RATE, self._heart_rate)
        # Most recent reading first
        samples = sorted(
            (s for s in self._heart_rate if self._starts_in(s.timestamp, date_range)),
            key=lambda s: s.timestamp,
            reverse=True,
        )
        return HeartRateData.from_samples(samples)

    async def get_sleep(self, date_range: DateRange) -> List[SleepSession]:
        self._check_access(MetricType.SLEEP, self._sleep)
        stages = [s for s in self._sleep if self._starts_in(s.start, date_range)]
        return group_sleep_sessions(stages)

    async def get_active_energy(self, date_range: DateRange) -> float:
        self._check_access(MetricType.ACTIVE_ENERGY, self._active_energy)
        return float(sum(s.value for s in self._active_energy if self._starts_in(s.start, date_range)))
