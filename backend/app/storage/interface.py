"""
Health Data Store Interface - Abstract base class for health data sources.
This interface lets the assistant run against the in-memory store, the local
JSON store or a device-backed implementation without changes.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models import DateRange, HeartRateData, SleepSession


class HealthDataStore(ABC):
    """
    Read-only contract the assistant depends on.

    Every method may raise ``AuthorizationError`` (access not granted),
    ``NoDataError`` (no data source for the metric) or ``UnknownError``.
    """

    @abstractmethod
    async def get_steps(self, date_range: DateRange) -> int:
        """
        Total step count in the range.

        Args:
            date_range: Half-open interval to query

        Returns:
            int: Step count (>= 0)
        """
        pass

    @abstractmethod
    async def get_heart_rate(self, date_range: DateRange) -> HeartRateData:
        """
        Heart rate readings in the range.

        Args:
            date_range: Half-open interval to query

        Returns:
            HeartRateData: Average (None when empty) and the readings
        """
        pass

    @abstractmethod
    async def get_sleep(self, date_range: DateRange) -> List[SleepSession]:
        """
        Sleep sessions in the range.

        Args:
            date_range: Half-open interval to query

        Returns:
            List[SleepSession]: Sessions in chronological order, possibly empty
        """
        pass

    @abstractmethod
    async def get_active_energy(self, date_range: DateRange) -> float:
        """
        Cumulative active energy in the range.

        Args:
            date_range: Half-open interval to query

        Returns:
            float: Kilocalories (>= 0)
        """
        pass
