"""
Health data errors raised by the health-data stores.

The assistant never lets these reach the caller; they are turned into
user-facing text by the response composer.
"""

from typing import Optional


class HealthDataError(Exception):
    """Base class for failures reported by a health-data store."""

    default_message = "Failed to query health data"

    def __init__(self, message: Optional[str] = None, metric: Optional[str] = None):
        self.metric = metric
        super().__init__(message or self.default_message)


class AuthorizationError(HealthDataError):
    """Read permission for the metric was not granted or was denied."""

    default_message = "Health data authorization was denied"


class NoDataError(HealthDataError):
    """The query succeeded but there is no data source for the metric."""

    default_message = "No health data available"


class UnknownError(HealthDataError):
    """Any other failure while accessing the health data."""
