"""
Wall-clock access for the HTTP edge.

The interpreter and assistant take ``now`` as a parameter; only request
handlers read the clock, through these helpers.
"""

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo


def current_time(tz_name: Optional[str] = None) -> datetime:
    """Return an aware ``datetime`` for now in ``tz_name`` (system local zone if None)."""
    if tz_name:
        return datetime.now(ZoneInfo(tz_name))
    return datetime.now().astimezone()


def localize(moment: datetime, tz_name: Optional[str] = None) -> datetime:
    """
    Make ``moment`` timezone-aware.

    A naive value is read as wall-clock time in ``tz_name`` (system local
    zone if None); an aware value is returned unchanged.
    """
    if moment.tzinfo is not None and moment.utcoffset() is not None:
        return moment
    if tz_name:
        return moment.replace(tzinfo=ZoneInfo(tz_name))
    return moment.astimezone()


def reference_time(now: Optional[datetime], tz_name: Optional[str] = None) -> datetime:
    """The request's reference time: ``now`` made aware, or the current time."""
    if now is None:
        return current_time(tz_name)
    return localize(now, tz_name)
