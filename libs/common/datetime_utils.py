"""Datetime helpers.

Usage:
    from libs.common.datetime_utils import utc_now

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
"""

from datetime import datetime, time, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo

from libs.common.config import get_settings


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def store_now(tz_name: Optional[str] = None) -> datetime:
    """Current time in the store's timezone (settings.TIMEZONE by default)."""
    return datetime.now(ZoneInfo(tz_name or get_settings().TIMEZONE))


def parse_time_of_day(value: str) -> time:
    """Parse an "HH:MM" string as used by opening/closing hours."""
    hours, _, minutes = value.strip().partition(":")
    return time(hour=int(hours), minute=int(minutes or 0))


def minutes_since_midnight(value: Union[datetime, time]) -> int:
    return value.hour * 60 + value.minute
