"""Opening-hours evaluation for stores with auto-schedule enabled."""

from datetime import datetime
from typing import Any, Mapping, Optional

from libs.common.datetime_utils import minutes_since_midnight, parse_time_of_day

DEFAULT_OPENING_TIME = "09:00"
DEFAULT_CLOSING_TIME = "18:00"


def should_be_open(opening_time: str, closing_time: str, now: datetime) -> bool:
    """True when ``now`` falls in [opening, closing) on the same day."""
    current = minutes_since_midnight(now)
    opens = minutes_since_midnight(parse_time_of_day(opening_time))
    closes = minutes_since_midnight(parse_time_of_day(closing_time))
    return opens <= current < closes


def scheduled_status(profile: Mapping[str, Any], now: datetime) -> Optional[bool]:
    """
    The open/closed flag the schedule wants, or None when auto-schedule is off.
    """
    if not profile.get("autoSchedule"):
        return None
    return should_be_open(
        profile.get("openingTime") or DEFAULT_OPENING_TIME,
        profile.get("closingTime") or DEFAULT_CLOSING_TIME,
        now,
    )
