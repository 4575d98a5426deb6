"""Timezone and calendar arithmetic for follow-ups and reminders.

Instants (sent dates, the clock) are absolute UTC. Follow-ups are plain
calendar dates on the owner's calendar, and "today" is always the owner's
local date.
"""

import logging
from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Normalise a datetime to aware UTC.

    SQLite hands back naive datetimes; those were written as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def is_valid_timezone(name: str | None) -> bool:
    """Check if name is a known IANA timezone identifier."""
    if not name:
        return False
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def resolve_timezone(name: str | None) -> ZoneInfo:
    """Get the ZoneInfo for name, falling back to UTC when unknown."""
    if is_valid_timezone(name):
        return ZoneInfo(name)
    logger.warning(f"Unknown timezone {name!r}, falling back to UTC")
    return ZoneInfo("UTC")


def local_date(now: datetime, tz: ZoneInfo) -> date:
    """Calendar date of now as seen in tz."""
    return ensure_utc(now).astimezone(tz).date()


def today_for(now: datetime, timezone: str | None) -> date:
    """The owner's local calendar date at now."""
    return local_date(now, resolve_timezone(timezone))


def extend_followup(now: datetime, days: int, timezone: str | None) -> date:
    """Follow-up date `days` calendar days after now, counted on the owner's calendar.

    Days are added to the local date, so a daylight-saving change in between
    never shifts the result onto a neighbouring day.
    """
    return today_for(now, timezone) + timedelta(days=days)
