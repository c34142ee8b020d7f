"""
Calendar helpers for business-day queries.

Days and months are evaluated in the restaurant time zone configured by
ORDER_CODE_TIMEZONE; the returned bounds are UTC so they compare directly
with stored timestamps.
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo

from shared.config.settings import settings


def get_zone(name: str | None = None) -> tzinfo:
    """Resolve an IANA zone name. UTC does not need the tz database."""
    name = name or settings.order_code_timezone
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def local_today(zone: tzinfo | None = None) -> date:
    return datetime.now(zone or get_zone()).date()


def day_bounds(day: date, zone: tzinfo | None = None) -> tuple[datetime, datetime]:
    """Half-open [start, end) of a local calendar day, in UTC."""
    zone = zone or get_zone()
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def month_bounds(year: int, month: int, zone: tzinfo | None = None) -> tuple[datetime, datetime]:
    """
    Half-open [start, end) of a local calendar month, in UTC.

    Raises:
        ValueError: If month is outside 1..12
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")

    zone = zone or get_zone()
    first = date(year, month, 1)
    next_first = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    start = datetime.combine(first, time.min, tzinfo=zone)
    end = datetime.combine(next_first, time.min, tzinfo=zone)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Naive datetimes are taken as UTC; aware ones are converted."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
