"""Local-time helpers for epoch-millisecond timestamps.

All bucketing uses one zone: the configured IANA zone when given, otherwise
the device-local zone. Ranges are inclusive ``[start, end]`` in epoch
milliseconds, ending one millisecond before the next period starts so
that DST transitions produce 23- or 25-hour days instead of gaps.
"""

import calendar
import re
from datetime import date, datetime, timedelta, tzinfo

_MONTH_KEY = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def to_local(epoch_ms: int, tz: tzinfo | None = None) -> datetime:
    """Convert epoch milliseconds to an aware datetime in ``tz`` (or local)."""
    seconds, millis = divmod(epoch_ms, 1000)
    if tz is None:
        moment = datetime.fromtimestamp(seconds).astimezone()
    else:
        moment = datetime.fromtimestamp(seconds, tz)
    return moment.replace(microsecond=millis * 1000)


def to_epoch_ms(moment: datetime) -> int:
    """Convert a datetime to epoch milliseconds (naive means local time)."""
    return round(moment.timestamp() * 1000)


def day_key(epoch_ms: int, tz: tzinfo | None = None) -> str:
    """Calendar day of a timestamp as ``YYYY-MM-DD``."""
    return to_local(epoch_ms, tz).strftime("%Y-%m-%d")


def month_key(day: date) -> str:
    """Budget period key ``YYYY-MM`` for a date."""
    return f"{day.year:04d}-{day.month:02d}"


def parse_month_key(key: str) -> tuple[int, int]:
    """Split a ``YYYY-MM`` key into (year, month).

    Raises:
        ValueError: If the key is malformed
    """
    match = _MONTH_KEY.match(key)
    if not match:
        raise ValueError(f"Invalid month key: {key!r} (expected YYYY-MM)")
    return int(match.group(1)), int(match.group(2))


def start_of_day(day: date, tz: tzinfo | None = None) -> int:
    """Epoch milliseconds of local midnight starting ``day``."""
    midnight = datetime(day.year, day.month, day.day)
    if tz is None:
        return to_epoch_ms(midnight)
    return to_epoch_ms(midnight.replace(tzinfo=tz))


def day_range(day: date, tz: tzinfo | None = None) -> tuple[int, int]:
    """Inclusive epoch-ms range covering one local calendar day."""
    return start_of_day(day, tz), start_of_day(day + timedelta(days=1), tz) - 1


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def previous_month(year: int, month: int) -> tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def next_month(year: int, month: int) -> tuple[int, int]:
    return (year + 1, 1) if month == 12 else (year, month + 1)


def month_range(year: int, month: int, tz: tzinfo | None = None) -> tuple[int, int]:
    """Inclusive epoch-ms range covering one local calendar month."""
    ny, nm = next_month(year, month)
    return start_of_day(date(year, month, 1), tz), start_of_day(date(ny, nm, 1), tz) - 1


def today(tz: tzinfo | None = None) -> date:
    """Current local date in ``tz`` (or the device zone)."""
    return datetime.now(tz).date() if tz is not None else date.today()
