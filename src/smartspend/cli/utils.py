"""Shared helpers for SmartSpend CLI commands."""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from datetime import date, datetime, time, tzinfo

import typer

from ..config import get_settings
from ..database import SmartSpendDB
from ..errors import SmartSpendError
from ..periods import (
    day_range,
    month_key,
    month_range,
    parse_month_key,
    to_epoch_ms,
    today,
)

logger = logging.getLogger(__name__)


@contextmanager
def open_database() -> Generator[SmartSpendDB, None, None]:
    """Open and initialize the current profile's store for one command.

    Domain errors raised inside the block are logged and turned into exit
    code 1.
    """
    try:
        settings = get_settings()
    except ValueError as e:
        logger.error(f"❌ {e}")
        raise typer.Exit(1) from e

    try:
        db = SmartSpendDB.from_settings(settings)
        db.initialize()
        if db.degraded:
            logger.warning(
                "⚠️  Using a temporary in-memory store: nothing will be saved"
            )
        try:
            yield db
        finally:
            db.close()
    except SmartSpendError as e:
        logger.error(f"❌ {e}")
        raise typer.Exit(1) from e


def parse_day(value: str) -> date:
    """Parse ``YYYY-MM-DD`` or raise a CLI parameter error."""
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise typer.BadParameter(f"Invalid date {value!r}, expected YYYY-MM-DD") from e


def parse_time(value: str) -> time:
    """Parse ``HH:MM`` (24h) or raise a CLI parameter error."""
    try:
        return datetime.strptime(value, "%H:%M").time()
    except ValueError as e:
        raise typer.BadParameter(f"Invalid time {value!r}, expected HH:MM") from e


def resolve_month(value: str | None, tz: tzinfo | None) -> tuple[int, int]:
    """Year and month from a ``YYYY-MM`` option, defaulting to the current month."""
    if value is None:
        value = month_key(today(tz))
    try:
        return parse_month_key(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def resolve_range(
    month: str | None, start: str | None, end: str | None, tz: tzinfo | None
) -> tuple[int, int]:
    """Inclusive epoch-ms range from ``--from``/``--to`` days or a month.

    Explicit days win over the month; a missing bound defaults to the other
    bound's day.
    """
    if start is None and end is None:
        return month_range(*resolve_month(month, tz), tz)

    first = parse_day(start or end)  # type: ignore[arg-type]
    last = parse_day(end or start)  # type: ignore[arg-type]
    if last < first:
        raise typer.BadParameter("--to must not be before --from")
    return day_range(first, tz)[0], day_range(last, tz)[1]


def timestamp_for(day: str | None, at: str | None, tz: tzinfo | None) -> int:
    """Epoch ms for a local day and time; missing parts default to now."""
    now = datetime.now(tz)
    the_day = parse_day(day) if day else now.date()
    the_time = parse_time(at) if at else now.time().replace(second=0, microsecond=0)
    moment = datetime.combine(the_day, the_time)
    if tz is not None:
        moment = moment.replace(tzinfo=tz)
    return to_epoch_ms(moment)
