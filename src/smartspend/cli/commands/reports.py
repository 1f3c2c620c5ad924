"""Spending report commands for SmartSpend CLI."""

import logging

import typer

from ...insights import monthly_insights
from ..utils import open_database, resolve_month, resolve_range

app = typer.Typer(help="Spending totals, rankings, and insights")
logger = logging.getLogger(__name__)

_MONTH_HELP = "YYYY-MM (default: this month)"


@app.command("total")
def total(
    month: str | None = typer.Option(None, "--month", help=_MONTH_HELP),
    start: str | None = typer.Option(None, "--from", help="First day, YYYY-MM-DD"),
    end: str | None = typer.Option(None, "--to", help="Last day, YYYY-MM-DD"),
    category_id: int | None = typer.Option(
        None, "--category", "-c", help="Only this category"
    ),
) -> None:
    """Total spent over a period."""
    with open_database() as db:
        first, last = resolve_range(month, start, end, db.tz)
        if category_id is None:
            amount = db.aggregation.total_for_range(first, last)
        else:
            amount = db.aggregation.total_for_category_in_range(category_id, first, last)
        print(amount)


@app.command("categories")
def categories(
    month: str | None = typer.Option(None, "--month", help=_MONTH_HELP),
    start: str | None = typer.Option(None, "--from", help="First day, YYYY-MM-DD"),
    end: str | None = typer.Option(None, "--to", help="Last day, YYYY-MM-DD"),
) -> None:
    """Spending per category, largest first."""
    with open_database() as db:
        rows = db.aggregation.category_spending_for_range(
            *resolve_range(month, start, end, db.tz)
        )
        if not rows:
            logger.info("No spending in this period")
            return
        for s in rows:
            print(f"{s.category_emoji} {s.category_name:<18} {s.total:>10}")


@app.command("daily")
def daily(
    month: str | None = typer.Option(None, "--month", help=_MONTH_HELP),
    start: str | None = typer.Option(None, "--from", help="First day, YYYY-MM-DD"),
    end: str | None = typer.Option(None, "--to", help="Last day, YYYY-MM-DD"),
) -> None:
    """Spending per day, oldest first. Days without spending are omitted."""
    with open_database() as db:
        rows = db.aggregation.daily_spending_for_range(
            *resolve_range(month, start, end, db.tz)
        )
        if not rows:
            logger.info("No spending in this period")
            return
        for d in rows:
            print(f"{d.day}  {d.total:>10}")


@app.command("insights")
def insights(
    month: str | None = typer.Option(None, "--month", help=_MONTH_HELP),
) -> None:
    """Month summary compared with the previous month, plus nudges."""
    with open_database() as db:
        result = monthly_insights(db.aggregation, *resolve_month(month, db.tz))
        print(f"📅 {result.month_year}")
        print(f"   Spent:          {result.month_total}")
        print(f"   Last month:     {result.previous_month_total}")
        print(f"   Change:         {result.change_percent:+d}%")
        print(f"   Daily average:  {result.daily_average}")
        for nudge in result.nudges:
            print(f"💡 {nudge}")
