"""Monthly budget commands for SmartSpend CLI."""

import logging

import typer

from ...insights import BudgetStatus, budget_health
from ...periods import month_range
from ..utils import open_database, resolve_month

app = typer.Typer(help="Set and review monthly category budgets")
logger = logging.getLogger(__name__)

_STATUS_ICONS = {
    BudgetStatus.OK: "🟢",
    BudgetStatus.WARNING: "🟡",
    BudgetStatus.OVER: "🔴",
}


@app.command("set")
def set_budget(
    category_id: int = typer.Argument(..., help="Category id"),
    limit: str = typer.Argument(..., help="Monthly limit"),
    month: str | None = typer.Option(None, "--month", help="YYYY-MM (default: this month)"),
) -> None:
    """Set the limit for a category and month, replacing any existing one."""
    with open_database() as db:
        year, mon = resolve_month(month, db.tz)
        budget = db.budgets.upsert(category_id, limit, f"{year:04d}-{mon:02d}")
        logger.info(
            f"✅ Budget {budget.id}: category {budget.category_id} "
            f"limited to {budget.limit_amount} for {budget.month_year}"
        )


@app.command("list")
def list_budgets(
    month: str | None = typer.Option(None, "--month", help="YYYY-MM (default: this month)"),
) -> None:
    """List budgets for a month."""
    with open_database() as db:
        year, mon = resolve_month(month, db.tz)
        budgets = db.budgets.list_for_month(f"{year:04d}-{mon:02d}")
        if not budgets:
            logger.info("No budgets set for this month")
            return
        index = db.categories.index()
        for b in budgets:
            category = index.get(b.category_id)
            label = f"{category.emoji} {category.name}" if category else "Unknown"
            print(f"{b.id:>4}  {label:<22} {b.limit_amount:>10}  {b.month_year}")


@app.command("delete")
def delete_budget(
    budget_id: int = typer.Argument(..., help="Budget id"),
) -> None:
    """Delete a budget."""
    with open_database() as db:
        db.budgets.delete(budget_id)
        logger.info(f"✅ Deleted budget {budget_id}")


@app.command("health")
def budget_health_report(
    month: str | None = typer.Option(None, "--month", help="YYYY-MM (default: this month)"),
) -> None:
    """Show spending against each budget for a month."""
    with open_database() as db:
        year, mon = resolve_month(month, db.tz)
        start, end = month_range(year, mon, db.tz)
        health = budget_health(
            db.categories.list_all(),
            db.budgets.list_for_month(f"{year:04d}-{mon:02d}"),
            lambda category_id: db.aggregation.total_for_category_in_range(
                category_id, start, end
            ),
        )
        if not health:
            logger.info("No budgets set for this month")
            return
        for h in health:
            print(
                f"{_STATUS_ICONS[h.status]} {h.category.emoji} {h.category.name:<18} "
                f"{h.spent:>10} / {h.limit:<10} {h.percent:>4}%"
            )
