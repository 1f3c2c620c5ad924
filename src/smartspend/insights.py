"""Budget health and monthly spending insights.

Pure computations over repository and aggregation outputs; nothing here
holds state or writes to storage.
"""

from collections.abc import Callable, Iterable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict

from .aggregation import AggregationEngine
from .models import Budget, Category, CategorySpending, DailySpending
from .periods import days_in_month, month_range, previous_month, today

WARNING_PERCENT = 80
OVER_PERCENT = 100
NUDGE_CHANGE_PERCENT = Decimal(10)


class BudgetStatus(str, Enum):
    OK = "ok"
    WARNING = "warning"
    OVER = "over"


class BudgetHealth(BaseModel):
    """Spending against one category's monthly limit."""

    model_config = ConfigDict(frozen=True)

    category: Category
    spent: Decimal
    limit: Decimal
    percent: int
    status: BudgetStatus


class MonthlyInsights(BaseModel):
    """Month-over-month summary and spending nudges."""

    model_config = ConfigDict(frozen=True)

    month_year: str
    month_total: Decimal
    previous_month_total: Decimal
    change_percent: int
    daily_average: Decimal
    top_category: CategorySpending | None
    top_category_share: int
    highest_spend_day: DailySpending | None
    nudges: list[str]


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_currency(amount: Decimal) -> str:
    """Rupee amount with thousands separators and at most two decimals."""
    text = f"{amount:,.2f}".rstrip("0").rstrip(".")
    return f"₹{text}"


def budget_status(percent: int) -> BudgetStatus:
    if percent >= OVER_PERCENT:
        return BudgetStatus.OVER
    if percent >= WARNING_PERCENT:
        return BudgetStatus.WARNING
    return BudgetStatus.OK


def budget_health(
    categories: Iterable[Category],
    budgets: Iterable[Budget],
    spent_lookup: Callable[[int], Decimal],
) -> list[BudgetHealth]:
    """Compute health for each budget, in budget order.

    Budgets whose category no longer exists are skipped.

    Args:
        categories: Current category set
        budgets: Budgets of the month being inspected
        spent_lookup: Returns the amount spent in a category over that month

    Returns:
        One ``BudgetHealth`` per budget with a live category
    """
    by_id = {c.id: c for c in categories}
    health = []
    for budget in budgets:
        category = by_id.get(budget.category_id)
        if category is None:
            continue
        spent = spent_lookup(budget.category_id)
        percent = round_half_up(spent / budget.limit_amount * 100)
        health.append(
            BudgetHealth(
                category=category,
                spent=spent,
                limit=budget.limit_amount,
                percent=percent,
                status=budget_status(percent),
            )
        )
    return health


def _highest_day(daily: list[DailySpending]) -> DailySpending | None:
    highest = None
    for day in daily:
        # strict comparison keeps the earliest of equal maxima
        if highest is None or day.total > highest.total:
            highest = day
    return highest


def monthly_insights(
    engine: AggregationEngine, year: int, month: int, current_day: date | None = None
) -> MonthlyInsights:
    """Summarize one month against the month before it.

    Args:
        engine: Aggregation engine; its zone defines month and day boundaries
        year: Calendar year of the month to inspect
        month: Calendar month (1-12)
        current_day: Today's date, for the daily average of a running month

    Returns:
        Totals, change versus last month, daily average, top category,
        highest spend day, and human-readable nudges
    """
    current_day = current_day or today(engine.tz)
    start, end = month_range(year, month, engine.tz)
    prev_start, prev_end = month_range(*previous_month(year, month), engine.tz)

    month_total = engine.total_for_range(start, end)
    previous_total = engine.total_for_range(prev_start, prev_end)
    categories = engine.category_spending_for_range(start, end)
    daily = engine.daily_spending_for_range(start, end)

    is_current = (current_day.year, current_day.month) == (year, month)
    days_counted = current_day.day if is_current else days_in_month(year, month)
    daily_average = (month_total / days_counted).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )

    change = Decimal(0)
    if previous_total > 0:
        change = (month_total - previous_total) / previous_total * 100

    nudges: list[str] = []
    top = categories[0] if categories else None
    top_share = 0
    if top is not None:
        category_total = sum((c.total for c in categories), Decimal(0))
        if category_total > 0:
            top_share = round_half_up(top.total / category_total * 100)
        nudges.append(
            f"{top.category_emoji} {top.category_name} is your top spend "
            f"at {top_share}% of total."
        )

    if change > NUDGE_CHANGE_PERCENT:
        nudges.append(
            f"You're spending {round_half_up(abs(change))}% more than last month."
        )
    elif change < -NUDGE_CHANGE_PERCENT:
        nudges.append(
            f"Great! You're spending {round_half_up(abs(change))}% less than last month."
        )

    highest = _highest_day(daily)
    if highest is not None:
        label = date.fromisoformat(highest.day).strftime("%d %b")
        nudges.append(
            f"Highest spend day: {label} ({format_currency(highest.total)})"
        )

    return MonthlyInsights(
        month_year=f"{year:04d}-{month:02d}",
        month_total=month_total,
        previous_month_total=previous_total,
        change_percent=round_half_up(change),
        daily_average=daily_average,
        top_category=top,
        top_category_share=top_share,
        highest_spend_day=highest,
        nudges=nudges,
    )
