"""Range aggregations over stored transactions.

All ranges are inclusive ``[start, end]`` in epoch milliseconds. Sums are
exact ``Decimal`` arithmetic; an empty range totals ``Decimal("0")``.
"""

import logging
from datetime import tzinfo
from decimal import Decimal

from .enrichment import display_attributes
from .models import CategorySpending, DailySpending
from .periods import day_key
from .repositories import CategoryRepository
from .storage import StorageBackend

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class AggregationEngine:
    """Sums, group-by-category, and group-by-day over a date range."""

    def __init__(
        self,
        backend: StorageBackend,
        categories: CategoryRepository,
        tz: tzinfo | None = None,
    ):
        """Initialize the engine.

        Args:
            backend: Storage holding the transactions
            categories: Source of display attributes for category rankings
            tz: Zone used for calendar-day bucketing; None means device-local
        """
        self._backend = backend
        self._categories = categories
        self.tz = tz

    def total_for_range(self, start: int, end: int) -> Decimal:
        """Sum of ``amount`` over transactions with ``start <= date <= end``."""
        rows = self._backend.list_transactions(start=start, end=end)
        return sum((t.amount for t in rows), ZERO)

    def total_for_category_in_range(
        self, category_id: int, start: int, end: int
    ) -> Decimal:
        """Same as ``total_for_range`` restricted to one category."""
        rows = self._backend.list_transactions(
            start=start, end=end, category_id=category_id
        )
        return sum((t.amount for t in rows), ZERO)

    def category_spending_for_range(
        self, start: int, end: int
    ) -> list[CategorySpending]:
        """Per-category totals, largest first.

        Categories without transactions in range are omitted. Equal totals
        keep the order in which each category was first encountered, walking
        transactions newest first.
        """
        totals: dict[int, Decimal] = {}
        for t in self._backend.list_transactions(start=start, end=end):
            totals[t.category_id] = totals.get(t.category_id, ZERO) + t.amount

        index = self._categories.index()
        spending = []
        for category_id, total in totals.items():
            name, emoji, color = display_attributes(category_id, index)
            spending.append(
                CategorySpending(
                    category_id=category_id,
                    total=total,
                    category_name=name,
                    category_emoji=emoji,
                    category_color=color,
                )
            )

        # sorted() is stable, so ties stay in encounter order
        return sorted(spending, key=lambda s: s.total, reverse=True)

    def daily_spending_for_range(self, start: int, end: int) -> list[DailySpending]:
        """Per-day totals keyed ``YYYY-MM-DD`` in the engine's zone, oldest first.

        Days without transactions are omitted.
        """
        totals: dict[str, Decimal] = {}
        for t in self._backend.list_transactions(start=start, end=end):
            key = day_key(t.date, self.tz)
            totals[key] = totals.get(key, ZERO) + t.amount

        return [
            DailySpending(day=day, total=total) for day, total in sorted(totals.items())
        ]
