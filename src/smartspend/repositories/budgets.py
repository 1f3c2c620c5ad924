"""Budget repository with natural-key upsert on (category_id, month_year)."""

import logging
from decimal import Decimal

from ..errors import NotFoundError, ValidationError
from ..models import Budget, EntityKind, parse_entity
from ..periods import parse_month_key
from ..storage import StorageBackend
from .categories import CategoryRepository

logger = logging.getLogger(__name__)


def _check_month_key(month_year: str) -> None:
    try:
        parse_month_key(month_year)
    except ValueError as e:
        raise ValidationError(str(e)) from e


class BudgetRepository:
    """Monthly category limits; at most one per (category, month)."""

    def __init__(self, backend: StorageBackend, categories: CategoryRepository):
        self._backend = backend
        self._categories = categories

    def get_for_category_month(self, category_id: int, month_year: str) -> Budget | None:
        _check_month_key(month_year)
        return self._backend.find_budget(category_id, month_year)

    def list_for_month(self, month_year: str) -> list[Budget]:
        _check_month_key(month_year)
        return self._backend.list_budgets(month_year)

    def upsert(
        self, category_id: int, limit_amount: Decimal | float | str, month_year: str
    ) -> Budget:
        """Set the limit for a (category, month), keeping the id if one exists.

        The uniqueness of the natural key is enforced here, as an explicit
        find-then-update-or-insert, for every backend.

        Raises:
            ValidationError: If the limit or month key is malformed, or the
                category does not exist
        """
        # Placeholder id: validation must not consume a counter value
        draft = parse_entity(
            Budget,
            {
                "id": 1,
                "category_id": category_id,
                "limit_amount": limit_amount,
                "month_year": month_year,
            },
        )
        if not self._categories.exists(category_id):
            raise ValidationError(f"Category {category_id} does not exist")

        existing = self._backend.find_budget(category_id, month_year)
        if existing is not None:
            budget = existing.model_copy(update={"limit_amount": draft.limit_amount})
            self._backend.update_budget(budget)
            logger.debug(f"Updated budget {budget.id} for {month_year}")
            return budget

        budget = draft.model_copy(
            update={"id": self._backend.allocate_id(EntityKind.BUDGET)}
        )
        self._backend.insert_budget(budget)
        logger.debug(f"Created budget {budget.id} for {month_year}")
        return budget

    def delete(self, budget_id: int) -> None:
        """Remove a budget.

        Raises:
            NotFoundError: If no budget has this id
        """
        if not self._backend.delete_budget(budget_id):
            raise NotFoundError(EntityKind.BUDGET.value, budget_id)
