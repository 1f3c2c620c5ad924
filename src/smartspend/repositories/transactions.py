"""Transaction repository: validated CRUD plus enriched listing and search."""

import logging
from typing import Any

from ..enrichment import CategoryIndex, enrich
from ..errors import NotFoundError, ValidationError
from ..models import (
    EntityKind,
    Transaction,
    TransactionData,
    TransactionWithCategory,
    parse_entity,
)
from ..storage import StorageBackend
from .categories import CategoryRepository

logger = logging.getLogger(__name__)

TransactionInput = TransactionData | dict[str, Any]


class TransactionRepository:
    """Owns every transaction row; no other component mutates them."""

    def __init__(self, backend: StorageBackend, categories: CategoryRepository):
        self._backend = backend
        self._categories = categories

    def _validate(self, data: TransactionInput) -> TransactionData:
        if isinstance(data, TransactionData):
            data = data.model_dump()
        validated = parse_entity(TransactionData, data)
        if not self._categories.exists(validated.category_id):
            raise ValidationError(f"Category {validated.category_id} does not exist")
        return validated

    @staticmethod
    def _enrich_all(
        rows: list[Transaction], index: CategoryIndex
    ) -> list[TransactionWithCategory]:
        return [enrich(t, index) for t in rows]

    # -- commands ------------------------------------------------------------

    def create(self, data: TransactionInput) -> int:
        """Store a new transaction and return its id.

        Raises:
            ValidationError: If amount is not positive, a field is malformed,
                or the category does not exist
        """
        validated = self._validate(data)
        transaction_id = self._backend.allocate_id(EntityKind.TRANSACTION)
        self._backend.insert_transaction(
            Transaction(id=transaction_id, **validated.model_dump())
        )
        logger.debug(f"Created transaction {transaction_id}")
        return transaction_id

    def update(self, transaction_id: int, data: TransactionInput) -> Transaction:
        """Replace every field of an existing transaction.

        Raises:
            NotFoundError: If no transaction has this id
            ValidationError: If the new data is invalid
        """
        if self._backend.get_transaction(transaction_id) is None:
            raise NotFoundError(EntityKind.TRANSACTION.value, transaction_id)

        validated = self._validate(data)
        transaction = Transaction(id=transaction_id, **validated.model_dump())
        self._backend.update_transaction(transaction)
        return transaction

    def delete(self, transaction_id: int) -> None:
        """Remove a transaction.

        Raises:
            NotFoundError: If no transaction has this id
        """
        if not self._backend.delete_transaction(transaction_id):
            raise NotFoundError(EntityKind.TRANSACTION.value, transaction_id)
        logger.debug(f"Deleted transaction {transaction_id}")

    # -- queries -------------------------------------------------------------

    def get_by_id(self, transaction_id: int) -> Transaction | None:
        """The raw stored transaction, or None if absent."""
        return self._backend.get_transaction(transaction_id)

    def list_all(self) -> list[TransactionWithCategory]:
        """Every transaction, newest first."""
        return self._enrich_all(
            self._backend.list_transactions(), self._categories.index()
        )

    def list_by_date_range(
        self, start: int, end: int
    ) -> list[TransactionWithCategory]:
        """Transactions with ``start <= date <= end``, newest first."""
        return self._enrich_all(
            self._backend.list_transactions(start=start, end=end),
            self._categories.index(),
        )

    def list_recent(self, limit: int) -> list[TransactionWithCategory]:
        """The ``limit`` newest transactions.

        Raises:
            ValidationError: If limit is negative
        """
        if limit < 0:
            raise ValidationError(f"limit must be >= 0, got {limit}")
        return self._enrich_all(
            self._backend.list_transactions(limit=limit), self._categories.index()
        )

    def search(self, text: str) -> list[TransactionWithCategory]:
        """Case-insensitive substring match on note or category name, newest first.

        Orphaned transactions match on their note only; the "Unknown"
        placeholder is a display fallback, not a searchable name.
        """
        needle = text.lower()
        index = self._categories.index()

        def matches(t: Transaction) -> bool:
            category = index.get(t.category_id)
            category_name = category.name.lower() if category else ""
            return needle in t.note.lower() or needle in category_name

        return self._enrich_all(
            [t for t in self._backend.list_transactions() if matches(t)], index
        )

    def count_for_category(self, category_id: int) -> int:
        """Number of transactions referencing a category."""
        return len(self._backend.list_transactions(category_id=category_id))
