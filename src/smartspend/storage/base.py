"""Abstract storage interface for SmartSpend persistence backends.

Two strategies implement this contract:

1. ``DuckDBBackend`` - embedded relational store, durable per statement
2. ``SnapshotBackend`` - in-memory cache with debounced JSON write-behind

Repositories only talk to this interface, so swapping the backend never
changes repository behavior. Backends store and return validated models;
they do not enforce domain rules (default-category protection, category
existence, natural-key upserts). Those live in the repositories.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from ..models import Budget, Category, EntityKind, Transaction


class StorageBackend(ABC):
    """Row-level persistence primitives shared by every backend."""

    # -- lifecycle -----------------------------------------------------------

    @abstractmethod
    def open(self) -> None:
        """Open the durable medium and load or create its structures.

        Raises:
            PersistenceError: If the medium is unavailable or unreadable
        """

    @abstractmethod
    def close(self) -> None:
        """Flush pending writes and release the medium.

        Raises:
            PersistenceError: If a pending write could not be made durable
        """

    @abstractmethod
    def flush_now(self) -> None:
        """Make every applied mutation durable before returning.

        Raises:
            PersistenceError: If the durable write fails
        """

    @abstractmethod
    def is_initialized(self) -> bool:
        """Whether first-run seeding has already happened for this store."""

    @abstractmethod
    def seed(
        self, categories: Iterable[Category], next_ids: dict[EntityKind, int]
    ) -> None:
        """Insert seed categories, set counters, and mark the store initialized."""

    @abstractmethod
    def reset(
        self, categories: Iterable[Category], next_ids: dict[EntityKind, int]
    ) -> None:
        """Drop all rows, then restore seed categories and counters."""

    # -- identifiers ---------------------------------------------------------

    @abstractmethod
    def allocate_id(self, kind: EntityKind) -> int:
        """Return the next id for ``kind`` and advance its counter."""

    @abstractmethod
    def peek_next_id(self, kind: EntityKind) -> int:
        """Return the id the next allocation for ``kind`` would hand out."""

    # -- categories ----------------------------------------------------------

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """All categories ordered by id ascending."""

    @abstractmethod
    def get_category(self, category_id: int) -> Category | None:
        """A single category, or None."""

    @abstractmethod
    def insert_category(self, category: Category) -> None:
        pass

    @abstractmethod
    def update_category(self, category: Category) -> bool:
        """Replace the stored row with the same id. Returns False if absent."""

    @abstractmethod
    def delete_category(self, category_id: int) -> bool:
        """Remove a row. Returns False if absent."""

    # -- transactions --------------------------------------------------------

    @abstractmethod
    def list_transactions(
        self,
        start: int | None = None,
        end: int | None = None,
        category_id: int | None = None,
        limit: int | None = None,
    ) -> list[Transaction]:
        """Transactions matching the optional filters.

        Args:
            start: Inclusive lower bound on ``date`` (epoch ms)
            end: Inclusive upper bound on ``date`` (epoch ms)
            category_id: Only transactions in this category
            limit: Maximum number of rows

        Returns:
            Rows ordered by ``date`` descending, then ``id`` descending
        """

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Transaction | None:
        pass

    @abstractmethod
    def insert_transaction(self, transaction: Transaction) -> None:
        pass

    @abstractmethod
    def update_transaction(self, transaction: Transaction) -> bool:
        """Replace the stored row with the same id. Returns False if absent."""

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> bool:
        """Remove a row. Returns False if absent."""

    # -- budgets -------------------------------------------------------------

    @abstractmethod
    def find_budget(self, category_id: int, month_year: str) -> Budget | None:
        """The budget stored under a natural key, or None."""

    @abstractmethod
    def list_budgets(self, month_year: str | None = None) -> list[Budget]:
        """Budgets ordered by id, optionally restricted to one month."""

    @abstractmethod
    def insert_budget(self, budget: Budget) -> None:
        pass

    @abstractmethod
    def update_budget(self, budget: Budget) -> bool:
        """Replace the stored row with the same id. Returns False if absent."""

    @abstractmethod
    def delete_budget(self, budget_id: int) -> bool:
        """Remove a row. Returns False if absent."""

    def __enter__(self) -> "StorageBackend":
        self.open()
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()
