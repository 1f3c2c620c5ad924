"""In-memory backend with debounced write-behind to a JSON snapshot.

Reads and writes hit in-memory dictionaries synchronously, so repository
calls never block on I/O. Each mutation (re)starts a ``threading.Timer``;
when the store has been quiet for ``flush_delay_ms`` the whole state is
written as one JSON snapshot (temp file + ``os.replace``).

Durability tradeoff: a write-behind failure is logged and retried on the
next mutation; it is never raised to the caller that made the mutation.
Durability therefore lags visibility by at most the debounce window, and
by longer while the medium keeps failing. ``flush_now()`` is the
synchronous escape hatch and does raise ``PersistenceError``; call it
before destructive operations.

With ``snapshot_path=None`` the backend is purely in-memory.
"""

import logging
import os
import threading
from collections.abc import Iterable
from pathlib import Path

import pydantic
from pydantic import BaseModel, Field

from ..errors import PersistenceError
from ..models import Budget, Category, EntityKind, Transaction
from .base import StorageBackend

logger = logging.getLogger(__name__)


class Snapshot(BaseModel):
    """Serialized state of a snapshot store."""

    initialized: bool = False
    categories: list[Category] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
    budgets: list[Budget] = Field(default_factory=list)
    next_ids: dict[EntityKind, int] = Field(default_factory=dict)


class SnapshotBackend(StorageBackend):
    """Persistence backend keeping all rows in memory."""

    def __init__(self, snapshot_path: Path | str | None, flush_delay_ms: int = 100):
        """Initialize the backend.

        Args:
            snapshot_path: JSON snapshot file, or None for a memory-only store
            flush_delay_ms: Quiet period before a debounced write
        """
        self.snapshot_path = Path(snapshot_path) if snapshot_path is not None else None
        self.flush_delay = flush_delay_ms / 1000
        self._lock = threading.RLock()
        self._timer: threading.Timer | None = None
        self._dirty = False
        self._opened = False
        self._load(Snapshot())

    @property
    def durable(self) -> bool:
        """Whether mutations are ever written to disk."""
        return self.snapshot_path is not None

    @property
    def has_pending_writes(self) -> bool:
        """Whether some applied mutation has not been written yet."""
        with self._lock:
            return self._dirty and self.durable

    def _load(self, snapshot: Snapshot) -> None:
        self._initialized = snapshot.initialized
        self._categories: dict[int, Category] = {c.id: c for c in snapshot.categories}
        self._transactions: dict[int, Transaction] = {
            t.id: t for t in snapshot.transactions
        }
        self._budgets: dict[int, Budget] = {b.id: b for b in snapshot.budgets}
        self._next_ids: dict[EntityKind, int] = dict(snapshot.next_ids)

    def _to_snapshot(self) -> Snapshot:
        return Snapshot(
            initialized=self._initialized,
            categories=sorted(self._categories.values(), key=lambda c: c.id),
            transactions=sorted(self._transactions.values(), key=lambda t: t.id),
            budgets=sorted(self._budgets.values(), key=lambda b: b.id),
            next_ids=self._next_ids,
        )

    # -- write-behind --------------------------------------------------------

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _mark_dirty(self) -> None:
        """Record a mutation and restart the debounce timer."""
        self._dirty = True
        if not self.durable:
            return
        self._cancel_timer()
        self._timer = threading.Timer(self.flush_delay, self._flush_from_timer)
        self._timer.daemon = True
        self._timer.start()

    def _flush_from_timer(self) -> None:
        try:
            self._write_snapshot()
        except PersistenceError:
            logger.exception(
                "Snapshot write-behind failed; changes stay in memory and "
                "the write is retried on the next mutation"
            )

    def _write_snapshot(self) -> None:
        with self._lock:
            if self.snapshot_path is None:
                self._dirty = False
                return

            payload = self._to_snapshot().model_dump_json(indent=2)
            tmp_path = self.snapshot_path.with_name(self.snapshot_path.name + ".tmp")
            try:
                tmp_path.write_text(payload, encoding="utf-8")
                os.replace(tmp_path, self.snapshot_path)
            except OSError as e:
                raise PersistenceError(
                    f"Cannot write snapshot {self.snapshot_path}: {e}"
                ) from e

            self._dirty = False
            logger.debug(f"Wrote snapshot: {self.snapshot_path}")

    # -- lifecycle -----------------------------------------------------------

    def open(self) -> None:
        with self._lock:
            if self._opened:
                return

            if self.snapshot_path is not None:
                try:
                    if self.snapshot_path.exists():
                        snapshot = Snapshot.model_validate_json(
                            self.snapshot_path.read_bytes()
                        )
                        self._load(snapshot)
                        logger.info(f"Loaded snapshot: {self.snapshot_path}")
                    else:
                        self.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
                except (OSError, pydantic.ValidationError) as e:
                    raise PersistenceError(
                        f"Cannot load snapshot {self.snapshot_path}: {e}"
                    ) from e

            self._opened = True

    def close(self) -> None:
        with self._lock:
            if not self._opened:
                return
            self.flush_now()
            self._opened = False

    def flush_now(self) -> None:
        with self._lock:
            self._cancel_timer()
            if self._dirty:
                self._write_snapshot()

    def is_initialized(self) -> bool:
        with self._lock:
            return self._initialized

    def seed(
        self, categories: Iterable[Category], next_ids: dict[EntityKind, int]
    ) -> None:
        with self._lock:
            self._categories = {c.id: c for c in categories}
            self._next_ids = dict(next_ids)
            self._initialized = True
            self._dirty = True
            # First-run seeding is written synchronously so an unusable
            # medium is detected during initialization.
            self._cancel_timer()
            self._write_snapshot()
        logger.info("Seeded default categories")

    def reset(
        self, categories: Iterable[Category], next_ids: dict[EntityKind, int]
    ) -> None:
        with self._lock:
            self._transactions.clear()
            self._budgets.clear()
            self._categories = {c.id: c for c in categories}
            self._next_ids = dict(next_ids)
            self._mark_dirty()

    # -- identifiers ---------------------------------------------------------

    def peek_next_id(self, kind: EntityKind) -> int:
        with self._lock:
            if kind not in self._next_ids:
                raise PersistenceError(
                    f"No id counter for {kind.value}; store not seeded"
                )
            return self._next_ids[kind]

    def allocate_id(self, kind: EntityKind) -> int:
        with self._lock:
            next_id = self.peek_next_id(kind)
            self._next_ids[kind] = next_id + 1
            self._mark_dirty()
            return next_id

    # -- categories ----------------------------------------------------------

    def list_categories(self) -> list[Category]:
        with self._lock:
            return sorted(self._categories.values(), key=lambda c: c.id)

    def get_category(self, category_id: int) -> Category | None:
        with self._lock:
            return self._categories.get(category_id)

    def insert_category(self, category: Category) -> None:
        with self._lock:
            self._categories[category.id] = category
            self._mark_dirty()

    def update_category(self, category: Category) -> bool:
        with self._lock:
            if category.id not in self._categories:
                return False
            self._categories[category.id] = category
            self._mark_dirty()
            return True

    def delete_category(self, category_id: int) -> bool:
        with self._lock:
            if self._categories.pop(category_id, None) is None:
                return False
            self._mark_dirty()
            return True

    # -- transactions --------------------------------------------------------

    def list_transactions(
        self,
        start: int | None = None,
        end: int | None = None,
        category_id: int | None = None,
        limit: int | None = None,
    ) -> list[Transaction]:
        with self._lock:
            rows = [
                t
                for t in self._transactions.values()
                if (start is None or t.date >= start)
                and (end is None or t.date <= end)
                and (category_id is None or t.category_id == category_id)
            ]
        rows.sort(key=lambda t: (t.date, t.id), reverse=True)
        return rows if limit is None else rows[:limit]

    def get_transaction(self, transaction_id: int) -> Transaction | None:
        with self._lock:
            return self._transactions.get(transaction_id)

    def insert_transaction(self, transaction: Transaction) -> None:
        with self._lock:
            self._transactions[transaction.id] = transaction
            self._mark_dirty()

    def update_transaction(self, transaction: Transaction) -> bool:
        with self._lock:
            if transaction.id not in self._transactions:
                return False
            self._transactions[transaction.id] = transaction
            self._mark_dirty()
            return True

    def delete_transaction(self, transaction_id: int) -> bool:
        with self._lock:
            if self._transactions.pop(transaction_id, None) is None:
                return False
            self._mark_dirty()
            return True

    # -- budgets -------------------------------------------------------------

    def find_budget(self, category_id: int, month_year: str) -> Budget | None:
        with self._lock:
            matches = [
                b
                for b in self._budgets.values()
                if b.category_id == category_id and b.month_year == month_year
            ]
        return min(matches, key=lambda b: b.id) if matches else None

    def list_budgets(self, month_year: str | None = None) -> list[Budget]:
        with self._lock:
            rows = [
                b
                for b in self._budgets.values()
                if month_year is None or b.month_year == month_year
            ]
        return sorted(rows, key=lambda b: b.id)

    def insert_budget(self, budget: Budget) -> None:
        with self._lock:
            self._budgets[budget.id] = budget
            self._mark_dirty()

    def update_budget(self, budget: Budget) -> bool:
        with self._lock:
            if budget.id not in self._budgets:
                return False
            self._budgets[budget.id] = budget
            self._mark_dirty()
            return True

    def delete_budget(self, budget_id: int) -> bool:
        with self._lock:
            if self._budgets.pop(budget_id, None) is None:
                return False
            self._mark_dirty()
            return True
