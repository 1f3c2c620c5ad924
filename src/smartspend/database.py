"""SmartSpend database facade.

``SmartSpendDB`` owns one persistence backend plus the repositories and the
aggregation engine built on it. It is the single entry point used by the CLI
and by any other caller.
"""

import logging
from datetime import tzinfo

from .aggregation import AggregationEngine
from .config import SmartSpendSettings, get_settings
from .defaults import DEFAULT_CATEGORIES, INITIAL_NEXT_IDS
from .errors import PersistenceError
from .models import EntityKind
from .repositories import BudgetRepository, CategoryRepository, TransactionRepository
from .storage import SnapshotBackend, StorageBackend, create_backend

logger = logging.getLogger(__name__)


class SmartSpendDB:
    """Lifecycle and access point for the local SmartSpend store.

    Example:
        with SmartSpendDB.from_settings() as db:
            tx_id = db.transactions.create({...})
    """

    def __init__(self, backend: StorageBackend, tz: tzinfo | None = None):
        """Initialize the facade. Nothing is opened until ``initialize()``.

        Args:
            backend: Persistence backend to use
            tz: Zone for calendar-day bucketing; None means device-local
        """
        self._backend = backend
        self.tz = tz
        self.degraded = False
        self._ready = False
        self._categories: CategoryRepository | None = None
        self._transactions: TransactionRepository | None = None
        self._budgets: BudgetRepository | None = None
        self._aggregation: AggregationEngine | None = None

    @classmethod
    def from_settings(cls, settings: SmartSpendSettings | None = None) -> "SmartSpendDB":
        """Build a facade from (by default, the current profile's) settings."""
        settings = settings or get_settings()
        return cls(create_backend(settings), tz=settings.tzinfo)

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    # -- lifecycle -----------------------------------------------------------

    @staticmethod
    def _open_and_seed(backend: StorageBackend) -> None:
        backend.open()
        if backend.is_initialized():
            logger.debug("Store already initialized, loading existing data")
            return
        logger.info("First run: creating default categories")
        backend.seed(DEFAULT_CATEGORIES, INITIAL_NEXT_IDS)

    def _discard(self, backend: StorageBackend) -> None:
        try:
            backend.close()
        except PersistenceError as e:
            logger.warning(f"Could not close unusable backend cleanly: {e}")

    def initialize(self) -> None:
        """Open the store and seed defaults on first run. Idempotent.

        If the durable medium is unavailable, the session continues on an
        empty in-memory store seeded with the defaults and ``degraded`` is
        set. Nothing written in that mode survives the process.
        """
        if self._ready:
            return

        try:
            self._open_and_seed(self._backend)
        except PersistenceError as e:
            logger.error(
                f"Persistent storage unavailable ({e}). Falling back to an "
                "in-memory store: changes made in this session will NOT be saved"
            )
            self._discard(self._backend)
            fallback = SnapshotBackend(None)
            self._open_and_seed(fallback)
            self._backend = fallback
            self.degraded = True

        self._categories = CategoryRepository(self._backend)
        self._transactions = TransactionRepository(self._backend, self._categories)
        self._budgets = BudgetRepository(self._backend, self._categories)
        self._aggregation = AggregationEngine(self._backend, self._categories, self.tz)
        self._ready = True

    def close(self) -> None:
        """Flush pending writes and release the backend.

        Raises:
            PersistenceError: If pending writes could not be made durable
        """
        self._ready = False
        self._backend.close()

    def flush_now(self) -> None:
        """Force every applied mutation to durable storage.

        Raises:
            PersistenceError: If the durable write fails
        """
        self._require_ready()
        self._backend.flush_now()

    def delete_all_data(self) -> None:
        """Wipe transactions and budgets and restore the default categories.

        Id counters return to their post-seed values. The reset is flushed
        synchronously before returning.

        Raises:
            PersistenceError: If the wipe could not be made durable; callers
                must not report success in that case
        """
        self._require_ready()
        self._backend.reset(DEFAULT_CATEGORIES, INITIAL_NEXT_IDS)
        self._backend.flush_now()
        logger.info("All data deleted, default categories restored")

    def next_ids(self) -> dict[EntityKind, int]:
        """Id each entity's next allocation would receive."""
        self._require_ready()
        return {kind: self._backend.peek_next_id(kind) for kind in EntityKind}

    # -- components ----------------------------------------------------------

    def _require_ready(self) -> None:
        if not self._ready:
            raise PersistenceError("Database not initialized. Call initialize() first.")

    @property
    def categories(self) -> CategoryRepository:
        self._require_ready()
        assert self._categories is not None  # noqa: S101 - set by initialize()
        return self._categories

    @property
    def transactions(self) -> TransactionRepository:
        self._require_ready()
        assert self._transactions is not None  # noqa: S101 - set by initialize()
        return self._transactions

    @property
    def budgets(self) -> BudgetRepository:
        self._require_ready()
        assert self._budgets is not None  # noqa: S101 - set by initialize()
        return self._budgets

    @property
    def aggregation(self) -> AggregationEngine:
        self._require_ready()
        assert self._aggregation is not None  # noqa: S101 - set by initialize()
        return self._aggregation

    def __enter__(self) -> "SmartSpendDB":
        self.initialize()
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()
