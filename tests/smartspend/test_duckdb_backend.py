"""Tests for the DuckDB backend's schema and driver error handling."""

from collections.abc import Generator
from decimal import Decimal
from pathlib import Path

import duckdb
import pytest

from conftest import tx_data
from smartspend.defaults import DEFAULT_CATEGORIES, INITIAL_NEXT_IDS
from smartspend.errors import PersistenceError
from smartspend.models import EntityKind, Transaction
from smartspend.storage import DuckDBBackend
from smartspend.storage.duckdb_backend import SCHEMA_FILES


@pytest.fixture
def database_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "smartspend.duckdb"


@pytest.fixture
def store(database_path: Path) -> Generator[DuckDBBackend, None, None]:
    backend = DuckDBBackend(database_path)
    backend.open()
    backend.seed(DEFAULT_CATEGORIES, INITIAL_NEXT_IDS)
    yield backend
    backend.close()


class TestDuckDBSchema:
    """Tables created from the SQL schema files."""

    @pytest.mark.integration
    def test_open_creates_all_tables(self, database_path: Path) -> None:
        backend = DuckDBBackend(database_path)
        backend.open()
        backend.close()

        conn = duckdb.connect(str(database_path), read_only=True)
        try:
            tables = {row[0] for row in conn.execute("SHOW TABLES").fetchall()}
        finally:
            conn.close()
        assert tables == {name.removesuffix(".sql") for name in SCHEMA_FILES}

    @pytest.mark.integration
    def test_open_is_repeatable(self, store: DuckDBBackend) -> None:
        store.close()
        store.open()

        assert store.is_initialized() is True
        assert len(store.list_categories()) == 12

    @pytest.mark.integration
    def test_amounts_keep_two_decimal_places(self, store: DuckDBBackend) -> None:
        tx = Transaction(id=1, **tx_data(amount=Decimal("0.10")))
        store.insert_transaction(tx)

        stored = store.get_transaction(1)
        assert stored is not None
        assert stored.amount == Decimal("0.10")
        assert isinstance(stored.amount, Decimal)

    @pytest.mark.integration
    def test_counters_are_persisted(self, store: DuckDBBackend) -> None:
        assert store.allocate_id(EntityKind.BUDGET) == 1
        assert store.allocate_id(EntityKind.BUDGET) == 2
        assert store.peek_next_id(EntityKind.BUDGET) == 3


class TestDuckDBErrors:
    """Driver failures surface as PersistenceError."""

    @pytest.mark.unit
    def test_calls_before_open_raise(self, database_path: Path) -> None:
        with pytest.raises(PersistenceError, match="not open"):
            DuckDBBackend(database_path).list_categories()

    @pytest.mark.integration
    def test_unopenable_path_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")

        with pytest.raises(PersistenceError, match="Cannot open"):
            DuckDBBackend(blocker / "smartspend.duckdb").open()

    @pytest.mark.integration
    def test_duplicate_primary_key_raises(self, store: DuckDBBackend) -> None:
        with pytest.raises(PersistenceError):
            store.insert_category(DEFAULT_CATEGORIES[0])

    @pytest.mark.integration
    def test_failed_seed_rolls_back(self, database_path: Path) -> None:
        backend = DuckDBBackend(database_path)
        backend.open()
        duplicated = (*DEFAULT_CATEGORIES, DEFAULT_CATEGORIES[0])

        with pytest.raises(PersistenceError):
            backend.seed(duplicated, INITIAL_NEXT_IDS)

        assert backend.is_initialized() is False
        assert backend.list_categories() == []
        backend.close()
