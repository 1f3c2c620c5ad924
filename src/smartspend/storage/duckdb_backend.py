"""Embedded relational backend on DuckDB.

Every operation executes directly against the database file, so durability
is immediate and per statement. Table structures are created from the SQL
files in ``src/smartspend/sql/schema/``.
"""

import logging
from collections.abc import Generator, Iterable
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import duckdb
from pydantic import BaseModel

from ..errors import PersistenceError
from ..models import Budget, Category, EntityKind, Transaction
from .base import StorageBackend

logger = logging.getLogger(__name__)

_SQL_DIR = Path(__file__).resolve().parent.parent / "sql" / "schema"

# Executed in order on every open; each file is idempotent (IF NOT EXISTS)
SCHEMA_FILES = [
    "app_meta.sql",
    "id_counters.sql",
    "categories.sql",
    "transactions.sql",
    "budgets.sql",
]

_CATEGORY_COLUMNS = "id, name, emoji, is_default, color_hex"
_TRANSACTION_COLUMNS = (
    "id, amount, category_id, note, date, payment_method, is_recurring, "
    "recurring_interval_days, is_split, split_share"
)
_BUDGET_COLUMNS = "id, category_id, limit_amount, month_year"

_INITIALIZED_KEY = "initialized"


def _category_params(c: Category) -> list[Any]:
    return [c.id, c.name, c.emoji, c.is_default, c.color_hex]


def _transaction_params(t: Transaction) -> list[Any]:
    return [
        t.amount,
        t.category_id,
        t.note,
        t.date,
        t.payment_method.value,
        t.is_recurring,
        t.recurring_interval_days,
        t.is_split,
        t.split_share,
    ]


class DuckDBBackend(StorageBackend):
    """Persistence backend storing each entity in its own DuckDB table."""

    def __init__(self, database_path: Path | str, create_dirs: bool = True):
        """Initialize the backend.

        Args:
            database_path: Path to the DuckDB database file
            create_dirs: Create the parent directory on open if missing
        """
        self.database_path = Path(database_path)
        self.create_dirs = create_dirs
        self._conn: duckdb.DuckDBPyConnection | None = None

    # -- connection helpers --------------------------------------------------

    def _db(self) -> duckdb.DuckDBPyConnection:
        if self._conn is None:
            raise PersistenceError("DuckDB connection not open. Call open() first.")
        return self._conn

    def _execute(
        self, sql: str, params: list[Any] | None = None
    ) -> duckdb.DuckDBPyConnection:
        db = self._db()
        try:
            if params:
                return db.execute(sql, params)
            return db.execute(sql)
        except duckdb.Error as e:
            logger.error(f"DuckDB statement failed: {e}")
            raise PersistenceError(f"DuckDB statement failed: {e}") from e

    def _fetch_models(
        self, model_cls: type[BaseModel], sql: str, params: list[Any] | None = None
    ) -> list[Any]:
        result = self._execute(sql, params)
        columns = [desc[0] for desc in result.description]
        return [
            model_cls.model_validate(dict(zip(columns, row, strict=True)))
            for row in result.fetchall()
        ]

    def _changed(self, sql: str, params: list[Any]) -> bool:
        """Run a RETURNING statement and report whether any row matched."""
        return bool(self._execute(sql, params).fetchall())

    @contextmanager
    def _transaction(self) -> Generator[None, None, None]:
        db = self._db()
        try:
            db.begin()
        except duckdb.Error as e:
            raise PersistenceError(f"Cannot begin DuckDB transaction: {e}") from e
        try:
            yield
        except BaseException:
            db.rollback()
            raise
        try:
            db.commit()
        except duckdb.Error as e:
            raise PersistenceError(f"Cannot commit DuckDB transaction: {e}") from e

    # -- lifecycle -----------------------------------------------------------

    def open(self) -> None:
        if self._conn is not None:
            return

        try:
            if self.create_dirs:
                self.database_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = duckdb.connect(str(self.database_path))
            for sql_file in SCHEMA_FILES:
                self._conn.execute((_SQL_DIR / sql_file).read_text())
                logger.debug(f"Executed schema file: {sql_file}")
        except (duckdb.Error, OSError) as e:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
            raise PersistenceError(
                f"Cannot open DuckDB database {self.database_path}: {e}"
            ) from e

        logger.info(f"Connected to DuckDB database: {self.database_path}")

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.info("DuckDB connection closed")

    def flush_now(self) -> None:
        # Statements are durable as soon as they return; force a checkpoint
        # so the WAL is folded into the main file as well.
        self._execute("CHECKPOINT")

    def is_initialized(self) -> bool:
        row = self._execute(
            "SELECT value FROM app_meta WHERE key = ?", [_INITIALIZED_KEY]
        ).fetchone()
        return row is not None and row[0] == "true"

    def _insert_counters(self, next_ids: dict[EntityKind, int]) -> None:
        for kind, next_id in next_ids.items():
            self._execute(
                "INSERT OR REPLACE INTO id_counters (entity, next_id) VALUES (?, ?)",
                [kind.value, next_id],
            )

    def seed(
        self, categories: Iterable[Category], next_ids: dict[EntityKind, int]
    ) -> None:
        with self._transaction():
            for category in categories:
                self.insert_category(category)
            self._insert_counters(next_ids)
            self._execute(
                "INSERT OR REPLACE INTO app_meta (key, value) VALUES (?, 'true')",
                [_INITIALIZED_KEY],
            )
        logger.info("Seeded default categories")

    def reset(
        self, categories: Iterable[Category], next_ids: dict[EntityKind, int]
    ) -> None:
        # Seed ids are replaced in place, never deleted, so one transaction
        # covers both the wipe and the restore.
        seed = list(categories)
        with self._transaction():
            self._execute("DELETE FROM transactions")
            self._execute("DELETE FROM budgets")
            if seed:
                placeholders = ", ".join("?" for _ in seed)
                self._execute(
                    f"DELETE FROM categories WHERE id NOT IN ({placeholders})",  # noqa: S608
                    [c.id for c in seed],
                )
            else:
                self._execute("DELETE FROM categories")
            for category in seed:
                self._execute(
                    f"INSERT OR REPLACE INTO categories ({_CATEGORY_COLUMNS}) "
                    "VALUES (?, ?, ?, ?, ?)",
                    _category_params(category),
                )
            self._insert_counters(next_ids)

    # -- identifiers ---------------------------------------------------------

    def peek_next_id(self, kind: EntityKind) -> int:
        row = self._execute(
            "SELECT next_id FROM id_counters WHERE entity = ?", [kind.value]
        ).fetchone()
        if row is None:
            raise PersistenceError(f"No id counter for {kind.value}; store not seeded")
        return int(row[0])

    def allocate_id(self, kind: EntityKind) -> int:
        with self._transaction():
            next_id = self.peek_next_id(kind)
            self._execute(
                "UPDATE id_counters SET next_id = next_id + 1 WHERE entity = ?",
                [kind.value],
            )
        return next_id

    # -- categories ----------------------------------------------------------

    def list_categories(self) -> list[Category]:
        return self._fetch_models(
            Category, f"SELECT {_CATEGORY_COLUMNS} FROM categories ORDER BY id"
        )

    def get_category(self, category_id: int) -> Category | None:
        rows = self._fetch_models(
            Category,
            f"SELECT {_CATEGORY_COLUMNS} FROM categories WHERE id = ?",
            [category_id],
        )
        return rows[0] if rows else None

    def insert_category(self, category: Category) -> None:
        self._execute(
            f"INSERT INTO categories ({_CATEGORY_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
            _category_params(category),
        )

    def update_category(self, category: Category) -> bool:
        return self._changed(
            """
            UPDATE categories SET name = ?, emoji = ?, is_default = ?, color_hex = ?
            WHERE id = ?
            RETURNING id
            """,
            [
                category.name,
                category.emoji,
                category.is_default,
                category.color_hex,
                category.id,
            ],
        )

    def delete_category(self, category_id: int) -> bool:
        return self._changed(
            "DELETE FROM categories WHERE id = ? RETURNING id", [category_id]
        )

    # -- transactions --------------------------------------------------------

    def list_transactions(
        self,
        start: int | None = None,
        end: int | None = None,
        category_id: int | None = None,
        limit: int | None = None,
    ) -> list[Transaction]:
        conditions: list[str] = []
        params: list[Any] = []

        if start is not None:
            conditions.append("date >= ?")
            params.append(start)
        if end is not None:
            conditions.append("date <= ?")
            params.append(end)
        if category_id is not None:
            conditions.append("category_id = ?")
            params.append(category_id)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        sql = (
            f"SELECT {_TRANSACTION_COLUMNS} FROM transactions {where} "  # noqa: S608
            "ORDER BY date DESC, id DESC"
        )
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)

        return self._fetch_models(Transaction, sql, params)

    def get_transaction(self, transaction_id: int) -> Transaction | None:
        rows = self._fetch_models(
            Transaction,
            f"SELECT {_TRANSACTION_COLUMNS} FROM transactions WHERE id = ?",
            [transaction_id],
        )
        return rows[0] if rows else None

    def insert_transaction(self, transaction: Transaction) -> None:
        self._execute(
            f"""
            INSERT INTO transactions ({_TRANSACTION_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [transaction.id, *_transaction_params(transaction)],
        )

    def update_transaction(self, transaction: Transaction) -> bool:
        return self._changed(
            """
            UPDATE transactions SET
                amount = ?, category_id = ?, note = ?, date = ?,
                payment_method = ?, is_recurring = ?, recurring_interval_days = ?,
                is_split = ?, split_share = ?
            WHERE id = ?
            RETURNING id
            """,
            [*_transaction_params(transaction), transaction.id],
        )

    def delete_transaction(self, transaction_id: int) -> bool:
        return self._changed(
            "DELETE FROM transactions WHERE id = ? RETURNING id", [transaction_id]
        )

    # -- budgets -------------------------------------------------------------

    def find_budget(self, category_id: int, month_year: str) -> Budget | None:
        rows = self._fetch_models(
            Budget,
            f"""
            SELECT {_BUDGET_COLUMNS} FROM budgets
            WHERE category_id = ? AND month_year = ?
            ORDER BY id
            LIMIT 1
            """,
            [category_id, month_year],
        )
        return rows[0] if rows else None

    def list_budgets(self, month_year: str | None = None) -> list[Budget]:
        if month_year is None:
            return self._fetch_models(
                Budget, f"SELECT {_BUDGET_COLUMNS} FROM budgets ORDER BY id"
            )
        return self._fetch_models(
            Budget,
            f"SELECT {_BUDGET_COLUMNS} FROM budgets WHERE month_year = ? ORDER BY id",
            [month_year],
        )

    def insert_budget(self, budget: Budget) -> None:
        self._execute(
            f"INSERT INTO budgets ({_BUDGET_COLUMNS}) VALUES (?, ?, ?, ?)",
            [budget.id, budget.category_id, budget.limit_amount, budget.month_year],
        )

    def update_budget(self, budget: Budget) -> bool:
        return self._changed(
            """
            UPDATE budgets SET category_id = ?, limit_amount = ?, month_year = ?
            WHERE id = ?
            RETURNING id
            """,
            [budget.category_id, budget.limit_amount, budget.month_year, budget.id],
        )

    def delete_budget(self, budget_id: int) -> bool:
        return self._changed(
            "DELETE FROM budgets WHERE id = ? RETURNING id", [budget_id]
        )
