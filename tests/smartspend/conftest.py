"""Shared pytest fixtures for smartspend tests.

Repository and aggregation tests use the ``db`` fixture, which is
parametrized over both persistence backends so every behavior is proven
identical for DuckDB and the JSON snapshot store.
"""

from collections.abc import Generator
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

import pytest

from smartspend.config import clear_settings_cache, set_current_profile
from smartspend.database import SmartSpendDB
from smartspend.storage import DuckDBBackend, SnapshotBackend, StorageBackend

# Fixed-offset zone (no DST) so day boundaries are deterministic
TZ = ZoneInfo("Asia/Kolkata")


def ms(
    year: int, month: int, day: int, hour: int = 12, minute: int = 0, tz: Any = TZ
) -> int:
    """Epoch milliseconds for a wall-clock time in ``tz``."""
    return round(datetime(year, month, day, hour, minute, tzinfo=tz).timestamp() * 1000)


def tx_data(**overrides: Any) -> dict[str, Any]:
    """Valid transaction input, with any field overridden."""
    data: dict[str, Any] = {
        "amount": Decimal("100"),
        "category_id": 1,
        "note": "",
        "date": ms(2024, 3, 15),
        "payment_method": "UPI",
        "is_recurring": False,
        "recurring_interval_days": None,
        "is_split": False,
        "split_share": None,
    }
    data.update(overrides)
    return data


def make_backend(kind: str, directory: Path) -> StorageBackend:
    if kind == "duckdb":
        return DuckDBBackend(directory / "smartspend.duckdb")
    return SnapshotBackend(directory / "smartspend.json", flush_delay_ms=20)


@pytest.fixture(autouse=True)
def clean_profile_state(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Isolate settings per test.

    Clears the settings cache, resets the current profile to 'test', and
    points the data directory at a per-test temporary directory.
    """
    monkeypatch.setenv("SMARTSPEND_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("SMARTSPEND_TIMEZONE", raising=False)
    monkeypatch.delenv("SMARTSPEND_DATABASE__BACKEND", raising=False)
    clear_settings_cache()
    set_current_profile("test")

    yield

    clear_settings_cache()
    set_current_profile("test")


@pytest.fixture(params=["duckdb", "snapshot"])
def backend_kind(request: pytest.FixtureRequest) -> str:
    return request.param


@pytest.fixture
def backend(backend_kind: str, tmp_path: Path) -> StorageBackend:
    """An unopened backend of each kind writing under ``tmp_path``."""
    return make_backend(backend_kind, tmp_path)


@pytest.fixture
def db(backend: StorageBackend) -> Generator[SmartSpendDB, None, None]:
    """An initialized database over each backend, in a fixed zone."""
    database = SmartSpendDB(backend, tz=TZ)
    database.initialize()
    yield database
    database.close()
