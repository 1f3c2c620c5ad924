"""Persistence backends for SmartSpend.

Both backends implement ``StorageBackend``; ``create_backend`` picks one from
configuration so repositories never depend on the storage strategy.
"""

from ..config import SmartSpendSettings
from .base import StorageBackend
from .duckdb_backend import DuckDBBackend
from .snapshot_backend import SnapshotBackend


def create_backend(settings: SmartSpendSettings) -> StorageBackend:
    """Build the backend selected by ``settings.database.backend``."""
    if settings.database.backend == "snapshot":
        return SnapshotBackend(
            settings.snapshot_path, flush_delay_ms=settings.database.flush_delay_ms
        )
    return DuckDBBackend(
        settings.duckdb_path, create_dirs=settings.database.create_dirs
    )


__all__ = ["StorageBackend", "DuckDBBackend", "SnapshotBackend", "create_backend"]
