"""SmartSpend: local data layer for a personal finance tracker.

This package stores transactions, categories, and monthly budgets and answers
range and aggregation queries over them:
- Entity repositories with referential and uniqueness invariants
- Aggregation engine for range totals, category rankings, and daily series
- Two interchangeable persistence backends (DuckDB or JSON snapshot)
- CLI interface for all operations

All data is stored locally.
"""

from .database import SmartSpendDB
from .errors import (
    NotFoundError,
    PersistenceError,
    ProtectedEntityError,
    SmartSpendError,
    ValidationError,
)

__version__ = "0.1.0"

__all__ = [
    "SmartSpendDB",
    "SmartSpendError",
    "ValidationError",
    "NotFoundError",
    "ProtectedEntityError",
    "PersistenceError",
]
