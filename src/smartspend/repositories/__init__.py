"""Entity repositories for SmartSpend.

Each repository enforces its own entity's invariants on top of a
``StorageBackend``.
"""

from .budgets import BudgetRepository
from .categories import CategoryRepository
from .transactions import TransactionRepository

__all__ = ["CategoryRepository", "TransactionRepository", "BudgetRepository"]
