"""Read-time join of transactions to their category display attributes.

Transactions never store category data. Every read resolves ``category_id``
against the current category set, so category edits show up in all
historical views and deleted categories degrade to an "Unknown" placeholder.
"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .defaults import (
    UNKNOWN_CATEGORY_COLOR,
    UNKNOWN_CATEGORY_EMOJI,
    UNKNOWN_CATEGORY_NAME,
)
from .models import Category, Transaction, TransactionWithCategory

CategoryIndex = Mapping[int, Category]


def build_category_index(categories: Iterable[Category]) -> CategoryIndex:
    """Snapshot categories into a read-only id -> Category mapping."""
    return MappingProxyType({c.id: c for c in categories})


def display_attributes(
    category_id: int, index: CategoryIndex
) -> tuple[str, str, str]:
    """Return (name, emoji, color) for a category id, or the Unknown fallback."""
    category = index.get(category_id)
    if category is None:
        return UNKNOWN_CATEGORY_NAME, UNKNOWN_CATEGORY_EMOJI, UNKNOWN_CATEGORY_COLOR
    return category.name, category.emoji, category.color_hex


def enrich(transaction: Transaction, index: CategoryIndex) -> TransactionWithCategory:
    """Attach category display attributes to a transaction. Never raises on orphans."""
    name, emoji, color = display_attributes(transaction.category_id, index)
    return TransactionWithCategory(
        **transaction.model_dump(),
        category_name=name,
        category_emoji=emoji,
        category_color=color,
    )
