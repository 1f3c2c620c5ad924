"""Default categories and fallback display attributes.

The twelve defaults are seeded verbatim with fixed ids 1-12 on first run and
restored by ``delete_all_data``. User-created categories start at id 13.
"""

from .models import Category, EntityKind

DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id=1, name="Food & Drinks", emoji="🍔", is_default=True, color_hex="#FF6B6B"),
    Category(id=2, name="Transport", emoji="🚗", is_default=True, color_hex="#4ECDC4"),
    Category(id=3, name="Shopping", emoji="🛍️", is_default=True, color_hex="#FFE66D"),
    Category(id=4, name="Entertainment", emoji="🎭", is_default=True, color_hex="#A29BFE"),
    Category(id=5, name="Health", emoji="💊", is_default=True, color_hex="#55EFC4"),
    Category(id=6, name="Groceries", emoji="🛒", is_default=True, color_hex="#FDCB6E"),
    Category(id=7, name="Rent & Utilities", emoji="🏠", is_default=True, color_hex="#74B9FF"),
    Category(id=8, name="Education", emoji="📚", is_default=True, color_hex="#E17055"),
    Category(id=9, name="Travel", emoji="✈️", is_default=True, color_hex="#00B894"),
    Category(id=10, name="Subscriptions", emoji="📱", is_default=True, color_hex="#FD79A8"),
    Category(id=11, name="Personal Care", emoji="💅", is_default=True, color_hex="#6C5CE7"),
    Category(id=12, name="Others", emoji="📦", is_default=True, color_hex="#B2BEC3"),
)

# Next id for each entity right after seeding
INITIAL_NEXT_IDS: dict[EntityKind, int] = {
    EntityKind.TRANSACTION: 1,
    EntityKind.CATEGORY: len(DEFAULT_CATEGORIES) + 1,
    EntityKind.BUDGET: 1,
}

# Display attributes used when a transaction's category no longer exists
UNKNOWN_CATEGORY_NAME = "Unknown"
UNKNOWN_CATEGORY_EMOJI = "📦"
UNKNOWN_CATEGORY_COLOR = "#B2BEC3"
