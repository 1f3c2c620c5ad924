"""Category repository: CRUD with default-category protection."""

import logging

from ..enrichment import CategoryIndex, build_category_index
from ..errors import NotFoundError, ProtectedEntityError
from ..models import Category, EntityKind, parse_entity
from ..storage import StorageBackend

logger = logging.getLogger(__name__)


class CategoryRepository:
    """User-defined and default spending categories."""

    def __init__(self, backend: StorageBackend):
        self._backend = backend

    def list_all(self) -> list[Category]:
        """All categories ordered by id ascending."""
        return self._backend.list_categories()

    def get(self, category_id: int) -> Category | None:
        return self._backend.get_category(category_id)

    def exists(self, category_id: int) -> bool:
        return self._backend.get_category(category_id) is not None

    def index(self) -> CategoryIndex:
        """Immutable id -> Category snapshot for read-time enrichment."""
        return build_category_index(self._backend.list_categories())

    def create(self, name: str, emoji: str, color_hex: str) -> Category:
        """Create a user category with the next free id.

        Raises:
            ValidationError: If name, emoji, or color are malformed
        """
        # Validate before allocating so bad input never consumes an id
        draft = parse_entity(
            Category,
            {"id": 1, "name": name, "emoji": emoji, "color_hex": color_hex},
        )
        category = draft.model_copy(
            update={"id": self._backend.allocate_id(EntityKind.CATEGORY)}
        )
        self._backend.insert_category(category)
        logger.info(f"Created category {category.id}: {category.name}")
        return category

    def update(self, category: Category) -> Category:
        """Replace name, emoji, and color of an existing category.

        ``is_default`` is fixed at creation and is never changed here.

        Raises:
            NotFoundError: If no category has this id
            ValidationError: If the new attributes are malformed
        """
        existing = self._backend.get_category(category.id)
        if existing is None:
            raise NotFoundError(EntityKind.CATEGORY.value, category.id)

        updated = parse_entity(
            Category,
            {
                "id": existing.id,
                "name": category.name,
                "emoji": category.emoji,
                "color_hex": category.color_hex,
                "is_default": existing.is_default,
            },
        )
        self._backend.update_category(updated)
        return updated

    def delete(self, category_id: int) -> None:
        """Delete a user category. Transactions and budgets are not cascaded.

        Raises:
            NotFoundError: If no category has this id
            ProtectedEntityError: If the category is one of the defaults
        """
        existing = self._backend.get_category(category_id)
        if existing is None:
            raise NotFoundError(EntityKind.CATEGORY.value, category_id)
        if existing.is_default:
            raise ProtectedEntityError(EntityKind.CATEGORY.value, category_id)

        self._backend.delete_category(category_id)
        logger.info(f"Deleted category {category_id}: {existing.name}")
