"""Category management commands for SmartSpend CLI."""

import logging

import typer

from ...errors import NotFoundError
from ...models import EntityKind
from ..utils import open_database

app = typer.Typer(help="Manage spending categories")
logger = logging.getLogger(__name__)


@app.command("list")
def list_categories() -> None:
    """List all categories, defaults first."""
    with open_database() as db:
        for c in db.categories.list_all():
            marker = " (default)" if c.is_default else ""
            print(f"{c.id:>4}  {c.emoji} {c.name}  {c.color_hex}{marker}")


@app.command("add")
def add_category(
    name: str = typer.Argument(..., help="Category name"),
    emoji: str = typer.Option("📦", "--emoji", "-e", help="Display emoji"),
    color: str = typer.Option("#B2BEC3", "--color", "-c", help="Color as #RRGGBB"),
) -> None:
    """Create a custom category."""
    with open_database() as db:
        category = db.categories.create(name, emoji, color)
        logger.info(f"✅ Created category {category.id}: {category.emoji} {category.name}")


@app.command("rename")
def rename_category(
    category_id: int = typer.Argument(..., help="Category id"),
    name: str = typer.Argument(..., help="New name"),
    emoji: str | None = typer.Option(None, "--emoji", "-e", help="New emoji"),
    color: str | None = typer.Option(None, "--color", "-c", help="New color"),
) -> None:
    """Change a category's name, and optionally its emoji and color.

    Past transactions show the new attributes immediately.
    """
    with open_database() as db:
        existing = db.categories.get(category_id)
        if existing is None:
            raise NotFoundError(EntityKind.CATEGORY.value, category_id)

        updated = db.categories.update(
            existing.model_copy(
                update={
                    "name": name,
                    "emoji": emoji or existing.emoji,
                    "color_hex": color or existing.color_hex,
                }
            )
        )
        logger.info(f"✅ Updated category {updated.id}: {updated.emoji} {updated.name}")


@app.command("delete")
def delete_category(
    category_id: int = typer.Argument(..., help="Category id"),
) -> None:
    """Delete a custom category. Default categories cannot be deleted.

    Transactions in the category are kept and shown as "Unknown".
    """
    with open_database() as db:
        orphaned = db.transactions.count_for_category(category_id)
        db.categories.delete(category_id)
        logger.info(f"✅ Deleted category {category_id}")
        if orphaned:
            logger.warning(
                f"⚠️  {orphaned} transaction(s) now show as Unknown category"
            )
