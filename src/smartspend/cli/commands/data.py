"""Store lifecycle commands for SmartSpend CLI."""

import logging

import typer

from ..utils import open_database

logger = logging.getLogger(__name__)

CONFIRMATION_WORD = "DELETE"


def init_store() -> None:
    """Create the store for the current profile and seed default categories."""
    with open_database() as db:
        categories = db.categories.list_all()
        logger.info(f"✅ Store ready with {len(categories)} categories")


def reset_store(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Delete ALL transactions and budgets and restore the default categories."""
    if not yes:
        answer = typer.prompt(
            f"This permanently deletes all data. Type {CONFIRMATION_WORD} to confirm"
        )
        if answer != CONFIRMATION_WORD:
            logger.info("❌ Cancelled")
            raise typer.Exit(1)

    with open_database() as db:
        db.delete_all_data()
        logger.info("✅ All data has been deleted")
