"""Export commands for SmartSpend CLI."""

import logging
from pathlib import Path

import typer

from ... import export
from ..utils import open_database

app = typer.Typer(help="Export transactions to files")
logger = logging.getLogger(__name__)


@app.command("csv")
def export_csv(
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Output file (default: print to stdout)"
    ),
) -> None:
    """Export every transaction as CSV."""
    with open_database() as db:
        transactions = db.transactions.list_all()
        categories = db.categories.list_all()
        if output is None:
            print(export.transactions_to_csv(transactions, categories, db.tz), end="")
            return
        rows = export.write_csv(output, transactions, categories, db.tz)
        logger.info(f"✅ Exported {rows} transactions to {output}")


@app.command("parquet")
def export_parquet(
    output: Path = typer.Option(..., "--output", "-o", help="Output Parquet file"),
) -> None:
    """Export every transaction as a typed Parquet file."""
    with open_database() as db:
        rows = export.write_parquet(
            output, db.transactions.list_all(), db.categories.list_all(), db.tz
        )
        logger.info(f"✅ Exported {rows} transactions to {output}")
