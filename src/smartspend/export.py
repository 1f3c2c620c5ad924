"""Transaction export: CSV for sharing, Polars frames for Parquet.

CSV layout::

    Date,Time,Amount,Category,Note,Payment Method,Recurring
    2024-03-05,18:42,250,Transport,"cab to ""airport"" gate",UPI,No

Date and time are rendered in the given zone (device-local by default).
The note is always quoted with inner quotes doubled; the other fields are
written as-is. Missing categories fall back to "Unknown".
"""

import logging
from collections.abc import Iterable
from datetime import tzinfo
from decimal import Decimal
from pathlib import Path
from typing import Any

import polars as pl

from .enrichment import build_category_index, display_attributes
from .models import Category, Transaction
from .periods import to_local

logger = logging.getLogger(__name__)

CSV_HEADER = "Date,Time,Amount,Category,Note,Payment Method,Recurring"

FRAME_SCHEMA: dict[str, Any] = {
    "id": pl.Int64,
    "date": pl.String,
    "time": pl.String,
    "timestamp_ms": pl.Int64,
    "amount": pl.Decimal(precision=18, scale=2),
    "category_id": pl.Int64,
    "category": pl.String,
    "note": pl.String,
    "payment_method": pl.String,
    "is_recurring": pl.Boolean,
    "recurring_interval_days": pl.Int64,
    "is_split": pl.Boolean,
    "split_share": pl.Decimal(precision=18, scale=2),
}


def format_amount(amount: Decimal) -> str:
    """Plain decimal without exponent or trailing fractional zeros."""
    text = f"{amount:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def quote_note(note: str) -> str:
    return '"' + note.replace('"', '""') + '"'


def transactions_to_csv(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    tz: tzinfo | None = None,
) -> str:
    """Render transactions as CSV text, one line per transaction in input order.

    Args:
        transactions: Transactions to export, typically ``list_all()``
        categories: Current category set used to resolve names
        tz: Zone for the Date and Time columns; None means device-local

    Returns:
        CSV text with header, each line terminated by a newline
    """
    index = build_category_index(categories)
    lines = [CSV_HEADER]
    for t in transactions:
        moment = to_local(t.date, tz)
        name, _, _ = display_attributes(t.category_id, index)
        lines.append(
            ",".join(
                [
                    moment.strftime("%Y-%m-%d"),
                    moment.strftime("%H:%M"),
                    format_amount(t.amount),
                    name,
                    quote_note(t.note),
                    t.payment_method.value,
                    "Yes" if t.is_recurring else "No",
                ]
            )
        )
    return "\n".join(lines) + "\n"


def write_csv(
    path: Path,
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    tz: tzinfo | None = None,
) -> int:
    """Write the CSV export to ``path`` and return the number of rows written."""
    text = transactions_to_csv(transactions, categories, tz)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    rows = text.count("\n") - 1
    logger.info(f"Exported {rows} transactions to {path}")
    return rows


def transactions_to_frame(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    tz: tzinfo | None = None,
) -> pl.DataFrame:
    """The export rows as a typed Polars DataFrame (empty frames keep the schema)."""
    index = build_category_index(categories)
    rows: list[dict[str, Any]] = []
    for t in transactions:
        moment = to_local(t.date, tz)
        rows.append(
            {
                "id": t.id,
                "date": moment.strftime("%Y-%m-%d"),
                "time": moment.strftime("%H:%M"),
                "timestamp_ms": t.date,
                "amount": t.amount,
                "category_id": t.category_id,
                "category": display_attributes(t.category_id, index)[0],
                "note": t.note,
                "payment_method": t.payment_method.value,
                "is_recurring": t.is_recurring,
                "recurring_interval_days": t.recurring_interval_days,
                "is_split": t.is_split,
                "split_share": t.split_share,
            }
        )
    return pl.DataFrame(rows, schema=FRAME_SCHEMA)


def write_parquet(
    path: Path,
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    tz: tzinfo | None = None,
) -> int:
    """Write the export rows as Parquet and return the number of rows written."""
    df = transactions_to_frame(transactions, categories, tz)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.write_parquet(path)
    logger.info(f"Exported {len(df)} transactions to {path}")
    return len(df)
