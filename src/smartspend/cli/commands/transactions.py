"""Transaction commands for SmartSpend CLI."""

import logging
from datetime import tzinfo

import typer

from ...models import PaymentMethod, TransactionWithCategory
from ...periods import to_local
from ..utils import open_database, resolve_range, timestamp_for

app = typer.Typer(help="Record and browse transactions")
logger = logging.getLogger(__name__)


def format_transaction(t: TransactionWithCategory, tz: tzinfo | None) -> str:
    """One display line for a transaction."""
    moment = to_local(t.date, tz)
    flags = ""
    if t.is_recurring:
        flags += f" [every {t.recurring_interval_days}d]"
    if t.is_split:
        flags += f" [split, my share {t.split_share}]"
    return (
        f"{t.id:>5}  {moment:%Y-%m-%d %H:%M}  {t.category_emoji} "
        f"{t.category_name:<18} {t.amount:>10}  {t.payment_method.value:<5}  "
        f"{t.note}{flags}"
    )


def _print_rows(rows: list[TransactionWithCategory], tz: tzinfo | None) -> None:
    if not rows:
        logger.info("No transactions found")
        return
    for t in rows:
        print(format_transaction(t, tz))


@app.command("add")
def add_transaction(
    amount: str = typer.Argument(..., help="Amount spent, e.g. 250 or 99.50"),
    category_id: int = typer.Option(..., "--category", "-c", help="Category id"),
    note: str = typer.Option("", "--note", "-n", help="Free-text note"),
    day: str | None = typer.Option(
        None, "--date", "-d", help="YYYY-MM-DD (default: today)"
    ),
    at: str | None = typer.Option(None, "--time", "-t", help="HH:MM (default: now)"),
    method: PaymentMethod = typer.Option(
        PaymentMethod.UPI, "--method", "-m", help="Payment method"
    ),
    recurring_days: int | None = typer.Option(
        None, "--recurring", help="Repeat interval in days (7 or 30)"
    ),
    split_share: str | None = typer.Option(
        None, "--split-share", help="Your share when the bill is split"
    ),
) -> None:
    """Record a transaction."""
    with open_database() as db:
        tx_id = db.transactions.create(
            {
                "amount": amount,
                "category_id": category_id,
                "note": note,
                "date": timestamp_for(day, at, db.tz),
                "payment_method": method,
                "is_recurring": recurring_days is not None,
                "recurring_interval_days": recurring_days,
                "is_split": split_share is not None,
                "split_share": split_share,
            }
        )
        logger.info(f"✅ Recorded transaction {tx_id}")


@app.command("list")
def list_transactions(
    month: str | None = typer.Option(None, "--month", help="YYYY-MM"),
    start: str | None = typer.Option(None, "--from", help="First day, YYYY-MM-DD"),
    end: str | None = typer.Option(None, "--to", help="Last day, YYYY-MM-DD"),
    show_all: bool = typer.Option(
        False, "--all", "-a", help="Ignore dates, list everything"
    ),
) -> None:
    """List transactions, newest first (default: current month)."""
    with open_database() as db:
        if show_all:
            rows = db.transactions.list_all()
        else:
            rows = db.transactions.list_by_date_range(
                *resolve_range(month, start, end, db.tz)
            )
        _print_rows(rows, db.tz)


@app.command("recent")
def recent_transactions(
    limit: int = typer.Option(10, "--limit", "-n", help="How many to show"),
) -> None:
    """Show the most recent transactions."""
    with open_database() as db:
        _print_rows(db.transactions.list_recent(limit), db.tz)


@app.command("search")
def search_transactions(
    text: str = typer.Argument(..., help="Text to find in notes or category names"),
) -> None:
    """Search transactions by note or category name (case-insensitive)."""
    with open_database() as db:
        _print_rows(db.transactions.search(text), db.tz)


@app.command("delete")
def delete_transaction(
    transaction_id: int = typer.Argument(..., help="Transaction id"),
) -> None:
    """Delete a transaction."""
    with open_database() as db:
        db.transactions.delete(transaction_id)
        logger.info(f"✅ Deleted transaction {transaction_id}")
