"""Main CLI application for SmartSpend.

This module provides the unified entry point for all SmartSpend CLI
operations, organizing commands into groups for categories, transactions,
budgets, reports, and exports.
"""

import logging
from typing import Annotated

import typer

from ..config import LoggingConfig, get_logging_config, set_current_profile
from ..logging import setup_logging
from .commands import budgets, categories, data, export, reports, transactions

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="smartspend",
    help="SmartSpend: Local personal spending tracker",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    profile: Annotated[
        str,
        typer.Option(
            "--profile",
            "-p",
            help="User profile to use (e.g., alice, household). Default: default",
            envvar="SMARTSPEND_PROFILE",
        ),
    ] = "default",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose debug logging",
        ),
    ] = False,
) -> None:
    """Global options for SmartSpend CLI.

    Each profile keeps its own store under data/<profile>/, so separate
    profiles can track separate budgets (personal, household, ...).

    Examples:
      smartspend tx add 250 -c 2 -n "cab to office"
      smartspend --profile=household report categories --month 2024-03

    Can also be set via SMARTSPEND_PROFILE environment variable.
    """
    try:
        set_current_profile(profile)
        logging_config = get_logging_config()
    except ValueError as e:
        setup_logging(LoggingConfig(), cli_mode=True, verbose=verbose)
        logger.error(f"❌ {e}")
        raise typer.BadParameter(str(e)) from e

    setup_logging(logging_config, cli_mode=True, verbose=verbose)

    logger.debug(f"👤 Using profile: {profile}")


app.command("init")(data.init_store)
app.command("reset")(data.reset_store)

app.add_typer(categories.app, name="category", help="Manage spending categories")
app.add_typer(transactions.app, name="tx", help="Record and browse transactions")
app.add_typer(budgets.app, name="budget", help="Monthly category budgets")
app.add_typer(reports.app, name="report", help="Spending reports and insights")
app.add_typer(export.app, name="export", help="Export transactions")


def main() -> None:
    """Entry point for the SmartSpend CLI application."""
    app()


if __name__ == "__main__":
    main()
