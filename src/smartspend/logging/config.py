"""Logging setup for SmartSpend.

Handlers are driven by the ``logging`` section of ``SmartSpendSettings``
(``SMARTSPEND_LOGGING__*``). Console output always goes to stderr: the CLI
prints reports and CSV on stdout, and the snapshot write-behind thread
reports failed flushes through the same root handlers.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler

from ..config import LoggingConfig, get_logging_config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CLI_LOG_FORMAT = "%(message)s"


def setup_logging(
    config: LoggingConfig | None = None,
    cli_mode: bool = False,
    verbose: bool = False,
    force: bool = False,
) -> None:
    """Configure the root logger once per process.

    Args:
        config: Logging section to apply. Defaults to the current profile's.
        cli_mode: Print bare messages on the console (emoji status lines)
        verbose: Log at DEBUG regardless of the configured level
        force: Replace handlers installed by an earlier call
    """
    if config is None:
        config = get_logging_config()

    level = logging.DEBUG if verbose else getattr(logging, config.level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(
        logging.Formatter(CLI_LOG_FORMAT if cli_mode else LOG_FORMAT)
    )
    handlers: list[logging.Handler] = [console_handler]

    if config.log_to_file:
        config.log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.log_file_path,
            maxBytes=config.max_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=force)

    # DuckDB chatter at INFO drowns out the CLI's own status lines
    logging.getLogger("duckdb").setLevel(logging.WARNING)
