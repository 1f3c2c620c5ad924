"""Centralized logging configuration for SmartSpend.

Standard usage:
    ```python
    import logging
    from smartspend.logging import setup_logging

    # Configure once at application startup from SMARTSPEND_LOGGING__*
    setup_logging()

    # Get loggers in each module
    logger = logging.getLogger(__name__)
    ```
"""

from ..config import LoggingConfig
from .config import setup_logging

__all__ = ["LoggingConfig", "setup_logging"]
