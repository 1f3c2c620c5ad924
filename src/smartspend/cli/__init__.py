"""SmartSpend CLI package.

This package provides the command-line interface for recording spending,
managing categories and budgets, and producing reports and exports.
"""

from .main import app, main

__all__ = ["app", "main"]
