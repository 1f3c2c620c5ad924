"""SmartSpend CLI command groups."""
