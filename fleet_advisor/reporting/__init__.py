"""Terminal formatters for fleet recommendation output."""
