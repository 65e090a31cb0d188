"""
Output formatters for scan results.

Provides multiple output formats including:
- Human-readable console output
- JSON for machine processing
- CSV for spreadsheet import
"""

from outrider.formatters.cli import CLIFormatter
from outrider.formatters.json_formatter import JSONFormatter
from outrider.formatters.csv_formatter import CSVFormatter

__all__ = [
    "CLIFormatter",
    "JSONFormatter",
    "CSVFormatter",
    "get_formatter",
]


def get_formatter(format_name: str, **options):
    """Get a formatter by name."""
    formatters = {
        "console": CLIFormatter,
        "text": CLIFormatter,
        "json": JSONFormatter,
        "csv": CSVFormatter,
    }

    formatter_class = formatters.get(format_name.lower())
    if formatter_class:
        return formatter_class(**options)

    raise ValueError(f"Unsupported output format: {format_name}")
