"""Output formatters for Trinity validation reports."""

from .base import BaseFormatter
from .console_formatter import ConsoleFormatter
from .html_formatter import HtmlFormatter
from .json_formatter import JsonFormatter


def get_formatter(name: str, **options) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "console", "json", "html"
        **options: Passed to the formatter's constructor

    Returns:
        Formatter instance

    Raises:
        ValueError: If name is not recognized
    """
    formatters = {
        "console": ConsoleFormatter,
        "json": JsonFormatter,
        "html": HtmlFormatter,
    }
    cls = formatters.get(name)
    if cls is None:
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(formatters))}")
    return cls(**options)


__all__ = [
    "BaseFormatter",
    "ConsoleFormatter",
    "JsonFormatter",
    "HtmlFormatter",
    "get_formatter",
]
