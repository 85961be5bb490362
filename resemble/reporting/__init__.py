"""
Reporting module for rendering comparison results.
"""

from resemble.reporting.formatter import (
    ResultFormatter,
    TextFormatter,
    JSONFormatter,
    get_formatter,
)

__all__ = [
    "ResultFormatter",
    "TextFormatter",
    "JSONFormatter",
    "get_formatter",
]
