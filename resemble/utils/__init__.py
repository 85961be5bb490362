"""
Utility functions and helpers.

Provides common utilities used across the codebase.
"""

from resemble.utils.logging_config import setup_logging
from resemble.utils.validation import validate_file, validate_files

__all__ = [
    "setup_logging",
    "validate_file",
    "validate_files",
]
