"""
Input validation utilities.

Preflight checks run before any source file is parsed.
"""

import os
from pathlib import Path
from typing import Iterable, List, Optional, Tuple


def validate_file(path: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a local source file path.

    Args:
        path: Path to validate.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not path:
        return False, "Path cannot be empty"

    path_obj = Path(path)

    if not path_obj.exists():
        return False, f"Path does not exist: {path}"

    if not path_obj.is_file():
        return False, f"Path is not a file: {path}"

    if not os.access(path_obj, os.R_OK):
        return False, f"Path is not readable: {path}"

    return True, None


def validate_files(paths: Iterable[str]) -> List[str]:
    """
    Validate several source file paths at once.

    Args:
        paths: Paths to validate.

    Returns:
        Error messages for every invalid path, empty when all are valid.
    """
    errors = []
    for path in paths:
        is_valid, error = validate_file(path)
        if not is_valid:
            errors.append(error)
    return errors
