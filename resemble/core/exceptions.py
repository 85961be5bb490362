"""
Custom exceptions for Resemble.

All fallibility lives at the input boundary: locating the files and
parsing them. Feature extraction and similarity scoring never raise.
"""

from typing import Optional


class ResembleError(Exception):
    """Base exception for all Resemble errors."""

    def __init__(self, message: str, stage: str = None, details: dict = None):
        super().__init__(message)
        self.stage = stage
        self.details = details or {}

    def __str__(self):
        base_msg = super().__str__()
        if self.stage:
            return f"[{self.stage}] {base_msg}"
        return base_msg


class InputNotFoundError(ResembleError):
    """Raised when an input path does not reference an existing file."""

    def __init__(self, path: str):
        super().__init__(
            f"Input file does not exist: {path}",
            stage="Input",
            details={"path": str(path)},
        )
        self.path = str(path)


class SourceParseError(ResembleError):
    """Raised when source text is not valid Rust syntax."""

    def __init__(self, path: Optional[str], description: str):
        if path:
            message = f"Failed to parse '{path}': {description}"
        else:
            message = f"Failed to parse source: {description}"
        super().__init__(
            message,
            stage="Parse",
            details={"path": str(path) if path else None, "description": description},
        )
        self.path = str(path) if path else None
        self.description = description


class ParserUnavailableError(ResembleError):
    """Raised when the tree-sitter Rust grammar cannot be loaded."""

    def __init__(self, reason: str):
        super().__init__(
            f"Rust parser unavailable: {reason}",
            stage="Parse",
            details={"reason": reason},
        )


class ConfigError(ResembleError):
    """Raised when a configuration file cannot be loaded."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Config", details=details)
