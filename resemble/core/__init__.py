"""
Core module containing configuration and the exception hierarchy.
"""

from resemble.core.config import Config, ResembleConfig
from resemble.core.exceptions import (
    ResembleError,
    InputNotFoundError,
    SourceParseError,
    ParserUnavailableError,
    ConfigError,
)

__all__ = [
    "Config",
    "ResembleConfig",
    "ResembleError",
    "InputNotFoundError",
    "SourceParseError",
    "ParserUnavailableError",
    "ConfigError",
]
