"""
Result formatters for different output formats.

Provides formatters for plain text and JSON output of comparison
results and single-file feature maps.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Mapping

from resemble.engine import ComparisonResult

logger = logging.getLogger(__name__)


class ResultFormatter(ABC):
    """Abstract base class for result formatters."""

    @abstractmethod
    def format(self, result: ComparisonResult) -> str:
        """Format a comparison result to string."""
        pass

    @abstractmethod
    def format_features(self, features: Mapping[str, float]) -> str:
        """Format a single feature map to string."""
        pass

    def save(self, result: ComparisonResult, path: Path) -> None:
        """Save formatted result to file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.format(result) + "\n")
        logger.info(f"Result saved to {path}")


class TextFormatter(ResultFormatter):
    """Formats results as the one-line similarity report."""

    def __init__(self, precision: int = 6):
        self.precision = precision

    def format(self, result: ComparisonResult) -> str:
        return f"Cosine similarity = {result.similarity:.{self.precision}f}"

    def format_features(self, features: Mapping[str, float]) -> str:
        if not features:
            return "(no features)"

        width = max(len(key) for key in features)
        lines = [
            f"{key:<{width}}  {value:g}"
            for key, value in sorted(features.items())
        ]
        return "\n".join(lines)


class JSONFormatter(ResultFormatter):
    """Formats results as JSON with both feature maps."""

    def __init__(self, indent: int = 2, precision: int = 6):
        self.indent = indent
        self.precision = precision

    def format(self, result: ComparisonResult) -> str:
        data = result.to_dict()
        data["similarity"] = round(result.similarity, self.precision)
        return json.dumps(data, indent=self.indent)

    def format_features(self, features: Mapping[str, float]) -> str:
        data: Dict[str, float] = dict(sorted(features.items()))
        return json.dumps(data, indent=self.indent)


def get_formatter(name: str, precision: int = 6) -> ResultFormatter:
    """
    Get a formatter by output format name.

    Args:
        name: Output format ("text" or "json").
        precision: Digits after the decimal point for the score.

    Returns:
        Matching formatter instance.
    """
    formatters = {
        "text": TextFormatter,
        "json": JSONFormatter,
    }
    if name not in formatters:
        raise ValueError(f"Unknown output format: {name}")
    return formatters[name](precision=precision)
