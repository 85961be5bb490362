"""
Syntax analysis module: Rust parsing and feature extraction.

Turns source text into a tree-sitter syntax tree and the tree into a
feature map of labeled node counts.
"""

from resemble.analysis.parser import RustParser
from resemble.analysis.features import (
    FeatureCounter,
    FeatureExtractor,
    count_source,
    parse_and_count,
)
from resemble.analysis.taxonomy import ALL_LABELS, Category

__all__ = [
    "RustParser",
    "FeatureCounter",
    "FeatureExtractor",
    "count_source",
    "parse_and_count",
    "ALL_LABELS",
    "Category",
]
