"""
Resemble: structural similarity for Rust source files.

Converts each file's syntax tree into a sparse feature map of
node-kind counts and compares two maps with cosine similarity.
"""

__version__ = "1.0.0"
__author__ = "Resemble"

from resemble.analysis.features import FeatureExtractor, parse_and_count
from resemble.embedding.embedding import Embedding
from resemble.similarity.cosine import cosine_similarity, similarity_from_counts

__all__ = [
    "FeatureExtractor",
    "parse_and_count",
    "Embedding",
    "cosine_similarity",
    "similarity_from_counts",
]
