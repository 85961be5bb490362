"""
Similarity module for comparing embeddings.
"""

from resemble.similarity.cosine import (
    cosine_similarity,
    dot_product,
    similarity_from_counts,
)

__all__ = [
    "cosine_similarity",
    "dot_product",
    "similarity_from_counts",
]
