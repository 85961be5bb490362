"""
Embedding module wrapping feature maps as sparse vectors.
"""

from resemble.embedding.embedding import Embedding

__all__ = [
    "Embedding",
]
