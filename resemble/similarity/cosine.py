"""
Cosine similarity between sparse embeddings.
"""

from typing import Mapping

from resemble.embedding.embedding import Embedding


def dot_product(a: Embedding, b: Embedding) -> float:
    """
    Dot product of two sparse embeddings.

    Iterates the embedding with fewer labels and looks each label up
    in the other one. The result does not depend on which side is
    iterated.
    """
    smaller, larger = (a, b) if len(a) <= len(b) else (b, a)

    dot = 0.0
    for key, value in smaller.features.items():
        dot += value * larger.get(key)
    return dot


def cosine_similarity(a: Embedding, b: Embedding) -> float:
    """
    Compute the cosine similarity between two embeddings.

    Returns a value between 0.0 and 1.0. If either embedding has zero
    magnitude the result is 0.0, even when both are empty.
    """
    dot = dot_product(a, b)

    # Each norm covers the full map, not only the shared labels
    na = a.l2_norm()
    nb = b.l2_norm()
    if na == 0.0 or nb == 0.0:
        return 0.0

    return min(max(dot / (na * nb), 0.0), 1.0)


def similarity_from_counts(
    a: Mapping[str, float],
    b: Mapping[str, float],
) -> float:
    """Convenience function: compute similarity from raw counts."""
    return cosine_similarity(Embedding.from_counts(a), Embedding.from_counts(b))
