"""
Sparse embedding of a feature map.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping

import numpy as np


@dataclass(frozen=True)
class Embedding:
    """
    An embedding is a sparse feature map viewed as a vector.

    The map is copied on construction and exposed read-only. Two
    embeddings are equal when their feature maps are equal.
    """

    features: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "features", MappingProxyType(dict(self.features)))

    @classmethod
    def from_counts(cls, counts: Mapping[str, float]) -> "Embedding":
        """Create an embedding from a feature count map."""
        return cls(features=counts)

    @classmethod
    def empty(cls) -> "Embedding":
        """Create an embedding with no features."""
        return cls()

    def l2_norm(self) -> float:
        """Compute L2 norm of the embedding vector."""
        values = np.fromiter(self.features.values(), dtype=np.float64, count=len(self.features))
        return float(np.sqrt(np.dot(values, values)))

    def get(self, key: str, default: float = 0.0) -> float:
        """Count of a label, or `default` when the label is absent."""
        return self.features.get(key, default)

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary."""
        return dict(self.features)

    def __len__(self) -> int:
        return len(self.features)

    def __eq__(self, other):
        if not isinstance(other, Embedding):
            return NotImplemented
        return dict(self.features) == dict(other.features)

    def __hash__(self):
        return hash(frozenset(self.features.items()))
