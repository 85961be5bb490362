"""
Main engine for Resemble.

Provides a high-level interface that wires the parser, the feature
extractor, embeddings and the similarity engine together.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from resemble.analysis.features import FeatureExtractor
from resemble.analysis.parser import RustParser
from resemble.core.config import Config, ResembleConfig
from resemble.core.exceptions import InputNotFoundError
from resemble.embedding.embedding import Embedding
from resemble.similarity.cosine import cosine_similarity
from resemble.utils.validation import validate_file

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class ComparisonResult:
    """Result of comparing two Rust sources."""

    similarity: float
    features_a: Dict[str, float] = field(default_factory=dict)
    features_b: Dict[str, float] = field(default_factory=dict)
    source_a: Optional[str] = None
    source_b: Optional[str] = None

    @property
    def shared_labels(self) -> List[str]:
        """Labels present in both feature maps, sorted."""
        return sorted(set(self.features_a) & set(self.features_b))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "similarity": self.similarity,
            "files": {
                "a": self.source_a,
                "b": self.source_b,
            },
            "shared_labels": self.shared_labels,
            "features": {
                "a": dict(sorted(self.features_a.items())),
                "b": dict(sorted(self.features_b.items())),
            },
        }


class ResembleEngine:
    """
    Computes structural similarity between Rust source files.

    Each file is parsed, converted to a feature map, wrapped in an
    embedding, and the two embeddings are compared with cosine
    similarity.
    """

    def __init__(self, config: ResembleConfig = None):
        self.config = config or Config.get()
        self.parser = RustParser(self.config.parser)
        self.extractor = FeatureExtractor(self.config.features)

    def fingerprint_file(self, path: PathLike) -> Dict[str, float]:
        """
        Compute the feature map of a Rust source file.

        Args:
            path: Path to the source file.

        Returns:
            Mapping from feature label to occurrence count.
        """
        self._check_exists(path)
        tree = self.parser.parse_file(path)
        features = self.extractor.extract(tree)
        logger.debug(
            f"Fingerprinted {path}: {len(features)} labels, "
            f"{sum(features.values()):.0f} counted nodes"
        )
        return features

    def fingerprint_source(self, source: Union[str, bytes]) -> Dict[str, float]:
        """Compute the feature map of in-memory Rust source text."""
        tree = self.parser.parse(source)
        return self.extractor.extract(tree)

    def embed_file(self, path: PathLike) -> Embedding:
        """Compute the embedding of a Rust source file."""
        return Embedding.from_counts(self.fingerprint_file(path))

    def compare_files(self, path_a: PathLike, path_b: PathLike) -> ComparisonResult:
        """
        Compare two Rust source files.

        Both paths are checked for existence before either is parsed.

        Args:
            path_a: First source file.
            path_b: Second source file.

        Returns:
            ComparisonResult with the similarity score and feature maps.
        """
        self._check_exists(path_a)
        self._check_exists(path_b)

        logger.info(f"Comparing {path_a} with {path_b}")

        features_a = self.fingerprint_file(path_a)
        features_b = self.fingerprint_file(path_b)

        return self._compare(features_a, features_b, str(path_a), str(path_b))

    def compare_sources(
        self,
        source_a: Union[str, bytes],
        source_b: Union[str, bytes],
    ) -> ComparisonResult:
        """Compare two in-memory Rust sources."""
        features_a = self.fingerprint_source(source_a)
        features_b = self.fingerprint_source(source_b)
        return self._compare(features_a, features_b, None, None)

    def _compare(
        self,
        features_a: Dict[str, float],
        features_b: Dict[str, float],
        source_a: Optional[str],
        source_b: Optional[str],
    ) -> ComparisonResult:
        """Score two feature maps."""
        similarity = cosine_similarity(
            Embedding.from_counts(features_a),
            Embedding.from_counts(features_b),
        )
        logger.info(f"Cosine similarity = {similarity:.6f}")

        return ComparisonResult(
            similarity=similarity,
            features_a=features_a,
            features_b=features_b,
            source_a=source_a,
            source_b=source_b,
        )

    def _check_exists(self, path: PathLike) -> None:
        """Raise InputNotFoundError unless path is an existing file."""
        is_valid, error = validate_file(str(path))
        if not is_valid:
            logger.debug(error)
            raise InputNotFoundError(str(path))


def compare_files(
    path_a: PathLike,
    path_b: PathLike,
    config: ResembleConfig = None,
) -> ComparisonResult:
    """
    Convenience function to compare two Rust source files.

    Args:
        path_a: First source file.
        path_b: Second source file.
        config: Optional configuration.

    Returns:
        ComparisonResult with the similarity score.
    """
    engine = ResembleEngine(config)
    return engine.compare_files(path_a, path_b)
