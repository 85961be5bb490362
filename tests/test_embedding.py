"""
Unit tests for the Embedding wrapper.
"""

import math
import unittest

from resemble.embedding.embedding import Embedding


class TestEmbedding(unittest.TestCase):
    """Tests for embedding construction, norm and equality."""

    def test_from_counts_copies_map(self):
        """Later changes to the source map do not leak into the embedding."""
        counts = {"Expr::Call": 2.0}
        emb = Embedding.from_counts(counts)
        counts["Expr::Call"] = 10.0
        counts["Block"] = 1.0

        self.assertEqual(emb.features["Expr::Call"], 2.0)
        self.assertNotIn("Block", emb.features)

    def test_features_are_read_only(self):
        """The wrapped map cannot be mutated."""
        emb = Embedding.from_counts({"Block": 1.0})
        with self.assertRaises(TypeError):
            emb.features["Block"] = 2.0

    def test_l2_norm(self):
        """Norm is the square root of the sum of squares."""
        emb = Embedding.from_counts({"a": 3.0, "b": 4.0})
        self.assertAlmostEqual(emb.l2_norm(), 5.0)

    def test_l2_norm_of_empty_is_zero(self):
        """An empty map has a norm of exactly zero."""
        self.assertEqual(Embedding.empty().l2_norm(), 0.0)
        self.assertEqual(Embedding.from_counts({}).l2_norm(), 0.0)

    def test_l2_norm_of_all_zero_is_zero(self):
        """A map of zero counts has a norm of exactly zero."""
        emb = Embedding.from_counts({"a": 0.0, "b": 0.0})
        self.assertEqual(emb.l2_norm(), 0.0)

    def test_l2_norm_uses_every_value(self):
        """The norm covers the full map."""
        counts = {f"label{i}": float(i) for i in range(1, 11)}
        emb = Embedding.from_counts(counts)
        expected = math.sqrt(sum(v * v for v in counts.values()))
        self.assertAlmostEqual(emb.l2_norm(), expected)

    def test_value_equality(self):
        """Embeddings compare by feature map, not identity."""
        a = Embedding.from_counts({"Block": 1.0, "Macro": 2.0})
        b = Embedding.from_counts({"Macro": 2.0, "Block": 1.0})
        c = Embedding.from_counts({"Block": 1.0})

        self.assertEqual(a, b)
        self.assertNotEqual(a, c)
        self.assertEqual(hash(a), hash(b))

    def test_default_is_empty(self):
        """The default embedding has no features."""
        self.assertEqual(len(Embedding()), 0)
        self.assertEqual(Embedding(), Embedding.empty())

    def test_to_dict(self):
        """to_dict returns a plain, independent copy."""
        emb = Embedding.from_counts({"Block": 1.0})
        data = emb.to_dict()
        data["Block"] = 5.0

        self.assertIsInstance(data, dict)
        self.assertEqual(emb.get("Block"), 1.0)
        self.assertEqual(emb.get("Missing"), 0.0)


if __name__ == "__main__":
    unittest.main()
