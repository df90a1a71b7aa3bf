"""
Similarity strategies for comparing document shapes.

Provides pluggable similarity calculations for the VariantAnalyzer. Every
strategy accepts any iterable of paths and compares them as sets.
"""
from typing import Iterable, Protocol, runtime_checkable

from common.paths import split_path


@runtime_checkable
class SimilarityStrategy(Protocol):
    """Protocol for similarity calculation strategies."""

    def similarity(self, paths_a: Iterable[str], paths_b: Iterable[str]) -> float:
        """
        Calculate similarity between two path sets.

        Args:
            paths_a: Shape paths from the first document or variant.
            paths_b: Shape paths from the second document or variant.

        Returns:
            Similarity score between 0 and 1.
        """
        ...


class JaccardPathSimilarity:
    """
    Jaccard similarity on path sets.

    Jaccard Index = |A ∩ B| / |A ∪ B|

    Range: 0 (completely different) to 1 (identical)

    Example:
        >>> sim = JaccardPathSimilarity()
        >>> sim.similarity(["_id", "user.name"], ["_id", "user.email"])
        0.333...  # 1 intersection / 3 union
    """

    def similarity(self, paths_a: Iterable[str], paths_b: Iterable[str]) -> float:
        """Calculate Jaccard similarity between two path sets."""
        set_a, set_b = set(paths_a), set(paths_b)

        union = len(set_a | set_b)
        if union == 0:
            return 1.0  # Both empty = identical

        return len(set_a & set_b) / union


class WeightedJaccardSimilarity:
    """
    Weighted Jaccard similarity with depth decay.

    Deeper paths contribute less to the similarity score.
    Useful when structural differences near the root matter more.

    Args:
        depth_decay: Factor to multiply weight by for each level of depth.
                    0.8 means depth 2 has 0.64 weight, depth 3 has 0.51, etc.
    """

    def __init__(self, depth_decay: float = 0.8):
        self.depth_decay = depth_decay

    def _path_weight(self, path: str) -> float:
        """Calculate weight based on path depth (escaped dots do not count)."""
        depth = max(len(split_path(path)) - 1, 0)
        return self.depth_decay ** depth

    def similarity(self, paths_a: Iterable[str], paths_b: Iterable[str]) -> float:
        """Calculate weighted Jaccard similarity."""
        set_a, set_b = set(paths_a), set(paths_b)

        all_paths = set_a | set_b
        if not all_paths:
            return 1.0

        intersection_weight = sum(self._path_weight(p) for p in set_a & set_b)
        union_weight = sum(self._path_weight(p) for p in all_paths)

        if union_weight == 0:
            return 1.0

        return intersection_weight / union_weight


class ExactMatchSimilarity:
    """
    Binary similarity - 1 if path sets are identical, 0 otherwise.

    Useful for strict structural matching.
    """

    def similarity(self, paths_a: Iterable[str], paths_b: Iterable[str]) -> float:
        """Return 1.0 if identical, 0.0 otherwise."""
        return 1.0 if set(paths_a) == set(paths_b) else 0.0
