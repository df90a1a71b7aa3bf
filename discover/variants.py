"""
Document shape variants.

Groups documents by the set of paths that describe their shape, so that a
collection holding several kinds of documents can be summarized as a ranked
list of variants. Shape extraction is deliberately shallow and independent of
the flattener: arrays, dates and tagged extended scalars are opaque leaves.
"""
import hashlib
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from common.bson_types import BsonType, classify
from common.errors import ConfigError
from common.paths import escape_key, join_path
from common.sorting import sort_paths
from .differ import VariantDiff, diff_paths, format_diff
from .similarity import JaccardPathSimilarity, SimilarityStrategy

logger = logging.getLogger(__name__)

DEFAULT_SHAPE_MAX_DEPTH = 2
SIGNATURE_PREFIX_LENGTH = 8


@dataclass
class Variant:
    """One distinct document shape and how often it occurs."""

    signature: str
    """Leading hex characters of the shape fingerprint."""

    count: int
    """Number of sampled documents with this shape."""

    ratio: float
    """count / total sampled documents."""

    paths: list[str] = field(default_factory=list)
    """Shape paths, naturally sorted."""

    diff: VariantDiff = field(default_factory=VariantDiff)
    """Difference from the primary (most frequent) variant."""

    def __repr__(self) -> str:
        return (
            f"Variant(signature='{self.signature}', count={self.count}, "
            f"ratio={self.ratio:.1%}, diff='{format_diff(self.diff)}')"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "signature": self.signature,
            "count": self.count,
            "ratio": self.ratio,
            "paths": list(self.paths),
            "diff": self.diff.to_dict(),
        }


def extract_shape_paths(document: Mapping, max_depth: int = DEFAULT_SHAPE_MAX_DEPTH) -> list[str]:
    """
    Collect the paths describing a document's shape.

    Top-level keys sit at depth 1. A value deeper than max_depth is recorded
    at its own path without being descended into. Empty objects contribute
    nothing.

    Example:
        >>> extract_shape_paths({"a": 1, "b": {"c": {"d": {"e": 2}}}, "tags": [1, 2]})
        ['a', 'b.c.d', 'tags']
    """
    paths: list[str] = []

    def traverse(value: Any, current: str, depth: int) -> None:
        if depth > max_depth or classify(value) != BsonType.OBJECT:
            if current:
                paths.append(current)
            return

        for key, child in value.items():
            traverse(child, join_path(current, escape_key(str(key))), depth + 1)

    traverse(document, "", 0)
    return paths


def generate_signature(paths: Iterable[str]) -> str:
    """
    SHA-256 fingerprint of a path set.

    Paths are naturally sorted before hashing, so key order in the source
    document does not change the signature.
    """
    canonical = "|".join(sort_paths(paths))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


@dataclass
class _ShapeGroup:
    paths: list[str]
    count: int = 0


def analyze_variants(
    documents: list[Mapping],
    top_n: int = 10,
    max_depth: int = DEFAULT_SHAPE_MAX_DEPTH,
) -> list[Variant]:
    """
    Group documents by shape and rank the groups.

    Args:
        documents: Sampled documents.
        top_n: Maximum number of variants to return.
        max_depth: Shape extraction depth.

    Returns:
        Variants sorted by count (descending). Equal counts keep the order in
        which their first document appeared. The first variant is the primary
        one and has an empty diff; every other diff is taken against it.

    Raises:
        ConfigError: If top_n is not a positive integer.
    """
    if isinstance(top_n, bool) or not isinstance(top_n, int) or top_n < 1:
        raise ConfigError(f"top_n must be a positive integer, got {top_n!r}")

    if not documents:
        return []

    # Insertion order doubles as first-seen order for tie-breaks
    groups: dict[str, _ShapeGroup] = {}
    for document in documents:
        paths = extract_shape_paths(document, max_depth)
        signature = generate_signature(paths)
        group = groups.setdefault(signature, _ShapeGroup(paths=sort_paths(paths)))
        group.count += 1

    ranked = sorted(groups.items(), key=lambda item: -item[1].count)[:top_n]

    logger.debug(f"Found {len(groups)} shape variants in {len(documents)} documents, keeping {len(ranked)}")

    total = len(documents)
    primary_paths = ranked[0][1].paths

    variants = []
    for index, (signature, group) in enumerate(ranked):
        diff = VariantDiff() if index == 0 else diff_paths(primary_paths, group.paths)
        variants.append(Variant(
            signature=signature[:SIGNATURE_PREFIX_LENGTH],
            count=group.count,
            ratio=group.count / total,
            paths=group.paths,
            diff=diff,
        ))

    return variants


class VariantAnalyzer:
    """
    Analyzes document shapes and ranks structural variants.

    Example:
        >>> analyzer = VariantAnalyzer()
        >>> variants = analyzer.analyze(documents, top_n=5)
        >>> print(variants[0])
        Variant(signature='3f9a1c2e', count=812, ratio=81.2%, diff='-')

        >>> # Which known variant does a new document look like?
        >>> variant, score = analyzer.closest_variant(new_doc, variants)
    """

    def __init__(
        self,
        similarity_strategy: Optional[SimilarityStrategy] = None,
        max_depth: int = DEFAULT_SHAPE_MAX_DEPTH,
    ):
        """
        Initialize VariantAnalyzer.

        Args:
            similarity_strategy: Strategy for comparing shapes.
                               Defaults to JaccardPathSimilarity.
            max_depth: Shape extraction depth.
        """
        self.similarity = similarity_strategy or JaccardPathSimilarity()
        self.max_depth = max_depth

    def shape(self, document: Mapping) -> list[str]:
        return extract_shape_paths(document, self.max_depth)

    def analyze(self, documents: list[Mapping], top_n: int = 10) -> list[Variant]:
        """Rank the shape variants of documents. See analyze_variants()."""
        return analyze_variants(documents, top_n=top_n, max_depth=self.max_depth)

    def closest_variant(
        self,
        document: Mapping,
        variants: list[Variant],
    ) -> tuple[Optional[Variant], float]:
        """
        Find the known variant whose shape is most similar to a document.

        Args:
            document: Document to place.
            variants: Variants from analyze().

        Returns:
            (variant, score). Ties go to the higher-ranked variant. Returns
            (None, 0.0) when there are no variants.
        """
        paths = self.shape(document)
        best = None
        best_score = 0.0
        for variant in variants:
            score = self.similarity.similarity(paths, variant.paths)
            if best is None or score > best_score:
                best = variant
                best_score = score
        return best, best_score

    def describe(self, documents: list[Mapping], top_n: int = 5) -> str:
        """
        Generate a human-readable variant summary.

        Args:
            documents: Sampled documents.
            top_n: Number of variants to show.

        Returns:
            Formatted string describing the shape variants.
        """
        if not documents:
            return "No documents to analyze."

        variants = self.analyze(documents, top_n=top_n)
        all_paths = set()
        for document in documents:
            all_paths.update(self.shape(document))

        lines = [
            f"Documents analyzed: {len(documents):,}",
            f"Unique shape paths: {len(all_paths)}",
            "",
            "Variants:",
        ]
        for i, variant in enumerate(variants):
            marker = " ← PRIMARY" if i == 0 else ""
            lines.append(
                f"  {variant.signature} ({variant.count} docs, {variant.ratio:.1%}): "
                f"{format_diff(variant.diff)}{marker}"
            )

        return "\n".join(lines)
