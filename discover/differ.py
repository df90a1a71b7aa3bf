"""Path-set differences between document shapes."""
from dataclasses import dataclass, field
from typing import Any, Iterable

from common.sorting import sort_paths
from .similarity import JaccardPathSimilarity

_FORMAT_LIMIT = 3


@dataclass(frozen=True)
class VariantDiff:
    """Paths a variant adds to, or lacks relative to, the primary variant."""

    added_paths: list[str] = field(default_factory=list)
    missing_paths: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.added_paths and not self.missing_paths

    def to_dict(self) -> dict[str, Any]:
        return {"addedPaths": list(self.added_paths), "missingPaths": list(self.missing_paths)}


def diff_paths(base_paths: Iterable[str], compare_paths: Iterable[str]) -> VariantDiff:
    """
    Diff two path collections.

    Args:
        base_paths: Reference shape, usually the primary variant.
        compare_paths: Shape being compared against the reference.

    Returns:
        VariantDiff whose added_paths are in compare_paths only and whose
        missing_paths are in base_paths only, both naturally sorted.

    Example:
        >>> diff_paths(["_id", "name"], ["_id", "email"])
        VariantDiff(added_paths=['email'], missing_paths=['name'])
    """
    base = set(base_paths)
    compare = set(compare_paths)
    return VariantDiff(
        added_paths=sort_paths(compare - base),
        missing_paths=sort_paths(base - compare),
    )


def calculate_similarity(paths_a: Iterable[str], paths_b: Iterable[str]) -> float:
    """Jaccard index of two path sets. Two empty sets are identical (1.0)."""
    return JaccardPathSimilarity().similarity(paths_a, paths_b)


def _format_side(sign: str, paths: list[str]) -> str:
    shown = ", ".join(paths[:_FORMAT_LIMIT])
    if len(paths) > _FORMAT_LIMIT:
        shown += f"... (+{len(paths) - _FORMAT_LIMIT} more)"
    return sign + shown


def format_diff(diff: VariantDiff) -> str:
    """
    Compact one-line rendering of a diff.

    Example:
        >>> format_diff(VariantDiff(added_paths=["a", "b"], missing_paths=["x"]))
        '+a, b, -x'
        >>> format_diff(VariantDiff())
        '-'
    """
    parts = []
    if diff.added_paths:
        parts.append(_format_side("+", diff.added_paths))
    if diff.missing_paths:
        parts.append(_format_side("-", diff.missing_paths))
    return ", ".join(parts) or "-"
