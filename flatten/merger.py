"""
Merging per-document flatten results.

Flattening is independent per document; merging is one sequential pass
that concatenates value lists per path, sums truncation counters and then
folds positional array segments into the wildcard, so that
"items.[0].price" and "items.[1].price" become one field "items.[*].price".
"""
import logging
from typing import Iterable

from common.paths import normalize_path
from .flattener import FlattenResult, PathValue, TruncationCounters

logger = logging.getLogger(__name__)


def normalize_paths_to_wildcard(
    paths: dict[str, list[PathValue]]
) -> dict[str, list[PathValue]]:
    """Rewrite "[i]" segments to "[*]" and merge the resulting duplicate paths."""
    normalized: dict[str, list[PathValue]] = {}
    for path, values in paths.items():
        normalized.setdefault(normalize_path(path), []).extend(values)
    return normalized


def merge_flatten_results(results: Iterable[FlattenResult]) -> FlattenResult:
    """
    Combine many flatten results into one normalized result.

    Args:
        results: Per-document (or already merged) flatten results.

    Returns:
        FlattenResult whose paths use only wildcard array segments and whose
        counters are the sums of the inputs.
    """
    merged: dict[str, list[PathValue]] = {}
    counters = TruncationCounters()
    count = 0

    for result in results:
        for path, values in result.paths.items():
            merged.setdefault(path, []).extend(values)
        counters = counters + result.truncation_counters
        count += 1

    normalized = normalize_paths_to_wildcard(merged)

    logger.debug(
        f"Merged {count} flatten results into {len(normalized)} paths "
        f"({len(merged)} before normalization)"
    )
    if counters.total:
        logger.warning(
            f"Truncation during flatten: depth={counters.depth_truncated}, "
            f"keys={counters.keys_truncated}, arrays={counters.arrays_truncated}"
        )

    return FlattenResult(paths=normalized, truncation_counters=counters)
