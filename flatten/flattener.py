"""
Document flattening.

Turns one nested document into a map of path -> list of PathValue, under
depth, key and array-sample limits. Every container is recorded at its own
path as well as traversed, so "user" and "user.name" are both present.

Arrays are sampled positionally ("tags.[0]", "tags.[1]", ...) and also get a
"tags.[*]" entry per distinct element type. That wildcard entry is array
metadata, not a field; the merger later folds positional segments into the
same "[*]" marker.

All traversal state lives in a per-call context, so a single Flattener can
be shared between threads.
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from common.bson_types import BsonType, classify
from common.paths import TRUNCATED_MARKER, WILDCARD, escape_key, format_array_index, join_path
from .limits import DEFAULT_LIMITS, FlattenLimits

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathValue:
    """One value observed at a path in one document."""

    value: Any
    type: BsonType
    doc_index: int


@dataclass
class TruncationCounters:
    """How often each limit cut traversal short. Summed across documents."""

    depth_truncated: int = 0
    keys_truncated: int = 0
    arrays_truncated: int = 0

    def __add__(self, other: "TruncationCounters") -> "TruncationCounters":
        return TruncationCounters(
            depth_truncated=self.depth_truncated + other.depth_truncated,
            keys_truncated=self.keys_truncated + other.keys_truncated,
            arrays_truncated=self.arrays_truncated + other.arrays_truncated,
        )

    @property
    def total(self) -> int:
        return self.depth_truncated + self.keys_truncated + self.arrays_truncated

    def to_dict(self) -> dict[str, int]:
        return {
            "depthTruncated": self.depth_truncated,
            "keysTruncated": self.keys_truncated,
            "arraysTruncated": self.arrays_truncated,
        }


@dataclass
class FlattenResult:
    """Paths observed in one document (or a merged batch) plus truncation counts."""

    paths: dict[str, list[PathValue]] = field(default_factory=dict)
    truncation_counters: TruncationCounters = field(default_factory=TruncationCounters)


@dataclass
class _FlattenContext:
    """Mutable state for a single flatten call."""

    limits: FlattenLimits
    doc_index: int
    paths: dict[str, list[PathValue]] = field(default_factory=dict)
    counters: TruncationCounters = field(default_factory=TruncationCounters)
    key_count: int = 0

    @property
    def keys_exhausted(self) -> bool:
        return self.key_count >= self.limits.max_keys_per_doc

    def add_path(self, path: str, value: Any, bson_type: BsonType) -> None:
        # The key budget is shared by the whole document, not per branch
        if self.keys_exhausted:
            self.counters.keys_truncated += 1
            return
        self.paths.setdefault(path, []).append(
            PathValue(value=value, type=bson_type, doc_index=self.doc_index)
        )
        self.key_count += 1


class Flattener:
    """
    Flattens documents into typed path values.

    Example:
        >>> flattener = Flattener(FlattenLimits(max_depth=5))
        >>> result = flattener.flatten({"user": {"name": "Ann"}, "tags": ["a"]})
        >>> sorted(result.paths)
        ['tags', 'tags.[*]', 'tags.[0]', 'user', 'user.name']
    """

    def __init__(self, limits: Optional[FlattenLimits] = None):
        """
        Initialize Flattener.

        Args:
            limits: Traversal limits. Defaults to FlattenLimits().
        """
        self.limits = limits or DEFAULT_LIMITS

    def flatten(self, document: Mapping, doc_index: int = 0) -> FlattenResult:
        """
        Flatten a single document.

        Args:
            document: Top-level document. Its own path is never recorded;
                its keys start at depth 1.
            doc_index: Position of the document in the sample, stamped on
                every PathValue so presence can be counted per document.

        Returns:
            FlattenResult with positional (not yet normalized) paths.
        """
        ctx = _FlattenContext(limits=self.limits, doc_index=doc_index)

        for key, value in document.items():
            self._traverse(ctx, value, escape_key(str(key)), 1)

        if ctx.counters.total:
            logger.debug(
                f"Document {doc_index} truncated: depth={ctx.counters.depth_truncated}, "
                f"keys={ctx.counters.keys_truncated}, arrays={ctx.counters.arrays_truncated}"
            )

        return FlattenResult(paths=ctx.paths, truncation_counters=ctx.counters)

    def _traverse(self, ctx: _FlattenContext, value: Any, path: str, depth: int) -> None:
        """Recursively record a value and its descendants."""
        if depth > ctx.limits.max_depth:
            ctx.counters.depth_truncated += 1
            ctx.add_path(join_path(path, TRUNCATED_MARKER), None, BsonType.NULL)
            return

        if ctx.keys_exhausted:
            ctx.counters.keys_truncated += 1
            return

        bson_type = classify(value)

        if bson_type == BsonType.ARRAY:
            self._traverse_array(ctx, value, path, depth)
        elif bson_type == BsonType.OBJECT:
            ctx.add_path(path, value, bson_type)
            for key, child in value.items():
                self._traverse(ctx, child, join_path(path, escape_key(str(key))), depth + 1)
        else:
            # Scalars, dates, null/undefined and tagged extended scalars
            ctx.add_path(path, value, bson_type)

    def _traverse_array(self, ctx: _FlattenContext, array: Any, path: str, depth: int) -> None:
        ctx.add_path(path, array, BsonType.ARRAY)

        sample_size = min(len(array), ctx.limits.max_array_sample)
        if len(array) > ctx.limits.max_array_sample:
            ctx.counters.arrays_truncated += 1

        # Insertion-ordered set of element types
        element_types: dict[BsonType, None] = {}

        for i in range(sample_size):
            element = array[i]
            element_type = classify(element)
            element_types[element_type] = None
            element_path = join_path(path, format_array_index(i))

            if element_type in (BsonType.OBJECT, BsonType.ARRAY):
                self._traverse(ctx, element, element_path, depth + 1)
            else:
                ctx.add_path(element_path, element, element_type)

        wildcard_path = join_path(path, WILDCARD)
        for element_type in element_types:
            ctx.add_path(wildcard_path, f"[{element_type.value}]", element_type)


def flatten(
    document: Mapping,
    doc_index: int = 0,
    limits: Optional[FlattenLimits] = None,
) -> FlattenResult:
    """
    Convenience function to flatten one document.

    Args:
        document: Document to flatten.
        doc_index: Index of the document within its sample.
        limits: Traversal limits. Defaults to FlattenLimits().

    Returns:
        FlattenResult for the document.
    """
    return Flattener(limits).flatten(document, doc_index)
