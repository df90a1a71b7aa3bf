"""
Per-collection inference pipeline.

documents -> flatten (per document) -> merge -> aggregate -> FieldSchema[]
documents -> variant analysis -> Variant[]

Both branches read the same in-memory sample; no database access happens
here. Use adapters.from_bson() to prepare driver documents first.
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from common.concurrency import run_with_concurrency
from common.sorting import deep_sort_keys
from discover.variants import Variant, analyze_variants
from flatten.flattener import Flattener, TruncationCounters
from flatten.merger import merge_flatten_results
from validation.options import InferenceOptions
from .aggregator import aggregate_all
from .schema import FieldSchema

logger = logging.getLogger(__name__)

EMPTY_COLLECTION_WARNING = "Empty collection"
PII_WARNING = "PII detected"


@dataclass
class CollectionSchema:
    """Observed schema of one collection sample."""

    name: str
    sampled_count: int
    fields: list[FieldSchema] = field(default_factory=list)
    variants: list[Variant] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    truncation_counters: TruncationCounters = field(default_factory=TruncationCounters)

    @property
    def pii_fields(self) -> list[FieldSchema]:
        return [f for f in self.fields if f.hints]

    def get_field(self, path: str) -> Optional[FieldSchema]:
        return next((f for f in self.fields if f.path == path), None)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping with deterministically sorted keys."""
        return deep_sort_keys({
            "name": self.name,
            "sampledCount": self.sampled_count,
            "fields": [f.to_dict() for f in self.fields],
            "variants": [v.to_dict() for v in self.variants],
            "warnings": list(self.warnings),
            "truncationCounters": self.truncation_counters.to_dict(),
        })


def _build_warnings(
    sampled_count: int,
    fields: list[FieldSchema],
    counters: TruncationCounters,
) -> list[str]:
    warnings = []
    if sampled_count == 0:
        warnings.append(EMPTY_COLLECTION_WARNING)
    if any(f.hints for f in fields):
        warnings.append(PII_WARNING)
    if counters.total:
        warnings.append(
            f"Truncated during flatten (depth: {counters.depth_truncated}, "
            f"keys: {counters.keys_truncated}, arrays: {counters.arrays_truncated})"
        )
    return warnings


def infer_collection(
    name: str,
    documents: list[Mapping],
    options: Optional[InferenceOptions] = None,
) -> CollectionSchema:
    """
    Infer the observed schema of one collection sample.

    Args:
        name: Collection name, used for labelling only.
        documents: Sampled documents, already converted to the core value model.
        options: Inference options. Defaults to InferenceOptions().

    Returns:
        CollectionSchema with fields, variants, warnings and truncation counts.

    Example:
        >>> schema = infer_collection("users", [{"_id": 1, "email": "a@b.co"}])
        >>> [f.path for f in schema.fields]
        ['_id', 'email']
        >>> schema.warnings
        ['PII detected']
    """
    opts = options or InferenceOptions()
    flattener = Flattener(opts.limits)

    merged = merge_flatten_results(
        flattener.flatten(doc, index) for index, doc in enumerate(documents)
    )
    fields = aggregate_all(merged.paths, opts.aggregate_options(len(documents)))
    variants = analyze_variants(documents, top_n=opts.variant_top_n)

    schema = CollectionSchema(
        name=name,
        sampled_count=len(documents),
        fields=fields,
        variants=variants,
        warnings=_build_warnings(len(documents), fields, merged.truncation_counters),
        truncation_counters=merged.truncation_counters,
    )

    logger.info(
        f"Inferred {name}: {schema.sampled_count} documents, "
        f"{len(fields)} fields, {len(variants)} variants"
    )
    return schema


def infer_collections(
    batches: Mapping[str, list[Mapping]],
    options: Optional[InferenceOptions] = None,
) -> dict[str, CollectionSchema]:
    """
    Infer several collections concurrently.

    At most options.concurrency collections are processed at once. A
    collection whose inference raises is logged and left out of the result.

    Args:
        batches: Collection name -> sampled documents.
        options: Options shared by every collection.

    Returns:
        Collection name -> CollectionSchema, in the order of batches, for
        the collections that succeeded.
    """
    opts = options or InferenceOptions()
    items = list(batches.items())

    schemas = run_with_concurrency(
        items,
        lambda item, _index: infer_collection(item[0], item[1], opts),
        opts.concurrency,
        label=lambda item: f"collection {item[0]}",
    )

    if len(schemas) < len(items):
        logger.warning(f"{len(items) - len(schemas)} of {len(items)} collections failed")

    return {schema.name: schema for schema in schemas}
