"""
Aggregation of merged path values into FieldSchema records.

Input is the normalized path map produced by merge_flatten_results(); output
is one FieldSchema per field path, sorted naturally by path.
"""
import datetime as dt
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from common.bson_types import (
    UNDEFINED,
    BinaryValue,
    BsonType,
    ExtendedScalar,
    ObjectIdValue,
    format_datetime,
    is_numeric_type,
)
from common.paths import TRUNCATED_MARKER, WILDCARD
from common.sorting import path_sort_key
from flatten.flattener import PathValue
from redact.detector import detect_pii
from redact.masker import RedactedExample, RedactMode, RedactPolicy, mask
from .analyzer import calculate_type_ratio, get_type_distribution, has_mixed_types
from .schema import FieldSchema
from .stats import calculate_stats, coerce_numeric

_SKIPPED_SUFFIXES = ("." + WILDCARD, "." + TRUNCATED_MARKER)


@dataclass(frozen=True)
class AggregateOptions:
    """
    Settings for turning path values into field schemas.

    Attributes:
        total_docs: Number of sampled documents (denominator of present_ratio).
        optional_threshold: Fields present in fewer documents than this
            fraction are marked optional.
        examples_per_type: Distinct examples kept per observed type.
        redact: "all" masks every example, "pii" masks only examples with
            PII hints, "off" never masks.
        redact_mode: String masking mode passed to the masker.
        pii_patterns: Custom PII patterns, e.g. ("kakao.*",).
    """

    total_docs: int = 100
    optional_threshold: float = 0.95
    examples_per_type: int = 3
    redact: RedactPolicy = "pii"
    redact_mode: RedactMode = "balanced"
    pii_patterns: tuple[str, ...] = field(default_factory=tuple)


DEFAULT_AGGREGATE_OPTIONS = AggregateOptions()


def format_value(value: Any) -> str:
    """
    Render a value for display without masking.

    Containers are summarized structurally, dates become ISO-8601 and
    identifier/binary values are hex-encoded.
    """
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return f"[Array({len(value)})]"
    if isinstance(value, (dt.datetime, dt.date)):
        return format_datetime(value)
    if isinstance(value, (ObjectIdValue, BinaryValue)):
        return value.hex()
    if isinstance(value, ExtendedScalar):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if isinstance(value, re.Pattern):
        return f"/{value.pattern}/"
    if isinstance(value, Mapping):
        keys = [str(k) for k in value.keys()]
        if not keys:
            return "{}"
        if len(keys) <= 3:
            return "{" + ", ".join(keys) + "}"
        return "{" + ", ".join(keys[:3]) + "...}"
    return str(value)


def _render_example(pv: PathValue, path: str, options: AggregateOptions) -> RedactedExample:
    patterns = options.pii_patterns
    if options.redact == "all":
        return mask(pv.value, path, options.redact_mode, patterns)

    hints = detect_pii(path, pv.value, patterns)
    if options.redact == "pii" and hints:
        return mask(pv.value, path, options.redact_mode, patterns)

    return RedactedExample(value=format_value(pv.value), type=pv.type, hints=hints)


def collect_examples(
    values: list[PathValue],
    path: str,
    options: AggregateOptions,
) -> list[RedactedExample]:
    """
    Pick up to examples_per_type distinct examples for each observed type.

    Types are visited in first-seen order. Two examples are duplicates when
    both their type and rendered value match.
    """
    by_type: dict[BsonType, list[PathValue]] = {}
    for pv in values:
        by_type.setdefault(pv.type, []).append(pv)

    examples = []
    seen = set()

    for type_values in by_type.values():
        collected = 0
        for pv in type_values:
            if collected >= options.examples_per_type:
                break
            example = _render_example(pv, path, options)
            key = (example.type, example.value)
            if key in seen:
                continue
            seen.add(key)
            examples.append(example)
            collected += 1

    return examples


def aggregate_path(
    path: str,
    values: list[PathValue],
    options: Optional[AggregateOptions] = None,
) -> FieldSchema:
    """
    Build the FieldSchema for one path.

    Args:
        path: Normalized field path.
        values: Every value observed at the path across the sample.
        options: Aggregation settings. Defaults to AggregateOptions().

    Returns:
        FieldSchema for the path.
    """
    opts = options or DEFAULT_AGGREGATE_OPTIONS

    # A document contributing several array elements still counts once
    present_count = len({pv.doc_index for pv in values})
    present_ratio = present_count / opts.total_docs if opts.total_docs > 0 else 0.0
    absent_count = opts.total_docs - present_count

    type_counts = get_type_distribution(values)
    type_ratio = calculate_type_ratio(type_counts, len(values))

    examples = collect_examples(values, path, opts)

    stats = None
    numeric_values = [pv.value for pv in values if is_numeric_type(pv.type)]
    if numeric_values:
        numbers = coerce_numeric(numeric_values)
        if numbers:
            stats = calculate_stats(numbers)

    hints = list(dict.fromkeys(h for example in examples for h in example.hints))

    return FieldSchema(
        path=path,
        present_ratio=present_ratio,
        present_count=present_count,
        absent_count=absent_count,
        type_ratio=type_ratio,
        type_counts=type_counts,
        examples=examples,
        stats=stats,
        optional=present_ratio < opts.optional_threshold,
        mixed_type=has_mixed_types(type_counts),
        hints=hints,
    )


def is_schema_path(path: str) -> bool:
    """
    False for array element-type metadata ("x.[*]") and truncation markers.

    Descendants of a wildcard, such as "items.[*]._id", are real fields.
    """
    return not path.endswith(_SKIPPED_SUFFIXES)


def aggregate_all(
    paths: dict[str, list[PathValue]],
    options: Optional[AggregateOptions] = None,
) -> list[FieldSchema]:
    """
    Aggregate every field path of a merged flatten result.

    Args:
        paths: Normalized path -> values map.
        options: Aggregation settings shared by all paths.

    Returns:
        FieldSchemas sorted by path in natural order.
    """
    schemas = [
        aggregate_path(path, values, options)
        for path, values in paths.items()
        if is_schema_path(path)
    ]
    return sorted(schemas, key=lambda s: path_sort_key(s.path))
