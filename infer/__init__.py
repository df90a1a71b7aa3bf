"""
docshape infer - per-field schema aggregation and the collection pipeline.

Example:
    >>> from infer import infer_collection, schema_frame
    >>>
    >>> schema = infer_collection("orders", documents)
    >>> for f in schema.fields:
    ...     print(f.path, f.present_ratio, list(f.type_counts))
    >>> schema_frame(schema.fields).head()
"""
from .stats import FieldStats, calculate_stats, coerce_numeric, percentile, std_dev
from .analyzer import (
    calculate_type_ratio,
    get_primary_type,
    get_type_distribution,
    has_mixed_types,
)
from .schema import FieldSchema
from .aggregator import (
    AggregateOptions,
    DEFAULT_AGGREGATE_OPTIONS,
    aggregate_all,
    aggregate_path,
    collect_examples,
    format_value,
    is_schema_path,
)
from .collection import CollectionSchema, infer_collection, infer_collections
from .frame import FRAME_COLUMNS, schema_frame

__all__ = [
    'FieldStats',
    'calculate_stats',
    'coerce_numeric',
    'percentile',
    'std_dev',
    'calculate_type_ratio',
    'get_primary_type',
    'get_type_distribution',
    'has_mixed_types',
    'FieldSchema',
    'AggregateOptions',
    'DEFAULT_AGGREGATE_OPTIONS',
    'aggregate_all',
    'aggregate_path',
    'collect_examples',
    'format_value',
    'is_schema_path',
    'CollectionSchema',
    'infer_collection',
    'infer_collections',
    'FRAME_COLUMNS',
    'schema_frame',
]
