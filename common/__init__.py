"""Common utilities shared across docshape modules."""
from .errors import ConfigError, DocshapeError
from .paths import (
    TRUNCATED_MARKER,
    WILDCARD,
    escape_key,
    format_array_index,
    is_array_index,
    join_path,
    normalize_array_index,
    normalize_path,
    parse_array_index,
    split_path,
    unescape_key,
)
from .sorting import deep_sort_keys, natural_key, natural_sorted, sort_paths
from .bson_types import (
    UNDEFINED,
    BsonType,
    ExtendedScalar,
    classify,
    format_datetime,
    is_extended_scalar,
    is_numeric_type,
)
from .concurrency import run_with_concurrency
from .log_redaction import RedactingFilter, redact_message

__all__ = [
    'ConfigError',
    'DocshapeError',
    'TRUNCATED_MARKER',
    'WILDCARD',
    'escape_key',
    'format_array_index',
    'is_array_index',
    'join_path',
    'normalize_array_index',
    'normalize_path',
    'parse_array_index',
    'split_path',
    'unescape_key',
    'deep_sort_keys',
    'natural_key',
    'natural_sorted',
    'sort_paths',
    'UNDEFINED',
    'BsonType',
    'ExtendedScalar',
    'classify',
    'format_datetime',
    'is_extended_scalar',
    'is_numeric_type',
    'run_with_concurrency',
    'RedactingFilter',
    'redact_message',
]
