"""Type distribution helpers over the values observed at one path."""
from typing import Iterable, Optional

from common.bson_types import BsonType, is_numeric_type
from flatten.flattener import PathValue

_NULLISH = (BsonType.NULL, BsonType.UNDEFINED)


def get_type_distribution(values: Iterable[PathValue]) -> dict[BsonType, int]:
    """Count values per type, keeping first-seen type order."""
    type_counts: dict[BsonType, int] = {}
    for pv in values:
        type_counts[pv.type] = type_counts.get(pv.type, 0) + 1
    return type_counts


def calculate_type_ratio(type_counts: dict[BsonType, int], total: int) -> dict[BsonType, float]:
    """Fraction of values per type. The ratios sum to 1 when total is the value count."""
    if total <= 0:
        return {}
    return {bson_type: count / total for bson_type, count in type_counts.items()}


def has_mixed_types(type_counts: dict[BsonType, int]) -> bool:
    """
    True when more than one non-null type was observed.

    Null and undefined do not make a field mixed: a string field that is
    sometimes null is still a string field.
    """
    meaningful = [t for t in type_counts if t not in _NULLISH]
    return len(meaningful) > 1


def get_primary_type(type_counts: dict[BsonType, int]) -> Optional[BsonType]:
    """Most common non-null type; ties go to the type seen first."""
    primary = None
    max_count = 0
    for bson_type, count in type_counts.items():
        if bson_type in _NULLISH:
            continue
        if count > max_count:
            primary = bson_type
            max_count = count
    return primary


__all__ = [
    'get_type_distribution',
    'calculate_type_ratio',
    'has_mixed_types',
    'get_primary_type',
    'is_numeric_type',
]
