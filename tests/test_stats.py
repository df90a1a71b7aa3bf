"""Tests for numeric statistics and type distribution helpers."""
import decimal

import pytest

from common.bson_types import BsonType, DecimalValue, Int64Value
from flatten.flattener import PathValue
from infer.analyzer import (
    calculate_type_ratio,
    get_primary_type,
    get_type_distribution,
    has_mixed_types,
)
from infer.stats import FieldStats, calculate_stats, coerce_numeric, percentile, std_dev


class TestCalculateStats:

    def test_empty_is_zero(self):
        assert calculate_stats([]) == FieldStats(min=0, max=0, avg=0)

    def test_basic(self):
        stats = calculate_stats([1, 2, 3])
        assert stats.min == 1
        assert stats.max == 3
        assert stats.avg == 2.0

    def test_integral_extremes_are_ints(self):
        stats = calculate_stats([1.0, 4.0])
        assert isinstance(stats.min, int)
        assert isinstance(stats.max, int)

    def test_fractional(self):
        stats = calculate_stats([0.5, 1.25])
        assert stats.min == 0.5
        assert stats.max == 1.25
        assert stats.avg == pytest.approx(0.875)

    def test_to_dict(self):
        assert FieldStats(1, 2, 1.5).to_dict() == {"min": 1, "max": 2, "avg": 1.5}


class TestCoerceNumeric:

    def test_skips_non_coercible(self):
        values = [1, "2.5", "abc", None, float("nan"), True]
        assert coerce_numeric(values) == [1.0, 2.5]

    def test_unwraps_tagged_numbers(self):
        values = [Int64Value(10), DecimalValue("1.5"), decimal.Decimal("3")]
        assert coerce_numeric(values) == [10.0, 1.5, 3.0]

    def test_huge_int_dropped(self):
        assert coerce_numeric([10 ** 400, 7]) == [7.0]

    def test_empty(self):
        assert coerce_numeric([]) == []


class TestHelpers:

    def test_percentile(self):
        assert percentile([1, 2, 3, 4], 50) == 2.5
        assert percentile([1, 2, 3, 4], 100) == 4.0
        assert percentile([], 90) == 0.0

    def test_std_dev(self):
        values = [2, 4, 4, 4, 5, 5, 7, 9]
        assert std_dev(values, 5.0) == pytest.approx(2.0)

    def test_std_dev_single_value(self):
        assert std_dev([3], 3.0) == 0.0


def _values(*types):
    return [PathValue(value=None, type=t, doc_index=i) for i, t in enumerate(types)]


class TestTypeDistribution:

    def test_counts_first_seen_order(self):
        counts = get_type_distribution(_values(BsonType.STRING, BsonType.INT, BsonType.STRING))
        assert counts == {BsonType.STRING: 2, BsonType.INT: 1}
        assert list(counts) == [BsonType.STRING, BsonType.INT]

    def test_ratio_sums_to_one(self):
        counts = {BsonType.STRING: 2, BsonType.INT: 1, BsonType.NULL: 1}
        ratio = calculate_type_ratio(counts, 4)
        assert sum(ratio.values()) == pytest.approx(1.0)
        assert ratio[BsonType.STRING] == 0.5

    def test_ratio_empty(self):
        assert calculate_type_ratio({}, 0) == {}

    def test_mixed_ignores_null(self):
        assert not has_mixed_types({BsonType.STRING: 3, BsonType.NULL: 2, BsonType.UNDEFINED: 1})
        assert has_mixed_types({BsonType.STRING: 3, BsonType.INT: 1})

    def test_primary_type(self):
        assert get_primary_type({BsonType.NULL: 9, BsonType.INT: 2, BsonType.STRING: 2}) == BsonType.INT
        assert get_primary_type({BsonType.NULL: 1}) is None
