"""Tests for per-path aggregation into FieldSchema."""
import datetime as dt

import pytest

from common.bson_types import UNDEFINED, BsonType, Int64Value, ObjectIdValue
from flatten import FlattenLimits, flatten, merge_flatten_results
from flatten.flattener import PathValue
from infer import AggregateOptions, aggregate_all, aggregate_path, format_value, is_schema_path


def _aggregate(documents, limits=None, **kwargs):
    merged = merge_flatten_results(
        flatten(doc, i, limits) for i, doc in enumerate(documents)
    )
    options = AggregateOptions(total_docs=len(documents), **kwargs)
    return {f.path: f for f in aggregate_all(merged.paths, options)}


class TestFormatValue:

    @pytest.mark.parametrize("value,expected", [
        (None, "null"),
        (UNDEFINED, "undefined"),
        (True, "true"),
        (False, "false"),
        (42, "42"),
        (3.5, "3.5"),
        ("text", "text"),
        ([1, 2, 3], "[Array(3)]"),
        ({}, "{}"),
        ({"a": 1, "b": 2}, "{a, b}"),
        ({"a": 1, "b": 2, "c": 3}, "{a, b, c}"),
        ({"a": 1, "b": 2, "c": 3, "d": 4}, "{a, b, c...}"),
        (dt.datetime(2024, 1, 15, 10, 30), "2024-01-15T10:30:00.000Z"),
        (ObjectIdValue("65a1b2c3d4e5f6a7b8c9d0e1"), "65a1b2c3d4e5f6a7b8c9d0e1"),
        (Int64Value(5), "5"),
        (b"\x01\xff", "01ff"),
    ])
    def test_plain_rendering(self, value, expected):
        assert format_value(value) == expected


class TestIsSchemaPath:

    def test_metadata_paths_skipped(self):
        assert not is_schema_path("tags.[*]")
        assert not is_schema_path("a.b.[TRUNCATED]")

    def test_descendants_kept(self):
        assert is_schema_path("items.[*]._id")
        assert is_schema_path("tags")


class TestAggregateAll:

    def test_sorted_paths(self, user_documents):
        fields = _aggregate(user_documents)
        assert list(fields) == ["_id", "age", "email", "name", "nickname", "tags"]

    def test_presence_invariant(self, user_documents, order_documents):
        for docs in (user_documents, order_documents):
            for f in _aggregate(docs).values():
                assert f.present_count + f.absent_count == len(docs)
                assert f.total_docs == len(docs)

    def test_optional_field(self, user_documents):
        nickname = _aggregate(user_documents)["nickname"]
        assert nickname.present_count == 1
        assert nickname.absent_count == 2
        assert nickname.present_ratio == pytest.approx(1 / 3)
        assert nickname.optional

    def test_required_field(self, user_documents):
        assert not _aggregate(user_documents)["email"].optional

    def test_threshold_configurable(self, user_documents):
        fields = _aggregate(user_documents, optional_threshold=0.5)
        assert not fields["tags"].optional
        assert fields["nickname"].optional

    def test_mixed_types_and_stats(self, user_documents):
        age = _aggregate(user_documents)["age"]
        assert age.type_counts == {BsonType.INT: 2, BsonType.STRING: 1}
        assert sum(age.type_ratio.values()) == pytest.approx(1.0)
        assert age.mixed_type
        assert age.stats.min == 31
        assert age.stats.max == 45
        assert age.stats.avg == pytest.approx(38.0)

    def test_no_stats_for_strings(self, user_documents):
        assert _aggregate(user_documents)["email"].stats is None

    def test_long_and_int_stats(self, order_documents):
        total = _aggregate(order_documents)["total"]
        assert total.type_counts == {BsonType.LONG: 1, BsonType.INT: 1}
        assert total.stats.min == 42
        assert total.stats.max == 5000000000

    def test_array_descendants_count_documents(self, order_documents):
        fields = _aggregate(order_documents)
        sku = fields["items.[*].sku"]
        assert sum(sku.type_counts.values()) == 3
        assert sku.present_count == 2
        assert sku.present_ratio == 1.0

    def test_array_metadata_excluded(self, order_documents):
        fields = _aggregate(order_documents)
        assert "items" in fields
        assert "items.[*]" not in fields
        assert "items.[*].price" in fields

    def test_truncation_markers_excluded(self, deep_document):
        fields = _aggregate([deep_document], limits=FlattenLimits(max_depth=3))
        assert list(fields) == ["l1", "l1.l2", "l1.l2.l3"]

    def test_empty_input(self):
        assert aggregate_all({}, AggregateOptions(total_docs=0)) == []


class TestExamples:

    def test_pii_masked_by_default(self, user_documents):
        email = _aggregate(user_documents)["email"]
        assert [e.value for e in email.examples] == ["a***@e***.com", "b***@e***.org", "c***@e***.net"]
        assert email.hints == ["email"]

    def test_non_pii_formatted_plainly(self, user_documents):
        ids = _aggregate(user_documents)["_id"]
        assert ids.examples[0].value == "65a1b2c3d4e5f6a7b8c9d0e1"
        assert ids.examples[0].type == BsonType.OBJECT_ID
        assert ids.hints == []

    def test_redact_off_keeps_hints(self, user_documents):
        email = _aggregate(user_documents, redact="off")["email"]
        assert email.examples[0].value == "alice@example.com"
        assert email.hints == ["email"]

    def test_redact_all_masks_everything(self, user_documents):
        ids = _aggregate(user_documents, redact="all")["_id"]
        assert ids.examples[0].value == "65a**********0e1"

    def test_redact_all_never_exposes_short_codes(self):
        values = [PathValue("1234", BsonType.STRING, 0), PathValue("2024", BsonType.STRING, 1)]
        schema = aggregate_path("pin", values, AggregateOptions(total_docs=2, redact="all"))
        rendered = [e.value for e in schema.examples]
        assert rendered == ["****", "****"]

    def test_strict_mode(self, user_documents):
        name = _aggregate(user_documents, redact_mode="strict")["name"]
        assert name.examples[0].value == "A**********"

    def test_examples_per_type_and_dedupe(self):
        values = [PathValue(v, BsonType.STRING, i) for i, v in enumerate(["a", "a", "b", "c", "d"])]
        values.append(PathValue(1, BsonType.INT, 5))
        options = AggregateOptions(total_docs=6, examples_per_type=2, redact="off")
        schema = aggregate_path("code", values, options)
        assert [(e.type, e.value) for e in schema.examples] == [
            (BsonType.STRING, "a"),
            (BsonType.STRING, "b"),
            (BsonType.INT, "1"),
        ]

    def test_custom_patterns(self):
        docs = [{"kakao": {"id": "12345678"}}]
        fields = _aggregate(docs, pii_patterns=("kakao.*",))
        assert "kakao" in fields["kakao.id"].hints
        assert "kakao" not in fields["kakao"].hints

    def test_parent_pattern_hint(self, order_documents):
        city = _aggregate(order_documents)["customer.address.city"]
        assert "address" in city.hints
        assert city.examples[0].value != "Seoul"

    def test_to_dict_uses_wire_names(self, user_documents):
        data = _aggregate(user_documents)["age"].to_dict()
        assert data["typeCounts"] == {"int": 2, "string": 1}
        assert data["mixedType"] is True
        assert data["stats"] == {"min": 31, "max": 45, "avg": 38.0}
