"""Tests for the discover module - shape variants, diffs and similarity."""
import datetime as dt

import pytest

from common.bson_types import ObjectIdValue
from common.errors import ConfigError
from discover import (
    ExactMatchSimilarity,
    JaccardPathSimilarity,
    VariantAnalyzer,
    VariantDiff,
    WeightedJaccardSimilarity,
    analyze_variants,
    calculate_similarity,
    diff_paths,
    extract_shape_paths,
    format_diff,
    generate_signature,
)


class TestExtractShapePaths:
    """Tests for shallow shape extraction."""

    def test_flat_document(self):
        assert extract_shape_paths({"a": 1, "b": "x"}) == ["a", "b"]

    def test_nested_object(self):
        assert extract_shape_paths({"user": {"name": "A", "age": 3}}) == ["user.name", "user.age"]

    def test_depth_cut_records_leaf_path(self):
        doc = {"a": {"b": {"c": {"d": 1}}}}
        assert extract_shape_paths(doc) == ["a.b.c"]
        assert extract_shape_paths(doc, max_depth=1) == ["a.b"]

    def test_opaque_leaves(self):
        doc = {
            "tags": [{"x": 1}],
            "at": dt.datetime(2024, 1, 1),
            "_id": ObjectIdValue("65a1b2c3d4e5f6a7b8c9d0e1"),
        }
        assert extract_shape_paths(doc) == ["tags", "at", "_id"]

    def test_empty_object_contributes_nothing(self):
        assert extract_shape_paths({"meta": {}, "a": 1}) == ["a"]

    def test_keys_escaped(self):
        assert extract_shape_paths({"a.b": 1}) == ["a\\.b"]


class TestSignature:

    def test_order_independent(self):
        assert generate_signature(["a", "b", "c"]) == generate_signature(["c", "b", "a"])

    def test_differs_for_different_sets(self):
        assert generate_signature(["a", "b"]) != generate_signature(["a", "c"])

    def test_is_sha256_hex(self):
        sig = generate_signature(["a"])
        assert len(sig) == 64
        int(sig, 16)

    def test_key_order_in_documents_irrelevant(self):
        a = extract_shape_paths({"x": 1, "y": {"z": 2}})
        b = extract_shape_paths({"y": {"z": 3}, "x": "s"})
        assert generate_signature(a) == generate_signature(b)


class TestAnalyzeVariants:

    def test_top_one(self):
        docs = [{"a": 1, "b": 2}, {"a": 3, "b": 4}, {"a": 5, "c": 6}]
        variants = analyze_variants(docs, top_n=1)
        assert len(variants) == 1
        assert variants[0].count == 2
        assert variants[0].ratio == pytest.approx(2 / 3)
        assert variants[0].diff == VariantDiff()
        assert variants[0].paths == ["a", "b"]

    def test_diff_against_primary(self):
        docs = [{"a": 1, "b": 2}, {"a": 3, "b": 4}, {"a": 5, "c": 6}]
        primary, other = analyze_variants(docs)
        assert other.diff.added_paths == ["c"]
        assert other.diff.missing_paths == ["b"]
        assert primary.ratio + other.ratio == pytest.approx(1.0)

    def test_signature_prefix(self):
        variants = analyze_variants([{"a": 1}])
        assert variants[0].signature == generate_signature(["a"])[:8]

    def test_tie_broken_by_first_seen(self):
        docs = [{"z": 1}, {"a": 1}, {"a": 2}, {"z": 2}]
        variants = analyze_variants(docs)
        assert [v.paths for v in variants] == [["z"], ["a"]]

    def test_sorted_by_count(self):
        docs = [{"a": 1}] + [{"b": 1}] * 3 + [{"c": 1}] * 2
        assert [v.count for v in analyze_variants(docs)] == [3, 2, 1]

    def test_empty(self):
        assert analyze_variants([]) == []

    @pytest.mark.parametrize("top_n", [0, -1, 1.5, True])
    def test_invalid_top_n_rejected(self, top_n):
        with pytest.raises(ConfigError):
            analyze_variants([{"a": 1}, {"b": 2}], top_n=top_n)

    def test_invalid_top_n_rejected_for_empty_input(self):
        with pytest.raises(ConfigError):
            analyze_variants([], top_n=0)

    def test_paths_naturally_sorted(self):
        variants = analyze_variants([{"f10": 1, "f2": 1, "f1": 1}])
        assert variants[0].paths == ["f1", "f2", "f10"]

    def test_to_dict(self):
        data = analyze_variants([{"a": 1}])[0].to_dict()
        assert data["diff"] == {"addedPaths": [], "missingPaths": []}
        assert data["count"] == 1


class TestDiff:

    def test_diff_paths(self):
        diff = diff_paths(["_id", "name"], ["_id", "email"])
        assert diff == VariantDiff(added_paths=["email"], missing_paths=["name"])

    def test_diff_sorted_naturally(self):
        diff = diff_paths([], ["f10", "f2"])
        assert diff.added_paths == ["f2", "f10"]

    def test_format_empty(self):
        assert format_diff(VariantDiff()) == "-"

    def test_format_both_sides(self):
        assert format_diff(VariantDiff(added_paths=["a", "b"], missing_paths=["x"])) == "+a, b, -x"

    def test_format_truncates(self):
        diff = VariantDiff(added_paths=["a", "b", "c", "d", "e"])
        assert format_diff(diff) == "+a, b, c... (+2 more)"


class TestSimilarity:
    """Tests for path-set similarity strategies."""

    def test_calculate_similarity_empty(self):
        assert calculate_similarity([], []) == 1.0

    def test_calculate_similarity_disjoint(self):
        assert calculate_similarity(["a"], ["b"]) == 0.0

    def test_partial_overlap(self):
        # Intersection {b, c} = 2, union {a, b, c, d} = 4
        assert JaccardPathSimilarity().similarity(["a", "b", "c"], ["b", "c", "d"]) == 0.5

    def test_duplicates_ignored(self):
        assert calculate_similarity(["a", "a"], ["a"]) == 1.0

    def test_weighted_prefers_shallow_matches(self):
        sim = WeightedJaccardSimilarity(depth_decay=0.5)
        shallow_match = sim.similarity({"a", "x.y.z"}, {"a"})
        deep_match = sim.similarity({"a", "x.y.z"}, {"x.y.z"})
        assert shallow_match > deep_match

    def test_weighted_ignores_escaped_dots(self):
        sim = WeightedJaccardSimilarity(depth_decay=0.5)
        assert sim._path_weight("a\\.b") == 1.0
        assert sim._path_weight("a.b") == 0.5

    def test_exact_match(self):
        sim = ExactMatchSimilarity()
        assert sim.similarity(["a", "b"], ["b", "a"]) == 1.0
        assert sim.similarity(["a"], ["a", "b"]) == 0.0


class TestVariantAnalyzer:

    @pytest.fixture
    def analyzer(self):
        return VariantAnalyzer()

    def test_analyze(self, analyzer, user_documents):
        variants = analyzer.analyze(user_documents)
        assert sum(v.count for v in variants) == len(user_documents)
        assert variants[0].count == 2

    def test_closest_variant(self, analyzer, user_documents):
        variants = analyzer.analyze(user_documents)
        variant, score = analyzer.closest_variant({"_id": 1, "name": "x", "email": "y", "age": 1, "tags": []}, variants)
        assert variant is variants[0]
        assert score == 1.0

    def test_closest_variant_none(self, analyzer):
        assert analyzer.closest_variant({"a": 1}, []) == (None, 0.0)

    def test_describe(self, analyzer, user_documents):
        text = analyzer.describe(user_documents)
        assert "Documents analyzed: 3" in text
        assert "PRIMARY" in text
        assert "+nickname, -tags" in text

    def test_describe_empty(self, analyzer):
        assert analyzer.describe([]) == "No documents to analyze."
