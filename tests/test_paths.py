"""Tests for path escaping, splitting and array-index normalization."""
import pytest

from common.paths import (
    TRUNCATED_MARKER,
    WILDCARD,
    escape_key,
    format_array_index,
    is_array_index,
    join_path,
    last_segment,
    normalize_array_index,
    normalize_path,
    parse_array_index,
    split_path,
    unescape_key,
)


class TestEscaping:
    """Tests for escape_key / unescape_key."""

    def test_plain_key_unchanged(self):
        assert escape_key("name") == "name"

    def test_dot_escaped(self):
        assert escape_key("a.b") == "a\\.b"

    def test_dollar_escaped(self):
        assert escape_key("$set") == "\\$set"

    def test_backslash_escaped_first(self):
        # A literal backslash followed by a dot must not collapse into "\."
        assert escape_key("a\\.b") == "a\\\\\\.b"

    @pytest.mark.parametrize("key", [
        "",
        "plain",
        "a.b.c",
        "$price",
        "back\\slash",
        "\\.",
        "\\\\$.",
        "trailing\\",
        "nul\x00char",
        "한글.키",
    ])
    def test_round_trip(self, key):
        assert unescape_key(escape_key(key)) == key

    def test_unescape_leaves_unknown_escapes(self):
        assert unescape_key("a\\b") == "a\\b"


class TestJoinSplit:
    """Tests for join_path / split_path."""

    def test_join_skips_empty(self):
        assert join_path("", "a", "", "b") == "a.b"

    def test_split_simple(self):
        assert split_path("user.address.city") == ["user", "address", "city"]

    def test_split_keeps_escaped_dot(self):
        assert split_path("meta.a\\.b.c") == ["meta", "a\\.b", "c"]

    def test_split_escaped_backslash_then_separator(self):
        # "a\\" is one segment ending in an escaped backslash
        assert split_path("a\\\\.b") == ["a\\\\", "b"]

    def test_split_drops_empty_segments(self):
        assert split_path("a..b") == ["a", "b"]
        assert split_path("") == []

    def test_split_join_round_trip(self):
        segments = ["orders", "[0]", escape_key("a.b"), escape_key("$x"), "[*]"]
        assert split_path(join_path(*segments)) == segments

    def test_last_segment(self):
        assert last_segment("contacts.[*].email") == "email"
        assert last_segment("a\\.b") == "a\\.b"


class TestArrayIndex:
    """Tests for positional array segments."""

    def test_format(self):
        assert format_array_index(7) == "[7]"

    def test_is_array_index(self):
        assert is_array_index("[0]")
        assert is_array_index("[123]")
        assert not is_array_index(WILDCARD)
        assert not is_array_index(TRUNCATED_MARKER)
        assert not is_array_index("items")

    def test_parse(self):
        assert parse_array_index("[42]") == 42
        assert parse_array_index("[*]") is None

    def test_normalize_segment(self):
        assert normalize_array_index("[3]") == WILDCARD
        assert normalize_array_index("sku") == "sku"

    def test_normalize_path(self):
        assert normalize_path("orders.[2].items.[10].sku") == "orders.[*].items.[*].sku"

    def test_normalize_path_keeps_escapes(self):
        assert normalize_path("a\\.b.[0]") == "a\\.b.[*]"
