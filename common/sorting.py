"""
Deterministic ordering helpers.

Every list docshape emits (fields, diffs, variant paths) is sorted with a
natural, numeric-aware order so that "item2" sorts before "item10" and the
output is byte-stable between runs.
"""
import re
from collections.abc import Mapping
from typing import Any, Callable, Iterable, TypeVar

from .paths import split_path

T = TypeVar("T")

_CHUNK_RE = re.compile(r"(\d+)")


def natural_key(value: str) -> tuple:
    """
    Sort key that compares digit runs numerically and text case-insensitively.

    Digit runs sort before text. The raw string is appended as a final
    tie-breaker so that two strings only compare equal when identical.
    """
    chunks = []
    for chunk in _CHUNK_RE.split(value):
        if not chunk:
            continue
        if chunk.isdigit():
            chunks.append((0, int(chunk)))
        else:
            chunks.append((1, chunk.casefold()))
    return (tuple(chunks), value)


def natural_sorted(items: Iterable[T], key: Callable[[T], str] = str) -> list[T]:
    """Return items sorted by natural_key(key(item))."""
    return sorted(items, key=lambda item: natural_key(key(item)))


def path_sort_key(path: str) -> tuple:
    """
    Sort key comparing paths segment by segment.

    A path that is a strict prefix of another sorts first, so "a.b" comes
    before "a.b.c" and "a.b.c" before "a.bc".
    """
    return (tuple(natural_key(s)[0] for s in split_path(path)), path)


def sort_paths(paths: Iterable[str]) -> list[str]:
    return sorted(paths, key=path_sort_key)


def deep_sort_keys(value: Any) -> Any:
    """
    Recursively rebuild mappings with naturally sorted keys.

    Lists are walked element by element; any other value is returned as-is.
    Used to make JSON output independent of dict insertion order.
    """
    if isinstance(value, Mapping):
        return {
            key: deep_sort_keys(value[key])
            for key in sorted(value.keys(), key=lambda k: natural_key(str(k)))
        }
    if isinstance(value, (list, tuple)):
        return [deep_sort_keys(item) for item in value]
    return value
