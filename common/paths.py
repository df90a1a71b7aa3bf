"""
Path notation for flattened documents.

Field paths use dot notation. Characters that would be ambiguous inside a
segment are escaped with a backslash:

    - "\\" -> "\\\\"
    - "."  -> "\\."
    - "$"  -> "\\$"

Array elements appear as their own segment:

    - "items.[0].sku"  - first element of items, by position
    - "items.[*].sku"  - any element of items (after normalization)
    - "a.b.[TRUNCATED]" - subtree cut off by the depth limit

This format is persisted in machine-readable output, so it must stay stable.

Example:
    >>> escape_key("user.name")
    'user\\\\.name'
    >>> split_path(join_path("orders", "[0]", escape_key("a.b")))
    ['orders', '[0]', 'a\\\\.b']
"""
import re
from typing import Optional

WILDCARD = "[*]"
TRUNCATED_MARKER = "[TRUNCATED]"

_ARRAY_INDEX_RE = re.compile(r"^\[(\d+)\]$")
_ESCAPABLE = "\\.$"


def escape_key(key: str) -> str:
    """
    Escape a raw document key so it can be used as a single path segment.

    Backslashes are escaped first so the escapes added for "." and "$"
    are not escaped a second time.
    """
    result = key.replace("\\", "\\\\")
    result = result.replace(".", "\\.")
    result = result.replace("$", "\\$")
    return result


def unescape_key(segment: str) -> str:
    """
    Reverse escape_key(). unescape_key(escape_key(s)) == s for any s.

    Scans left to right so an escaped backslash is never mistaken for the
    start of another escape.
    """
    chars = []
    i = 0
    while i < len(segment):
        char = segment[i]
        if char == "\\" and i + 1 < len(segment) and segment[i + 1] in _ESCAPABLE:
            chars.append(segment[i + 1])
            i += 2
        else:
            chars.append(char)
            i += 1
    return "".join(chars)


def join_path(*segments: str) -> str:
    """Join already-escaped segments with dots, skipping empty ones."""
    return ".".join(s for s in segments if s)


def split_path(path: str) -> list[str]:
    """
    Split a path on unescaped dots.

    A backslash and the character after it are kept together, so escaped
    dots stay inside their segment. Segments are returned still escaped.

    Args:
        path: Dot-notation path.

    Returns:
        List of escaped segments. Empty segments are dropped.
    """
    segments = []
    current = []
    i = 0

    while i < len(path):
        char = path[i]
        if char == "\\" and i + 1 < len(path):
            current.append(path[i:i + 2])
            i += 2
        elif char == ".":
            if current:
                segments.append("".join(current))
                current = []
            i += 1
        else:
            current.append(char)
            i += 1

    if current:
        segments.append("".join(current))

    return segments


def format_array_index(index: int) -> str:
    return f"[{index}]"


def is_array_index(segment: str) -> bool:
    """True for positional segments such as "[3]" (not for "[*]")."""
    return _ARRAY_INDEX_RE.match(segment) is not None


def parse_array_index(segment: str) -> Optional[int]:
    match = _ARRAY_INDEX_RE.match(segment)
    return int(match.group(1)) if match else None


def normalize_array_index(segment: str) -> str:
    """Map any positional segment ("[0]", "[17]") to the wildcard "[*]"."""
    return WILDCARD if is_array_index(segment) else segment


def normalize_path(path: str) -> str:
    """
    Rewrite every positional segment of a path to the wildcard.

    Example:
        >>> normalize_path("orders.[2].items.[0].sku")
        'orders.[*].items.[*].sku'
    """
    return join_path(*(normalize_array_index(s) for s in split_path(path)))


def last_segment(path: str) -> str:
    """Return the final segment of a path, or the path itself if it has none."""
    segments = split_path(path)
    return segments[-1] if segments else path
