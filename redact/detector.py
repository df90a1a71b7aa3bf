"""
Heuristic PII detection from field paths and values.

Hints come from four independent sources and are unioned:

    1. The field's own name (last path segment), e.g. "userEmail" -> email.
    2. Inheriting parents: any segment named like "address" or "location"
       marks that field and everything below it.
    3. Custom patterns. "kakao.*" marks every descendant of a "kakao" field
       (but not the "kakao" field itself); any other pattern must equal the
       whole path.
    4. The shape of string values (emails, phone numbers, JWTs, ...).

Detection is best-effort. False negatives are expected; callers that need
a guarantee should redact everything.
"""
import re
from typing import Any, Optional, Sequence

from common.paths import WILDCARD, split_path, unescape_key

# Matched against the last path segment
PII_FIELD_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"email", re.I), "email"),
    (re.compile(r"e[-_]?mail", re.I), "email"),
    (re.compile(r"phone", re.I), "phone"),
    (re.compile(r"mobile", re.I), "phone"),
    (re.compile(r"tel(?:ephone)?", re.I), "phone"),
    (re.compile(r"password", re.I), "password"),
    (re.compile(r"passwd", re.I), "password"),
    (re.compile(r"pwd", re.I), "password"),
    (re.compile(r"secret", re.I), "secret"),
    (re.compile(r"token", re.I), "token"),
    (re.compile(r"api[-_]?key", re.I), "api_key"),
    (re.compile(r"access[-_]?key", re.I), "access_key"),
    (re.compile(r"auth", re.I), "auth"),
    (re.compile(r"ssn", re.I), "ssn"),
    (re.compile(r"serial", re.I), "ssn"),
    (re.compile(r"social[-_]?security", re.I), "ssn"),
    (re.compile(r"credit[-_]?card", re.I), "credit_card"),
    (re.compile(r"card[-_]?number", re.I), "credit_card"),
    (re.compile(r"cvv", re.I), "cvv"),
    (re.compile(r"cvc", re.I), "cvv"),
    (re.compile(r"address", re.I), "address"),
    (re.compile(r"birth[-_]?date", re.I), "birthdate"),
    (re.compile(r"dob", re.I), "birthdate"),
    (re.compile(r"ip[-_]?address", re.I), "ip_address"),
    (re.compile(r"^ci$", re.I), "ci"),
    (re.compile(r"^di$", re.I), "di"),
    (re.compile(r"salt", re.I), "salt"),
    (re.compile(r"name", re.I), "name"),
]

# Matched against every non-array segment; applies to all descendants
PII_PARENT_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"^address$", re.I), "address"),
    (re.compile(r"^location$", re.I), "location"),
]

# Matched against whole string values
PII_VALUE_PATTERNS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"), "email"),
    (re.compile(r"\+?\d{1,4}[-.\s]?\(?\d{1,3}\)?[-.\s]?\d{1,4}[-.\s]?\d{1,9}"), "phone"),
    (re.compile(r"\d{3}-?\d{2}-?\d{4}"), "ssn"),
    (re.compile(r"\d{4}[-\s]?\d{4}[-\s]?\d{4}[-\s]?\d{4}"), "credit_card"),
    (re.compile(r"eyJ[a-zA-Z0-9_-]+\.eyJ[a-zA-Z0-9_-]+\.[a-zA-Z0-9_-]+"), "jwt"),
    (re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.I), "uuid"),
    (
        re.compile(r"(?:(?:25[0-5]|2[0-4]\d|[01]?\d\d?)\.){3}(?:25[0-5]|2[0-4]\d|[01]?\d\d?)"),
        "ip_address",
    ),
    (re.compile(r"(?:[0-9a-fA-F]{1,4}:){7}[0-9a-fA-F]{1,4}"), "ip_address"),
]

PII_WARNINGS = {
    "email": "Email address detected",
    "phone": "Phone number detected",
    "password": "Password field detected",
    "secret": "Secret field detected",
    "token": "Token field detected",
    "api_key": "API key detected",
    "access_key": "Access key detected",
    "auth": "Authentication field detected",
    "ssn": "SSN detected",
    "credit_card": "Credit card number detected",
    "cvv": "CVV detected",
    "address": "Address field detected",
    "location": "Location field detected",
    "birthdate": "Birthdate detected",
    "ip_address": "IP address detected",
    "jwt": "JWT token detected",
    "uuid": "UUID detected",
    "ci": "CI detected",
    "di": "DI detected",
    "salt": "Salt value detected",
    "name": "Name field detected",
}


def _field_segments(path: str) -> list[str]:
    return [unescape_key(s) for s in split_path(path)]


def _field_name(segments: list[str], path: str) -> str:
    return segments[-1] if segments else path


def _strip_wildcard(segment: str) -> str:
    if segment.endswith(WILDCARD):
        return segment[:-len(WILDCARD)]
    return segment


def match_custom_pattern(path: str, pattern: str) -> bool:
    """
    Test a path against one custom PII pattern.

    "prefix.*" matches when the prefix segments appear in the path and at
    least one more segment follows them, so "kakao.*" matches "kakao.id" and
    "user.kakao.token" but not "kakao". Any other pattern must equal the
    path, ignoring case.
    """
    if pattern.endswith(".*"):
        prefix = [s.lower() for s in split_path(pattern[:-2])]
        if not prefix:
            return False
        segments = [_strip_wildcard(s).lower() for s in split_path(path)]
        width = len(prefix)
        for start in range(len(segments) - width + 1):
            if segments[start:start + width] == prefix:
                # Only descendants match, never the prefix field itself
                return start + width < len(segments)
        return False

    return path.lower() == pattern.lower()


def _custom_hint(pattern: str) -> str:
    base = pattern[:-2] if pattern.endswith(".*") else pattern
    segments = split_path(base)
    return unescape_key(segments[-1]) if segments else pattern


def _name_hints(path: str) -> list[str]:
    segments = _field_segments(path)
    field_name = _field_name(segments, path)
    hints = [hint for pattern, hint in PII_FIELD_PATTERNS if pattern.search(field_name)]

    for segment in split_path(path):
        if segment.startswith("["):
            continue
        segment = unescape_key(segment)
        hints.extend(hint for pattern, hint in PII_PARENT_PATTERNS if pattern.search(segment))

    return hints


def detect_pii(
    path: str,
    value: Any,
    custom_patterns: Optional[Sequence[str]] = None,
) -> list[str]:
    """
    Collect PII hints for a value found at a path.

    Args:
        path: Escaped field path, e.g. "contacts.[*].email".
        value: The observed value. Only strings are checked by shape.
        custom_patterns: Extra patterns such as ["kakao.*", "legacy.ssn"].

    Returns:
        Distinct hint names in the order they were found.
    """
    hints = _name_hints(path)

    for pattern in custom_patterns or ():
        if match_custom_pattern(path, pattern):
            hints.append(_custom_hint(pattern))

    if isinstance(value, str):
        hints.extend(hint for pattern, hint in PII_VALUE_PATTERNS if pattern.fullmatch(value))

    return list(dict.fromkeys(hints))


def is_pii_field(path: str, custom_patterns: Optional[Sequence[str]] = None) -> bool:
    """True when the path alone (ignoring values) suggests PII."""
    if _name_hints(path):
        return True
    return any(match_custom_pattern(path, p) for p in custom_patterns or ())


def has_pii(value: Any, path: str, custom_patterns: Optional[Sequence[str]] = None) -> bool:
    return bool(detect_pii(path, value, custom_patterns))


def get_pii_warning(hints: Sequence[str]) -> Optional[str]:
    """Human-readable warning for a list of hints, or None when there are none."""
    if not hints:
        return None
    return ", ".join(PII_WARNINGS.get(hint, f"PII: {hint}") for hint in hints)
