"""
Value masking for display examples.

Masking never reveals container contents: arrays and objects are reduced to
a size summary. Strings keep a small prefix/suffix depending on the mode,
emails and phone numbers get shape-preserving masks, and dates keep their
ISO-8601 skeleton with every digit starred out.

When in doubt the masker hides more, not less.
"""
import datetime as dt
import decimal
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Sequence

from common.bson_types import (
    UNDEFINED,
    BinaryValue,
    BsonType,
    ExtendedScalar,
    ObjectIdValue,
    classify,
    format_datetime,
)
from .detector import detect_pii

RedactMode = Literal["strict", "balanced"]
RedactPolicy = Literal["all", "pii", "off"]

MAX_MASKED_LENGTH = 10
MIN_VISIBLE_CHARS = 3
MIN_VISIBLE_RATIO = 4

_NON_DIGIT_RE = re.compile(r"\D")
_DIGIT_RE = re.compile(r"\d")


@dataclass(frozen=True)
class RedactedExample:
    """An example value rendered for display, masked or not."""

    value: str
    type: BsonType
    hints: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "type": self.type.value, "hints": list(self.hints)}


def mask_string(value: str, mode: RedactMode = "balanced") -> str:
    """
    Mask a string, keeping a few edge characters visible.

    strict keeps only the first character. balanced keeps up to three
    characters on each side (a quarter of the length at most). Strings of
    two characters or fewer are fully masked, and the run of "*" is never
    longer than MAX_MASKED_LENGTH.
    """
    length = len(value)
    if length <= 2:
        return "*" * length

    if mode == "strict":
        return value[0] + "*" * min(length - 1, MAX_MASKED_LENGTH)

    if length <= MIN_VISIBLE_RATIO:
        return value[0] + "*" * (length - 2) + value[-1]

    visible = min(MIN_VISIBLE_CHARS, length // MIN_VISIBLE_RATIO)
    masked = min(length - visible * 2, MAX_MASKED_LENGTH)
    return value[:visible] + "*" * masked + value[-visible:]


def mask_email(email: str) -> str:
    """
    Mask an email address, keeping its shape.

    Example:
        >>> mask_email("john.doe@example.com")
        'j***@e***.com'
    """
    local, _, domain = email.partition("@")
    if not domain:
        return mask_string(email, "balanced")

    masked_local = local[0] + "***" if len(local) > 1 else "*"

    labels = domain.split(".")
    if len(labels) > 1:
        first = labels[0][:1] or "*"
        masked_domain = f"{first}***.{labels[-1]}"
    else:
        masked_domain = mask_string(domain, "balanced")

    return f"{masked_local}@{masked_domain}"


def mask_phone(phone: str) -> str:
    """
    Keep the trailing digits of a phone number.

    At most four digits and never more than half of them are shown, so a
    short code such as a PIN is fully masked.
    """
    digits = _NON_DIGIT_RE.sub("", phone)
    if len(digits) <= 4:
        return "*" * len(phone)
    keep = min(4, len(digits) // 2)
    return "*" * (len(digits) - keep) + digits[-keep:]


def mask_number(value: Any) -> str:
    """Keep the first and last character of a number; two or fewer are fully masked."""
    text = str(value)
    if len(text) <= 2:
        return "*" * len(text)
    return text[0] + "*" * (len(text) - 2) + text[-1]


def _mask_tagged(value: ExtendedScalar, mode: RedactMode) -> str:
    if isinstance(value, (ObjectIdValue, BinaryValue)):
        return mask_string(value.hex(), mode)
    return f"[{value.type_name}]"


def mask(
    value: Any,
    path: str,
    mode: RedactMode = "balanced",
    custom_patterns: Optional[Sequence[str]] = None,
) -> RedactedExample:
    """
    Mask a value for display.

    Args:
        value: Value to mask.
        path: Field path the value was found at (used for PII hints).
        mode: "strict" or "balanced" string masking.
        custom_patterns: Extra PII patterns passed to the detector.

    Returns:
        RedactedExample with the masked string, the value's type and hints.
    """
    bson_type = classify(value)
    hints = detect_pii(path, value, custom_patterns)

    if value is None:
        rendered = "null"
    elif value is UNDEFINED:
        rendered = "undefined"
    elif isinstance(value, bool):
        rendered = "true" if value else "false"
    elif isinstance(value, (int, float, decimal.Decimal)):
        rendered = mask_number(value)
    elif isinstance(value, str):
        if "email" in hints:
            rendered = mask_email(value)
        elif "phone" in hints:
            rendered = mask_phone(value)
        else:
            rendered = mask_string(value, mode)
    elif isinstance(value, (dt.datetime, dt.date)):
        rendered = _DIGIT_RE.sub("*", format_datetime(value))
    elif isinstance(value, ExtendedScalar):
        rendered = _mask_tagged(value, mode)
    elif isinstance(value, (bytes, bytearray)):
        rendered = mask_string(bytes(value).hex(), mode)
    elif isinstance(value, (list, tuple)):
        rendered = f"[Array({len(value)})]"
    elif isinstance(value, Mapping):
        rendered = f"{{Object({len(value)} keys)}}"
    elif bson_type == BsonType.REGEX:
        rendered = "[BSONRegExp]"
    else:
        rendered = "[Unknown]"

    return RedactedExample(value=rendered, type=bson_type, hints=hints)
