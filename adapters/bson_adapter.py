"""
Conversion from pymongo/bson native values to the docshape value model.

The inference core never imports a database driver. Documents read with
pymongo (or parsed from MongoDB Extended JSON) pass through from_bson()
first, which turns driver types into plain Python containers and the tagged
ExtendedScalar family.
"""
import datetime as dt
import re
import uuid
from collections.abc import Mapping
from typing import Any

from bson import Binary, Code, DBRef, Decimal128, Int64, MaxKey, MinKey, ObjectId, Regex, Timestamp
from bson import json_util
from bson.datetime_ms import DatetimeMS
from bson.errors import InvalidBSON

from common.bson_types import (
    BinaryValue,
    DBPointerValue,
    DecimalValue,
    Int64Value,
    JavaScriptValue,
    MaxKeyValue,
    MinKeyValue,
    ObjectIdValue,
    RegexValue,
    TimestampValue,
)

_UUID_SUBTYPE = 4

_REGEX_FLAG_LETTERS = [
    (re.IGNORECASE, "i"),
    (re.LOCALE, "l"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
    (re.UNICODE, "u"),
    (re.VERBOSE, "x"),
]


def regex_flags_to_str(flags: Any) -> str:
    """bson Regex flags may be an int bitmask or already a letter string."""
    if isinstance(flags, str):
        return "".join(sorted(flags))
    return "".join(letter for flag, letter in _REGEX_FLAG_LETTERS if flags & flag)


def from_bson(value: Any) -> Any:
    """
    Recursively convert a bson/pymongo value into the core value model.

    Containers are rebuilt (SON and RawBSONDocument-like mappings become
    dicts, tuples stay sequences as lists), driver scalars become tagged
    ExtendedScalar values, and everything else is returned unchanged.

    Example:
        >>> from_bson({"_id": ObjectId("65a1b2c3d4e5f6a7b8c9d0e1"), "n": Int64(5)})
        {'_id': ObjectIdValue(oid='65a1b2c3d4e5f6a7b8c9d0e1'), 'n': Int64Value(value=5)}
    """
    # Driver subclasses of builtins (Int64 <: int, Binary <: bytes,
    # Code <: str) must be matched before the builtins.
    if isinstance(value, ObjectId):
        return ObjectIdValue(str(value))
    if isinstance(value, Int64):
        return Int64Value(int(value))
    if isinstance(value, Decimal128):
        return DecimalValue(str(value))
    if isinstance(value, Timestamp):
        return TimestampValue(time=value.time, inc=value.inc)
    if isinstance(value, Binary):
        return BinaryValue(data=bytes(value), subtype=value.subtype)
    if isinstance(value, uuid.UUID):
        return BinaryValue(data=value.bytes, subtype=_UUID_SUBTYPE)
    if isinstance(value, MinKey):
        return MinKeyValue()
    if isinstance(value, MaxKey):
        return MaxKeyValue()
    if isinstance(value, Regex):
        return RegexValue(pattern=str(value.pattern), flags=regex_flags_to_str(value.flags))
    if isinstance(value, Code):
        scope = from_bson(value.scope) if value.scope is not None else None
        return JavaScriptValue(code=str(value), scope=scope)
    if isinstance(value, DBRef):
        namespace = f"{value.database}.{value.collection}" if value.database else value.collection
        return DBPointerValue(namespace=namespace, oid=str(value.id))
    if isinstance(value, DatetimeMS):
        try:
            return value.as_datetime()
        except (InvalidBSON, OverflowError, ValueError):
            # Outside the range of datetime; keep the epoch milliseconds
            return Int64Value(int(value))
    if isinstance(value, dt.datetime):
        return value
    if isinstance(value, Mapping):
        return {key: from_bson(child) for key, child in value.items()}
    if isinstance(value, (list, tuple)):
        return [from_bson(child) for child in value]
    return value


def from_extended_json(text: str) -> Any:
    """
    Parse MongoDB Extended JSON (canonical or relaxed) into the core model.

    Example:
        >>> from_extended_json('{"n": {"$numberLong": "5"}}')
        {'n': Int64Value(value=5)}
    """
    return from_bson(json_util.loads(text))
