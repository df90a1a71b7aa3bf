"""
BSON type taxonomy and value classification.

The core works on plain Python values (dict, list, str, int, float, bool,
None, datetime) plus a small closed family of tagged extended scalars for
BSON types that have no natural Python counterpart. Database drivers must
convert their own value types into this model first (see adapters/), so
nothing here depends on a specific client library.

Tagged scalars are object-shaped but are always treated as leaves: the
flattener, the shape extractor and the masker never look inside them.

Example:
    >>> classify(42)
    <BsonType.INT: 'int'>
    >>> classify(2147483648)
    <BsonType.LONG: 'long'>
    >>> classify(ObjectIdValue("65a1f0c2e4b0a1b2c3d4e5f6"))
    <BsonType.OBJECT_ID: 'objectId'>
"""
import datetime as dt
import decimal
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Optional, Union

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


class BsonType(str, Enum):
    """Closed set of type tags. Values are the names used in persisted output."""

    DOUBLE = "double"
    STRING = "string"
    OBJECT = "object"
    ARRAY = "array"
    BIN_DATA = "binData"
    UNDEFINED = "undefined"
    OBJECT_ID = "objectId"
    BOOLEAN = "boolean"
    DATE = "date"
    NULL = "null"
    REGEX = "regex"
    DB_POINTER = "dbPointer"
    JAVASCRIPT = "javascript"
    SYMBOL = "symbol"
    JAVASCRIPT_WITH_SCOPE = "javascriptWithScope"
    INT = "int"
    TIMESTAMP = "timestamp"
    LONG = "long"
    DECIMAL = "decimal"
    MIN_KEY = "minKey"
    MAX_KEY = "maxKey"

    def __str__(self) -> str:
        return self.value


NUMERIC_TYPES = frozenset({BsonType.INT, BsonType.LONG, BsonType.DOUBLE, BsonType.DECIMAL})


class _Undefined:
    """Sentinel for the BSON undefined value (distinct from None/null)."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


# ======================================
# Tagged extended scalars
# ======================================

class ExtendedScalar:
    """
    Base for tagged values that classify by discriminator, not by shape.

    Subclasses set ``bson_type`` (the classification tag) and ``type_name``
    (the label shown in masked placeholders such as "[Timestamp]").
    """

    bson_type: ClassVar[BsonType]
    type_name: ClassVar[str]


@dataclass(frozen=True)
class ObjectIdValue(ExtendedScalar):
    """12-byte document identifier, stored as 24 lowercase hex characters."""

    oid: str

    bson_type: ClassVar[BsonType] = BsonType.OBJECT_ID
    type_name: ClassVar[str] = "ObjectId"

    def hex(self) -> str:
        return self.oid.lower()

    def __str__(self) -> str:
        return self.hex()


@dataclass(frozen=True)
class Int64Value(ExtendedScalar):
    """Explicit 64-bit integer, regardless of magnitude."""

    value: int

    bson_type: ClassVar[BsonType] = BsonType.LONG
    type_name: ClassVar[str] = "Long"

    def as_number(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class DecimalValue(ExtendedScalar):
    """128-bit decimal, kept as its exact string form."""

    value: str

    bson_type: ClassVar[BsonType] = BsonType.DECIMAL
    type_name: ClassVar[str] = "Decimal128"

    def as_number(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TimestampValue(ExtendedScalar):
    """Internal replication timestamp: seconds since epoch plus an ordinal."""

    time: int
    inc: int

    bson_type: ClassVar[BsonType] = BsonType.TIMESTAMP
    type_name: ClassVar[str] = "Timestamp"

    def __str__(self) -> str:
        return f"Timestamp({self.time}, {self.inc})"


@dataclass(frozen=True)
class BinaryValue(ExtendedScalar):
    data: bytes
    subtype: int = 0

    bson_type: ClassVar[BsonType] = BsonType.BIN_DATA
    type_name: ClassVar[str] = "Binary"

    def hex(self) -> str:
        return self.data.hex()

    def __str__(self) -> str:
        return self.hex()


@dataclass(frozen=True)
class MinKeyValue(ExtendedScalar):
    bson_type: ClassVar[BsonType] = BsonType.MIN_KEY
    type_name: ClassVar[str] = "MinKey"

    def __str__(self) -> str:
        return "MinKey"


@dataclass(frozen=True)
class MaxKeyValue(ExtendedScalar):
    bson_type: ClassVar[BsonType] = BsonType.MAX_KEY
    type_name: ClassVar[str] = "MaxKey"

    def __str__(self) -> str:
        return "MaxKey"


@dataclass(frozen=True)
class RegexValue(ExtendedScalar):
    pattern: str
    flags: str = ""

    bson_type: ClassVar[BsonType] = BsonType.REGEX
    type_name: ClassVar[str] = "BSONRegExp"

    def __str__(self) -> str:
        return f"/{self.pattern}/{self.flags}"


@dataclass(frozen=True)
class JavaScriptValue(ExtendedScalar):
    """JavaScript code; a non-None scope makes it javascriptWithScope."""

    code: str
    scope: Optional[Mapping] = None

    type_name: ClassVar[str] = "Code"

    @property
    def bson_type(self) -> BsonType:  # type: ignore[override]
        if self.scope is not None:
            return BsonType.JAVASCRIPT_WITH_SCOPE
        return BsonType.JAVASCRIPT

    def __str__(self) -> str:
        return self.code


@dataclass(frozen=True)
class SymbolValue(ExtendedScalar):
    symbol: str

    bson_type: ClassVar[BsonType] = BsonType.SYMBOL
    type_name: ClassVar[str] = "BSONSymbol"

    def __str__(self) -> str:
        return self.symbol


@dataclass(frozen=True)
class DBPointerValue(ExtendedScalar):
    """Deprecated namespace + id reference (also used for DBRef)."""

    namespace: str
    oid: str

    bson_type: ClassVar[BsonType] = BsonType.DB_POINTER
    type_name: ClassVar[str] = "DBPointer"

    def __str__(self) -> str:
        return f"{self.namespace}:{self.oid}"


# ======================================
# Classification
# ======================================

def is_extended_scalar(value: Any) -> bool:
    return isinstance(value, ExtendedScalar)


def _classify_number(value: Union[int, float]) -> BsonType:
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return BsonType.DOUBLE
    if isinstance(value, float) and not value.is_integer():
        return BsonType.DOUBLE
    if INT32_MIN <= value <= INT32_MAX:
        return BsonType.INT
    return BsonType.LONG


def classify(value: Any) -> BsonType:
    """
    Map a value to its BSON type tag.

    Integral numbers inside the signed 32-bit range are Int, integral numbers
    outside it are Long, everything else numeric is Double. Tagged scalars
    report their own discriminator. Unknown objects classify as Undefined.

    Args:
        value: Any value from the core value model.

    Returns:
        The matching BsonType.
    """
    if value is None:
        return BsonType.NULL
    if value is UNDEFINED:
        return BsonType.UNDEFINED
    # bool is a subclass of int, so it must be checked first
    if isinstance(value, bool):
        return BsonType.BOOLEAN
    if isinstance(value, (int, float)):
        return _classify_number(value)
    if isinstance(value, decimal.Decimal):
        return BsonType.DECIMAL
    if isinstance(value, str):
        return BsonType.STRING
    if isinstance(value, ExtendedScalar):
        return value.bson_type
    if isinstance(value, (bytes, bytearray)):
        return BsonType.BIN_DATA
    if isinstance(value, (dt.datetime, dt.date)):
        return BsonType.DATE
    if isinstance(value, re.Pattern):
        return BsonType.REGEX
    if isinstance(value, (list, tuple)):
        return BsonType.ARRAY
    if isinstance(value, Mapping):
        return BsonType.OBJECT
    return BsonType.UNDEFINED


def is_numeric_type(bson_type: BsonType) -> bool:
    return bson_type in NUMERIC_TYPES


def is_leaf(value: Any) -> bool:
    """True for values the traversals never descend into."""
    return classify(value) not in (BsonType.OBJECT, BsonType.ARRAY)


def format_datetime(value: Union[dt.datetime, dt.date]) -> str:
    """
    Render a date as ISO-8601 UTC with millisecond precision.

    Naive datetimes are taken to be UTC, which is how BSON dates are decoded.

    Example:
        >>> format_datetime(dt.datetime(2024, 1, 15, 10, 30))
        '2024-01-15T10:30:00.000Z'
    """
    if not isinstance(value, dt.datetime):
        value = dt.datetime(value.year, value.month, value.day)
    if value.tzinfo is not None:
        value = value.astimezone(dt.timezone.utc).replace(tzinfo=None)
    millis = value.microsecond // 1000
    return f"{value.strftime('%Y-%m-%dT%H:%M:%S')}.{millis:03d}Z"
