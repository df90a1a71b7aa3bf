"""Resource limits applied while flattening a single document."""
from dataclasses import asdict, dataclass

from common.errors import ConfigError

# Inclusive (low, high) bounds for each limit.
LIMIT_RANGES = {
    "max_depth": (1, 100),
    "max_keys_per_doc": (1, 10000),
    "max_array_sample": (1, 1000),
}


def check_limit(name: str, value: object) -> list[str]:
    """Return violation messages for one limit value (empty when valid)."""
    low, high = LIMIT_RANGES[name]
    if isinstance(value, bool) or not isinstance(value, int):
        return [f"{name} must be an integer, got {type(value).__name__}"]
    if value < low or value > high:
        return [f"{name} must be between {low} and {high}, got {value}"]
    return []


@dataclass(frozen=True)
class FlattenLimits:
    """
    Depth, key and array-sample limits for one flatten() call.

    Out-of-range values raise ConfigError at construction time.

    Attributes:
        max_depth: Deepest nesting level traversed; deeper subtrees are
            replaced by a single "<path>.[TRUNCATED]" marker.
        max_keys_per_doc: Maximum number of path values recorded per document.
        max_array_sample: Leading array elements inspected per array.
    """

    max_depth: int = 20
    max_keys_per_doc: int = 2000
    max_array_sample: int = 50

    def __post_init__(self):
        errors = []
        for name in LIMIT_RANGES:
            errors.extend(check_limit(name, getattr(self, name)))
        if errors:
            raise ConfigError("; ".join(errors), errors)

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


DEFAULT_LIMITS = FlattenLimits()
