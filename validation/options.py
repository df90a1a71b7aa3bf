"""
Inference options.

InferenceOptions bundles every tunable of a schema inference run and
validates itself on construction. load_options() builds one from
DOCSHAPE_* environment variables (optionally read from a .env file).

Usage:
    from validation import load_options
    options = load_options(max_depth=10)
    print(options.limits.max_depth)
"""
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional, Union

from dotenv import load_dotenv

from flatten.limits import FlattenLimits
from redact.masker import RedactMode, RedactPolicy
from .validator import OptionsValidator, ValidationResult

if TYPE_CHECKING:
    from infer.aggregator import AggregateOptions

logger = logging.getLogger(__name__)

ENV_PREFIX = "DOCSHAPE_"


@dataclass
class InferenceOptions:
    """Every tunable of an inference run. Invalid values raise ConfigError."""
    max_depth: int = 20
    max_keys_per_doc: int = 2000
    max_array_sample: int = 50
    optional_threshold: float = 0.95
    examples_per_type: int = 3
    variant_top_n: int = 10
    redact: RedactPolicy = "pii"
    redact_mode: RedactMode = "balanced"
    pii_patterns: list[str] = field(default_factory=list)
    concurrency: int = 10

    def __post_init__(self):
        if isinstance(self.pii_patterns, tuple):
            self.pii_patterns = list(self.pii_patterns)
        OptionsValidator().validate(self).raise_for_errors()

    @property
    def limits(self) -> FlattenLimits:
        return FlattenLimits(
            max_depth=self.max_depth,
            max_keys_per_doc=self.max_keys_per_doc,
            max_array_sample=self.max_array_sample,
        )

    def aggregate_options(self, total_docs: int) -> "AggregateOptions":
        """Aggregation settings for a sample of total_docs documents."""
        from infer.aggregator import AggregateOptions

        return AggregateOptions(
            total_docs=total_docs,
            optional_threshold=self.optional_threshold,
            examples_per_type=self.examples_per_type,
            redact=self.redact,
            redact_mode=self.redact_mode,
            pii_patterns=tuple(self.pii_patterns),
        )


def _parse_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _parse_choice(raw: str) -> str:
    return raw.strip().lower()


# option name -> (parser, description used in error messages)
_ENV_PARSERS: dict[str, tuple[Callable[[str], object], str]] = {
    "max_depth": (int, "an integer"),
    "max_keys_per_doc": (int, "an integer"),
    "max_array_sample": (int, "an integer"),
    "optional_threshold": (float, "a number"),
    "examples_per_type": (int, "an integer"),
    "variant_top_n": (int, "an integer"),
    "redact": (_parse_choice, "a string"),
    "redact_mode": (_parse_choice, "a string"),
    "pii_patterns": (_parse_list, "a comma-separated list"),
    "concurrency": (int, "an integer"),
}


def env_name(option: str) -> str:
    return ENV_PREFIX + option.upper()


def read_env_options(result: ValidationResult) -> dict[str, object]:
    """
    Parse DOCSHAPE_* variables from os.environ.

    Unset or blank variables are skipped. A value that does not parse is
    recorded as an error on result; it never falls back to the default.
    """
    values = {}
    for option, (parser, expected) in _ENV_PARSERS.items():
        name = env_name(option)
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            continue
        try:
            values[option] = parser(raw.strip())
        except ValueError:
            result.add_error(f"{name} must be {expected}, got {raw!r}")
    return values


def load_options(
    env_path: Optional[Union[str, Path]] = None,
    **overrides,
) -> InferenceOptions:
    """
    Build validated InferenceOptions from the environment.

    Args:
        env_path: .env file to load first. When None, python-dotenv searches
            for one. Variables already set in the process win over the file.
        **overrides: Option values that take precedence over the environment.

    Returns:
        InferenceOptions.

    Raises:
        ConfigError: If any variable fails to parse, an override names an
            unknown option, or a resulting value is out of range.
    """
    load_dotenv(dotenv_path=env_path)

    result = ValidationResult(success=True)
    values = read_env_options(result)

    known = {f.name for f in fields(InferenceOptions)}
    for name in sorted(set(overrides) - known):
        result.add_error(f"Unknown option: {name}")

    result.raise_for_errors()

    values.update(overrides)
    options = InferenceOptions(**values)
    logger.debug(f"Loaded options: {options}")
    return options
