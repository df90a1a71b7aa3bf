"""
Option validation.

Collects every configuration problem into a ValidationResult instead of
stopping at the first one, so a single ConfigError can report them all.
Values are never clamped into range.
"""
import logging
from dataclasses import dataclass, field
from typing import Any

from common.errors import ConfigError
from common.paths import split_path
from flatten.limits import LIMIT_RANGES, check_limit

logger = logging.getLogger(__name__)

REDACT_POLICIES = ("all", "pii", "off")
REDACT_MODES = ("strict", "balanced")


@dataclass
class ValidationResult:
    """Result of a validation operation."""
    success: bool
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)
        self.success = False

    def merge(self, other: "ValidationResult") -> None:
        for msg in other.warnings:
            self.add_warning(msg)
        for msg in other.errors:
            self.add_error(msg)

    def raise_for_errors(self) -> None:
        """Log warnings, then raise ConfigError if any error was recorded."""
        for msg in self.warnings:
            logger.warning(f"Configuration warning: {msg}")
        if self.errors:
            raise ConfigError(
                f"Invalid configuration: {'; '.join(self.errors)}", self.errors
            )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class OptionsValidator:
    """
    Validates inference options.

    Works on any object exposing the InferenceOptions attribute names, so it
    can check options before they are assembled into a dataclass.

    Example:
        >>> result = OptionsValidator().validate(options)
        >>> result.errors
        ['max_depth must be between 1 and 100, got 0']
    """

    def validate(self, options: Any) -> ValidationResult:
        """
        Check every option and return the combined result.

        Args:
            options: InferenceOptions (or a look-alike).

        Returns:
            ValidationResult; success is False when any error was found.
        """
        result = ValidationResult(success=True)

        for name in LIMIT_RANGES:
            for msg in check_limit(name, getattr(options, name)):
                result.add_error(msg)

        self._check_threshold(options.optional_threshold, result)
        for name in ("examples_per_type", "variant_top_n", "concurrency"):
            self._check_positive(name, getattr(options, name), result)

        if options.redact not in REDACT_POLICIES:
            result.add_error(
                f"redact must be one of {', '.join(REDACT_POLICIES)}, got {options.redact!r}"
            )
        if options.redact_mode not in REDACT_MODES:
            result.add_error(
                f"redact_mode must be one of {', '.join(REDACT_MODES)}, got {options.redact_mode!r}"
            )

        result.merge(self.validate_pii_patterns(options.pii_patterns))
        return result

    def validate_pii_patterns(self, patterns: Any) -> ValidationResult:
        """Custom patterns must be strings; empty or duplicate ones only warn."""
        result = ValidationResult(success=True)
        if isinstance(patterns, str):
            result.add_error("pii_patterns must be a list of strings, not a single string")
            return result

        seen = set()
        for pattern in patterns or ():
            if not isinstance(pattern, str):
                result.add_error(f"pii_patterns entries must be strings, got {type(pattern).__name__}")
                continue
            base = pattern[:-2] if pattern.endswith(".*") else pattern
            if not split_path(base):
                result.add_warning(f"PII pattern {pattern!r} has an empty prefix and matches nothing")
            key = pattern.lower()
            if key in seen:
                result.add_warning(f"Duplicate PII pattern {pattern!r}")
            seen.add(key)

        return result

    def _check_threshold(self, value: Any, result: ValidationResult) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            result.add_error(f"optional_threshold must be a number, got {type(value).__name__}")
        elif not 0 <= value <= 1:
            result.add_error(f"optional_threshold must be between 0 and 1, got {value}")

    def _check_positive(self, name: str, value: Any, result: ValidationResult) -> None:
        if not _is_int(value):
            result.add_error(f"{name} must be an integer, got {type(value).__name__}")
        elif value <= 0:
            result.add_error(f"{name} must be greater than 0, got {value}")
