"""Exception types raised by docshape."""
from typing import Optional


class DocshapeError(Exception):
    """Base class for all docshape errors."""


class ConfigError(DocshapeError, ValueError):
    """
    Raised when inference options are out of range or malformed.

    Configuration is checked before any document is traversed; values are
    never clamped into range.

    Attributes:
        errors: Individual violation messages.
    """

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.errors = list(errors) if errors else [message]
