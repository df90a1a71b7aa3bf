"""
Logging filter that scrubs PII-shaped substrings from log messages.

Attach it to a handler so messages that accidentally embed document values
never reach the log sink verbatim:

    handler = logging.StreamHandler()
    handler.addFilter(RedactingFilter())
"""
import logging
import re

REDACTED = "[REDACTED]"

# Order matters: longer digit runs are replaced before shorter ones
_REDACT_PATTERNS = [
    re.compile(r"eyJ[a-zA-Z0-9_-]+\.eyJ[a-zA-Z0-9_-]+\.[a-zA-Z0-9_-]+"),
    re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"),
    re.compile(r"\b\d{4}[-\s]?\d{4}[-\s]?\d{4}[-\s]?\d{4}\b"),
    re.compile(r"\b\d{3}-\d{2}-\d{4}\b"),
    re.compile(r"(?<![\w.])\+?\d{1,3}[-.\s]?\(?\d{2,4}\)?[-.\s]\d{3,4}[-.\s]\d{4}\b"),
]


def redact_message(message: str) -> str:
    """
    Replace email, phone, SSN, credit card and JWT shapes with [REDACTED].

    Example:
        >>> redact_message("lookup failed for jane@example.com")
        'lookup failed for [REDACTED]'
    """
    for pattern in _REDACT_PATTERNS:
        message = pattern.sub(REDACTED, message)
    return message


class RedactingFilter(logging.Filter):
    """Rewrites each record's message in place; never drops records."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_message(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True
