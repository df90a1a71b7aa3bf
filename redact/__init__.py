"""
docshape redact - PII hints and value masking for schema examples.

Example:
    >>> from redact import detect_pii, mask
    >>>
    >>> detect_pii("contact.email", "ann@example.com")
    ['email']
    >>> mask("ann@example.com", "contact.email").value
    'a***@e***.com'
"""
from .detector import (
    PII_WARNINGS,
    detect_pii,
    get_pii_warning,
    has_pii,
    is_pii_field,
    match_custom_pattern,
)
from .masker import (
    RedactMode,
    RedactPolicy,
    RedactedExample,
    mask,
    mask_email,
    mask_number,
    mask_phone,
    mask_string,
)

__all__ = [
    'PII_WARNINGS',
    'detect_pii',
    'get_pii_warning',
    'has_pii',
    'is_pii_field',
    'match_custom_pattern',
    'RedactMode',
    'RedactPolicy',
    'RedactedExample',
    'mask',
    'mask_email',
    'mask_number',
    'mask_phone',
    'mask_string',
]
