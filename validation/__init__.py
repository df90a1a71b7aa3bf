"""
Docshape Validation - inference options and their validation.

Options are validated as a whole before any document is traversed; every
violation is reported in a single ConfigError and nothing is clamped.
"""
from .validator import OptionsValidator, ValidationResult, REDACT_MODES, REDACT_POLICIES
from .options import InferenceOptions, load_options, read_env_options, ENV_PREFIX

__all__ = [
    'OptionsValidator',
    'ValidationResult',
    'REDACT_MODES',
    'REDACT_POLICIES',
    'InferenceOptions',
    'load_options',
    'read_env_options',
    'ENV_PREFIX',
]
