"""
Docshape - Observed-schema inference for schema-less document stores.

Installs as flat top-level packages:
    - flatten: Flatten documents into typed, escaped field paths
    - infer: Per-field aggregation and the collection pipeline
    - redact: PII hints and example masking
    - discover: Document shape variants and diffs
    - validation: Inference options and their validation
    - adapters: pymongo/bson value conversion
    - common: Path codec, type taxonomy and shared helpers

Example:
    >>> from adapters import from_bson
    >>> from infer import infer_collection
    >>> from validation import load_options
    >>> from discover import format_diff
"""
__version__ = "0.1.0"
