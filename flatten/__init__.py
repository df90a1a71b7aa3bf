"""
docshape flatten - Flatten documents into typed, escaped field paths.

Example:
    >>> from flatten import flatten, merge_flatten_results, FlattenLimits
    >>>
    >>> limits = FlattenLimits(max_depth=10)
    >>> results = [flatten(doc, i, limits) for i, doc in enumerate(documents)]
    >>> merged = merge_flatten_results(results)
    >>> merged.paths["items.[*].price"]
"""
from .flattener import Flattener, FlattenResult, PathValue, TruncationCounters, flatten
from .limits import DEFAULT_LIMITS, FlattenLimits
from .merger import merge_flatten_results, normalize_paths_to_wildcard

__all__ = [
    'Flattener',
    'FlattenResult',
    'PathValue',
    'TruncationCounters',
    'flatten',
    'FlattenLimits',
    'DEFAULT_LIMITS',
    'merge_flatten_results',
    'normalize_paths_to_wildcard',
]
