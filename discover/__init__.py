"""
Docshape Discover - document shape variants and diffs.

Groups sampled documents by structural shape, ranks the resulting variants
and describes how each one differs from the most common shape.

Example:
    >>> from discover import VariantAnalyzer, format_diff
    >>>
    >>> analyzer = VariantAnalyzer()
    >>> variants = analyzer.analyze(documents, top_n=10)
    >>> for v in variants:
    ...     print(v.signature, v.count, format_diff(v.diff))
"""
from .variants import (
    Variant,
    VariantAnalyzer,
    analyze_variants,
    extract_shape_paths,
    generate_signature,
)
from .differ import VariantDiff, calculate_similarity, diff_paths, format_diff
from .similarity import (
    SimilarityStrategy,
    JaccardPathSimilarity,
    WeightedJaccardSimilarity,
    ExactMatchSimilarity,
)

__all__ = [
    'Variant',
    'VariantAnalyzer',
    'analyze_variants',
    'extract_shape_paths',
    'generate_signature',
    'VariantDiff',
    'calculate_similarity',
    'diff_paths',
    'format_diff',
    'SimilarityStrategy',
    'JaccardPathSimilarity',
    'WeightedJaccardSimilarity',
    'ExactMatchSimilarity',
]
