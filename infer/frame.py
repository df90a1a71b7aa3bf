"""Tabular view of field schemas."""
from typing import Iterable

import numpy as np
import pandas as pd

from .analyzer import get_primary_type
from .schema import FieldSchema

FRAME_COLUMNS = [
    'path',
    'primary_type',
    'types',
    'present_ratio',
    'present_count',
    'optional',
    'mixed_type',
    'hints',
    'min',
    'max',
    'avg',
]


def schema_frame(fields: Iterable[FieldSchema]) -> pd.DataFrame:
    """
    Build a DataFrame with one row per field.

    Multi-valued columns (types, hints) are comma-joined strings; stats
    columns are NaN for non-numeric fields.

    Example:
        >>> df = schema_frame(schema.fields)
        >>> df[df['optional']][['path', 'present_ratio']]
    """
    rows = []
    for f in fields:
        primary = get_primary_type(f.type_counts)
        rows.append({
            'path': f.path,
            'primary_type': primary.value if primary else None,
            'types': ", ".join(t.value for t in f.type_counts),
            'present_ratio': f.present_ratio,
            'present_count': f.present_count,
            'optional': f.optional,
            'mixed_type': f.mixed_type,
            'hints': ", ".join(f.hints),
            'min': f.stats.min if f.stats else np.nan,
            'max': f.stats.max if f.stats else np.nan,
            'avg': f.stats.avg if f.stats else np.nan,
        })

    return pd.DataFrame(rows, columns=FRAME_COLUMNS)
