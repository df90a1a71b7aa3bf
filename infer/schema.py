"""Per-field schema records produced by aggregation."""
from dataclasses import dataclass, field
from typing import Any, Optional

from common.bson_types import BsonType
from redact.masker import RedactedExample
from .stats import FieldStats


@dataclass(frozen=True)
class FieldSchema:
    """
    Observed schema of one field path across a document sample.

    present_count counts distinct documents that contain the path, so
    present_count + absent_count always equals the number of sampled
    documents, even for paths below arrays.
    """

    path: str
    present_ratio: float
    present_count: int
    absent_count: int
    type_ratio: dict[BsonType, float]
    type_counts: dict[BsonType, int]
    examples: list[RedactedExample] = field(default_factory=list)
    stats: Optional[FieldStats] = None
    optional: bool = False
    mixed_type: bool = False
    hints: list[str] = field(default_factory=list)

    @property
    def total_docs(self) -> int:
        return self.present_count + self.absent_count

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys used in persisted schema output."""
        return {
            "path": self.path,
            "presentRatio": self.present_ratio,
            "presentCount": self.present_count,
            "absentCount": self.absent_count,
            "typeRatio": {t.value: r for t, r in self.type_ratio.items()},
            "typeCounts": {t.value: c for t, c in self.type_counts.items()},
            "examples": [e.to_dict() for e in self.examples],
            "stats": self.stats.to_dict() if self.stats else None,
            "optional": self.optional,
            "mixedType": self.mixed_type,
            "hints": list(self.hints),
        }
