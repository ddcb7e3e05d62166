"""
Rating tables.

The one authoritative letter-grade table, plus the bucket thresholds and
representative scores, bundled into an immutable RatingTables value that is
passed to every score normalizer call.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

import config.settings as settings
from critic_ledger.models.report import ConfigurationError
from critic_ledger.models.review import BUCKETS

# Letter grade -> canonical score. Do not copy this table elsewhere.
LETTER_GRADES = MappingProxyType({
    "A+": 97,
    "A": 93,
    "A-": 90,
    "B+": 87,
    "B": 83,
    "B-": 80,
    "C+": 77,
    "C": 73,
    "C-": 70,
    "D+": 67,
    "D": 60,
    "D-": 57,
    "F": 50,
})

# Rating text that is a label, not a rating
PLACEHOLDER_PATTERNS = (
    re.compile(r"^sentiment\s*:", re.IGNORECASE),
    re.compile(r"^(n/?a|none|null|tbd|tba|unknown|no\s+rating|not\s+rated|-+|\?+)$", re.IGNORECASE),
)

# Designations are bonuses, not base scores
DESIGNATION_PATTERNS = (
    re.compile(r"^recommended$", re.IGNORECASE),
    re.compile(r"^highly[\s_-]?recommended$", re.IGNORECASE),
    re.compile(r"^critics?'?s?[\s_-]?(pick|choice)$", re.IGNORECASE),
    re.compile(r"^must[\s_-]?see$", re.IGNORECASE),
    re.compile(r"^editor'?s?[\s_-]?choice$", re.IGNORECASE),
    re.compile(r"^essential$", re.IGNORECASE),
)


@dataclass(frozen=True)
class RatingTables:
    """Immutable scoring configuration."""
    letter_grades: Mapping[str, int]
    bucket_thresholds: Tuple[Tuple[str, int], ...]  # (bucket, inclusive min), descending
    representative_scores: Mapping[str, int]
    thumb_buckets: Mapping[str, str]

    def __post_init__(self):
        names = [name for name, _ in self.bucket_thresholds]
        if sorted(names) != sorted(BUCKETS):
            raise ConfigurationError(f"Bucket thresholds must cover exactly {BUCKETS}, got {names}")

        minimums = [minimum for _, minimum in self.bucket_thresholds]
        if minimums != sorted(minimums, reverse=True) or len(set(minimums)) != len(minimums):
            raise ConfigurationError("Bucket thresholds must be strictly descending")
        if minimums[-1] != 0:
            raise ConfigurationError("Lowest bucket threshold must be 0")

        for bucket, score in self.representative_scores.items():
            if bucket_for(score, self) != bucket:
                raise ConfigurationError(
                    f"Representative score {score} for '{bucket}' falls in another bucket"
                )

        for thumb, bucket in self.thumb_buckets.items():
            if bucket not in BUCKETS:
                raise ConfigurationError(f"Thumb '{thumb}' maps to unknown bucket '{bucket}'")

    @classmethod
    def default(cls) -> "RatingTables":
        return cls(
            letter_grades=LETTER_GRADES,
            bucket_thresholds=tuple(settings.BUCKET_THRESHOLDS),
            representative_scores=MappingProxyType(dict(settings.BUCKET_REPRESENTATIVE_SCORES)),
            thumb_buckets=MappingProxyType(dict(settings.THUMB_BUCKETS))
        )

    def bucket_index(self, bucket: str) -> int:
        """Position from the top (Rave = 0)."""
        return [name for name, _ in self.bucket_thresholds].index(bucket)

    def thumb_bucket(self, thumb: Optional[str]) -> Optional[str]:
        if not thumb:
            return None
        return self.thumb_buckets.get(thumb.strip().lower())


def bucket_for(score: Optional[int], tables: RatingTables) -> Optional[str]:
    """Threshold function: canonical score -> bucket (None stays None)."""
    if score is None:
        return None
    for bucket, minimum in tables.bucket_thresholds:
        if score >= minimum:
            return bucket
    return tables.bucket_thresholds[-1][0]


# Design Rationale and Trade-offs:
#
# 1. Why one letter grade table?
#    - Sources disagree on B+ (85 vs 88) and mixing them splits buckets
#    - Trade-off: Some archived grades move by a few points
#
# 2. Why treat placeholders and designations as non-ratings?
#    - "Sentiment: positive" and "Critics' Pick" carry no score on any scale
#    - Scoring them as 50 or 100 would skew every average
#    - Trade-off: More records reach the scorer or stay unscored
#
# 3. Why validate thresholds in __post_init__?
#    - Unordered thresholds would give overlapping buckets
#    - Trade-off: Custom tables fail at construction rather than mid-run
