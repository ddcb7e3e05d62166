"""
Score data models.

Parsed native ratings and external scorer results.
"""

from dataclasses import dataclass
from typing import Optional

RATING_KINDS = (
    "missing",
    "placeholder",
    "designation",
    "letter",
    "letter_range",
    "fraction",
    "stars",
    "numeric",
    "sentiment",
    "out_of_range",
    "unparseable",
)

CONFIDENCE_LEVELS = ("high", "medium", "low")


@dataclass(frozen=True)
class RatingParse:
    """
    Result of reading one original rating string.
    score is None for every kind that does not carry a rating.
    """
    kind: str
    score: Optional[int] = None
    parsed_value: Optional[str] = None  # Normalized form, e.g. "3.5/5" or "B+"

    def __post_init__(self):
        if self.kind not in RATING_KINDS:
            raise ValueError(f"Invalid rating kind: {self.kind}")

    @property
    def is_scored(self) -> bool:
        return self.score is not None

    @property
    def is_unresolved(self) -> bool:
        """True when the text looked like a rating but could not be used."""
        return self.kind in ("unparseable", "out_of_range")


@dataclass(frozen=True)
class ScorerResult:
    """
    Response from the external scoring service.
    Only high/medium confidence results may set a record's canonical score.
    """
    score: int  # 0-100
    confidence: str  # "high", "medium", or "low"

    def __post_init__(self):
        if not (0 <= self.score <= 100):
            raise ValueError(f"Invalid scorer score: {self.score}. Must be 0-100")

        if self.confidence not in CONFIDENCE_LEVELS:
            raise ValueError(
                f"Invalid confidence: {self.confidence}. Must be 'high', 'medium', or 'low'"
            )


# Design Rationale and Trade-offs:
#
# 1. Why a RatingParse result instead of returning an int or None?
#    - "no score" has several causes (placeholder, designation, out of range)
#    - The report needs the cause, the record needs only the score
#    - Trade-off: Callers unpack one more object
#
# 2. Why validate ScorerResult on construction?
#    - An LLM can return 140 or "very high" confidence
#    - Trade-off: A malformed response is dropped instead of clamped
