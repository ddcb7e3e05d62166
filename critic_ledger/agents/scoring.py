"""
Score Normalizer.

Converts native rating strings (letter grades, fractions, stars, plain
numbers, sentiment words) into the canonical 0-100 scale and derives the
sentiment bucket.
"""

import logging
import re
from typing import Optional

from critic_ledger.models.review import ReviewRecord
from critic_ledger.models.score import RatingParse
from critic_ledger.registry.rating_tables import (
    DESIGNATION_PATTERNS,
    PLACEHOLDER_PATTERNS,
    RatingTables,
    bucket_for,
)
from critic_ledger.utils.text import round_half_up

logger = logging.getLogger(__name__)

_NUMBER = r"(\d+(?:\.\d+)?)"

# Score stored by a source archive rather than read from a rating
ARCHIVE_SCORE_SOURCE = "source"

LETTER_PATTERN = re.compile(r"^(?:grade\s*:?\s*)?([A-DF][+-]?)$", re.IGNORECASE)
LETTER_RANGE_PATTERN = re.compile(r"^([A-DF][+-]?)\s*(?:/|to)\s*([A-DF][+-]?)$", re.IGNORECASE)
FRACTION_PATTERN = re.compile(
    rf"^{_NUMBER}\s*(?:/|out\s+of)\s*{_NUMBER}\s*(?:stars?)?$", re.IGNORECASE
)
STARS_PATTERN = re.compile(rf"^{_NUMBER}\s*stars?$", re.IGNORECASE)
UNICODE_STARS_PATTERN = re.compile(r"^([★☆]{1,10})$")
NUMBER_PATTERN = re.compile(rf"^{_NUMBER}$")
SENTIMENT_PATTERN = re.compile(r"^(rave|positive|mixed|negative|pan)[.!]?$", re.IGNORECASE)


def parse_rating(text: Optional[str], tables: RatingTables) -> RatingParse:
    """
    Read an original rating string.

    Non-ratings (missing, placeholder, designation) are recognized first, then
    formats are tried in order: letter grade, fraction, stars, plain number,
    sentiment word. The first format that matches decides the result.

    Args:
        text: Verbatim rating from the source, e.g. "3.5/5", "B+", "Rave"
        tables: Rating tables

    Returns:
        RatingParse with a score for rating kinds, None otherwise
    """
    if text is None or not str(text).strip():
        return RatingParse("missing")

    rating = " ".join(str(text).split())

    if any(p.search(rating) for p in PLACEHOLDER_PATTERNS):
        return RatingParse("placeholder", parsed_value=rating)

    if any(p.search(rating) for p in DESIGNATION_PATTERNS):
        return RatingParse("designation", parsed_value=rating)

    match = LETTER_PATTERN.match(rating)
    if match:
        grade = match.group(1).upper()
        if grade in tables.letter_grades:
            return RatingParse("letter", tables.letter_grades[grade], grade)

    match = LETTER_RANGE_PATTERN.match(rating)
    if match:
        low, high = match.group(1).upper(), match.group(2).upper()
        if low in tables.letter_grades and high in tables.letter_grades:
            average = (tables.letter_grades[low] + tables.letter_grades[high]) / 2
            return RatingParse("letter_range", round_half_up(average), f"{low}/{high}")

    match = FRACTION_PATTERN.match(rating)
    if match:
        return _fraction(float(match.group(1)), float(match.group(2)), "fraction")

    match = STARS_PATTERN.match(rating)
    if match:
        return _fraction(float(match.group(1)), 5.0, "stars")

    match = UNICODE_STARS_PATTERN.match(rating)
    if match:
        stars = match.group(1)
        return _fraction(float(stars.count("★")), float(len(stars)), "stars")

    match = NUMBER_PATTERN.match(rating)
    if match:
        value = float(match.group(1))
        if value <= 10:
            return _checked(round_half_up(value * 10), "numeric", f"{_fmt(value)}/10")
        return _checked(round_half_up(value), "numeric", _fmt(value))

    match = SENTIMENT_PATTERN.match(rating)
    if match:
        bucket = match.group(1).capitalize()
        return RatingParse("sentiment", tables.representative_scores[bucket], bucket)

    return RatingParse("unparseable", parsed_value=rating)


def normalize_score(text: Optional[str], tables: RatingTables) -> Optional[int]:
    """Canonical 0-100 score for a rating string, or None if it carries none."""
    return parse_rating(text, tables).score


def _fraction(numerator: float, denominator: float, kind: str) -> RatingParse:
    parsed = f"{_fmt(numerator)}/{_fmt(denominator)}"
    if denominator <= 0:
        return RatingParse("unparseable", parsed_value=parsed)
    return _checked(round_half_up(numerator * 100 / denominator), kind, parsed)


def _checked(score: int, kind: str, parsed: str) -> RatingParse:
    # Out-of-scale values are rejected, never clamped
    if not (0 <= score <= 100):
        return RatingParse("out_of_range", parsed_value=parsed)
    return RatingParse(kind, score, parsed)


def _fmt(value: float) -> str:
    return str(int(value)) if value == int(value) else str(value)


class ScoreNormalizer:
    """
    Attaches canonical score and bucket to records.

    A parseable rating always wins. Without one, an existing score (from the
    source archive or the external scorer) is kept as is; it is never reset
    to a default value. A placeholder rating ("Sentiment: Positive", "N/A")
    means the archive never had a real rating, so an archived score next to
    it is dropped. Scores with any other source are kept.
    """

    def __init__(self, tables: RatingTables):
        self.tables = tables

    def parse(self, text: Optional[str]) -> RatingParse:
        return parse_rating(text, self.tables)

    def bucket_for(self, score: Optional[int]) -> Optional[str]:
        return bucket_for(score, self.tables)

    def apply_to_record(self, record: ReviewRecord) -> RatingParse:
        """
        Normalize a record's score in place.

        Args:
            record: Record to update

        Returns:
            The RatingParse of its original rating (for unresolved reporting)
        """
        parsed = self.parse(record.original_rating_text)

        if parsed.is_scored:
            record.canonical_score = parsed.score
            record.score_source = "sentiment" if parsed.kind == "sentiment" else "rating"

        if (
            parsed.kind == "placeholder"
            and record.canonical_score is not None
            and record.score_source == ARCHIVE_SCORE_SOURCE
        ):
            logger.info(
                f"Dropping archived score {record.canonical_score} for {record.identity_key}: "
                f"rating '{record.original_rating_text}' is a placeholder"
            )
            record.canonical_score = None
            record.score_source = None

        if parsed.kind == "designation" and not record.designation:
            record.designation = parsed.parsed_value

        record.bucket = self.bucket_for(record.canonical_score)

        if parsed.is_unresolved:
            logger.debug(
                f"Unresolved rating for {record.identity_key}: "
                f"'{record.original_rating_text}' ({parsed.kind})"
            )

        return parsed


# Design Rationale and Trade-offs:
#
# 1. Why regex patterns in a fixed order instead of a parser library?
#    - Rating strings are short and come in a small set of shapes
#    - Order decides ambiguous cases ("B+/A-" is a range, "3/5" a fraction)
#    - Trade-off: A new format needs a new pattern
#
# 2. Why reject scores above 100 instead of clamping?
#    - "7 stars" on a 5-star scale is a data error, not a rave
#    - Trade-off: The record stays unscored until fixed
#
# 3. Why round half up instead of Python's round?
#    - round() rounds to even, so 62.5 and 63.5 both land on even numbers
#    - Trade-off: Needs a helper instead of a builtin
#
# 4. Why drop an archived score beside a placeholder rating?
#    - Archives stored 50 for "Sentiment: positive", which reads as a Negative review
#    - Only the archive score is dropped, every other score source is kept
#    - Trade-off: Some records lose a score until the scorer fills it
