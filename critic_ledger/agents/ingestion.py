"""
Ingestion Agent.

Turns raw review dicts from heterogeneous sources (direct scrapes,
aggregator archives, previously published corpus files) into ReviewRecords.
No normalization happens here beyond field mapping and blank handling.
"""

import logging
import re
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from critic_ledger.models.review import SCORE_SOURCES, ReviewRecord
from critic_ledger.utils.text import blank_to_none, round_half_up

logger = logging.getLogger(__name__)

# Per-source excerpt and thumb fields found in aggregator exports
EXCERPT_FIELDS = {
    "dtliExcerpt": "dtli",
    "bwwExcerpt": "bww",
    "showScoreExcerpt": "show-score",
}
THUMB_FIELDS = {
    "dtliThumb": "dtli",
    "bwwThumb": "bww",
}

DATE_FORMATS = ("%Y-%m-%d", "%B %d, %Y", "%b %d, %Y", "%b. %d, %Y", "%m/%d/%Y", "%d %B %Y")
_ISO_PREFIX = re.compile(r"^(\d{4}-\d{2}-\d{2})[T ]")


def normalize_date(value) -> Optional[str]:
    """
    Parse a publish date into YYYY-MM-DD.

    Args:
        value: "2024-03-05", "2024-03-05T19:00:00Z", "March 5, 2024", ...

    Returns:
        Normalized date, or None if missing or unreadable
    """
    text = blank_to_none(value)
    if text is None:
        return None

    match = _ISO_PREFIX.match(text)
    if match:
        text = match.group(1)

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).strftime("%Y-%m-%d")
        except ValueError:
            continue

    logger.debug(f"Unreadable publish date '{text}'")
    return None


def _first(raw: dict, *keys):
    for key in keys:
        value = raw.get(key)
        if isinstance(value, str):
            value = blank_to_none(value)
        if value is not None:
            return value
    return None


def _to_score(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return round_half_up(float(value))
    except (TypeError, ValueError):
        logger.debug(f"Ignoring non-numeric score {value!r}")
        return None


def _thumb(value) -> Optional[str]:
    text = blank_to_none(value)
    return text.capitalize() if text else None


class IngestionAgent:
    """
    Maps raw source dicts onto the ReviewRecord model.

    Accepts aggregator exports (originalRating, assignedScore, dtliExcerpt,
    thumb, sources, ...) as well as the engine's own serialized output, so a
    published corpus can be fed back in.
    """

    def __init__(self, default_source: Optional[str] = None):
        """
        Initialize ingestion agent.

        Args:
            default_source: Provenance tag for records that carry none
        """
        self.default_source = default_source
        logger.info(f"Initialized IngestionAgent (default source: {default_source or 'none'})")

    def ingest(self, raw_records: Iterable[dict]) -> Tuple[List[ReviewRecord], List[Tuple[int, str]]]:
        """
        Convert a batch of raw records.

        Args:
            raw_records: Raw review dicts

        Returns:
            (records, failures) where failures are (input position, error message)
        """
        records = []
        failures = []

        for position, raw in enumerate(raw_records):
            try:
                records.append(self.to_record(raw))
            except (KeyError, TypeError, ValueError) as e:
                logger.error(f"Skipping raw record #{position}: {e}")
                failures.append((position, str(e)))

        logger.info(f"Ingested {len(records)} records ({len(failures)} rejected)")
        return records, failures

    def to_record(self, raw: dict) -> ReviewRecord:
        """
        Convert one raw dict.

        Raises:
            TypeError: If raw is not a dict
            ValueError: If the record has no show id
        """
        if not isinstance(raw, dict):
            raise TypeError(f"Expected a dict, got {type(raw).__name__}")

        show_id = _first(raw, "showId", "show_id")
        if not show_id:
            raise ValueError("Raw record has no showId")

        score, score_source = self._score(raw)
        llm_score, llm_confidence = self._llm_score(raw)
        excerpts = self._excerpts(raw)
        thumbs = self._thumbs(raw)

        record = ReviewRecord(
            show_id=str(show_id),
            outlet_id=_first(raw, "outletId", "outlet_id"),
            outlet_display_name=_first(raw, "outlet", "outletName"),
            critic_name=_first(raw, "criticName", "critic") or "unknown",
            url=_first(raw, "url"),
            publish_date=normalize_date(_first(raw, "publishDate", "date")),
            original_rating_text=self._rating_text(raw),
            canonical_score=score,
            score_source=score_source,
            full_text=_first(raw, "fullText", "full_text"),
            excerpts=excerpts,
            thumbs=thumbs,
            llm_score=llm_score,
            llm_confidence=llm_confidence,
            designation=_first(raw, "designation")
        )

        for source in self._provenance(raw):
            record.add_provenance(source)
        for source in sorted(set(excerpts) | set(thumbs)):
            record.add_provenance(source)

        return record

    @staticmethod
    def _rating_text(raw: dict) -> Optional[str]:
        value = _first(raw, "originalRatingText", "originalRating", "originalScore", "rating")
        return None if value is None else str(value)

    @staticmethod
    def _score(raw: dict) -> Tuple[Optional[int], Optional[str]]:
        score = _to_score(_first(raw, "canonicalScore", "assignedScore"))
        if score is None:
            return None, None

        source = _first(raw, "scoreSource")
        return score, source if source in SCORE_SOURCES else "source"

    @staticmethod
    def _llm_score(raw: dict) -> Tuple[Optional[int], Optional[str]]:
        value = raw.get("llmScore")
        if isinstance(value, dict):
            return _to_score(value.get("score")), blank_to_none(value.get("confidence"))
        return _to_score(value), blank_to_none(raw.get("llmConfidence"))

    def _excerpts(self, raw: dict) -> Dict[str, str]:
        excerpts = {}
        for source, text in (raw.get("excerpts") or {}).items():
            text = blank_to_none(text)
            if text:
                excerpts[source] = text
        for key, source in EXCERPT_FIELDS.items():
            text = blank_to_none(raw.get(key))
            if text and source not in excerpts:
                excerpts[source] = text
        return excerpts

    def _thumbs(self, raw: dict) -> Dict[str, str]:
        thumbs = {}
        for source, value in (raw.get("thumbs") or {}).items():
            thumb = _thumb(value)
            if thumb:
                thumbs[source] = thumb
        for key, source in THUMB_FIELDS.items():
            thumb = _thumb(raw.get(key))
            if thumb and source not in thumbs:
                thumbs[source] = thumb

        # A bare "thumb" belongs to whichever source supplied the record
        thumb = _thumb(raw.get("thumb"))
        if thumb:
            sources = self._provenance(raw)
            thumbs.setdefault(sources[0] if sources else "source", thumb)
        return thumbs

    def _provenance(self, raw: dict) -> List[str]:
        sources = []
        for value in (raw.get("provenance") or raw.get("sources") or []):
            tag = blank_to_none(value)
            if tag and tag not in sources:
                sources.append(tag)

        single = blank_to_none(raw.get("source"))
        if single and single not in sources:
            sources.append(single)

        if not sources and self.default_source:
            sources.append(self.default_source)
        return sources


# Design Rationale and Trade-offs:
#
# 1. Why map every known source field name here instead of per-source readers?
#    - Archives, scrapes and published corpus files share most fields
#    - A published corpus reads back through the same path, so re-runs are stable
#    - Trade-off: One field alias table that grows with every new source
#
# 2. Why no normalization beyond blanks and dates?
#    - Later stages must see what the source actually said
#    - Trade-off: Downstream stages handle raw outlet and critic strings
#
# 3. Why keep an archived score with source "source"?
#    - The score normalizer decides whether to trust it against the rating text
#    - Trade-off: A wrong archive score survives when the rating text is missing
