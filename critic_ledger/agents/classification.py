"""
Content Classifier.

Decides how much trustworthy review text a record carries (its content tier)
and detects structural defects: wrong show, wrong production, multi-show
pages, paywall truncation and navigation junk. Annotates only, never deletes.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import config.settings as settings
from critic_ledger.models.review import (
    ContentTier,
    ReviewFlag,
    ReviewRecord,
    STRUCTURAL_FLAGS,
    check_tier_flags,
    order_flags,
)
from critic_ledger.utils.text import comparison_key, count_words

logger = logging.getLogger(__name__)


PAYWALL_PATTERNS = [
    re.compile(r"subscribe\s+to\s+(continue|read|keep|access)", re.IGNORECASE),
    re.compile(r"sign\s+in\s+to\s+(continue|read|keep|access|view)", re.IGNORECASE),
    re.compile(r"log\s+in\s+to\s+(continue|read|access|view)", re.IGNORECASE),
    re.compile(r"to\s+continue\s+reading", re.IGNORECASE),
    re.compile(r"for\s+subscribers\s+only", re.IGNORECASE),
    re.compile(r"unlock\s+(this\s+)?(story|article)", re.IGNORECASE),
    re.compile(r"already\s+a\s+(member|subscriber)\?", re.IGNORECASE),
    re.compile(r"create\s+(a\s+)?(free\s+)?account\s+to\s+(continue|read)", re.IGNORECASE),
    re.compile(r"verify\s+(that\s+)?you\s+are\s+(a\s+)?human", re.IGNORECASE),
    re.compile(r"(are\s+you\s+a\s+robot|press\s+(and|&)\s+hold)", re.IGNORECASE),
]

NAVIGATION_PATTERNS = [
    re.compile(r"privacy\s+policy", re.IGNORECASE),
    re.compile(r"terms\s+(of\s+)?(use|service)", re.IGNORECASE),
    re.compile(r"cookie\s+(policy|settings|preferences)", re.IGNORECASE),
    re.compile(r"related\s+(articles?|stories|posts)", re.IGNORECASE),
    re.compile(r"(popular|latest|trending)\s+(articles?|stories|posts|now)", re.IGNORECASE),
    re.compile(r"skip\s+to\s+(main\s+)?content", re.IGNORECASE),
    re.compile(r"all\s+rights\s+reserved", re.IGNORECASE),
    re.compile(r"(sign\s+up\s+for|subscribe\s+to)\s+(our\s+)?newsletter", re.IGNORECASE),
    re.compile(r"follow\s+us\s+on", re.IGNORECASE),
    re.compile(r"share\s+(on\s+)?(facebook|twitter|email)", re.IGNORECASE),
    re.compile(r"see\s+all\s+(articles?|stories|reviews)", re.IGNORECASE),
    re.compile(r"^\s*(home|about|contact|advertise|careers|faq|menu|search)\s*$", re.IGNORECASE | re.MULTILINE),
]

# Vocabulary of subjects a theater review is not about
UNRELATED_SUBJECT_PATTERNS = [
    re.compile(r"\bhorror\s+(film|movie|sequel)s?\b", re.IGNORECASE),
    re.compile(r"\b(the|this)\s+(film|movie)\b.{0,40}\b(director|screenplay|cinematograph\w*)\b", re.IGNORECASE),
    re.compile(r"\b(in\s+theaters|streaming\s+on|box\s+office\s+(report|numbers|results))\b", re.IGNORECASE),
    re.compile(r"\bmoviegoers?\b", re.IGNORECASE),
    re.compile(r"\bscreenplay\b", re.IGNORECASE),
    re.compile(r"\b(recipe|ingredients)\b", re.IGNORECASE),
    re.compile(r"\b(sports?\s+(news|scores)|election\s+results|weather\s+forecast)\b", re.IGNORECASE),
]

THEATER_KEYWORDS = (
    "broadway", "theater", "theatre", "musical", "stage", "playwright", "cast",
    "director", "choreograph", "audience", "intermission", "revival", "production",
    "staging", "ensemble", "lyrics", "score", "performance", "curtain call",
)

_TITLE_STOPWORDS = {"the", "and", "for", "a", "an", "of"}


@dataclass(frozen=True)
class ContentAssessment:
    """Classifier output for one record. Tier and flags are always a valid combination."""
    tier: ContentTier
    flags: Tuple[ReviewFlag, ...] = ()
    confidence: str = "high"  # "high", "medium", or "low"
    reason: str = ""
    word_count: int = 0
    signals: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "flags", order_flags(self.flags))
        check_tier_flags(self.tier, self.flags)

    @property
    def structural_flags(self) -> Tuple[ReviewFlag, ...]:
        return tuple(f for f in self.flags if f in STRUCTURAL_FLAGS)


class ContentClassifier:
    """
    Heuristic content tiering.

    Checks run in a fixed order: structural defects first (they make the
    text unusable regardless of length), then paywall truncation, then
    word count.
    """

    def __init__(
        self,
        min_complete_words: int = settings.MIN_COMPLETE_WORDS,
        min_substantive_ratio: float = settings.MIN_SUBSTANTIVE_RATIO,
        min_navigation_matches: int = settings.MIN_NAVIGATION_MATCHES,
        multi_show_min_titles: int = settings.MULTI_SHOW_MIN_TITLES,
        wrong_production_max_years: int = settings.WRONG_PRODUCTION_MAX_YEARS_BEFORE
    ):
        self.min_complete_words = min_complete_words
        self.min_substantive_ratio = min_substantive_ratio
        self.min_navigation_matches = min_navigation_matches
        self.multi_show_min_titles = multi_show_min_titles
        self.wrong_production_max_years = wrong_production_max_years

    def classify(
        self,
        record: ReviewRecord,
        show_title: str,
        other_titles: Sequence[str] = (),
        show_year: Optional[int] = None
    ) -> ContentAssessment:
        """
        Assess a record's text.

        Args:
            record: Record to assess (not modified)
            show_title: Title of the production the record claims to review
            other_titles: Titles of other productions, for multi-show pages
            show_year: Year the production opened, for wrong-production checks

        Returns:
            ContentAssessment
        """
        flags: List[ReviewFlag] = []
        signals: List[str] = []

        if self._is_wrong_production(record.publish_date, show_year):
            flags.append(ReviewFlag.WRONG_PRODUCTION)
            signals.append(f"published {record.publish_date}, production year {show_year}")

        text = (record.full_text or "").strip()
        excerpts = [e for e in record.excerpts.values() if e and e.strip()]

        if not text or self._is_copied_excerpt(text, excerpts):
            if flags:
                return self._invalid(flags, signals, 0, "high")
            if excerpts:
                return ContentAssessment(
                    tier=ContentTier.EXCERPT,
                    reason=f"{len(excerpts)} aggregator excerpt(s), no scraped body",
                    word_count=sum(count_words(e) for e in excerpts)
                )
            return ContentAssessment(tier=ContentTier.STUB, reason="No text of any kind")

        word_count = count_words(text)

        nav_matches, substantive_ratio = self._navigation_profile(text)
        if nav_matches >= self.min_navigation_matches and substantive_ratio < self.min_substantive_ratio:
            flags.append(ReviewFlag.NAVIGATION_JUNK)
            signals.append(f"{nav_matches} boilerplate patterns, {substantive_ratio:.0%} substantive")

        mentioned = self._other_titles_mentioned(text, show_title, other_titles)
        if len(mentioned) >= self.multi_show_min_titles:
            flags.append(ReviewFlag.MULTI_SHOW_REVIEW)
            signals.append(f"mentions {', '.join(mentioned[:5])}")

        title_found = self._title_mentioned(text, show_title)
        unrelated = self._unrelated_subject(text)
        if not title_found and unrelated:
            flags.append(ReviewFlag.WRONG_SHOW)
            signals.append(f"title '{show_title}' absent, unrelated subject: '{unrelated}'")

        paywall = self._paywall_marker(text)
        if paywall:
            flags.append(ReviewFlag.TRUNCATED_BY_PAYWALL)
            signals.append(f"paywall marker: '{paywall}'")

        if any(f in STRUCTURAL_FLAGS for f in flags):
            structural = sum(1 for f in flags if f in STRUCTURAL_FLAGS)
            confidence = "high" if structural >= 2 or ReviewFlag.WRONG_PRODUCTION in flags else "medium"
            return self._invalid(flags, signals, word_count, confidence)

        if paywall:
            return ContentAssessment(
                tier=ContentTier.TRUNCATED,
                flags=tuple(flags),
                reason=f"Paywall/bot-block marker present ({word_count} words)",
                word_count=word_count,
                signals=tuple(signals)
            )

        if word_count >= self.min_complete_words:
            return ContentAssessment(
                tier=ContentTier.COMPLETE,
                confidence="high" if title_found else "medium",
                reason=f"{word_count} words, no truncation markers",
                word_count=word_count
            )

        return ContentAssessment(
            tier=ContentTier.TRUNCATED,
            confidence="medium",
            reason=f"Only {word_count} words (complete needs {self.min_complete_words})",
            word_count=word_count
        )

    def apply_to_record(self, record: ReviewRecord, assessment: ContentAssessment) -> ReviewRecord:
        record.content_tier = assessment.tier
        record.flags = assessment.flags
        return record

    def _invalid(self, flags, signals, word_count: int, confidence: str) -> ContentAssessment:
        return ContentAssessment(
            tier=ContentTier.INVALID,
            flags=tuple(flags),
            confidence=confidence,
            reason="; ".join(signals),
            word_count=word_count,
            signals=tuple(signals)
        )

    def _is_wrong_production(self, publish_date: Optional[str], show_year: Optional[int]) -> bool:
        if not publish_date or not show_year or not publish_date[:4].isdigit():
            return False
        return int(publish_date[:4]) < show_year - self.wrong_production_max_years

    @staticmethod
    def _is_copied_excerpt(text: str, excerpts: List[str]) -> bool:
        """A 'full text' that is just an aggregator quote is an excerpt."""
        body = comparison_key(text)
        return any(body == comparison_key(e) for e in excerpts)

    @staticmethod
    def _paywall_marker(text: str) -> Optional[str]:
        for pattern in PAYWALL_PATTERNS:
            match = pattern.search(text)
            if match:
                return match.group(0)
        return None

    @staticmethod
    def _navigation_profile(text: str) -> Tuple[int, float]:
        """
        Count distinct boilerplate patterns, and the share of words that sit
        on substantive lines (not boilerplate, at least eight words long).
        """
        matches = sum(1 for p in NAVIGATION_PATTERNS if p.search(text))

        total = 0
        substantive = 0
        for line in text.splitlines():
            words = count_words(line)
            total += words
            if words >= 8 and not any(p.search(line) for p in NAVIGATION_PATTERNS):
                substantive += words

        ratio = substantive / total if total else 0.0
        return matches, ratio

    @staticmethod
    def _title_mentioned(text: str, show_title: str) -> bool:
        body = f" {comparison_key(text)} "
        title = comparison_key(show_title)
        if not title:
            return True

        if f" {title} " in body:
            return True

        without_article = comparison_key(show_title, strip_article=True)
        if len(without_article) > 3 and f" {without_article} " in body:
            return True

        # Long titles are often shortened: accept two significant title words
        words = [w for w in title.split() if len(w) > 3 and w not in _TITLE_STOPWORDS]
        if len(words) >= 2:
            return sum(1 for w in words if f" {w} " in body) >= 2
        return False

    @staticmethod
    def _other_titles_mentioned(text: str, show_title: str, other_titles: Sequence[str]) -> List[str]:
        body = f" {comparison_key(text)} "
        own = comparison_key(show_title)
        found = []
        for title in other_titles:
            key = comparison_key(title)
            if len(key) < 4 or key == own or key in own:
                continue
            if f" {key} " in body and title not in found:
                found.append(title)
        return found

    @staticmethod
    def _unrelated_subject(text: str) -> Optional[str]:
        lower = text.lower()
        theater_hits = sum(1 for kw in THEATER_KEYWORDS if kw in lower)
        for pattern in UNRELATED_SUBJECT_PATTERNS:
            match = pattern.search(text)
            if match and theater_hits < 3:
                return match.group(0)
        return None


# Design Rationale and Trade-offs:
#
# 1. Why regex heuristics instead of an LLM classifier?
#    - Runs offline and gives the same answer on every run
#    - Trade-off: Unusual page layouts slip through or get flagged
#
# 2. Why annotate only, never delete?
#    - Deletion policy belongs to the quarantine gate
#    - Trade-off: Invalid records travel one stage further
#
# 3. Why treat a full text equal to an aggregator quote as an excerpt?
#    - Scrapers sometimes save the quote as the article body
#    - Trade-off: A genuinely one-sentence review is marked as an excerpt
#
# 4. Why a year window for wrong-production detection?
#    - Reviews of a previous run of the same title share the show id prefix
#    - Preview coverage is published up to a year before opening
#    - Trade-off: Records without a publish date are never flagged
