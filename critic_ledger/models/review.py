"""
Review record data model.

One critic's review of one production, after any amount of normalization.
Serialized with the camelCase field names used by the review data files.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

UNKNOWN = "unknown"

BUCKETS = ("Rave", "Positive", "Mixed", "Negative", "Pan")

SCORE_SOURCES = ("rating", "sentiment", "source", "llm", "thumb-override")


class ContentTier(str, Enum):
    """How much trustworthy review text a record carries."""
    COMPLETE = "complete"
    TRUNCATED = "truncated"
    EXCERPT = "excerpt"
    STUB = "stub"
    INVALID = "invalid"


class ReviewFlag(str, Enum):
    """Structural defects. Declaration order is the canonical flag order."""
    WRONG_SHOW = "wrong-show"
    WRONG_PRODUCTION = "wrong-production"
    MULTI_SHOW_REVIEW = "multi-show-review"
    TRUNCATED_BY_PAYWALL = "truncated-by-paywall"
    NAVIGATION_JUNK = "navigation-junk"


# Flags that mean the text is not a review of this production
STRUCTURAL_FLAGS = frozenset({
    ReviewFlag.WRONG_SHOW,
    ReviewFlag.WRONG_PRODUCTION,
    ReviewFlag.MULTI_SHOW_REVIEW,
    ReviewFlag.NAVIGATION_JUNK,
})


def order_flags(flags) -> Tuple[ReviewFlag, ...]:
    """Deduplicate flags and return them in canonical order."""
    wanted = {ReviewFlag(f) for f in flags}
    return tuple(f for f in ReviewFlag if f in wanted)


def check_tier_flags(tier: ContentTier, flags) -> None:
    """
    Reject tier/flag combinations that have no valid meaning.

    Valid combinations:
    - INVALID with at least one structural flag (paywall flag optional)
    - TRUNCATED with or without the paywall flag
    - COMPLETE, EXCERPT, STUB with no flags

    Raises:
        ValueError: If the combination is not one of the above
    """
    flag_set = set(order_flags(flags))
    structural = flag_set & STRUCTURAL_FLAGS

    if tier == ContentTier.INVALID:
        if not structural:
            raise ValueError("Tier 'invalid' requires a structural flag")
        return

    if structural:
        raise ValueError(
            f"Structural flags {sorted(f.value for f in structural)} require tier 'invalid', "
            f"got '{tier.value}'"
        )

    if ReviewFlag.TRUNCATED_BY_PAYWALL in flag_set and tier != ContentTier.TRUNCATED:
        raise ValueError(f"Paywall flag is only valid with tier 'truncated', got '{tier.value}'")


@dataclass
class ReviewRecord:
    """
    A critic's review of a single production.

    Identity is (show_id, outlet_id, critic_id); critic_id is the canonical
    key derived from critic_name by the identity normalizer.
    """
    show_id: str
    outlet_id: Optional[str] = None
    outlet_display_name: Optional[str] = None
    critic_name: str = UNKNOWN
    critic_id: str = UNKNOWN
    url: Optional[str] = None
    publish_date: Optional[str] = None  # YYYY-MM-DD
    original_rating_text: Optional[str] = None
    canonical_score: Optional[int] = None
    bucket: Optional[str] = None
    score_source: Optional[str] = None
    content_tier: Optional[ContentTier] = None
    full_text: Optional[str] = None
    excerpts: Dict[str, str] = field(default_factory=dict)  # provenance -> text
    thumbs: Dict[str, str] = field(default_factory=dict)  # provenance -> Up/Flat/Down
    llm_score: Optional[int] = None
    llm_confidence: Optional[str] = None
    designation: Optional[str] = None
    provenance: List[str] = field(default_factory=list)
    flags: Tuple[ReviewFlag, ...] = ()

    def __post_init__(self):
        if not self.show_id:
            raise ValueError("ReviewRecord requires a show_id")

        if self.bucket is not None and self.bucket not in BUCKETS:
            raise ValueError(f"Invalid bucket: {self.bucket}. Must be one of {BUCKETS}")

        if self.score_source is not None and self.score_source not in SCORE_SOURCES:
            raise ValueError(f"Invalid score_source: {self.score_source}")

        if self.content_tier is not None:
            self.content_tier = ContentTier(self.content_tier)

        self.flags = order_flags(self.flags)

    @property
    def identity_key(self) -> Tuple[str, str, str]:
        return (self.show_id, self.outlet_id or UNKNOWN, self.critic_id or UNKNOWN)

    @property
    def has_known_critic(self) -> bool:
        return bool(self.critic_id) and self.critic_id != UNKNOWN

    @property
    def has_known_outlet(self) -> bool:
        return bool(self.outlet_id) and self.outlet_id != UNKNOWN

    def add_provenance(self, source: str) -> None:
        """Append a source tag, keeping the list an ordered set."""
        if source and source not in self.provenance:
            self.provenance.append(source)

    @classmethod
    def from_dict(cls, data: dict) -> "ReviewRecord":
        """Create ReviewRecord from a serialized (camelCase) dict."""
        return cls(
            show_id=data["showId"],
            outlet_id=data.get("outletId"),
            outlet_display_name=data.get("outlet"),
            critic_name=data.get("criticName") or UNKNOWN,
            critic_id=data.get("criticId") or UNKNOWN,
            url=data.get("url"),
            publish_date=data.get("publishDate"),
            original_rating_text=data.get("originalRatingText"),
            canonical_score=data.get("canonicalScore"),
            bucket=data.get("bucket"),
            score_source=data.get("scoreSource"),
            content_tier=data.get("contentTier"),
            full_text=data.get("fullText"),
            excerpts=dict(data.get("excerpts") or {}),
            thumbs=dict(data.get("thumbs") or {}),
            llm_score=data.get("llmScore"),
            llm_confidence=data.get("llmConfidence"),
            designation=data.get("designation"),
            provenance=list(data.get("provenance") or []),
            flags=tuple(data.get("flags") or ())
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "showId": self.show_id,
            "outletId": self.outlet_id,
            "outlet": self.outlet_display_name,
            "criticName": self.critic_name,
            "criticId": self.critic_id,
            "url": self.url,
            "publishDate": self.publish_date,
            "originalRatingText": self.original_rating_text,
            "canonicalScore": self.canonical_score,
            "bucket": self.bucket,
            "scoreSource": self.score_source,
            "contentTier": self.content_tier.value if self.content_tier else None,
            "fullText": self.full_text,
            "excerpts": dict(sorted(self.excerpts.items())),
            "thumbs": dict(sorted(self.thumbs.items())),
            "llmScore": self.llm_score,
            "llmConfidence": self.llm_confidence,
            "designation": self.designation,
            "provenance": list(self.provenance),
            "flags": [f.value for f in self.flags]
        }


# Design Rationale and Trade-offs:
#
# 1. Why a mutable dataclass instead of a frozen one?
#    - Each stage annotates the same record in place
#    - Trade-off: Stages must be careful about what they overwrite
#
# 2. Why str Enums for tiers and flags?
#    - They serialize as plain strings in the corpus JSON
#    - Trade-off: Comparisons against raw strings still work, which hides typos
#
# 3. Why sort keys, excerpts and flags in to_dict?
#    - Identical input must give byte-identical output
#    - Trade-off: Output order no longer reflects source order
#
# 4. Why reject unknown buckets and score sources in __post_init__?
#    - A typo in an archive would otherwise publish a bucket nobody counts
#    - Trade-off: Loading a hand-edited corpus can fail on construction
