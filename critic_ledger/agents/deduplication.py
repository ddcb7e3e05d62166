"""
Record Merger & Deduplicator.

Collapses records that describe the same real-world review into one
survivor, folding in every field the survivor lacks.

Two records are the same review when they share an identity key
(show, outlet, critic), or when they belong to the same show and their
URLs are equal after normalization.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import config.settings as settings
from critic_ledger.models.report import DiscardedDuplicate
from critic_ledger.models.review import ReviewRecord
from critic_ledger.utils.text import count_words, normalize_url

logger = logging.getLogger(__name__)

SAME_IDENTITY = "same outlet+critic"
SAME_URL = "same normalized URL"

_CONFIDENCE_ORDER = {"low": 0, "medium": 1, "high": 2}


def default_quality(record: ReviewRecord, weights: Optional[Dict[str, float]] = None) -> float:
    """
    Information richness of a record. Authoritative full text dominates,
    then known identity, then scores and URL.
    """
    weights = weights or settings.MERGE_WEIGHTS
    quality = 0.0

    if record.full_text and record.full_text.strip():
        quality += weights["full_text"]
        length_bonus = count_words(record.full_text) / 100 * weights["full_text_per_100_words"]
        quality += min(length_bonus, weights["full_text_length_cap"])

    if record.has_known_critic:
        quality += weights["known_critic"]
    if record.has_known_outlet:
        quality += weights["known_outlet"]
    if record.canonical_score is not None:
        quality += weights["canonical_score"]
    if record.llm_score is not None:
        quality += weights["llm_score"]
    if record.url:
        quality += weights["url"]

    return quality


@dataclass
class MergeResult:
    records: List[ReviewRecord] = field(default_factory=list)
    discarded: List[DiscardedDuplicate] = field(default_factory=list)
    passes: int = 0


class _UnionFind:
    def __init__(self, size: int):
        self.parent = list(range(size))

    def find(self, i: int) -> int:
        while self.parent[i] != i:
            self.parent[i] = self.parent[self.parent[i]]
            i = self.parent[i]
        return i

    def union(self, a: int, b: int) -> None:
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return
        # Lower index stays root so group order follows input order
        if root_b < root_a:
            root_a, root_b = root_b, root_a
        self.parent[root_b] = root_a


class RecordMerger:
    """
    Deduplicates a batch of normalized records.

    The survivor of each group is its highest-quality member (first
    encountered on ties). Passes repeat until nothing merges, since filling
    an unknown critic can make a survivor collide with another group.
    """

    def __init__(self, quality_fn: Optional[Callable[[ReviewRecord], float]] = None, max_passes: int = 10):
        self.quality_fn = quality_fn or default_quality
        self.max_passes = max_passes

    def deduplicate(self, records: Sequence[ReviewRecord]) -> MergeResult:
        """
        Merge duplicate records.

        Args:
            records: Normalized records (survivors are updated in place)

        Returns:
            MergeResult with one record per real-world review and the discards
        """
        result = MergeResult(records=list(records))

        while result.passes < self.max_passes:
            result.passes += 1
            merged, discarded = self._merge_pass(result.records)
            result.records = merged
            result.discarded.extend(discarded)
            if not discarded:
                break
        else:
            logger.warning(f"Deduplication did not settle after {self.max_passes} passes")

        if result.discarded:
            logger.info(
                f"Merged {len(result.discarded)} duplicate records "
                f"({len(result.records)} remain, {result.passes} passes)"
            )
        return result

    def _merge_pass(self, records: List[ReviewRecord]) -> Tuple[List[ReviewRecord], List[DiscardedDuplicate]]:
        groups = self._group(records)
        survivors = []
        discarded = []

        for members in groups:
            if len(members) == 1:
                survivors.append(records[members[0]])
                continue
            survivor, dropped = self.merge_group([records[i] for i in members])
            survivors.append(survivor)
            discarded.extend(dropped)

        return survivors, discarded

    def _group(self, records: List[ReviewRecord]) -> List[List[int]]:
        """Indices of duplicate records, grouped; groups ordered by first member."""
        uf = _UnionFind(len(records))
        first_by_identity: Dict[Tuple[str, str, str], int] = {}
        first_by_url: Dict[Tuple[str, str], int] = {}

        for i, record in enumerate(records):
            # Without a known outlet the identity key says nothing; only the URL can match
            if record.has_known_outlet:
                key = record.identity_key
                if key in first_by_identity:
                    uf.union(first_by_identity[key], i)
                else:
                    first_by_identity[key] = i

            url = normalize_url(record.url)
            if url:
                url_key = (record.show_id, url)
                if url_key in first_by_url:
                    uf.union(first_by_url[url_key], i)
                else:
                    first_by_url[url_key] = i

        groups: Dict[int, List[int]] = {}
        for i in range(len(records)):
            groups.setdefault(uf.find(i), []).append(i)
        return [groups[root] for root in sorted(groups)]

    def merge_group(self, group: List[ReviewRecord]) -> Tuple[ReviewRecord, List[DiscardedDuplicate]]:
        """
        Merge one group of duplicates into its best member.

        Args:
            group: Records of the same review, in input order

        Returns:
            (survivor, discarded entries)
        """
        scored = [(self.quality_fn(r), i, r) for i, r in enumerate(group)]
        ranked = sorted(scored, key=lambda item: (-item[0], item[1]))

        survivor_quality, _, survivor = ranked[0]
        survivor_identity = survivor.identity_key

        discarded = []
        for quality, _, donor in ranked[1:]:
            reason = SAME_IDENTITY if donor.identity_key == survivor_identity else SAME_URL

            discarded.append(DiscardedDuplicate(
                identity=donor.identity_key,
                survivor_identity=survivor_identity,
                reason=reason,
                quality_delta=round(survivor_quality - quality, 2),
                url=donor.url,
                provenance=tuple(donor.provenance)
            ))
            merge_into(survivor, donor)
            logger.debug(f"Folded {'/'.join(donor.identity_key)} into {'/'.join(survivor_identity)} ({reason})")

        return survivor, discarded


def merge_into(survivor: ReviewRecord, donor: ReviewRecord) -> ReviewRecord:
    """
    Fill the survivor's absent fields from a duplicate.

    Outlet and critic are only taken when the survivor's are unknown.
    Text and per-source excerpts keep the longer of the two.
    Content tier and flags are left alone (re-derived after merging).
    """
    if not survivor.has_known_outlet and donor.has_known_outlet:
        survivor.outlet_id = donor.outlet_id
        survivor.outlet_display_name = donor.outlet_display_name

    if not survivor.has_known_critic and donor.has_known_critic:
        survivor.critic_id = donor.critic_id
        survivor.critic_name = donor.critic_name

    for name in ("url", "publish_date", "original_rating_text", "designation"):
        if getattr(survivor, name) is None and getattr(donor, name) is not None:
            setattr(survivor, name, getattr(donor, name))

    if survivor.canonical_score is None and donor.canonical_score is not None:
        survivor.canonical_score = donor.canonical_score
        survivor.score_source = donor.score_source
        survivor.bucket = donor.bucket

    donor_text = (donor.full_text or "").strip()
    if donor_text and len(donor_text) > len((survivor.full_text or "").strip()):
        survivor.full_text = donor.full_text

    for source, excerpt in donor.excerpts.items():
        kept = (survivor.excerpts.get(source) or "").strip()
        if excerpt and len(excerpt.strip()) > len(kept):
            survivor.excerpts[source] = excerpt

    for source, thumb in donor.thumbs.items():
        if thumb and not survivor.thumbs.get(source):
            survivor.thumbs[source] = thumb

    if donor.llm_score is not None and (
        survivor.llm_score is None
        or _CONFIDENCE_ORDER.get(donor.llm_confidence, -1) > _CONFIDENCE_ORDER.get(survivor.llm_confidence, -1)
    ):
        survivor.llm_score = donor.llm_score
        survivor.llm_confidence = donor.llm_confidence

    for source in donor.provenance:
        survivor.add_provenance(source)

    return survivor


# Design Rationale and Trade-offs:
#
# 1. Why union-find over identity and URL matches?
#    - A record can match one duplicate by identity and another by URL
#    - Grouping transitively puts all three in one group in one pass
#    - Trade-off: One bad URL can chain unrelated records of the same show
#
# 2. Why repeat passes until nothing merges?
#    - A merge can fill an unknown outlet or critic and create new identity matches
#    - Trade-off: Extra passes on large batches, capped by max_passes
#
# 3. Why a pluggable quality function?
#    - Which record survives is a policy question, not a matching one
#    - Trade-off: Two runs with different functions publish different survivors
#
# 4. Why fill absent fields instead of preferring the survivor wholesale?
#    - Aggregators carry excerpts and thumbs, scrapes carry text and URLs
#    - Trade-off: A survivor can end up with fields from several sources
