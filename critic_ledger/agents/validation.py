"""
Consistency Validator.

Last gate before publication: checks every invariant the corpus promises,
applies the one defined repair (trusted thumb override) and excludes
records that cannot be trusted. Never raises on bad data.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Tuple

import config.settings as settings
from critic_ledger.models.report import ScoreRepair, ValidationIssue
from critic_ledger.models.review import ReviewRecord
from critic_ledger.registry.rating_tables import RatingTables, bucket_for

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    published: List[ReviewRecord] = field(default_factory=list)
    excluded: List[ReviewRecord] = field(default_factory=list)
    issues: List[ValidationIssue] = field(default_factory=list)
    repairs: List[ScoreRepair] = field(default_factory=list)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.fatal]


class ConsistencyValidator:
    """
    Validates a merged batch.

    Fatal (record excluded): missing show or outlet, score outside 0-100,
    bucket disagreeing with score, identity key already published.
    Non-fatal: thumb conflicts that cannot be repaired.
    """

    def __init__(
        self,
        tables: RatingTables,
        trusted_thumb_sources: Sequence[str] = settings.TRUSTED_THUMB_SOURCES,
        max_thumb_distance: int = settings.MAX_THUMB_BUCKET_DISTANCE
    ):
        self.tables = tables
        self.trusted_thumb_sources = tuple(trusted_thumb_sources)
        self.max_thumb_distance = max_thumb_distance

    def validate(self, records: Sequence[ReviewRecord]) -> ValidationResult:
        """
        Validate records, repairing trusted thumb conflicts in place.

        Args:
            records: Deduplicated records

        Returns:
            ValidationResult (published records keep input order)
        """
        result = ValidationResult()
        seen: Set[Tuple[str, str, str]] = set()

        for record in records:
            fatal = self.check_record(record)
            if not fatal and record.identity_key in seen:
                fatal = ValidationIssue(
                    identity=record.identity_key,
                    code="duplicate-identity",
                    message="Identity key already published in this batch",
                    fatal=True
                )

            if fatal:
                logger.error(f"Excluding {'/'.join(record.identity_key)}: {fatal.message}")
                result.issues.append(fatal)
                result.excluded.append(record)
                continue

            repair = self.repair_thumb_conflict(record, result.issues)
            if repair:
                result.repairs.append(repair)

            seen.add(record.identity_key)
            result.published.append(record)

        logger.info(
            f"Validated {len(records)} records: {len(result.published)} published, "
            f"{len(result.excluded)} excluded, {len(result.repairs)} repaired"
        )
        return result

    def check_record(self, record: ReviewRecord) -> Optional[ValidationIssue]:
        """First fatal problem with a single record, or None."""
        identity = record.identity_key

        if not record.show_id:
            return ValidationIssue(identity, "missing-show", "Record has no show_id", fatal=True)

        if not record.has_known_outlet:
            return ValidationIssue(identity, "missing-outlet", "Record has no resolvable outlet", fatal=True)

        score = record.canonical_score
        if score is not None and not (0 <= score <= 100):
            return ValidationIssue(identity, "score-out-of-range", f"Score {score} outside 0-100", fatal=True)

        expected = bucket_for(score, self.tables)
        if record.bucket != expected:
            return ValidationIssue(
                identity,
                "bucket-mismatch",
                f"Bucket '{record.bucket}' does not match score {score} (expected '{expected}')",
                fatal=True
            )

        return None

    def repair_thumb_conflict(
        self,
        record: ReviewRecord,
        issues: List[ValidationIssue]
    ) -> Optional[ScoreRepair]:
        """
        Reconcile the score with external thumbs.

        A thumb more than one bucket away from the score is a conflict. If
        every conflicting thumb is trusted and they agree, the score moves to
        that bucket's representative score. Otherwise the conflict is flagged.
        """
        if record.canonical_score is None or not record.thumbs:
            return None
        if not (0 <= record.canonical_score <= 100):
            return None

        current = bucket_for(record.canonical_score, self.tables)
        conflicts = []
        for source, thumb in sorted(record.thumbs.items()):
            thumb_bucket = self.tables.thumb_bucket(thumb)
            if thumb_bucket is None:
                continue
            distance = abs(self.tables.bucket_index(thumb_bucket) - self.tables.bucket_index(current))
            if distance > self.max_thumb_distance:
                conflicts.append((source, thumb, thumb_bucket))

        if not conflicts:
            return None

        thumbs = tuple((source, thumb) for source, thumb, _ in conflicts)
        target_buckets = {bucket for _, _, bucket in conflicts}
        all_trusted = all(source in self.trusted_thumb_sources for source, _, _ in conflicts)

        if not all_trusted or len(target_buckets) != 1:
            issues.append(ValidationIssue(
                identity=record.identity_key,
                code="thumb-conflict",
                message=f"Score {record.canonical_score} ({current}) conflicts with thumbs {dict(thumbs)}"
            ))
            logger.warning(f"Unrepaired thumb conflict on {'/'.join(record.identity_key)}: {dict(thumbs)}")
            return None

        new_bucket = target_buckets.pop()
        new_score = self.tables.representative_scores[new_bucket]
        repair = ScoreRepair(
            identity=record.identity_key,
            old_score=record.canonical_score,
            new_score=new_score,
            old_bucket=current,
            new_bucket=new_bucket,
            thumbs=thumbs
        )

        record.canonical_score = new_score
        record.bucket = new_bucket
        record.score_source = "thumb-override"
        logger.warning(
            f"Repaired {'/'.join(record.identity_key)}: {repair.old_score} ({current}) -> "
            f"{new_score} ({new_bucket}) from thumbs {dict(thumbs)}"
        )
        return repair



# Design Rationale and Trade-offs:
#
# 1. Why exclude records instead of raising?
#    - One broken record must not block the rest of the corpus
#    - The report lists every exclusion with its reason
#    - Trade-off: A systematic bug shows up as many exclusions, not a crash
#
# 2. Why only repair thumb conflicts when every trusted thumb agrees?
#    - Two sources disagreeing is not evidence the score is wrong
#    - Trade-off: Some conflicts stay as warnings for manual review
#
# 3. Why move the score to the bucket's representative value?
#    - The thumb only says which bucket, not where inside it
#    - Trade-off: The repaired score loses the original's precision
