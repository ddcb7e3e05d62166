"""
Quarantine Gate.

Decides what happens to records the classifier marked invalid: they leave
the active corpus (and never take part in merging), but are kept for review
unless deletion is explicitly enabled.
"""

import logging

import config.settings as settings
from critic_ledger.agents.classification import ContentAssessment
from critic_ledger.models.report import QuarantineDecision
from critic_ledger.models.review import ContentTier, ReviewRecord

logger = logging.getLogger(__name__)

KEEP = "keep"
QUARANTINE = "quarantine"
DELETE = "delete"


class QuarantineGate:
    """
    keep / quarantine / delete for one classified record.

    Deletion needs all of: deletion enabled, high classifier confidence and
    at least `deletion_min_flags` structural flags. Anything less is a
    quarantine, which is reversible.
    """

    def __init__(
        self,
        allow_deletion: bool = settings.ALLOW_DELETION,
        deletion_min_flags: int = settings.DELETION_MIN_FLAGS
    ):
        self.allow_deletion = allow_deletion
        self.deletion_min_flags = deletion_min_flags

    def decide(self, record: ReviewRecord, assessment: ContentAssessment) -> str:
        if assessment.tier != ContentTier.INVALID:
            return KEEP

        if (
            self.allow_deletion
            and assessment.confidence == "high"
            and len(assessment.structural_flags) >= self.deletion_min_flags
        ):
            return DELETE

        return QUARANTINE

    def decision_for(self, record: ReviewRecord, assessment: ContentAssessment) -> QuarantineDecision:
        """Decide and package the outcome for the run report (invalid records only)."""
        action = self.decide(record, assessment)
        if action == KEEP:
            raise ValueError(f"Record {record.identity_key} is not invalid, nothing to quarantine")

        decision = QuarantineDecision(
            identity=record.identity_key,
            action=action,
            flags=tuple(f.value for f in assessment.flags),
            confidence=assessment.confidence,
            reason=assessment.reason
        )
        logger.warning(f"{action.capitalize()} {'/'.join(record.identity_key)}: {assessment.reason}")
        return decision


# Design Rationale and Trade-offs:
#
# 1. Why quarantine before merging?
#    - An invalid record must never donate a date or URL to a valid duplicate
#    - Trade-off: A duplicate of a quarantined record is published alone
#
# 2. Why require several high-confidence flags for deletion?
#    - One heuristic hit is not enough to discard data permanently
#    - Trade-off: Most junk stays in quarantine until someone reviews it
