"""
Report data models.

Every merge, discard, quarantine, repair and exclusion the engine makes is
recorded here so a run can be audited and reversed.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Tuple


class ConfigurationError(ValueError):
    """A lookup table is internally inconsistent (e.g. one alias, two outlets)."""


@dataclass(frozen=True)
class DiscardedDuplicate:
    """A record folded into a survivor during deduplication."""
    identity: Tuple[str, str, str]
    survivor_identity: Tuple[str, str, str]
    reason: str  # "same outlet+critic" or "same normalized URL"
    quality_delta: float  # survivor quality minus discarded quality
    url: Optional[str] = None
    provenance: Tuple[str, ...] = ()


@dataclass(frozen=True)
class QuarantineDecision:
    """Outcome of the quarantine gate for a structurally defective record."""
    identity: Tuple[str, str, str]
    action: str  # "quarantine" or "delete"
    flags: Tuple[str, ...]
    confidence: str
    reason: str


@dataclass(frozen=True)
class ScoreRepair:
    """A score forced to agree with a trusted external thumb."""
    identity: Tuple[str, str, str]
    old_score: int
    new_score: int
    old_bucket: str
    new_bucket: str
    thumbs: Tuple[Tuple[str, str], ...]


@dataclass(frozen=True)
class ValidationIssue:
    """
    A problem found on a record.
    fatal issues exclude the record from the published corpus.
    """
    identity: Tuple[str, str, str]
    code: str
    message: str
    fatal: bool = False


@dataclass(frozen=True)
class UnresolvedItem:
    """Input the engine could not interpret, or a record needing human attention."""
    identity: Tuple[str, str, str]
    kind: str  # "outlet", "rating", "placeholder-score", "unscored", "low-confidence", "scorer-error"
    value: Optional[str] = None


@dataclass
class PipelineReport:
    """Side-channel output of one pipeline run."""
    discarded: List[DiscardedDuplicate] = field(default_factory=list)
    quarantined: List[QuarantineDecision] = field(default_factory=list)
    repairs: List[ScoreRepair] = field(default_factory=list)
    issues: List[ValidationIssue] = field(default_factory=list)
    unresolved: List[UnresolvedItem] = field(default_factory=list)
    distribution: Dict[str, Dict[str, int]] = field(default_factory=dict)
    input_count: int = 0
    output_count: int = 0

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.fatal]

    def add_unresolved(self, identity, kind: str, value: Optional[str] = None) -> None:
        item = UnresolvedItem(identity=tuple(identity), kind=kind, value=value)
        if item not in self.unresolved:
            self.unresolved.append(item)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "inputCount": self.input_count,
            "outputCount": self.output_count,
            "discarded": [asdict(d) for d in self.discarded],
            "quarantined": [asdict(q) for q in self.quarantined],
            "repairs": [asdict(r) for r in self.repairs],
            "issues": [asdict(i) for i in self.issues],
            "unresolved": [asdict(u) for u in self.unresolved],
            "distribution": self.distribution
        }


# Design Rationale and Trade-offs:
#
# 1. Why one report object instead of logging only?
#    - Discards, repairs and quarantines must be reviewable after the run
#    - Logs rotate and mix runs together
#    - Trade-off: Report size grows with batch size
#
# 2. Why a fatal flag on ValidationIssue instead of two lists?
#    - Warnings and exclusions share identity, code and message
#    - Trade-off: Readers filter by fatal to find exclusions
#
# 3. Why deduplicate unresolved entries?
#    - Records are annotated twice (before and after merging)
#    - Trade-off: Repeated causes on the same record are collapsed
