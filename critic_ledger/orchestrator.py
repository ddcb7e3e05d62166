"""
Pipeline Orchestrator.

Runs one batch of raw review records through every engine stage and
collects the published corpus, the quarantined records and the run report.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from typing import Callable, Iterable, List, Optional, Tuple

import config.settings as settings
from critic_ledger.agents.aggregation import DistributionSummarizer
from critic_ledger.agents.classification import ContentAssessment, ContentClassifier
from critic_ledger.agents.deduplication import RecordMerger
from critic_ledger.agents.identity import IdentityNormalizer
from critic_ledger.agents.ingestion import IngestionAgent
from critic_ledger.agents.quarantine import KEEP, QUARANTINE, QuarantineGate
from critic_ledger.agents.scoring import ScoreNormalizer
from critic_ledger.agents.validation import ConsistencyValidator
from critic_ledger.models.report import PipelineReport, QuarantineDecision, ValidationIssue
from critic_ledger.models.review import UNKNOWN, ReviewRecord
from critic_ledger.models.score import ScorerResult
from critic_ledger.registry.alias_registry import AliasTables
from critic_ledger.registry.rating_tables import RatingTables
from critic_ledger.registry.show_catalog import ShowCatalog
from critic_ledger.utils.text import count_words

logger = logging.getLogger(__name__)

# score(text, outlet_name, critic_name, show_title) -> ScorerResult | None
Scorer = Callable[[str, str, str, str], Optional[ScorerResult]]


@dataclass
class PipelineResult:
    corpus: List[ReviewRecord] = field(default_factory=list)
    quarantined: List[Tuple[ReviewRecord, QuarantineDecision]] = field(default_factory=list)
    report: PipelineReport = field(default_factory=PipelineReport)

    def corpus_json(self) -> str:
        """Serialized corpus. Byte-stable for identical input."""
        return json.dumps(
            [r.to_dict() for r in self.corpus], indent=2, sort_keys=True, ensure_ascii=False
        ) + "\n"

    def quarantine_entries(self) -> List[dict]:
        return [
            {"record": record.to_dict(), "decision": asdict(decision)}
            for record, decision in self.quarantined
        ]


class PipelineOrchestrator:
    """
    Orchestrates the normalization and deduplication pipeline.

    Coordinates:
    1. Ingestion -> 2. Identity -> 3. Score -> 4. Classification
    -> 5. Quarantine -> 6. Merge (survivors re-normalized)
    -> 7. External scoring (optional) -> 8. Validation -> 9. Summary
    """

    def __init__(
        self,
        alias_tables: Optional[AliasTables] = None,
        rating_tables: Optional[RatingTables] = None,
        catalog: Optional[ShowCatalog] = None,
        scorer: Optional[Scorer] = None,
        classifier: Optional[ContentClassifier] = None,
        gate: Optional[QuarantineGate] = None,
        quality_fn: Optional[Callable[[ReviewRecord], float]] = None,
        continue_on_failure: bool = settings.CONTINUE_ON_RECORD_FAILURE
    ):
        """
        Initialize pipeline orchestrator.

        Args:
            alias_tables: Outlet/critic alias tables (defaults if None)
            rating_tables: Letter grades, thresholds, thumbs (defaults if None)
            catalog: Show catalog (empty if None)
            scorer: External scorer for unscored records, or None to skip
            classifier: Content classifier (default thresholds if None)
            gate: Quarantine gate (deletion disabled if None)
            quality_fn: Merge quality function (weighted default if None)
            continue_on_failure: Record failures are reported instead of raised
        """
        logger.info("Initializing pipeline components...")

        self.rating_tables = rating_tables or RatingTables.default()
        self.catalog = catalog or ShowCatalog()
        self.scorer = scorer
        self.continue_on_failure = continue_on_failure

        self.ingestion_agent = IngestionAgent()
        self.identity_normalizer = IdentityNormalizer(alias_tables or AliasTables.default())
        self.score_normalizer = ScoreNormalizer(self.rating_tables)
        self.classifier = classifier or ContentClassifier()
        self.gate = gate or QuarantineGate()
        self.merger = RecordMerger(quality_fn=quality_fn)
        self.validator = ConsistencyValidator(self.rating_tables)
        self.summarizer = DistributionSummarizer()

        logger.info("Pipeline initialized successfully")

    def run(self, raw_records: Iterable[dict], only_active: bool = False) -> PipelineResult:
        """
        Run the complete pipeline over one batch.

        Args:
            raw_records: Raw review dicts (any source, or a previous corpus)
            only_active: Only keep records of shows that are open or in previews

        Returns:
            PipelineResult with the corpus sorted by identity key
        """
        raw_records = list(raw_records)
        result = PipelineResult()
        report = result.report
        report.input_count = len(raw_records)

        logger.info(f"Starting pipeline: {len(raw_records)} raw records (only_active={only_active})")

        # Per-record stages, then quarantine before anything can merge
        active = []
        skipped_inactive = 0
        for position, raw in enumerate(raw_records):
            try:
                record = self.ingestion_agent.to_record(raw)
                if only_active and not self.catalog.is_active(record.show_id):
                    self._skip_inactive(record, report)
                    skipped_inactive += 1
                    continue
                assessment = self._annotate(record, report)
            except Exception as e:
                self._record_failure(raw, position, e, report)
                continue

            if not self._gate(record, assessment, result):
                active.append(record)

        if skipped_inactive:
            logger.info(f"Skipped {skipped_inactive} records of inactive shows")

        # Merge, then re-derive everything the merge may have changed
        merged = self.merger.deduplicate(active)
        report.discarded.extend(merged.discarded)

        survivors = []
        for record in merged.records:
            try:
                assessment = self._annotate(record, report)
            except Exception as e:
                self._record_failure(record.to_dict(), None, e, report)
                continue
            if not self._gate(record, assessment, result):
                survivors.append(record)

        if self.scorer:
            for record in survivors:
                self._score_externally(record, report)
        else:
            for record in survivors:
                self._apply_stored_llm_score(record, report)

        for record in survivors:
            if record.canonical_score is None:
                report.add_unresolved(record.identity_key, "unscored")

        validation = self.validator.validate(survivors)
        report.issues.extend(validation.issues)
        report.repairs.extend(validation.repairs)

        result.corpus = sorted(validation.published, key=lambda r: r.identity_key)
        result.quarantined.sort(key=lambda item: item[0].identity_key)
        report.output_count = len(result.corpus)
        report.distribution = self.summarizer.summarize(result.corpus)

        logger.info(
            f"Pipeline complete: {report.input_count} in -> {report.output_count} published, "
            f"{len(report.discarded)} merged, {len(report.quarantined)} quarantined, "
            f"{len(report.errors)} excluded"
        )
        return result

    def _annotate(self, record: ReviewRecord, report: PipelineReport) -> ContentAssessment:
        """Identity, score and content classification for one record, in place."""
        raw_outlet = record.outlet_id or record.outlet_display_name
        outlet, _ = self.identity_normalizer.apply_to_record(record)
        if not outlet.resolved and outlet.outlet_id != UNKNOWN:
            logger.info(f"Unresolved outlet '{raw_outlet}' kept as '{outlet.outlet_id}'")
            report.add_unresolved(record.identity_key, "outlet", raw_outlet)

        had_score = record.canonical_score is not None
        parsed = self.score_normalizer.apply_to_record(record)
        if parsed.kind == "placeholder" and had_score and record.canonical_score is None:
            report.add_unresolved(record.identity_key, "placeholder-score", record.original_rating_text)
        if parsed.is_unresolved:
            report.add_unresolved(record.identity_key, "rating", record.original_rating_text)

        assessment = self.classifier.classify(
            record,
            show_title=self.catalog.title_for(record.show_id),
            other_titles=self.catalog.other_titles(record.show_id),
            show_year=self.catalog.year_for(record.show_id)
        )
        self.classifier.apply_to_record(record, assessment)
        return assessment

    def _skip_inactive(self, record: ReviewRecord, report: PipelineReport) -> None:
        """Audit entry for a record left out by the only_active filter."""
        self.identity_normalizer.apply_to_record(record)
        show = self.catalog.get(record.show_id)
        status = show.status if show and show.status else "not in catalog"
        report.issues.append(ValidationIssue(
            identity=record.identity_key,
            code="inactive-show",
            message=f"Show '{record.show_id}' is not open or in previews ({status})"
        ))

    def _gate(self, record: ReviewRecord, assessment: ContentAssessment, result: PipelineResult) -> bool:
        """True if the record left the active corpus."""
        if self.gate.decide(record, assessment) == KEEP:
            return False

        decision = self.gate.decision_for(record, assessment)
        result.report.quarantined.append(decision)
        if decision.action == QUARANTINE:
            result.quarantined.append((record, decision))
        return True

    def _score_externally(self, record: ReviewRecord, report: PipelineReport) -> None:
        if record.canonical_score is not None:
            return
        if record.llm_score is not None:
            self._apply_stored_llm_score(record, report)
            return

        text = record.full_text or " ".join(record.excerpts[k] for k in sorted(record.excerpts))
        if count_words(text) < settings.SCORER_MIN_TEXT_WORDS:
            return

        try:
            scored = self.scorer(
                text,
                record.outlet_display_name or UNKNOWN,
                record.critic_name,
                self.catalog.title_for(record.show_id)
            )
        except Exception as e:
            logger.error(f"Scorer failed for {'/'.join(record.identity_key)}: {e}")
            scored = None

        if scored is None:
            report.add_unresolved(record.identity_key, "scorer-error")
            return

        record.llm_score = scored.score
        record.llm_confidence = scored.confidence
        self._apply_stored_llm_score(record, report)

    def _apply_stored_llm_score(self, record: ReviewRecord, report: PipelineReport) -> None:
        """Promote an authoritative scorer result to the canonical score."""
        if record.canonical_score is not None or record.llm_score is None:
            return

        if record.llm_confidence in settings.AUTHORITATIVE_CONFIDENCE:
            record.canonical_score = record.llm_score
            record.score_source = "llm"
            record.bucket = self.score_normalizer.bucket_for(record.canonical_score)
        else:
            report.add_unresolved(record.identity_key, "low-confidence", str(record.llm_score))

    def _record_failure(self, raw, position: Optional[int], error: Exception, report: PipelineReport) -> None:
        show_id = raw.get("showId") if isinstance(raw, dict) else None
        where = f"#{position}" if position is not None else f"for {show_id}"
        logger.error(f"Failed to process record {where}: {error}")

        if not self.continue_on_failure:
            raise error

        report.issues.append(ValidationIssue(
            identity=(str(show_id or UNKNOWN), UNKNOWN, UNKNOWN),
            code="record-failed",
            message=str(error),
            fatal=True
        ))
        logger.warning("Continuing with next record (graceful degradation)")


# Design Rationale and Trade-offs:
#
# 1. Why annotate every record twice (before and after merging)?
#    - A merge can change text, rating or outlet, which changes tier and score
#    - Trade-off: Classification runs twice for merged records
#
# 2. Why inject the scorer as a callable?
#    - The pipeline runs and is tested without an API key
#    - Trade-off: The scorer contract is a type alias, not an interface
#
# 3. Why report records skipped by only_active?
#    - Every input record must be accounted for in the run report
#    - Trade-off: Large inactive archives produce long reports
#
# 4. Why continue on record failure by default?
#    - A single malformed record must not block a nightly batch
#    - Failures are fatal issues in the report, so nothing is silently lost
#    - Trade-off: A systematic ingestion bug produces a report full of failures
