"""
Critic Ledger - Review Record Normalization & Deduplication

CLI entry point for running the pipeline over a batch of review records.
"""

import argparse
import logging
import sys

from critic_ledger.agents.aggregation import DistributionSummarizer
from critic_ledger.agents.llm_scorer import GeminiReviewScorer
from critic_ledger.agents.quarantine import QuarantineGate
from critic_ledger.orchestrator import PipelineOrchestrator
from critic_ledger.registry.alias_registry import load_alias_tables
from critic_ledger.registry.show_catalog import ShowCatalog
from critic_ledger.utils.storage import StorageManager
import config.settings as settings


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Critic Ledger - Review Record Normalization & Deduplication",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Normalize and deduplicate a raw batch
  python main.py --input data/raw/reviews.json

  # Only shows currently running, with a show catalog
  python main.py --input data/raw/reviews.json \\
                 --catalog data/shows.json --only-active

  # Score unrated reviews with Gemini (needs GOOGLE_API_KEY)
  python main.py --input data/raw/reviews.json --score-missing

  # Re-run on a published corpus (output is unchanged)
  python main.py --input output/reviews.json
        """
    )

    parser.add_argument(
        "--input",
        required=True,
        help="Raw review batch JSON (list of records, or {\"reviews\": [...]})"
    )

    parser.add_argument(
        "--output-dir",
        default=str(settings.OUTPUT_ROOT),
        help=f"Output directory (default: {settings.OUTPUT_ROOT})"
    )

    parser.add_argument(
        "--catalog",
        default=str(settings.DATA_ROOT / "shows.json"),
        help="Show catalog JSON (titles, status, opening dates)"
    )

    parser.add_argument(
        "--aliases",
        help="Alias override JSON (extra outlet and critic variants)"
    )

    parser.add_argument(
        "--only-active",
        action="store_true",
        help="Only keep reviews of shows that are open or in previews"
    )

    parser.add_argument(
        "--score-missing",
        action="store_true",
        help="Ask the LLM scorer for reviews with text but no usable rating"
    )

    parser.add_argument(
        "--allow-deletion",
        action="store_true",
        default=settings.ALLOW_DELETION,
        help="Delete (instead of quarantine) records with several high-confidence defects"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    args = parser.parse_args()

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    # The scorer is the only component that needs an API key
    if args.score_missing and not settings.GOOGLE_API_KEY:
        logger.error(
            "GOOGLE_API_KEY environment variable not set. "
            "Set it or run without --score-missing."
        )
        sys.exit(1)

    print("=" * 60)
    print("Critic Ledger - Review Normalization & Deduplication")
    print("=" * 60)
    print(f"Input: {args.input}")
    print(f"Output: {args.output_dir}")
    print(f"Catalog: {args.catalog}")
    print(f"Only active shows: {args.only_active}")
    print(f"LLM scoring: {args.score_missing}")
    print("=" * 60)
    print()

    try:
        storage = StorageManager(args.output_dir)
        raw_records = storage.load_raw_records(args.input)
        if raw_records is None:
            logger.error(f"Input file not found: {args.input}")
            sys.exit(1)

        scorer = None
        if args.score_missing:
            scorer = GeminiReviewScorer(api_key=settings.GOOGLE_API_KEY).score

        logger.info("Initializing Critic Ledger pipeline...")
        orchestrator = PipelineOrchestrator(
            alias_tables=load_alias_tables(args.aliases),
            catalog=ShowCatalog.from_file(args.catalog),
            scorer=scorer,
            gate=QuarantineGate(allow_deletion=args.allow_deletion)
        )

        result = orchestrator.run(raw_records, only_active=args.only_active)

        corpus_path = storage.save_corpus(result.corpus_json())
        report_path = storage.save_report(result.report.to_dict())
        storage.save_quarantined(result.quarantine_entries())
        table_path = DistributionSummarizer().export_show_table(result.corpus, args.output_dir)

        report = result.report
        print()
        print("=" * 60)
        print("✅ Pipeline completed successfully!")
        print("=" * 60)
        print(f"Records: {report.input_count} in -> {report.output_count} published")
        print(f"Merged duplicates: {len(report.discarded)}")
        print(f"Quarantined: {len(report.quarantined)}")
        print(f"Score repairs: {len(report.repairs)}")
        print(f"Excluded: {len(report.errors)}")
        print(f"Unresolved: {len(report.unresolved)}")
        print(f"Corpus: {corpus_path}")
        print(f"Report: {report_path}")
        print(f"Show table: {table_path}")
        print("=" * 60)

        logger.info("Critic Ledger completed successfully")
        sys.exit(0)

    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        print("\n⚠️  Pipeline interrupted")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Pipeline failed: {e}", exc_info=True)
        print(f"\n❌ Pipeline failed: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        sys.exit(1)


if __name__ == "__main__":
    main()


# Design Rationale and Trade-offs:
#
# 1. Why argparse instead of click or typer?
#    - Standard library, no extra dependency for a handful of flags
#    - Trade-off: Less polished help output than click
#
# 2. Why check GOOGLE_API_KEY only when --score-missing is set?
#    - The scorer is the only component that talks to an API
#    - Normalization and deduplication run fully offline
#    - Trade-off: A missing key is found late if scoring is added to an existing job
#
# 3. Why write corpus, report and quarantine as separate files?
#    - The corpus stays byte-stable and diffable between runs
#    - Audit data changes every run and lives beside it
#    - Trade-off: More files in the output directory
#
# 4. Why exit 1 on any pipeline failure?
#    - Shell scripts and CI jobs see the failure without parsing logs
#    - Record-level problems are in the report and do not fail the run
#    - Trade-off: A partially written output directory is possible on crash
