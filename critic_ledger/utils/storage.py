"""
Storage utility.

File I/O for raw review batches, the published corpus, the run report and
quarantined records. The engine itself never touches the filesystem.
"""

import json
import os
import logging
import shutil
from typing import Dict, List, Optional

import config.settings as settings

logger = logging.getLogger(__name__)


class StorageManager:
    """
    Manages file I/O around a pipeline run.

    Handles:
    - Raw review batches (any JSON list, or {"reviews": [...]})
    - Published corpus (output/reviews.json)
    - Run report (output/report.json)
    - Quarantined records (output/quarantine/<show_id>.json)
    """

    def __init__(self, output_root: str):
        """
        Initialize storage manager.

        Args:
            output_root: Output directory (e.g., /path/to/output)
        """
        self.output_root = str(output_root)
        self.quarantine_dir = os.path.join(self.output_root, settings.QUARANTINE_DIRNAME)
        self.corpus_path = os.path.join(self.output_root, "reviews.json")
        self.report_path = os.path.join(self.output_root, "report.json")

        os.makedirs(self.output_root, exist_ok=True)
        os.makedirs(self.quarantine_dir, exist_ok=True)

        logger.info(f"Initialized StorageManager with output_root={self.output_root}")

    def load_raw_records(self, input_path: str) -> Optional[List[Dict]]:
        """
        Load a raw review batch.

        Args:
            input_path: JSON file with a list of review dicts

        Returns:
            List of review dicts, or None if the file doesn't exist

        Raises:
            ValueError: If the file is not a list or {"reviews": [...]}
        """
        if not os.path.exists(input_path):
            logger.warning(f"No raw reviews found at {input_path}")
            return None

        with open(input_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if isinstance(data, dict):
            data = data.get("reviews")
        if not isinstance(data, list):
            raise ValueError(f"{input_path} must contain a list of reviews or {{\"reviews\": [...]}}")

        logger.info(f"Loaded {len(data)} raw reviews from {input_path}")
        return data

    def save_corpus(self, corpus_json: str) -> str:
        """
        Persist the serialized corpus, keeping the previous one as a backup.

        Args:
            corpus_json: Output of PipelineResult.corpus_json()

        Returns:
            Path written
        """
        if os.path.exists(self.corpus_path):
            backup_path = f"{self.corpus_path}.backup"
            shutil.copy(self.corpus_path, backup_path)
            logger.debug(f"Created backup: {backup_path}")

        self._write_atomic(self.corpus_path, corpus_json)
        logger.info(f"Corpus saved to {self.corpus_path}")
        return self.corpus_path

    def save_report(self, report: Dict) -> str:
        """Persist the run report as JSON."""
        self._write_atomic(self.report_path, json.dumps(report, indent=2, sort_keys=True))
        logger.info(f"Report saved to {self.report_path}")
        return self.report_path

    def save_quarantined(self, entries: List[Dict]) -> List[str]:
        """
        Write quarantined records, one file per show.

        Args:
            entries: Dicts with "record" (serialized ReviewRecord) and "decision"

        Returns:
            Paths written
        """
        by_show: Dict[str, List[Dict]] = {}
        for entry in entries:
            by_show.setdefault(entry["record"]["showId"], []).append(entry)

        paths = []
        for show_id, show_entries in sorted(by_show.items()):
            filepath = os.path.join(self.quarantine_dir, f"{show_id}.json")
            self._write_atomic(filepath, json.dumps(show_entries, indent=2, sort_keys=True))
            paths.append(filepath)

        if paths:
            logger.info(f"Quarantined {len(entries)} records across {len(paths)} shows in {self.quarantine_dir}")
        return paths

    def _write_atomic(self, filepath: str, content: str) -> None:
        """Write to a temp file, then rename over the target."""
        temp_path = f"{filepath}.tmp"
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                f.write(content)
            os.replace(temp_path, filepath)
        except OSError as e:
            logger.error(f"Failed to write {filepath}: {e}")
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise


# Design Rationale and Trade-offs:
#
# 1. Why keep file I/O out of the engine?
#    - Tests run the whole pipeline on in-memory lists
#    - Trade-off: main.py wires storage and engine together by hand
#
# 2. Why atomic writes (temp file + rename)?
#    - A crash mid-write must not leave a half-written corpus
#    - Trade-off: Needs space for a second copy while writing
#
# 3. Why accept both a bare list and {"reviews": [...]}?
#    - Aggregator exports use the wrapper, published corpora do not
#    - Trade-off: Two input shapes to document
