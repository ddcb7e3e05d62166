"""
Show Catalog - read-only view of the external show metadata store.

Only what the engine needs: title (for wrong-show detection), status (for
active-production filtering) and opening year (for wrong-production checks).
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import config.settings as settings
from critic_ledger.utils.text import title_from_show_id, year_from_show_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShowInfo:
    show_id: str
    title: str
    status: Optional[str] = None  # "open", "previews", "closed", ...
    opening_date: Optional[str] = None  # YYYY-MM-DD

    @property
    def year(self) -> Optional[int]:
        if self.opening_date and len(self.opening_date) >= 4 and self.opening_date[:4].isdigit():
            return int(self.opening_date[:4])
        return year_from_show_id(self.show_id)


class ShowCatalog:
    """
    Lookup of show_id -> ShowInfo.

    Unknown show ids are not errors: title and year fall back to what the
    id itself encodes ("cabaret-2024" -> "cabaret", 2024).
    """

    def __init__(self, shows: Iterable[ShowInfo] = ()):
        self._shows: Dict[str, ShowInfo] = {s.show_id: s for s in shows}

    @classmethod
    def from_file(cls, catalog_path: str) -> "ShowCatalog":
        """
        Load catalog from a shows JSON file (list of shows, or {"shows": [...]}).

        Args:
            catalog_path: Path to shows.json

        Returns:
            ShowCatalog (empty if the file does not exist)
        """
        if not os.path.exists(catalog_path):
            logger.warning(f"No show catalog found at {catalog_path}, using show ids only")
            return cls()

        with open(catalog_path, 'r') as f:
            data = json.load(f)

        entries = data.get("shows", []) if isinstance(data, dict) else data
        shows = [
            ShowInfo(
                show_id=entry["id"],
                title=entry.get("title") or title_from_show_id(entry["id"]),
                status=entry.get("status"),
                opening_date=entry.get("openingDate")
            )
            for entry in entries
        ]

        logger.info(f"Loaded {len(shows)} shows from catalog")
        return cls(shows)

    def get(self, show_id: str) -> Optional[ShowInfo]:
        return self._shows.get(show_id)

    def title_for(self, show_id: str) -> str:
        show = self._shows.get(show_id)
        return show.title if show else title_from_show_id(show_id)

    def year_for(self, show_id: str) -> Optional[int]:
        show = self._shows.get(show_id)
        return show.year if show else year_from_show_id(show_id)

    def other_titles(self, show_id: str) -> List[str]:
        """Titles of every other show in the catalog (multi-show detection)."""
        return [s.title for sid, s in self._shows.items() if sid != show_id]

    def is_active(self, show_id: str) -> bool:
        show = self._shows.get(show_id)
        return bool(show and show.status in settings.ACTIVE_SHOW_STATUSES)


# Design Rationale and Trade-offs:
#
# 1. Why fall back to a title derived from the show id?
#    - Wrong-show checks still work without a catalog entry
#    - Trade-off: Derived titles miss punctuation and subtitles
#
# 2. Why treat an unlisted show as inactive?
#    - only_active should publish what is known to be running
#    - Trade-off: A new show is skipped until the catalog lists it
