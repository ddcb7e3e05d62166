"""
Identity Normalizer.

Maps raw outlet and critic strings to canonical identifiers so variant
spellings of the same review converge on one identity key.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from critic_ledger.models.review import UNKNOWN, ReviewRecord
from critic_ledger.registry.alias_registry import AliasTables
from critic_ledger.utils.text import blank_to_none, comparison_key, slugify, url_host

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class OutletResolution:
    outlet_id: str
    display_name: str
    resolved: bool  # False when the id is a slug fallback


@dataclass(frozen=True)
class CriticResolution:
    critic_id: str
    display_name: str
    resolved: bool  # False when the id is a slug fallback or "unknown"


class IdentityNormalizer:
    """
    Canonicalizes outlet and critic identity using injected alias tables.

    All methods are pure: the same input and tables always give the same
    output, and normalizing a canonical id returns it unchanged.
    """

    def __init__(self, tables: AliasTables):
        self.tables = tables

    def normalize_outlet(self, raw: Optional[str]) -> OutletResolution:
        """
        Resolve a raw outlet string.

        Args:
            raw: Outlet as written by the source ("The New York Times", "nytimes", ...)

        Returns:
            OutletResolution; unknown outlets get a slug id and resolved=False
        """
        raw = blank_to_none(raw)
        if raw is None or comparison_key(raw) == UNKNOWN:
            return OutletResolution(UNKNOWN, UNKNOWN, resolved=False)

        key = comparison_key(raw, strip_article=True)
        outlet_id = self.tables.outlet_lookup.get(key)
        if outlet_id:
            return OutletResolution(outlet_id, self.display_name(outlet_id), resolved=True)

        fallback = slugify(key) or UNKNOWN
        return OutletResolution(fallback, self.display_name(fallback), resolved=False)

    def outlet_from_url(self, url: Optional[str]) -> Optional[str]:
        """Canonical outlet id for a review URL's domain, if known."""
        host = url_host(url)
        if not host:
            return None

        for domain, outlet_id in self.tables.outlet_domains.items():
            if host == domain or host.endswith(f".{domain}"):
                return outlet_id
        return None

    def display_name(self, outlet_id: str) -> str:
        """Human-readable outlet name, derived only from the outlet id."""
        known = self.tables.outlet_display_names.get(outlet_id)
        if known:
            return known
        if outlet_id == UNKNOWN:
            return UNKNOWN
        return " ".join(part.capitalize() for part in outlet_id.split("-"))

    def normalize_critic(self, raw: Optional[str]) -> CriticResolution:
        """
        Resolve a raw critic string via the explicit alias table only.

        Args:
            raw: Critic name as written by the source

        Returns:
            CriticResolution; missing or one-character names are "unknown"
        """
        raw = blank_to_none(raw)
        key = comparison_key(raw) if raw else ""
        if len(key.replace(" ", "")) < 2 or key == UNKNOWN:
            return CriticResolution(UNKNOWN, UNKNOWN, resolved=False)

        critic_id = self.tables.critic_lookup.get(key)
        if critic_id:
            return CriticResolution(
                critic_id, self.tables.critic_display_names[critic_id], resolved=True
            )

        return CriticResolution(slugify(key), _WHITESPACE.sub(" ", raw), resolved=False)

    def apply_to_record(self, record: ReviewRecord) -> Tuple[OutletResolution, CriticResolution]:
        """
        Attach canonical outlet and critic identity to a record in place.

        An unknown outlet is recovered from the review URL's domain when possible.

        Returns:
            The outlet and critic resolutions applied
        """
        outlet = self.normalize_outlet(record.outlet_id or record.outlet_display_name)
        if outlet.outlet_id == UNKNOWN:
            from_url = self.outlet_from_url(record.url)
            if from_url:
                outlet = OutletResolution(from_url, self.display_name(from_url), resolved=True)

        record.outlet_id = outlet.outlet_id
        record.outlet_display_name = outlet.display_name

        critic = self.normalize_critic(record.critic_name)
        record.critic_id = critic.critic_id
        record.critic_name = critic.display_name
        return outlet, critic


# Design Rationale and Trade-offs:
#
# 1. Why resolve critics only through the explicit alias table?
#    - Fuzzy matching would merge two critics with similar names
#    - Trade-off: Nicknames and initials need an alias entry
#
# 2. Why keep an unresolved outlet as a slug instead of "unknown"?
#    - The record still has a stable identity and can be published
#    - The report lists it so the alias table can be extended
#    - Trade-off: Two spellings of a new outlet stay separate until aliased
#
# 3. Why fall back to the URL host for the outlet?
#    - Scrapes often carry the URL but not the outlet name
#    - Trade-off: Syndicated copies are attributed to the hosting site
