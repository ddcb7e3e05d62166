"""
Alias Registry - Single source of truth for outlet and critic identity.

Builds the immutable lookup tables the identity normalizer is given, from the
defaults in default_aliases.py plus an optional JSON override file.
"""

import json
import logging
import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from critic_ledger.models.report import ConfigurationError
from critic_ledger.registry import default_aliases
from critic_ledger.utils.text import comparison_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AliasTables:
    """
    Read-only identity tables.

    outlet_lookup / critic_lookup map a comparison key to a canonical id.
    Every canonical id is also registered under its own comparison key, so
    looking up an already-canonical id returns itself.
    """
    outlet_lookup: Mapping[str, str]
    outlet_display_names: Mapping[str, str]
    outlet_domains: Mapping[str, str]
    critic_lookup: Mapping[str, str]
    critic_display_names: Mapping[str, str]

    @classmethod
    def build(
        cls,
        outlet_aliases: Mapping[str, Iterable[str]],
        critic_aliases: Mapping[str, Tuple[str, Iterable[str]]],
        outlet_display_names: Optional[Mapping[str, str]] = None,
        outlet_domains: Optional[Mapping[str, str]] = None
    ) -> "AliasTables":
        """
        Build tables, rejecting any alias that points at two canonical ids.

        Raises:
            ConfigurationError: On conflicting aliases or domains mapped to
                unknown outlets
        """
        outlet_lookup: Dict[str, str] = {}
        for outlet_id, aliases in outlet_aliases.items():
            for variant in [outlet_id, *aliases]:
                _register(outlet_lookup, comparison_key(variant, strip_article=True), outlet_id, "outlet")

        critic_lookup: Dict[str, str] = {}
        critic_names: Dict[str, str] = {}
        for critic_id, (display_name, aliases) in critic_aliases.items():
            critic_names[critic_id] = display_name
            for variant in [critic_id, display_name, *aliases]:
                _register(critic_lookup, comparison_key(variant), critic_id, "critic")

        domains = dict(outlet_domains or {})
        for domain, outlet_id in domains.items():
            if outlet_id not in outlet_aliases:
                raise ConfigurationError(
                    f"Domain '{domain}' maps to unknown outlet '{outlet_id}'"
                )

        return cls(
            outlet_lookup=MappingProxyType(outlet_lookup),
            outlet_display_names=MappingProxyType(dict(outlet_display_names or {})),
            outlet_domains=MappingProxyType({d.lower(): o for d, o in domains.items()}),
            critic_lookup=MappingProxyType(critic_lookup),
            critic_display_names=MappingProxyType(critic_names)
        )

    @classmethod
    def default(cls) -> "AliasTables":
        return cls.build(
            outlet_aliases=default_aliases.OUTLET_ALIASES,
            critic_aliases=default_aliases.CRITIC_ALIASES,
            outlet_display_names=default_aliases.OUTLET_DISPLAY_NAMES,
            outlet_domains=default_aliases.OUTLET_DOMAINS
        )


def _register(lookup: Dict[str, str], key: str, canonical: str, kind: str) -> None:
    if not key:
        return
    existing = lookup.get(key)
    if existing is not None and existing != canonical:
        raise ConfigurationError(
            f"{kind.capitalize()} alias '{key}' maps to both '{existing}' and '{canonical}'"
        )
    lookup[key] = canonical


def load_alias_tables(override_path: Optional[str] = None) -> AliasTables:
    """
    Load default tables, extended by an optional JSON override file.

    Override file format:
        {
          "outlets": {"canonical-id": ["variant", ...]},
          "outletDisplayNames": {"canonical-id": "Display Name"},
          "outletDomains": {"example.com": "canonical-id"},
          "critics": {"canonical-id": {"name": "Display Name", "aliases": ["variant"]}}
        }

    Args:
        override_path: Path to override JSON, or None for defaults only

    Returns:
        AliasTables

    Raises:
        ConfigurationError: If the merged tables conflict
    """
    outlets = {k: list(v) for k, v in default_aliases.OUTLET_ALIASES.items()}
    display_names = dict(default_aliases.OUTLET_DISPLAY_NAMES)
    domains = dict(default_aliases.OUTLET_DOMAINS)
    critics = {k: (name, list(aliases)) for k, (name, aliases) in default_aliases.CRITIC_ALIASES.items()}

    if override_path:
        if not os.path.exists(override_path):
            raise ConfigurationError(f"Alias override file not found: {override_path}")

        with open(override_path, 'r') as f:
            data = json.load(f)

        for outlet_id, aliases in data.get("outlets", {}).items():
            outlets.setdefault(outlet_id, []).extend(aliases)
        display_names.update(data.get("outletDisplayNames", {}))
        domains.update(data.get("outletDomains", {}))
        for critic_id, entry in data.get("critics", {}).items():
            name, aliases = critics.get(critic_id, (entry.get("name") or critic_id, []))
            critics[critic_id] = (entry.get("name") or name, aliases + list(entry.get("aliases", [])))

        logger.info(f"Loaded alias overrides from {override_path}")

    tables = AliasTables.build(
        outlet_aliases=outlets,
        critic_aliases=critics,
        outlet_display_names=display_names,
        outlet_domains=domains
    )
    logger.info(
        f"Alias tables ready: {len(outlets)} outlets, {len(critics)} critics, "
        f"{len(domains)} domains"
    )
    return tables


# Design Rationale and Trade-offs:
#
# 1. Why raise on an alias claimed by two canonical ids?
#    - A silent pick would merge reviews from different outlets
#    - Trade-off: A bad override file stops the run at startup
#
# 2. Why an override file on top of built-in tables?
#    - New outlet spellings appear with every aggregator export
#    - Trade-off: Two places to look when an alias misbehaves
#
# 3. Why MappingProxyType for the lookups?
#    - Tables are shared by every stage of a run
#    - Trade-off: Building a variant means building new tables
