"""
Text helpers.

Small pure functions shared by the normalizers: slugs, comparison keys,
word counts, URL canonicalization.
"""

import math
import re
from typing import Optional
from urllib.parse import urlsplit

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_LEADING_ARTICLE = re.compile(r"^the\s+", re.IGNORECASE)
_YEAR_SUFFIX = re.compile(r"-(\d{4})$")
_WORD = re.compile(r"[A-Za-z0-9'’]+")


def blank_to_none(value) -> Optional[str]:
    """Collapse empty or whitespace-only strings to None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def comparison_key(text: str, strip_article: bool = False) -> str:
    """
    Lowercase, optionally drop a leading "The", collapse every run of
    non-alphanumerics to a single space.

    "The New York Times" -> "new york times" (with strip_article=True)
    "new-york-times"     -> "new york times"
    """
    lowered = text.strip().lower()
    lowered = lowered.replace("&", " and ").replace("'", "").replace("’", "")
    if strip_article:
        lowered = _LEADING_ARTICLE.sub("", lowered)
    return _NON_ALNUM.sub(" ", lowered).strip()


def slugify(text: str) -> str:
    """Create a slug (lowercase, hyphenated, alphanumerics only)."""
    return comparison_key(text).replace(" ", "-")


def count_words(text: Optional[str]) -> int:
    if not text:
        return 0
    return len(_WORD.findall(text))


def round_half_up(value: float) -> int:
    """Round x.5 away from zero for positive values (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def normalize_url(url: Optional[str]) -> Optional[str]:
    """
    Canonical form of a review URL for duplicate detection.
    Scheme, "www.", query string, fragment and trailing slash are ignored.
    """
    url = blank_to_none(url)
    if not url:
        return None

    if "://" not in url:
        url = f"http://{url}"

    parts = urlsplit(url)
    host = (parts.hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    if not host:
        return None

    path = parts.path.rstrip("/")
    return f"{host}{path}"


def url_host(url: Optional[str]) -> Optional[str]:
    """Host of a URL without "www.", or None."""
    normalized = normalize_url(url)
    if not normalized:
        return None
    return normalized.split("/", 1)[0]


def title_from_show_id(show_id: str) -> str:
    """'back-to-the-future-2023' -> 'back to the future'"""
    return _YEAR_SUFFIX.sub("", show_id).replace("-", " ").strip()


def year_from_show_id(show_id: str) -> Optional[int]:
    match = _YEAR_SUFFIX.search(show_id)
    return int(match.group(1)) if match else None


# Design Rationale and Trade-offs:
#
# 1. Why one comparison_key for outlets, critics and titles?
#    - Case and punctuation differences must not split identities
#    - Trade-off: Names that differ only in punctuation are treated as one
#
# 2. Why strip query strings and "www." in normalize_url?
#    - Tracking parameters make the same article look like different URLs
#    - Trade-off: Sites that put the article id in the query string do not match
