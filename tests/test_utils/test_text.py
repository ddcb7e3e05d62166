"""
Unit tests for the text helpers.
"""

import pytest
from critic_ledger.utils.text import (
    comparison_key,
    count_words,
    normalize_url,
    round_half_up,
    slugify,
    title_from_show_id,
    url_host,
    year_from_show_id,
)


def test_comparison_key():
    """Test case, punctuation and leading article handling."""
    assert comparison_key("The New York Times", strip_article=True) == "new york times"
    assert comparison_key("new-york-times") == "new york times"
    assert comparison_key("Joe's  Blog") == "joes blog"
    assert comparison_key("Time Out & About") == "time out and about"


def test_slugify():
    """Test slugs are lowercase and hyphenated."""
    assert slugify("Mary O'Brien") == "mary-obrien"
    assert slugify("  Hollywood   Reporter ") == "hollywood-reporter"


def test_count_words():
    """Test word counting ignores punctuation."""
    assert count_words("It's a knockout -- truly.") == 4
    assert count_words(None) == 0


@pytest.mark.parametrize("value,expected", [(62.5, 63), (43.75, 44), (70.0, 70), (0.4, 0)])
def test_round_half_up(value, expected):
    """Test x.5 rounds up."""
    assert round_half_up(value) == expected


def test_normalize_url():
    """Test scheme, www, query, fragment and trailing slash are ignored."""
    expected = "nytimes.com/2024/cabaret.html"
    assert normalize_url("https://www.nytimes.com/2024/cabaret.html") == expected
    assert normalize_url("http://nytimes.com/2024/cabaret.html/?utm_source=x#top") == expected
    assert normalize_url("www.NYTimes.com/2024/cabaret.html") == expected
    assert normalize_url("") is None
    assert normalize_url(None) is None


def test_url_host():
    """Test host extraction."""
    assert url_host("https://www.variety.com/2024/review") == "variety.com"
    assert url_host(None) is None


def test_show_id_parts():
    """Test title and year recovery from a show id."""
    assert title_from_show_id("back-to-the-future-2023") == "back to the future"
    assert year_from_show_id("back-to-the-future-2023") == 2023
    assert year_from_show_id("cabaret") is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
