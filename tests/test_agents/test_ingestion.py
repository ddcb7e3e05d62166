"""
Unit tests for the Ingestion Agent.
"""

import pytest
from critic_ledger.agents.ingestion import IngestionAgent, normalize_date
from critic_ledger.models.review import ReviewRecord


@pytest.fixture
def agent():
    return IngestionAgent()


def test_aggregator_record_mapping(agent):
    """Test an aggregator export maps onto the record fields."""
    raw = {
        "showId": "cabaret-2024",
        "outlet": "The New York Times",
        "criticName": "Jesse Green",
        "url": "https://www.nytimes.com/2024/04/21/theater/cabaret-review.html",
        "publishDate": "April 21, 2024",
        "originalRating": "B+",
        "assignedScore": 87,
        "source": "dtli",
        "dtliExcerpt": "A knockout revival.",
        "bwwThumb": "down",
    }

    record = agent.to_record(raw)

    assert record.show_id == "cabaret-2024"
    assert record.outlet_id is None
    assert record.outlet_display_name == "The New York Times"
    assert record.critic_name == "Jesse Green"
    assert record.publish_date == "2024-04-21"
    assert record.original_rating_text == "B+"
    assert record.canonical_score == 87
    assert record.score_source == "source"
    assert record.excerpts == {"dtli": "A knockout revival."}
    assert record.thumbs == {"bww": "Down"}
    assert record.provenance == ["dtli", "bww"]


def test_blank_fields_become_none(agent):
    """Test empty and whitespace-only strings are treated as absent."""
    record = agent.to_record({
        "showId": "cabaret-2024",
        "outlet": "  ",
        "criticName": "",
        "url": "",
        "originalRating": " ",
        "fullText": "\n",
    })

    assert record.outlet_display_name is None
    assert record.critic_name == "unknown"
    assert record.url is None
    assert record.original_rating_text is None
    assert record.full_text is None


def test_numeric_rating_text_is_kept_as_text(agent):
    """Test a numeric originalScore is read as rating text."""
    record = agent.to_record({"showId": "cabaret-2024", "originalScore": 4})
    assert record.original_rating_text == "4"


def test_bare_thumb_belongs_to_record_source(agent):
    """Test a bare thumb is attributed to the source that supplied it."""
    record = agent.to_record({"showId": "cabaret-2024", "sources": ["bww"], "thumb": "UP"})

    assert record.thumbs == {"bww": "Up"}


def test_llm_score_forms(agent):
    """Test the scorer result is read from either serialized form."""
    nested = agent.to_record({"showId": "cabaret-2024", "llmScore": {"score": 71.5, "confidence": "medium"}})
    assert (nested.llm_score, nested.llm_confidence) == (72, "medium")

    flat = agent.to_record({"showId": "cabaret-2024", "llmScore": 64, "llmConfidence": "low"})
    assert (flat.llm_score, flat.llm_confidence) == (64, "low")


def test_invalid_score_source_falls_back(agent):
    """Test an unrecognized scoreSource is recorded as a source score."""
    record = agent.to_record({"showId": "cabaret-2024", "canonicalScore": 70, "scoreSource": "magic"})
    assert record.score_source == "source"


def test_non_numeric_score_is_ignored(agent):
    """Test junk in the score field leaves the record unscored."""
    record = agent.to_record({"showId": "cabaret-2024", "assignedScore": "great"})
    assert record.canonical_score is None
    assert record.score_source is None


def test_reads_its_own_output(agent):
    """Test a serialized record can be fed back in."""
    original = ReviewRecord(
        show_id="cabaret-2024",
        outlet_id="nytimes",
        outlet_display_name="The New York Times",
        critic_name="Jesse Green",
        critic_id="jesse-green",
        publish_date="2024-04-21",
        original_rating_text="3.5/5",
        canonical_score=70,
        bucket="Positive",
        score_source="rating",
        excerpts={"dtli": "A knockout."},
        thumbs={"dtli": "Up"},
        provenance=["scrape", "dtli"]
    )

    record = agent.to_record(original.to_dict())

    assert record.outlet_id == "nytimes"
    assert record.canonical_score == 70
    assert record.score_source == "rating"
    assert record.excerpts == original.excerpts
    assert record.thumbs == original.thumbs
    assert record.provenance == ["scrape", "dtli"]


def test_default_source_tag():
    """Test records with no provenance get the default tag."""
    agent = IngestionAgent(default_source="import")
    record = agent.to_record({"showId": "cabaret-2024"})
    assert record.provenance == ["import"]


def test_ingest_reports_failures(agent):
    """Test bad raw records are reported by position and skipped."""
    records, failures = agent.ingest([
        {"showId": "cabaret-2024"},
        {"outlet": "Variety"},
        "not a record",
        {"showId": "hamilton-2015"},
    ])

    assert [r.show_id for r in records] == ["cabaret-2024", "hamilton-2015"]
    assert [pos for pos, _ in failures] == [1, 2]


@pytest.mark.parametrize("value,expected", [
    ("2024-04-21", "2024-04-21"),
    ("2024-04-21T19:00:00Z", "2024-04-21"),
    ("April 21, 2024", "2024-04-21"),
    ("Apr 21, 2024", "2024-04-21"),
    ("04/21/2024", "2024-04-21"),
    ("21 April 2024", "2024-04-21"),
    ("last Tuesday", None),
    ("", None),
    (None, None),
])
def test_normalize_date(value, expected):
    """Test publish date formats found in source data."""
    assert normalize_date(value) == expected


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
