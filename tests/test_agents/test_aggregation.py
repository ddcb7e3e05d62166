"""
Unit tests for the distribution summary.
"""

import pytest
import os
import tempfile
import pandas as pd
from critic_ledger.agents.aggregation import UNSCORED, DistributionSummarizer
from critic_ledger.models.review import ContentTier, ReviewRecord


def _record(show_id, score=None, bucket=None, tier=ContentTier.COMPLETE, source=None, critic="a"):
    return ReviewRecord(
        show_id=show_id,
        outlet_id="nytimes",
        critic_id=critic,
        canonical_score=score,
        bucket=bucket,
        score_source=source,
        content_tier=tier
    )


@pytest.fixture
def records():
    return [
        _record("cabaret-2024", 90, "Rave", source="rating", critic="a"),
        _record("cabaret-2024", 75, "Positive", source="sentiment", critic="b"),
        _record("cabaret-2024", None, None, tier=ContentTier.EXCERPT, critic="c"),
        _record("hamilton-2015", 40, "Negative", tier=ContentTier.TRUNCATED, source="rating", critic="a"),
    ]


def test_summarize_counts(records):
    """Test counts per tier, bucket and score source."""
    summary = DistributionSummarizer().summarize(records)

    assert summary["tier"] == {"complete": 2, "truncated": 1, "excerpt": 1, "stub": 0, "invalid": 0}
    assert summary["bucket"] == {
        "Rave": 1, "Positive": 1, "Mixed": 0, "Negative": 1, "Pan": 0, UNSCORED: 1
    }
    assert summary["scoreSource"] == {"none": 1, "rating": 2, "sentiment": 1}


def test_summarize_empty_corpus():
    """Test an empty corpus still lists every tier and bucket."""
    summary = DistributionSummarizer().summarize([])

    assert sum(summary["tier"].values()) == 0
    assert set(summary["bucket"]) == {"Rave", "Positive", "Mixed", "Negative", "Pan", UNSCORED}
    assert summary["scoreSource"] == {}


def test_show_table(records):
    """Test per-show bucket counts and mean score."""
    table = DistributionSummarizer().show_table(records)

    assert list(table.index) == ["cabaret-2024", "hamilton-2015"]
    assert table.loc["cabaret-2024", "Reviews"] == 3
    assert table.loc["cabaret-2024", "Rave"] == 1
    assert table.loc["cabaret-2024", UNSCORED] == 1
    assert table.loc["cabaret-2024", "Mean Score"] == 82.5
    assert table.loc["hamilton-2015", "Negative"] == 1


def test_export_show_table(records):
    """Test CSV export of the per-show table."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = DistributionSummarizer().export_show_table(records, tmpdir)

        assert os.path.exists(path)
        df = pd.read_csv(path)
        assert list(df["Show"]) == ["cabaret-2024", "hamilton-2015"]
        assert list(df["Reviews"]) == [3, 1]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
