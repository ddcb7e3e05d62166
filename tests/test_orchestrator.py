"""
End-to-end tests for the pipeline orchestrator.

Runs small raw batches through every stage with the default tables and a
stubbed external scorer.
"""

import pytest
import json
from unittest.mock import Mock
from critic_ledger.models.review import ContentTier, ReviewFlag
from critic_ledger.models.score import ScorerResult
from critic_ledger.orchestrator import PipelineOrchestrator
from critic_ledger.registry.rating_tables import RatingTables, bucket_for
from critic_ledger.registry.show_catalog import ShowCatalog, ShowInfo

REVIEW_SENTENCE = (
    "This revival of Cabaret finds its ensemble in superb form, and the staging "
    "keeps the audience leaning forward through every number. "
)


def _body(words: int) -> str:
    text = REVIEW_SENTENCE * (words // 20 + 1)
    return " ".join(text.split()[:words])


def _raw(**kwargs) -> dict:
    base = {"showId": "cabaret-2024", "outlet": "The New York Times", "criticName": "Jesse Green"}
    base.update(kwargs)
    return base


@pytest.fixture
def orchestrator():
    return PipelineOrchestrator()


@pytest.fixture
def batch():
    """A mixed batch covering every stage."""
    return [
        # Same review from an aggregator and a scrape
        _raw(outletId="nytimes", source="dtli", originalRating="B+", dtliExcerpt="A knockout revival."),
        _raw(criticName="jesse green", source="scrape", fullText=_body(320),
             url="https://www.nytimes.com/2024/04/21/theater/cabaret-review.html"),
        _raw(outlet="Variety", criticName="Frank Rizzo", originalRating="3.5/5", source="bww"),
        _raw(outlet="Vulture", criticName="Sara Holdren", originalRating="Sentiment: positive", source="dtli"),
        _raw(outlet="Time Out New York", criticName="Adam Feldman",
             fullText=_body(39) + " Subscribe to continue reading this review.", source="scrape"),
        _raw(outlet="The Wrap", criticName="Robert Hofler", originalRating="82",
             dtliThumb="Down", source="dtli"),
        _raw(outlet="Joe's Theater Blog", criticName="Joe Smith", originalRating="4/5", source="scrape"),
        _raw(outlet="Deadline", criticName="Greg Evans", fullText=_body(320),
             publishDate="2014-04-24", source="scrape"),
    ]


def _by_outlet(result, outlet_id):
    return next(r for r in result.corpus if r.outlet_id == outlet_id)


def test_fraction_rating_is_scored(orchestrator, batch):
    """Test "3.5/5" publishes as 70 / Positive."""
    record = _by_outlet(orchestrator.run(batch), "variety")

    assert record.canonical_score == 70
    assert record.bucket == "Positive"
    assert record.score_source == "rating"


def test_outlet_variants_merge_keeping_longer_text(orchestrator, batch):
    """Test "nytimes" and "The New York Times" merge into one record with the full text."""
    result = orchestrator.run(batch)

    nyt = [r for r in result.corpus if r.outlet_id == "nytimes"]
    assert len(nyt) == 1
    record = nyt[0]
    assert record.full_text == _body(320)
    assert record.content_tier == ContentTier.COMPLETE
    assert record.canonical_score == 87
    assert record.excerpts == {"dtli": "A knockout revival."}
    assert record.provenance == ["scrape", "dtli"]

    assert len(result.report.discarded) == 1
    assert result.report.discarded[0].survivor_identity == ("cabaret-2024", "nytimes", "jesse-green")


def test_placeholder_rating_stays_unscored(orchestrator, batch):
    """Test "Sentiment: positive" is published without a score."""
    result = orchestrator.run(batch)
    record = _by_outlet(result, "vulture")

    assert record.canonical_score is None
    assert record.bucket is None
    kinds = {(u.identity, u.kind) for u in result.report.unresolved}
    assert (record.identity_key, "unscored") in kinds
    assert (record.identity_key, "rating") not in kinds


def test_paywall_text_is_truncated(orchestrator, batch):
    """Test a paywall marker at word 40 of 45 publishes as truncated."""
    record = _by_outlet(orchestrator.run(batch), "timeout")

    assert record.content_tier == ContentTier.TRUNCATED
    assert record.flags == (ReviewFlag.TRUNCATED_BY_PAYWALL,)


def test_trusted_thumb_conflict_is_repaired(orchestrator, batch):
    """Test 82 with a trusted Down thumb publishes as 40 with a repair entry."""
    result = orchestrator.run(batch)
    record = next(r for r in result.corpus if r.critic_id == "robert-hofler")

    assert record.canonical_score == 40
    assert record.bucket == "Negative"
    assert record.score_source == "thumb-override"

    repair = next(r for r in result.report.repairs if r.identity == record.identity_key)
    assert (repair.old_score, repair.new_score) == (82, 40)


def test_unknown_outlet_is_kept_and_reported(orchestrator, batch):
    """Test an unlisted outlet keeps a slug id and is reported."""
    result = orchestrator.run(batch)
    record = _by_outlet(result, "joes-theater-blog")

    assert record.canonical_score == 80
    assert any(u.kind == "outlet" and u.identity == record.identity_key for u in result.report.unresolved)


def test_wrong_production_is_quarantined(orchestrator, batch):
    """Test a review of an earlier production leaves the corpus."""
    result = orchestrator.run(batch)

    assert all(r.outlet_id != "deadline" for r in result.corpus)
    assert len(result.quarantined) == 1
    record, decision = result.quarantined[0]
    assert record.outlet_id == "deadline"
    assert decision.action == "quarantine"
    assert decision.flags == ("wrong-production",)
    assert result.report.quarantined == [decision]


def test_quarantine_happens_before_merge(orchestrator):
    """Test an invalid record never donates fields to a valid duplicate."""
    result = orchestrator.run([
        _raw(fullText=_body(320), publishDate="2014-04-24", url="https://www.nytimes.com/2014/cabaret"),
        _raw(dtliExcerpt="A knockout revival.", source="dtli"),
    ])

    assert len(result.corpus) == 1
    record = result.corpus[0]
    assert record.content_tier == ContentTier.EXCERPT
    assert record.publish_date is None
    assert record.url is None
    assert result.report.discarded == []
    assert len(result.quarantined) == 1


def test_corpus_invariants(orchestrator, batch):
    """Test every published record has a consistent bucket and a unique identity."""
    result = orchestrator.run(batch)
    tables = RatingTables.default()

    keys = [r.identity_key for r in result.corpus]
    assert len(keys) == len(set(keys))
    assert keys == sorted(keys)

    for record in result.corpus:
        assert record.bucket == bucket_for(record.canonical_score, tables)
        if record.canonical_score is not None:
            assert 0 <= record.canonical_score <= 100
        assert record.content_tier != ContentTier.INVALID

    report = result.report
    assert report.input_count == len(batch)
    assert report.output_count == len(result.corpus) == 6
    assert sum(report.distribution["tier"].values()) == len(result.corpus)


def test_rerun_on_published_corpus_is_identical(orchestrator, batch):
    """Test feeding the published corpus back in produces the same bytes."""
    first = orchestrator.run(batch)
    second = orchestrator.run(json.loads(first.corpus_json()))

    assert second.corpus_json() == first.corpus_json()
    assert second.report.discarded == []
    assert second.report.quarantined == []


def test_only_active_filters_by_catalog_status():
    """Test closed and unlisted shows are skipped when only_active is set."""
    catalog = ShowCatalog([
        ShowInfo("cabaret-2024", "Cabaret", status="open"),
        ShowInfo("hamilton-2015", "Hamilton", status="closed"),
    ])
    orchestrator = PipelineOrchestrator(catalog=catalog)

    result = orchestrator.run([
        _raw(originalRating="B"),
        _raw(showId="hamilton-2015", originalRating="A"),
        _raw(showId="wicked-2003", originalRating="C"),
    ], only_active=True)

    assert [r.show_id for r in result.corpus] == ["cabaret-2024"]
    assert result.report.input_count == 3

    skipped = [i for i in result.report.issues if i.code == "inactive-show"]
    assert [i.identity for i in skipped] == [
        ("hamilton-2015", "nytimes", "jesse-green"),
        ("wicked-2003", "nytimes", "jesse-green"),
    ]
    assert "closed" in skipped[0].message
    assert "not in catalog" in skipped[1].message
    assert not any(i.fatal for i in skipped)
    assert result.report.errors == []


def test_archived_score_beside_placeholder_is_dropped(orchestrator):
    """Test a stored 50 next to "Sentiment: Positive" publishes unscored and is reported."""
    result = orchestrator.run([
        _raw(outlet="Vulture", criticName="Sara Holdren", originalRating="Sentiment: Positive",
             assignedScore=50, source="dtli"),
    ])
    record = result.corpus[0]

    assert record.canonical_score is None
    assert record.bucket is None
    assert record.score_source is None
    kinds = {u.kind for u in result.report.unresolved if u.identity == record.identity_key}
    assert kinds >= {"placeholder-score", "unscored"}


def test_scorer_fills_unscored_records():
    """Test a high-confidence scorer result becomes the canonical score."""
    scorer = Mock(return_value=ScorerResult(score=78, confidence="high"))
    orchestrator = PipelineOrchestrator(scorer=scorer)

    result = orchestrator.run([_raw(fullText=_body(320))])
    record = result.corpus[0]

    assert record.canonical_score == 78
    assert record.bucket == "Positive"
    assert record.score_source == "llm"
    assert record.llm_confidence == "high"
    scorer.assert_called_once_with(_body(320), "The New York Times", "Jesse Green", "cabaret")


def test_scorer_is_not_asked_twice():
    """Test a stored scorer result is reused on re-run."""
    scorer = Mock(return_value=ScorerResult(score=78, confidence="high"))
    orchestrator = PipelineOrchestrator(scorer=scorer)

    first = orchestrator.run([_raw(fullText=_body(320))])
    second = orchestrator.run(json.loads(first.corpus_json()))

    assert scorer.call_count == 1
    assert second.corpus_json() == first.corpus_json()


def test_low_confidence_score_is_stored_not_promoted():
    """Test a low-confidence result is kept for review but never sets the score."""
    scorer = Mock(return_value=ScorerResult(score=30, confidence="low"))
    result = PipelineOrchestrator(scorer=scorer).run([_raw(fullText=_body(320))])
    record = result.corpus[0]

    assert record.canonical_score is None
    assert record.llm_score == 30
    assert {u.kind for u in result.report.unresolved} >= {"low-confidence", "unscored"}


def test_scorer_failure_is_reported():
    """Test a scorer returning None or raising leaves the record unscored."""
    for scorer in (Mock(return_value=None), Mock(side_effect=RuntimeError("timeout"))):
        result = PipelineOrchestrator(scorer=scorer).run([_raw(fullText=_body(320))])

        assert result.corpus[0].canonical_score is None
        assert any(u.kind == "scorer-error" for u in result.report.unresolved)


def test_scorer_skips_short_text():
    """Test near-empty text is not sent to the scorer."""
    scorer = Mock(return_value=ScorerResult(score=78, confidence="high"))
    PipelineOrchestrator(scorer=scorer).run([_raw(fullText=_body(12))])

    scorer.assert_not_called()


def test_bad_record_does_not_stop_the_batch(orchestrator):
    """Test a malformed raw record is reported and the rest are published."""
    result = orchestrator.run([_raw(originalRating="B"), "not a record", {"outlet": "Variety"}])

    assert len(result.corpus) == 1
    assert [i.code for i in result.report.errors] == ["record-failed", "record-failed"]


def test_bad_record_raises_when_not_continuing():
    """Test failures propagate when graceful degradation is off."""
    orchestrator = PipelineOrchestrator(continue_on_failure=False)

    with pytest.raises(ValueError):
        orchestrator.run([{"outlet": "Variety"}])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
