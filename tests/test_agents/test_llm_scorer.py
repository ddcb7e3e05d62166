"""
Unit tests for the Gemini review scorer.

Note: These tests use mocked LLM responses to avoid API costs.
"""

import pytest
import json
from unittest.mock import MagicMock, patch
from critic_ledger.agents.llm_scorer import GeminiReviewScorer

REVIEW_TEXT = "A thrilling, immaculately staged revival that earns every standing ovation."


@pytest.fixture
def mock_scorer():
    """Create scorer with mocked Gemini API."""
    with patch('critic_ledger.agents.llm_scorer.genai'):
        scorer = GeminiReviewScorer(
            api_key="test-key",
            model_name="gemini-1.5-flash",
            temperature=0.0
        )
        return scorer


def test_empty_text_is_not_scored(mock_scorer):
    """Test that empty text returns None without calling the API."""
    assert mock_scorer.score("", "The New York Times", "Jesse Green", "Cabaret") is None
    assert mock_scorer.score("   ", "The New York Times", "Jesse Green", "Cabaret") is None
    mock_scorer.model.generate_content.assert_not_called()


def test_parse_llm_response(mock_scorer):
    """Test parsing valid LLM JSON response."""
    result = mock_scorer._parse_llm_response(json.dumps({"score": 88, "confidence": "High"}))

    assert result.score == 88
    assert result.confidence == "high"


def test_parse_llm_response_rounds_fractional_scores(mock_scorer):
    """Test fractional scores are rounded to an integer."""
    result = mock_scorer._parse_llm_response(json.dumps({"score": 71.6, "confidence": "medium"}))
    assert result.score == 72


@pytest.mark.parametrize("payload,error", [
    ({"confidence": "high"}, KeyError),
    ({"score": "great", "confidence": "high"}, ValueError),
    ({"score": 140, "confidence": "high"}, ValueError),
    ({"score": 80, "confidence": "certain"}, ValueError),
])
def test_parse_llm_response_rejects_bad_payloads(mock_scorer, payload, error):
    """Test malformed responses raise so the retry loop can try again."""
    with pytest.raises(error):
        mock_scorer._parse_llm_response(json.dumps(payload))


def test_score_with_mocked_llm():
    """Test full score() flow with mocked LLM."""
    mock_response = MagicMock()
    mock_response.text = json.dumps({"score": 91, "confidence": "high"})

    with patch('critic_ledger.agents.llm_scorer.genai') as mock_genai:
        mock_model = MagicMock()
        mock_model.generate_content.return_value = mock_response
        mock_genai.GenerativeModel.return_value = mock_model

        scorer = GeminiReviewScorer(api_key="test-key", temperature=0.0)
        result = scorer.score(REVIEW_TEXT, "The New York Times", "Jesse Green", "Cabaret")

        assert result.score == 91
        assert result.confidence == "high"

        prompt = mock_model.generate_content.call_args[0][0]
        assert "Cabaret" in prompt
        assert "Jesse Green" in prompt
        mock_genai.configure.assert_called_once_with(api_key="test-key")


def test_json_decode_error_retry():
    """Test retry logic on JSON parsing errors."""
    mock_responses = [
        "invalid json{{{",
        "still invalid",
        json.dumps({"score": 40, "confidence": "medium"})
    ]

    with patch('critic_ledger.agents.llm_scorer.genai') as mock_genai:
        mock_model = MagicMock()
        mock_model.generate_content.side_effect = [
            MagicMock(text=resp) for resp in mock_responses
        ]
        mock_genai.GenerativeModel.return_value = mock_model

        scorer = GeminiReviewScorer(api_key="test-key", max_retries=3)
        result = scorer.score(REVIEW_TEXT, "Variety", "Frank Rizzo", "Cabaret")

        # Should succeed on third attempt
        assert result.score == 40
        assert mock_model.generate_content.call_count == 3


def test_api_errors_exhaust_retries():
    """Test that persistent API failures return None instead of raising."""
    with patch('critic_ledger.agents.llm_scorer.genai') as mock_genai:
        mock_model = MagicMock()
        mock_model.generate_content.side_effect = RuntimeError("quota exceeded")
        mock_genai.GenerativeModel.return_value = mock_model

        scorer = GeminiReviewScorer(api_key="test-key", max_retries=2)
        result = scorer.score(REVIEW_TEXT, "Variety", "Frank Rizzo", "Cabaret")

        assert result is None
        assert mock_model.generate_content.call_count == 2


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
