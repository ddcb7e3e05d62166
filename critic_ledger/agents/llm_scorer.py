"""
External Review Scorer.

Asks an LLM (Gemini) for a 0-100 sentiment score when a review has text
but no usable rating. The engine treats it as an opaque service: a result
or None, never an exception.
"""

import json
import logging
from typing import Optional

import google.generativeai as genai

import config.settings as settings
from critic_ledger.models.score import ScorerResult

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """You are a theater critic analyst who scores professional reviews of stage productions.

Your task:
1. Read the review text
2. Judge how favorably the critic regards the production overall
3. Return a score from 0 to 100 and your confidence in it

Scale:
- 85-100: Rave (enthusiastic, unreserved praise)
- 70-84: Positive (recommends, with minor reservations)
- 55-69: Mixed (real strengths and real problems)
- 35-54: Negative (does not recommend)
- 0-34: Pan (strongly negative)

Rules:
- Score the critic's verdict, not the plot or the subject matter
- Ignore quotes of other critics and audience reactions
- "high" confidence = clear verdict stated explicitly
- "medium" confidence = verdict clear from tone but not stated
- "low" confidence = text is too short, off-topic, or ambivalent

Output valid JSON only."""


def _construct_user_prompt(text: str, outlet_name: str, critic_name: str, show_title: str) -> str:
    """Construct user prompt for one review."""
    return f"""Show: "{show_title}"
Outlet: {outlet_name}
Critic: {critic_name}

Review Text:
\"\"\"{text}\"\"\"

Score the review as JSON:
{{
  "score": <integer 0-100>,
  "confidence": "high|medium|low"
}}"""


class GeminiReviewScorer:
    """
    Scores review text with Gemini.

    Implements the scorer seam used by the pipeline:
    score(text, outlet_name, critic_name, show_title) -> ScorerResult | None
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = settings.SCORER_MODEL,
        temperature: float = settings.LLM_TEMPERATURE,
        max_retries: int = settings.SCORER_MAX_RETRIES
    ):
        """
        Initialize scorer.

        Args:
            api_key: Gemini API key
            model_name: Gemini model to use
            temperature: LLM temperature (0.0 for deterministic)
            max_retries: Number of retries on API or parse failure
        """
        self.model_name = model_name
        self.temperature = temperature
        self.max_retries = max_retries

        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(
            model_name=model_name,
            generation_config={
                "temperature": temperature,
                "response_mime_type": "application/json"
            },
            system_instruction=SYSTEM_PROMPT
        )

        logger.info(f"Initialized GeminiReviewScorer with model={model_name}, temp={temperature}")

    def score(
        self,
        text: str,
        outlet_name: str,
        critic_name: str,
        show_title: str
    ) -> Optional[ScorerResult]:
        """
        Score one review.

        Args:
            text: Review text (full text or joined excerpts)
            outlet_name: Outlet display name
            critic_name: Critic display name
            show_title: Production title

        Returns:
            ScorerResult, or None if the text is empty or every attempt failed
        """
        if not text or not text.strip():
            logger.debug(f"Empty text for {outlet_name}/{critic_name}, not scoring")
            return None

        user_prompt = _construct_user_prompt(text, outlet_name, critic_name, show_title)

        for attempt in range(self.max_retries):
            try:
                response = self.model.generate_content(user_prompt)
                return self._parse_llm_response(response.text)

            except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                logger.error(f"Unusable scorer response (attempt {attempt + 1}): {e}")

            except Exception as e:
                logger.error(f"Scorer API error (attempt {attempt + 1}): {e}")

        logger.warning(f"Max retries reached scoring {outlet_name}/{critic_name}, no score")
        return None

    def _parse_llm_response(self, response_text: str) -> ScorerResult:
        """
        Parse LLM JSON response into a ScorerResult.

        Raises:
            json.JSONDecodeError: If response is not valid JSON
            KeyError: If a required field is missing
            ValueError: If score or confidence is out of range
        """
        data = json.loads(response_text)
        score = data["score"]
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise ValueError(f"Score is not a number: {score!r}")

        return ScorerResult(
            score=int(round(score)),
            confidence=str(data["confidence"]).strip().lower()
        )


# Design Rationale and Trade-offs:
#
# 1. Why return None instead of raising on failure?
#    - One bad response must not stop a batch of hundreds
#    - The pipeline reports the record as a scorer error
#    - Trade-off: Callers cannot tell a timeout from a malformed response
#
# 2. Why temperature=0.0 and JSON response mode?
#    - The same review must get the same score on a re-run
#    - Trade-off: Less varied reasoning in the explanation
#
# 3. Why keep low-confidence results at all?
#    - They are stored for review without becoming the canonical score
#    - Trade-off: Corpus records carry a score field that is not used
