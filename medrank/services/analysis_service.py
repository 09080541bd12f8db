"""
AI performance summary for the latest Grand Test.

Sends one prompt to Gemini through the google-genai client and returns the
text as-is. Failures degrade to fixed messages; there is no retry.
"""
import logging
from typing import Any, Optional, Sequence

from google import genai
from google.genai import types

from medrank.core.config import settings
from medrank.core.subjects import SUBJECTS
from medrank.schemas.grand_test import GrandTest

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "API Key is missing. Please configure the environment to use AI features."
NO_DATA_MESSAGE = "No test data available for analysis."
REQUEST_FAILED_MESSAGE = "An error occurred while communicating with the AI service."
EMPTY_RESPONSE_MESSAGE = "Could not generate analysis."

PROMPT_TEMPLATE = """You are an expert MBBS study coach. Analyze the following subject-wise performance for a student's latest Grand Test ({test_name}).

The subjects are categorized as:
- Rank Building (Basics)
- Rank Maintaining (Clinical Core)
- Rank Deciding (Short Subjects)

Performance Data:
{scores_summary}

Color Code Reference:
0-50%: Red (Weak)
50-80%: Yellow (Average)
80-100%: Green (Strong)

Provide a concise analysis:
1. Identify the critical "Red" zone subjects that are dragging the rank down.
2. Suggest specific focus areas based on the categories (e.g., if Rank Building is weak, emphasize basic sciences).
3. Give a short motivational action plan for the next test.

Keep the tone professional, encouraging, and strategic."""

def build_prompt(test: GrandTest) -> str:
    lines = [
        f"{subject.name} ({subject.category.value}): {test.percentage_for(subject.id)}%"
        for subject in SUBJECTS
    ]
    return PROMPT_TEMPLATE.format(test_name=test.name, scores_summary="\n".join(lines))

class AnalysisService:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[Any] = None,
    ):
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.model = model or settings.GEMINI_MODEL
        # Lazy client: building one without a key raises
        self._client = client

    def _get_client(self):
        if self._client is None:
            http_options = types.HttpOptions(
                base_url=settings.GEMINI_API_URL or None,
                timeout=int(settings.GEMINI_TIMEOUT * 1000),
            )
            self._client = genai.Client(api_key=self.api_key, http_options=http_options)
        return self._client

    async def analyze_performance(self, tests: Sequence[GrandTest]) -> str:
        """
        Ask the model for a coaching summary of the most recent test.
        Returns the response text, or one of the fixed fallback messages.
        """
        if not self.api_key:
            logger.warning("GEMINI_API_KEY not set. AI analysis is disabled.")
            return MISSING_KEY_MESSAGE

        if not tests:
            return NO_DATA_MESSAGE
        latest_test = tests[-1]

        prompt = build_prompt(latest_test)
        try:
            client = self._get_client()
            response = await client.aio.models.generate_content(model=self.model, contents=prompt)
            text = response.text if response else None
        except Exception as e:
            logger.error(f"AI Analysis failed: {e}")
            return REQUEST_FAILED_MESSAGE

        return text or EMPTY_RESPONSE_MESSAGE

analysis_service = AnalysisService()
