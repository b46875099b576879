"""OpenAI API integration for nltodo.

Alternative intent classifier backend (INTENT_PROVIDER=openai). Sends the intent prompt
as a chat completion and returns the raw message text. Failures are raised, never
degraded: a command cannot be applied without an intent.
"""

import os
import logging
from typing import Optional
from openai import OpenAI, APIError
from dotenv import load_dotenv

from nltodo.errors import ClassifierUnavailableError, EmptyResponseError
from nltodo.models.constants import DEFAULT_OPENAI_MODEL, DEFAULT_CLASSIFIER_TIMEOUT_SEC

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a todo assistant. Respond only with valid JSON."


class OpenAIClient:
    """Client for OpenAI API integration."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key. If None, reads from OPENAI_API_KEY environment variable.
            model: Model id. If None, reads OPENAI_MODEL.

        Note:
            If API key is not provided and not found in environment, the client will still
            initialize but classify() raises ClassifierUnavailableError.
        """
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.model = model or os.getenv("OPENAI_MODEL", DEFAULT_OPENAI_MODEL)
        self.client = None

        if self.api_key:
            self.client = OpenAI(api_key=self.api_key, timeout=DEFAULT_CLASSIFIER_TIMEOUT_SEC, max_retries=0)
        else:
            logger.warning("OPENAI_API_KEY not found in environment. Natural-language commands will fail.")

    def classify(self, prompt: str) -> str:
        """Send the prompt and return the raw response text.

        Raises:
            ClassifierUnavailableError: key missing, API or network error
            EmptyResponseError: completion has no message text
        """
        if not self.client:
            raise ClassifierUnavailableError("OPENAI_API_KEY not configured")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.0,  # Classification, not generation
                max_tokens=200,
            )
        except APIError as e:
            error_code = getattr(e, 'code', None)
            status_code = getattr(e, 'status_code', None)

            if error_code == 'insufficient_quota':
                logger.warning("OpenAI API quota insufficient. Please check billing/payment method in OpenAI dashboard.")
            elif status_code == 429:
                logger.warning("OpenAI API rate limit exceeded. Please wait before retrying.")
            else:
                logger.error(f"OpenAI API error: {status_code or 'unknown'} ({error_code or 'unknown'})")

            # Don't log full error message as it might contain sensitive info
            raise ClassifierUnavailableError(
                f"OpenAI API error: {status_code or 'unknown'}",
                status_code=status_code,
            ) from e

        if not response.choices:
            logger.error("OpenAI returned no choices")
            raise EmptyResponseError("No response from OpenAI API")

        content = response.choices[0].message.content
        if not content or not content.strip():
            logger.error("OpenAI returned empty message content")
            raise EmptyResponseError("No response text from OpenAI API")

        logger.debug(f"OpenAI responded with {len(content)} characters")
        return content
