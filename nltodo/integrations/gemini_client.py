"""Gemini API integration for nltodo.

Calls the Generative Language REST API (`models/{model}:generateContent`) with a JSON
body and the API key in the `x-goog-api-key` header, and returns the first candidate's
text. The call is made once; failures are raised, never retried.
"""

import os
import logging
from typing import Optional
import requests
from dotenv import load_dotenv

from nltodo.errors import ClassifierUnavailableError, EmptyResponseError
from nltodo.models.constants import (
    DEFAULT_GEMINI_MODEL,
    GEMINI_API_BASE,
    DEFAULT_CLASSIFIER_TIMEOUT_SEC,
)

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def _api_key_from_env() -> Optional[str]:
    # GEMINI_API is the legacy variable name
    return os.getenv("GEMINI_API_KEY") or os.getenv("GEMINI_API")


class GeminiClient:
    """Client for the Gemini generateContent endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize Gemini client.

        Args:
            api_key: Gemini API key. If None, reads GEMINI_API_KEY (or GEMINI_API).
            model: Model id. If None, reads GEMINI_MODEL.
            timeout: Transport timeout in seconds. If None, reads GEMINI_TIMEOUT_SEC.

        Note:
            A missing key does not fail construction; classify() raises
            ClassifierUnavailableError instead, so the app still serves the list.
        """
        self.api_key = api_key or _api_key_from_env()
        self.model = model or os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL)
        self.timeout = timeout or float(os.getenv("GEMINI_TIMEOUT_SEC", str(DEFAULT_CLASSIFIER_TIMEOUT_SEC)))

        if not self.api_key:
            logger.warning("GEMINI_API_KEY not found in environment. Natural-language commands will fail.")

    @property
    def url(self) -> str:
        return f"{GEMINI_API_BASE}/models/{self.model}:generateContent"

    def classify(self, prompt: str) -> str:
        """Send the prompt and return the raw response text.

        Raises:
            ClassifierUnavailableError: key missing, network error, or non-2xx status
            EmptyResponseError: response has no candidate text
        """
        if not self.api_key:
            raise ClassifierUnavailableError("GEMINI_API_KEY not configured")

        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }
        body = {"contents": [{"parts": [{"text": prompt}]}]}

        try:
            response = requests.post(self.url, headers=headers, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            # Don't log full error message as it might contain sensitive info
            logger.error(f"Error calling Gemini API: {type(e).__name__}")
            raise ClassifierUnavailableError(f"Failed to call Gemini API: {type(e).__name__}") from e

        if not response.ok:
            if response.status_code == 429:
                logger.warning("Gemini API rate limit exceeded. Please wait before retrying.")
            else:
                logger.error(f"Gemini API error: {response.status_code}")
            raise ClassifierUnavailableError(
                f"Gemini API returned status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Gemini API returned a non-JSON body")
            raise EmptyResponseError("Gemini API returned a non-JSON body") from e

        text = extract_text(data)
        if not text or not text.strip():
            logger.error("No text in Gemini API response")
            raise EmptyResponseError("No response text from Gemini API")

        logger.debug(f"Gemini responded with {len(text)} characters")
        return text


def extract_text(data) -> Optional[str]:
    """Return candidates[0].content.parts[0].text, or None if any link is missing."""
    if not isinstance(data, dict):
        return None
    candidates = data.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return None
    content = candidates[0].get("content")
    if not isinstance(content, dict):
        return None
    parts = content.get("parts") or []
    if not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) else None
