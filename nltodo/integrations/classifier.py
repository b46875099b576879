"""Intent classifier selection.

Any object with ``classify(prompt: str) -> str`` is an intent classifier. The provider is
chosen by INTENT_PROVIDER (``gemini`` by default, or ``openai``).
"""

import os
import logging
from typing import Optional, Protocol
from dotenv import load_dotenv

from nltodo.models.constants import PROVIDER_GEMINI, PROVIDER_OPENAI, DEFAULT_PROVIDER

load_dotenv()

logger = logging.getLogger(__name__)


class IntentClassifier(Protocol):
    """External NLP service turning a prompt into (hopefully JSON) text."""

    def classify(self, prompt: str) -> str:
        ...


def configured_provider() -> str:
    return os.getenv("INTENT_PROVIDER", DEFAULT_PROVIDER).strip().lower()


def build_classifier(provider: Optional[str] = None) -> IntentClassifier:
    """Build a classifier for the given provider name (default: from environment).

    Raises:
        ValueError: unknown provider name
    """
    provider = (provider or configured_provider()).lower()
    if provider == PROVIDER_GEMINI:
        from nltodo.integrations.gemini_client import GeminiClient
        return GeminiClient()
    if provider == PROVIDER_OPENAI:
        from nltodo.integrations.openai_client import OpenAIClient
        return OpenAIClient()
    raise ValueError(f"Unknown INTENT_PROVIDER '{provider}' (expected '{PROVIDER_GEMINI}' or '{PROVIDER_OPENAI}')")


# Classifier instance (singleton pattern); holds configuration only, no command state
_classifier: Optional[IntentClassifier] = None


def get_classifier() -> IntentClassifier:
    """Get or create the classifier instance (dependency for FastAPI)."""
    global _classifier
    if _classifier is None:
        _classifier = build_classifier()
        logger.info(f"Intent classifier: {type(_classifier).__name__}")
    return _classifier
