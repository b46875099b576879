"""Constants for nltodo.

This module centralizes magic values and defaults used throughout the application.
"""

# Command result messages (user-visible)
TODO_NOT_FOUND_MESSAGE = "Todo not found"
TODO_DELETED_MESSAGE = "Todo deleted"
TODO_DELETE_FAILED_MESSAGE = "Failed to delete"

# Intent classifier providers
PROVIDER_GEMINI = "gemini"
PROVIDER_OPENAI = "openai"
DEFAULT_PROVIDER = PROVIDER_GEMINI

# Classifier models
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-lite"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_CLASSIFIER_TIMEOUT_SEC = 30

# Log truncation for classifier text (never log full payloads)
LOG_SNIPPET_CHARS = 100

# UI: wait this long after the last keystroke before submitting a command
SUBMIT_DEBOUNCE_MS = 2000
