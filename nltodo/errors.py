"""Error taxonomy for nltodo.

Every error here is terminal for the single command that raised it. Nothing is retried
internally. "Task not found at position" and "unrecognized intent" are not errors: they
are normal interpreter outcomes reported in the command result.
"""


class NltodoError(Exception):
    """Base class for all nltodo errors."""


class InvalidInputError(NltodoError, ValueError):
    """Command text is empty or whitespace-only."""


class ClassifierError(NltodoError):
    """Base class for failures talking to (or understanding) the intent classifier."""


class ClassifierUnavailableError(ClassifierError):
    """Classifier call failed: missing API key, network error, or non-success status."""

    def __init__(self, message: str, *, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyResponseError(ClassifierError):
    """Classifier answered but the response carried no text."""


class MalformedIntentError(ClassifierError):
    """Classifier text is not JSON, or is JSON that violates the intent schema."""

    def __init__(self, message: str, *, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class StoreError(NltodoError):
    """Task store operation failed (transport, connectivity, or integrity)."""
