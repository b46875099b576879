"""Data models for nltodo."""

from nltodo.models.task import Task, TaskUpdate
from nltodo.models.intent import (
    IntentKind,
    RecognizedIntent,
    UnrecognizedIntent,
    MalformedIntent,
    ParsedIntent,
)

__all__ = [
    "Task",
    "TaskUpdate",
    "IntentKind",
    "RecognizedIntent",
    "UnrecognizedIntent",
    "MalformedIntent",
    "ParsedIntent",
]
