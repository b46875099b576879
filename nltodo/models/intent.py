"""Structured intents produced from classifier output.

The classifier's text is untrusted. ``nltodo.engine.intent_parser`` turns it into
exactly one of the variants below; nothing downstream looks at raw classifier text.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Union


class IntentKind(str, Enum):
    """Intents the classifier is asked to choose from."""
    CREATE = "create"
    DELETE = "delete"
    UPDATE = "update"
    FINISHED = "finished"


@dataclass(frozen=True)
class RecognizedIntent:
    """A schema-valid intent.

    ``provided`` lists the optional keys that were present in the classifier object,
    so "present but empty" (clear the field) stays distinguishable from "absent"
    (leave the field alone).
    """

    kind: IntentKind
    payload: Dict[str, Any]
    title: Optional[str] = None
    time: Optional[str] = None
    date: Optional[str] = None
    task_position: Optional[int] = None
    provided: FrozenSet[str] = field(default_factory=frozenset)

    def has(self, name: str) -> bool:
        return name in self.provided


@dataclass(frozen=True)
class UnrecognizedIntent:
    """A JSON object whose ``intent`` is missing or not one of IntentKind."""

    payload: Dict[str, Any]
    intent: Any = None


@dataclass(frozen=True)
class MalformedIntent:
    """Classifier text that is not JSON, or JSON that violates the schema."""

    raw_text: str
    reason: str


ParsedIntent = Union[RecognizedIntent, UnrecognizedIntent, MalformedIntent]
