"""Parsing and validation of intent classifier output.

This is the only place raw classifier text is interpreted. The result is always one of
RecognizedIntent, UnrecognizedIntent or MalformedIntent; the caller decides what each
means (MalformedIntent is terminal for the command, UnrecognizedIntent is a no-op).
"""

import json
import logging
import math
import re
from typing import Any, Dict, Optional, Tuple

from nltodo.models.constants import LOG_SNIPPET_CHARS
from nltodo.models.intent import (
    IntentKind,
    ParsedIntent,
    RecognizedIntent,
    UnrecognizedIntent,
    MalformedIntent,
)

logger = logging.getLogger(__name__)

# Opening fence with an optional language tag, e.g. ```json
_OPENING_FENCE_RE = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\n?")
_CLOSING_FENCE_RE = re.compile(r"\n?```$")

# "2", " 2 ", "2nd"
_POSITION_STR_RE = re.compile(r"^\s*(-?\d+)\s*(?:st|nd|rd|th)?\s*$", re.I)

OPTIONAL_FIELDS = ("title", "time", "date", "taskPosition")


class _SchemaViolation(ValueError):
    pass


def strip_code_fences(text: str) -> str:
    """Remove a leading/trailing markdown code fence, if present.

    Purely textual: only the outermost fence markers are removed, nothing inside is
    touched.
    """
    stripped = text.strip()
    if stripped.startswith("```"):
        stripped = _OPENING_FENCE_RE.sub("", stripped, count=1)
    if stripped.endswith("```"):
        stripped = _CLOSING_FENCE_RE.sub("", stripped, count=1)
    return stripped.strip()


def _optional_text(payload: Dict[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None or isinstance(value, str):
        return value
    raise _SchemaViolation(f"'{key}' must be a string or null, got {type(value).__name__}")


def _task_position(payload: Dict[str, Any]) -> Optional[int]:
    value = payload.get("taskPosition")
    if value is None:
        return None
    # bool is an int subclass; true/false are not positions
    if isinstance(value, bool):
        raise _SchemaViolation("'taskPosition' must be a number, got a boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise _SchemaViolation(f"'taskPosition' must be a whole number, got {value}")
    if isinstance(value, str):
        if not value.strip():
            return None
        m = _POSITION_STR_RE.match(value)
        if m:
            return int(m.group(1))
    raise _SchemaViolation(f"'taskPosition' is not a position: {value!r}")


def _intent_kind(value: Any) -> Optional[IntentKind]:
    if not isinstance(value, str):
        return None
    try:
        return IntentKind(value.strip().lower())
    except ValueError:
        return None


def _recognize(kind: IntentKind, payload: Dict[str, Any]) -> RecognizedIntent:
    provided = frozenset(key for key in OPTIONAL_FIELDS if key in payload)
    return RecognizedIntent(
        kind=kind,
        payload=payload,
        title=_optional_text(payload, "title"),
        time=_optional_text(payload, "time"),
        date=_optional_text(payload, "date"),
        task_position=_task_position(payload),
        provided=provided,
    )


def _reject_constant(name: str):
    # NaN/Infinity are not JSON and cannot be echoed back in a response body
    raise ValueError(f"non-standard JSON constant {name}")


def _finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"number out of range: {literal}")
    return value


def load_json_object(raw_text: str) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """Decode fenced or bare JSON. Returns (object, None) or (None, reason)."""
    text = strip_code_fences(raw_text or "")
    try:
        payload = json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)
    except json.JSONDecodeError as e:
        return None, f"Classifier output is not valid JSON: {e.msg}"
    except ValueError as e:
        return None, f"Classifier output is not valid JSON: {e}"
    if not isinstance(payload, dict):
        return None, f"Classifier output must be a JSON object, got {type(payload).__name__}"
    return payload, None


def parse_intent(raw_text: str) -> ParsedIntent:
    """Turn classifier text into a tagged intent variant. Never raises."""
    payload, reason = load_json_object(raw_text)
    if payload is None:
        logger.warning(f"{reason}. Response: {(raw_text or '')[:LOG_SNIPPET_CHARS]}")
        return MalformedIntent(raw_text=raw_text or "", reason=reason)

    kind = _intent_kind(payload.get("intent"))
    if kind is None:
        logger.warning(f"Unrecognized intent {payload.get('intent')!r} from classifier")
        return UnrecognizedIntent(payload=payload, intent=payload.get("intent"))

    try:
        intent = _recognize(kind, payload)
    except _SchemaViolation as e:
        logger.warning(f"Classifier output violates intent schema: {e}")
        return MalformedIntent(raw_text=raw_text, reason=str(e))

    logger.debug(f"Parsed intent {intent.kind.value} (position={intent.task_position}, fields={sorted(intent.provided)})")
    return intent
