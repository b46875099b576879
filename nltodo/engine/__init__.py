"""Command interpretation engine for nltodo."""

from nltodo.engine.intent_parser import parse_intent, strip_code_fences
from nltodo.engine.prompts import build_intent_prompt
from nltodo.engine.interpreter import CommandInterpreter, CommandOutcome, CommandResult

__all__ = [
    "parse_intent",
    "strip_code_fences",
    "build_intent_prompt",
    "CommandInterpreter",
    "CommandOutcome",
    "CommandResult",
]
