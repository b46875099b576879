"""Prompt contract with the intent classifier."""

import json

# Four output shapes, JSON only, with worked examples (ordinals map to integer positions).
INTENT_PROMPT_TEMPLATE = """You are a todo assistant. Parse the user's input and determine their intent.

User input: {text}

Return a JSON object with one of these structures:

If the user wants to CREATE a todo:
{{
  "intent": "create",
  "title": "extracted title or description",
  "time": "extracted time if mentioned (e.g., \\"3pm\\", \\"14:30\\") or null",
  "date": "extracted date if mentioned (e.g., \\"tomorrow\\", \\"2024-12-25\\") or null"
}}

If the user wants to DELETE a todo:
{{
  "intent": "delete",
  "taskPosition": <number> (e.g., 1 for "first task", 2 for "2nd task", 3 for "third task")
}}

If the user wants to UPDATE a todo:
{{
  "intent": "update",
  "taskPosition": <number> (e.g., 1 for "first task", 2 for "2nd task", 3 for "third task"),
  "title": "new title or description",
  "time": "new time if mentioned or null",
  "date": "new date if mentioned or null"
}}

If the user wants to MARK a todo as FINISHED:
{{
  "intent": "finished",
  "taskPosition": <number> (e.g., 1 for "first task", 2 for "2nd task", 3 for "third task")
}}

Examples:
- "reminder to cook food from now" -> {{"intent": "create", "title": "reminder to cook food", "time": null, "date": null}}
- "delete 2nd task" -> {{"intent": "delete", "taskPosition": 2}}
- "delete first task" -> {{"intent": "delete", "taskPosition": 1}}
- "update 2nd task to buy groceries" -> {{"intent": "update", "taskPosition": 2, "title": "buy groceries", "time": null, "date": null}}
- "change first task to meeting at 3pm tomorrow" -> {{"intent": "update", "taskPosition": 1, "title": "meeting", "time": "3pm", "date": "tomorrow"}}
- "finished task 2" -> {{"intent": "finished", "taskPosition": 2}}
- "finished 1st task" -> {{"intent": "finished", "taskPosition": 1}}
- "meeting at 3pm tomorrow" -> {{"intent": "create", "title": "meeting", "time": "3pm", "date": "tomorrow"}}

Return ONLY valid JSON, no other text."""


def build_intent_prompt(text: str) -> str:
    """Embed the user's text (JSON-quoted, so quotes in it can't break the prompt)."""
    return INTENT_PROMPT_TEMPLATE.format(text=json.dumps(text, ensure_ascii=False))
