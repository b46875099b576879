"""Task creation factory for nltodo.

This module centralizes task creation so ids, timestamps and defaults are assigned in
one place, whether the task comes from a "create" intent or a direct API call.
"""

import uuid
from datetime import datetime
from typing import Optional, Dict, Any

from nltodo.models.task import Task


def normalize_annotation(value: Optional[str]) -> Optional[str]:
    """Normalize a free-text time/date annotation.

    Empty or whitespace-only strings are treated as absent. Anything else is kept
    verbatim (annotations are never parsed).
    """
    if value is None:
        return None
    if not str(value).strip():
        return None
    return value


def create_task_defaults() -> Dict[str, Any]:
    """Get default task values as a dictionary."""
    return {
        "time": None,
        "date": None,
        "finished": False,
    }


def create_task_base(
    title: str,
    time: Optional[str] = None,
    date: Optional[str] = None,
    created_at: Optional[datetime] = None,
    finished: Optional[bool] = None,
) -> Task:
    """Create a task with defaults, allowing overrides.

    Args:
        title: Task title (required, non-empty)
        time: Free-text time annotation
        date: Free-text date annotation
        created_at: Creation timestamp (defaults to now, UTC)
        finished: Finished flag (defaults to False)

    Returns:
        Task object with a fresh UUID v4 id
    """
    defaults = create_task_defaults()
    return Task(
        id=str(uuid.uuid4()),
        title=title,
        time=normalize_annotation(time) if time is not None else defaults["time"],
        date=normalize_annotation(date) if date is not None else defaults["date"],
        created_at=created_at or datetime.utcnow(),
        finished=finished if finished is not None else defaults["finished"],
    )
