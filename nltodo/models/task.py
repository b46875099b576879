"""Task data model for nltodo."""

from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, field_validator


class Task(BaseModel):
    """Canonical Task model.

    Position ("2nd task") is never stored here: it is derived at query time from
    ``created_at`` ordering over the current store contents.
    """

    id: str = Field(..., description="Opaque task identifier, assigned at creation")
    title: str = Field(..., min_length=1, description="Task description")
    time: Optional[str] = Field(None, description="Free-text time annotation, stored verbatim")
    date: Optional[str] = Field(None, description="Free-text date annotation, stored verbatim")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp (ordering key)")
    finished: bool = Field(False, description="Whether the task is finished")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True


class TaskUpdate(BaseModel):
    """Partial edit for a task (direct, non-NLP edits from the UI).

    Only fields the caller actually sent are applied. An explicit ``null`` for
    ``time``/``date`` clears the stored value; ``title`` can only be replaced, and
    is trimmed (a blank title is rejected).
    """

    title: Optional[str] = Field(None, min_length=1)
    time: Optional[str] = None
    date: Optional[str] = None
    finished: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def _validate_title(cls, v):
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v

    def to_fields(self) -> Dict[str, Any]:
        """Return the partial field mapping for TaskRepository.update_fields()."""
        fields: Dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if name in ("time", "date"):
                fields[name] = value or None
            elif value is not None:
                fields[name] = value
        return fields
