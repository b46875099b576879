"""SQLAlchemy database models for nltodo."""

from datetime import datetime
import uuid
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Index

from nltodo.database.database import Base


class TaskDB(Base):
    """Database model for Task."""

    __tablename__ = "todos"
    __table_args__ = (
        # Position resolution: unfinished tasks ordered by creation
        Index("ix_todos_finished_created_at", "finished", "created_at"),
    )

    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # Basic fields
    title = Column(String, nullable=False)
    time = Column(String, nullable=True)
    date = Column(String, nullable=True)
    finished = Column(Boolean, nullable=False, default=False)

    # Ordering: created_at is the ordering key, seq breaks ties in insertion order
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    seq = Column(Integer, nullable=False, default=0)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from nltodo.models.task import Task

        return Task(
            id=self.id,
            title=self.title,
            time=self.time,
            date=self.date,
            created_at=self.created_at,
            finished=bool(self.finished),
        )

    @classmethod
    def from_pydantic(cls, task, seq: int = 0):
        """Create database model from Pydantic model."""
        return cls(
            id=task.id,
            title=task.title,
            time=task.time,
            date=task.date,
            created_at=task.created_at,
            finished=task.finished,
            seq=seq,
        )
