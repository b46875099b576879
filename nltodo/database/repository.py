"""Repository layer for database operations.

`TaskRepository` is the task store consumed by the command interpreter. Every
SQLAlchemy failure is rolled back and re-raised as `StoreError`.
"""

import logging
from typing import Any, Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from nltodo.database.models import TaskDB
from nltodo.errors import StoreError
from nltodo.models.task import Task

logger = logging.getLogger(__name__)

# Fields update_fields() may change; id and created_at are immutable.
UPDATABLE_FIELDS = frozenset({"title", "time", "date", "finished"})


class TaskRepository:
    """Repository for Task database operations."""

    def __init__(self, db: Session):
        self.db = db

    def _ordered_query(self, finished: Optional[bool] = None):
        query = self.db.query(TaskDB)
        if finished is not None:
            query = query.filter(TaskDB.finished == finished)
        return query.order_by(TaskDB.created_at.asc(), TaskDB.seq.asc())

    def _next_seq(self) -> int:
        current = self.db.query(func.max(TaskDB.seq)).scalar()
        return (current or 0) + 1

    def create(self, task: Task) -> Task:
        """Insert a new task."""
        try:
            task_db = TaskDB.from_pydantic(task, seq=self._next_seq())
            self.db.add(task_db)
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Created task {task.id}: {task.title[:50]}")
            return task_db.to_pydantic()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create task {task.id}: {type(e).__name__}: {str(e)}")
            raise StoreError(f"Failed to create task: {type(e).__name__}") from e

    def get(self, task_id: str) -> Optional[Task]:
        """Get task by ID."""
        try:
            task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to get task {task_id}: {type(e).__name__}: {str(e)}")
            raise StoreError(f"Failed to get task: {type(e).__name__}") from e
        return task_db.to_pydantic() if task_db else None

    def get_all(self) -> List[Task]:
        """Get all tasks sorted by creation date (oldest first)."""
        return self.get_filtered(None)

    def get_filtered(self, finished: Optional[bool]) -> List[Task]:
        """Get tasks matching the finished flag (None = all), oldest first."""
        try:
            tasks_db = self._ordered_query(finished).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to list tasks (finished={finished}): {type(e).__name__}: {str(e)}")
            raise StoreError(f"Failed to list tasks: {type(e).__name__}") from e
        return [task_db.to_pydantic() for task_db in tasks_db]

    def get_by_position(self, index: int, finished: Optional[bool] = None) -> Optional[Task]:
        """Resolve a 0-based position against the current ordered (filtered) list.

        Out-of-range indexes, negative ones included, are a normal miss and return None.
        The position is derived from the store at call time; a concurrent insert or
        delete between this read and a follow-up mutation can shift it.
        """
        tasks = self.get_filtered(finished)
        if index < 0 or index >= len(tasks):
            logger.debug(f"No task at position {index} (finished={finished}, count={len(tasks)})")
            return None
        return tasks[index]

    def update_fields(self, task_id: str, fields: Dict[str, Any]) -> Optional[Task]:
        """Apply a partial update. Returns the updated task, or None if it does not exist.

        A value of None clears the field (time/date).
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {', '.join(sorted(unknown))}")

        try:
            task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
            if not task_db:
                logger.debug(f"Task {task_id} not found for update")
                return None
            for name, value in fields.items():
                setattr(task_db, name, value)
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Updated task {task_id}: {sorted(fields)}")
            return task_db.to_pydantic()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update task {task_id}: {type(e).__name__}: {str(e)}")
            raise StoreError(f"Failed to update task: {type(e).__name__}") from e

    def delete(self, task_id: str) -> bool:
        """Permanently delete a task by ID."""
        try:
            task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
            if not task_db:
                return False
            self.db.delete(task_db)
            self.db.commit()
            logger.debug(f"Deleted task {task_id}")
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete task {task_id}: {type(e).__name__}: {str(e)}")
            raise StoreError(f"Failed to delete task: {type(e).__name__}") from e
