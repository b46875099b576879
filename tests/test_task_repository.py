"""Tests for TaskRepository CRUD operations and position resolution."""

import pytest
from datetime import timedelta
from unittest.mock import patch
from sqlalchemy.exc import OperationalError

from nltodo.errors import StoreError
from nltodo.models.task_factory import create_task_base


class TestTaskRepository:
    """Test TaskRepository CRUD operations."""

    def test_create_task(self, task_repository):
        """Test creating a task."""
        task = create_task_base(title="Buy milk", time="3pm", date="tomorrow")
        created = task_repository.create(task)

        assert created.id == task.id
        assert created.title == "Buy milk"
        assert created.time == "3pm"
        assert created.date == "tomorrow"
        assert created.finished is False

    def test_get_task_by_id(self, task_repository, make_tasks):
        """Test retrieving a task by ID."""
        (created,) = make_tasks("Task 1")
        retrieved = task_repository.get(created.id)

        assert retrieved is not None
        assert retrieved.title == "Task 1"
        assert retrieved.created_at == created.created_at

    def test_get_nonexistent_task(self, task_repository):
        """Test retrieving a nonexistent task returns None."""
        assert task_repository.get("nonexistent-id") is None

    def test_get_all_sorted_oldest_first(self, task_repository, base_time):
        """Test that get_all() returns tasks sorted by creation date (oldest first)."""
        # Create in reverse order
        for i, title in reversed(list(enumerate(["Task 1", "Task 2", "Task 3"]))):
            task_repository.create(create_task_base(title=title, created_at=base_time + timedelta(minutes=i)))

        titles = [t.title for t in task_repository.get_all()]
        assert titles == ["Task 1", "Task 2", "Task 3"]

    def test_equal_timestamps_keep_insertion_order(self, task_repository, base_time):
        """Tasks created at the same instant are listed in insertion order."""
        for title in ["first", "second", "third"]:
            task_repository.create(create_task_base(title=title, created_at=base_time))

        assert [t.title for t in task_repository.get_all()] == ["first", "second", "third"]

    def test_get_filtered_by_finished(self, task_repository, make_tasks):
        """Test filtering on the finished flag."""
        make_tasks("Open 1", {"title": "Done", "finished": True}, "Open 2")

        assert [t.title for t in task_repository.get_filtered(False)] == ["Open 1", "Open 2"]
        assert [t.title for t in task_repository.get_filtered(True)] == ["Done"]
        assert len(task_repository.get_filtered(None)) == 3

    def test_update_fields_partial(self, task_repository, make_tasks):
        """Only the given fields change; created_at and id are untouched."""
        (task,) = make_tasks({"title": "Meeting", "time": "3pm", "date": "tomorrow"})

        updated = task_repository.update_fields(task.id, {"title": "Team meeting"})

        assert updated.id == task.id
        assert updated.title == "Team meeting"
        assert updated.time == "3pm"
        assert updated.date == "tomorrow"
        assert updated.created_at == task.created_at

    def test_update_fields_none_clears(self, task_repository, make_tasks):
        """None clears time/date."""
        (task,) = make_tasks({"title": "Meeting", "time": "3pm", "date": "tomorrow"})

        updated = task_repository.update_fields(task.id, {"time": None})

        assert updated.time is None
        assert updated.date == "tomorrow"

    def test_update_nonexistent_task_returns_none(self, task_repository):
        assert task_repository.update_fields("nonexistent-id", {"finished": True}) is None

    def test_update_immutable_field_raises_error(self, task_repository, make_tasks):
        """created_at and id are never updatable."""
        (task,) = make_tasks("Task")

        with pytest.raises(ValueError, match="created_at"):
            task_repository.update_fields(task.id, {"created_at": task.created_at})

    def test_delete_task(self, task_repository, make_tasks):
        """Deletion is permanent."""
        (task,) = make_tasks("Delete me")

        assert task_repository.delete(task.id) is True
        assert task_repository.get(task.id) is None
        assert task_repository.get_all() == []

    def test_delete_nonexistent_task(self, task_repository):
        """Test deleting a nonexistent task returns False."""
        assert task_repository.delete("nonexistent-id") is False

    def test_store_failure_raises_store_error(self, task_repository):
        """SQLAlchemy errors surface as StoreError."""
        error = OperationalError("SELECT", {}, Exception("database is locked"))
        with patch.object(task_repository.db, "query", side_effect=error):
            with pytest.raises(StoreError):
                task_repository.get_all()


class TestPositionResolution:
    """Test get_by_position()."""

    def test_resolves_zero_based_index(self, task_repository, make_tasks):
        a, b, c = make_tasks("A", "B", "C")

        assert task_repository.get_by_position(0).id == a.id
        assert task_repository.get_by_position(2).id == c.id

    def test_out_of_range_is_a_miss(self, task_repository, make_tasks):
        make_tasks("A", "B")

        assert task_repository.get_by_position(2) is None
        assert task_repository.get_by_position(-1) is None

    def test_empty_store_is_a_miss(self, task_repository):
        assert task_repository.get_by_position(0, finished=False) is None

    def test_unfinished_filter_skips_finished_tasks(self, task_repository, make_tasks):
        a, done, c = make_tasks("A", {"title": "Done", "finished": True}, "C")

        assert task_repository.get_by_position(1, finished=False).id == c.id
        assert task_repository.get_by_position(0, finished=True).id == done.id
