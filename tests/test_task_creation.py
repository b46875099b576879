"""Tests for task creation defaults and the Task model."""

import pytest
from datetime import datetime
from pydantic import ValidationError

from nltodo.models.task import Task, TaskUpdate
from nltodo.models.task_factory import create_task_base, normalize_annotation


class TestTaskCreationDefaults:
    """Test that task creation uses correct default values."""

    def test_default_task_values(self):
        task = create_task_base(title="Buy milk")

        assert task.title == "Buy milk"
        assert task.time is None
        assert task.date is None
        assert task.finished is False
        assert task.id
        assert isinstance(task.created_at, datetime)

    def test_ids_are_unique(self):
        assert create_task_base(title="a").id != create_task_base(title="a").id

    def test_annotations_kept_verbatim(self):
        task = create_task_base(title="Call mom", time="  around 6-ish ", date="next Tues")
        assert task.time == "  around 6-ish "
        assert task.date == "next Tues"

    def test_blank_annotations_are_absent(self):
        task = create_task_base(title="Call mom", time="", date="   ")
        assert task.time is None
        assert task.date is None

    def test_explicit_created_at(self):
        when = datetime(2026, 3, 1, 12, 0)
        assert create_task_base(title="x", created_at=when).created_at == when

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError):
            create_task_base(title="")

    @pytest.mark.parametrize("value,expected", [(None, None), ("", None), (" ", None), ("3pm", "3pm")])
    def test_normalize_annotation(self, value, expected):
        assert normalize_annotation(value) == expected


class TestTaskSerialization:
    """Task JSON uses createdAt."""

    def test_dump_by_alias(self):
        task = create_task_base(title="x")
        data = task.model_dump(mode="json", by_alias=True)
        assert "createdAt" in data
        assert "created_at" not in data

    def test_accepts_field_name_and_alias(self):
        when = datetime(2026, 3, 1)
        by_name = Task(id="1", title="x", created_at=when)
        by_alias = Task(id="1", title="x", createdAt=when)
        assert by_name == by_alias


class TestTaskUpdate:
    """Test TaskUpdate.to_fields()."""

    def test_only_sent_fields(self):
        assert TaskUpdate(title="new").to_fields() == {"title": "new"}

    def test_explicit_null_clears_annotations(self):
        assert TaskUpdate(time=None, date="").to_fields() == {"time": None, "date": None}

    def test_null_title_ignored(self):
        assert TaskUpdate(title=None, finished=True).to_fields() == {"finished": True}

    @pytest.mark.parametrize("title", ["", "   ", "\t\n"])
    def test_blank_title_rejected(self, title):
        with pytest.raises(ValidationError):
            TaskUpdate(title=title)

    def test_title_is_trimmed(self):
        assert TaskUpdate(title="  Team meeting ").to_fields() == {"title": "Team meeting"}
