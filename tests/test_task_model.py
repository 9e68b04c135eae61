"""Tests for the Task model and outcome values."""

import pytest
from datetime import datetime, timedelta, timezone
from pydantic import ValidationError

from taskdesk.models.outcome import OperationResult, OutcomeKind
from taskdesk.models.task import Task, TaskStatus, TaskPriority


class TestTaskDefaults:
    """Test that tasks get the documented defaults."""

    def test_default_task_values(self):
        task = Task(title="Pay rent", due_date=datetime(2025, 3, 1))

        assert task.id is None
        assert task.status == TaskStatus.PENDING
        assert task.priority == TaskPriority.LOW
        assert task.description is None
        assert task.created_at is None

    def test_enum_values_are_stored_as_strings(self):
        task = Task(title="Pay rent", due_date=datetime(2025, 3, 1), status=TaskStatus.IN_PROGRESS)
        assert task.status == "in_progress"
        assert task.model_dump()["status"] == "in_progress"


class TestTaskValidation:

    @pytest.mark.parametrize("title", ["", "x" * 256])
    def test_title_length(self, title):
        with pytest.raises(ValidationError):
            Task(title=title, due_date=datetime(2025, 3, 1))

    def test_title_at_limit(self):
        assert len(Task(title="x" * 255, due_date=datetime(2025, 3, 1)).title) == 255

    def test_description_length(self):
        with pytest.raises(ValidationError):
            Task(title="ok", description="d" * 1001, due_date=datetime(2025, 3, 1))

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            Task(title="ok", due_date=datetime(2025, 3, 1), status="archived")

    def test_aware_timestamps_normalised_to_naive_utc(self):
        plus_two = timezone(timedelta(hours=2))
        task = Task(title="ok", due_date=datetime(2025, 3, 1, 14, 0, tzinfo=plus_two))

        assert task.due_date == datetime(2025, 3, 1, 12, 0)
        assert task.due_date.tzinfo is None


class TestPriorityRank:

    def test_rank_order(self):
        assert TaskPriority.LOW.rank < TaskPriority.NORMAL.rank < TaskPriority.URGENT.rank


class TestOperationResult:

    def test_success(self):
        result = OperationResult.success(42)
        assert result.ok is True
        assert result.value == 42
        assert result.error is None

    def test_rule_violation_is_not_storage_failure(self):
        result = OperationResult.failure(OutcomeKind.ALREADY_COMPLETED, "done")
        assert result.ok is False
        assert result.is_rule_violation is True
        assert result.is_storage_failure is False

    @pytest.mark.parametrize("kind", [OutcomeKind.PERSISTENCE_FAILURE, OutcomeKind.TRANSACTION_ROLLED_BACK])
    def test_storage_failures(self, kind):
        result = OperationResult.failure(kind, "boom")
        assert result.is_storage_failure is True
        assert result.is_rule_violation is False
