"""Tests for urgency ranking (deterministic ordering for the task list)."""

from datetime import datetime, timedelta

from taskdesk.engine.ranking import rank_by_urgency
from taskdesk.models.task import Task, TaskPriority


NOW = datetime(2025, 3, 1, 12, 0, 0)


def task_due(task_id: int, offset: timedelta, priority: TaskPriority = TaskPriority.LOW) -> Task:
    return Task(id=task_id, title=f"Task {task_id}", due_date=NOW + offset, priority=priority)


class TestRankByUrgency:
    """Test rank_by_urgency()."""

    def test_urgent_before_normal_before_low(self):
        low = task_due(1, timedelta(days=10))
        normal = task_due(2, timedelta(days=2))
        urgent = task_due(3, timedelta(hours=3))

        ranked = rank_by_urgency([low, normal, urgent], NOW)

        assert [t.id for t in ranked] == [3, 2, 1]

    def test_due_date_breaks_ties(self):
        later = task_due(1, timedelta(days=20))
        sooner = task_due(2, timedelta(days=5))
        overdue = task_due(3, timedelta(days=-1))
        due_soon = task_due(4, timedelta(hours=1))

        ranked = rank_by_urgency([later, sooner, due_soon, overdue], NOW)

        assert [t.id for t in ranked] == [3, 4, 2, 1]

    def test_stored_priority_is_ignored(self):
        """Ordering uses derived urgency, not the stored priority."""
        far_but_flagged = task_due(1, timedelta(days=10), priority=TaskPriority.URGENT)
        near_but_low = task_due(2, timedelta(hours=2), priority=TaskPriority.LOW)

        ranked = rank_by_urgency([far_but_flagged, near_but_low], NOW)

        assert [t.id for t in ranked] == [2, 1]
        # Stored values are returned untouched
        assert ranked[1].priority == TaskPriority.URGENT
        assert ranked[0].priority == TaskPriority.LOW

    def test_equal_keys_keep_input_order(self):
        due = timedelta(days=2)
        tasks = [task_due(i, due) for i in (5, 3, 9)]

        ranked = rank_by_urgency(tasks, NOW)

        assert [t.id for t in ranked] == [5, 3, 9]

    def test_empty(self):
        assert rank_by_urgency([], NOW) == []
