"""Transition rules for taskdesk.

Decides whether a proposed task mutation is admissible and derives
urgency from due-date proximity. Everything here is pure: no I/O, and
the same (existing, proposed, now) always produces the same result.
"""

from datetime import datetime
from typing import Optional

from taskdesk.models.task import Task, TaskStatus, TaskPriority
from taskdesk.models.outcome import OutcomeKind
from taskdesk.models.constants import URGENT_WINDOW, NORMAL_WINDOW, COMPLETION_HORIZON


# Allowed status moves. Completed is terminal.
ALLOWED_TRANSITIONS = {
    TaskStatus.PENDING: {TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED},
    TaskStatus.IN_PROGRESS: {TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED},
    TaskStatus.COMPLETED: set(),
}


class TransitionResult:
    """Result of evaluating a proposed mutation."""

    def __init__(
        self,
        task: Optional[Task] = None,
        violation: Optional[OutcomeKind] = None,
        message: Optional[str] = None,
    ):
        self.task = task
        self.violation = violation
        self.message = message

    @property
    def accepted(self) -> bool:
        return self.violation is None


def derive_urgency(due_date: datetime, now: datetime) -> TaskPriority:
    """Classify a due date relative to now.

    Args:
        due_date: When the task is due
        now: Reference time

    Returns:
        URGENT if due within a day (or overdue), NORMAL if due within three
        days, LOW otherwise
    """
    if due_date <= now + URGENT_WINDOW:
        return TaskPriority.URGENT
    if due_date <= now + NORMAL_WINDOW:
        return TaskPriority.NORMAL
    return TaskPriority.LOW


def can_transition(current: TaskStatus, target: TaskStatus) -> bool:
    """Check the status state machine (ignores due-date gating)."""
    return TaskStatus(target) in ALLOWED_TRANSITIONS[TaskStatus(current)]


def is_overdue(task: Task, now: datetime) -> bool:
    return task.due_date < now


def validate_transition(existing: Task, proposed: Task, now: datetime) -> TransitionResult:
    """Evaluate a proposed update against the stored task.

    Rules, in order:
    1. A completed task accepts no further mutation.
    2. A task cannot be completed while its (proposed) due date is more
       than three days out.
    3. Otherwise the proposed scalar fields are applied to a copy of the
       existing task and ``updated_at`` is stamped.
    4. If the existing task was already overdue and the result is not
       completed, priority is escalated to URGENT whatever the caller sent.

    Args:
        existing: Task as currently stored
        proposed: Task carrying the requested field values
        now: Reference time

    Returns:
        TransitionResult with either the applied task or the violation
    """
    # Completed has no outgoing moves, so this is the terminal-state check
    if not can_transition(existing.status, proposed.status):
        return TransitionResult(
            violation=OutcomeKind.ALREADY_COMPLETED,
            message=f"Task with ID {existing.id} is already marked as 'Completed'. It cannot be changed.",
        )

    if proposed.status == TaskStatus.COMPLETED and proposed.due_date > now + COMPLETION_HORIZON:
        return TransitionResult(
            violation=OutcomeKind.COMPLETION_TOO_EARLY,
            message=(
                f"Task with ID {existing.id} cannot be marked as 'Completed' "
                f"because it is due more than {COMPLETION_HORIZON.days} days ahead."
            ),
        )

    updated_at = now
    if existing.created_at is not None and existing.created_at > now:
        updated_at = existing.created_at

    applied = existing.model_copy(update={
        "title": proposed.title,
        "description": proposed.description,
        "due_date": proposed.due_date,
        "status": proposed.status,
        "priority": proposed.priority,
        "updated_at": updated_at,
    })

    # Escalation overrides caller intent
    if is_overdue(existing, now) and applied.status != TaskStatus.COMPLETED:
        applied = applied.model_copy(update={"priority": TaskPriority.URGENT})

    return TransitionResult(task=applied)
