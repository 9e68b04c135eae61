"""Data models for taskdesk."""

from taskdesk.models.task import Task, TaskStatus, TaskPriority
from taskdesk.models.outcome import OperationResult, OutcomeKind

__all__ = [
    "Task",
    "TaskStatus",
    "TaskPriority",
    "OperationResult",
    "OutcomeKind",
]
