"""Task data model for taskdesk."""

from datetime import datetime, timezone
from typing import Optional
from enum import Enum
from pydantic import BaseModel, Field, field_validator


class TaskStatus(str, Enum):
    """Task status enumeration."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"  # Terminal


class TaskPriority(str, Enum):
    """Task priority enumeration (low < normal < urgent)."""
    LOW = "low"
    NORMAL = "normal"
    URGENT = "urgent"

    @property
    def rank(self) -> int:
        """Numeric rank for ordering (higher = more urgent)."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    TaskPriority.LOW: 0,
    TaskPriority.NORMAL: 1,
    TaskPriority.URGENT: 2,
}


def to_naive_utc(value: datetime) -> datetime:
    """Normalise a datetime to naive UTC (the storage convention)."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class Task(BaseModel):
    """Canonical Task model."""

    id: Optional[int] = Field(None, description="Storage-assigned task identifier")
    title: str = Field(..., min_length=1, max_length=255, description="Task title")
    description: Optional[str] = Field(None, max_length=1000, description="Task description")
    due_date: datetime = Field(..., description="When the task is due (UTC)")
    status: TaskStatus = Field(TaskStatus.PENDING, description="Task status")
    priority: TaskPriority = Field(TaskPriority.LOW, description="Stored (advisory) priority")
    created_at: Optional[datetime] = Field(None, description="Task creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Task last update timestamp")

    @field_validator("due_date", "created_at", "updated_at")
    @classmethod
    def _normalise_timestamps(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value) if value is not None else None

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
