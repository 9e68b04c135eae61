"""Request and response bodies for the taskdesk API."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from taskdesk.models.task import Task, TaskStatus, TaskPriority
from taskdesk.models.constants import DEFAULT_STATUS, DEFAULT_PRIORITY


class TaskWrite(BaseModel):
    """Writable task fields (create and update)."""
    id: Optional[int] = Field(None, description="Task ID (must match the path on update)")
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    due_date: datetime
    status: TaskStatus = DEFAULT_STATUS
    priority: TaskPriority = DEFAULT_PRIORITY

    def to_task(self, task_id: Optional[int] = None) -> Task:
        return Task(
            id=task_id if task_id is not None else self.id,
            title=self.title,
            description=self.description,
            due_date=self.due_date,
            status=self.status,
            priority=self.priority,
        )


class BulkTaskWrite(TaskWrite):
    """One entry of a bulk update (ID required)."""
    id: int


class BulkUpdateRequest(BaseModel):
    """Body for PUT /api/tasks."""
    tasks: List[BulkTaskWrite] = Field(default_factory=list)


class TaskResponse(BaseModel):
    """Single task."""
    task: Task


class TaskListResponse(BaseModel):
    """Tasks ordered by urgency."""
    tasks: List[Task]
    count: int


class BulkUpdateResponse(BaseModel):
    """Tasks written by a bulk update."""
    updated_count: int
    tasks: List[Task]


class ErrorDetail(BaseModel):
    """Error payload carried in ``HTTPException.detail``."""
    error: str
    message: str
