"""SQLAlchemy database models for taskdesk."""

from datetime import datetime
from typing import Union, TypeVar, Type
from sqlalchemy import Column, String, Integer, DateTime

from taskdesk.database.database import Base
from taskdesk.models.task import TaskStatus, TaskPriority

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string).

    Args:
        enum_obj: Enum instance or string value

    Returns:
        String value of the enum, or the string itself if already a string
    """
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Convert string to enum with fallback to default.

    Args:
        value: String value to convert
        enum_class: Enum class to convert to
        default: Default enum value if conversion fails

    Returns:
        Enum instance, or default if conversion fails
    """
    if not value:
        return default
    try:
        return enum_class(value.lower())
    except (ValueError, AttributeError):
        return default


class TaskDB(Base):
    """Database model for Task."""

    __tablename__ = "tasks"

    # Primary key (assigned by the database)
    id = Column(Integer, primary_key=True, autoincrement=True)

    # Basic fields
    title = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    due_date = Column(DateTime, nullable=False, index=True)
    status = Column(String, nullable=False, default=TaskStatus.PENDING.value, index=True)
    priority = Column(String, nullable=False, default=TaskPriority.LOW.value)

    # Timestamps (stamped by the service layer)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from taskdesk.models.task import Task

        return Task(
            id=self.id,
            title=self.title,
            description=self.description,
            due_date=self.due_date,
            status=value_to_enum(self.status, TaskStatus, TaskStatus.PENDING),
            priority=value_to_enum(self.priority, TaskPriority, TaskPriority.LOW),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def apply(self, task) -> None:
        """Copy the mutable fields of a Pydantic task onto this row."""
        self.title = task.title
        self.description = task.description
        self.due_date = task.due_date
        self.status = enum_to_value(task.status)
        self.priority = enum_to_value(task.priority)
        self.updated_at = task.updated_at

    @classmethod
    def from_pydantic(cls, task):
        """Create database model from Pydantic model."""
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            due_date=task.due_date,
            status=enum_to_value(task.status),
            priority=enum_to_value(task.priority),
            created_at=task.created_at,
            updated_at=task.updated_at,
        )
