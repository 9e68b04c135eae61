"""Repository layer for database operations."""

import logging
from typing import List, Optional, Sequence, Set
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from taskdesk.models.task import Task
from taskdesk.database.models import TaskDB
from taskdesk.database.errors import PersistenceError, TransactionRolledBackError

logger = logging.getLogger(__name__)


class TaskRepository:
    """Repository for Task database operations.

    Implements the ``TaskStore`` port on top of a SQLAlchemy session. Every
    failure is rolled back, logged and re-raised as a ``PersistenceError``.
    """

    def __init__(self, db: Session):
        self.db = db

    def _as_unique_ids(self, task_ids: Sequence[int]) -> List[int]:
        """Deduplicate while preserving order."""
        seen: Set[int] = set()
        unique: List[int] = []
        for task_id in task_ids:
            if task_id not in seen:
                seen.add(task_id)
                unique.append(task_id)
        return unique

    def _read(self, description: str, query):
        try:
            return query()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to {description}: {type(e).__name__}: {str(e)}")
            raise PersistenceError(f"Failed to {description}") from e

    def get(self, task_id: int) -> Optional[Task]:
        """Get task by ID."""
        task_db = self._read(
            f"load task {task_id}",
            lambda: self.db.query(TaskDB).filter(TaskDB.id == task_id).first(),
        )
        return task_db.to_pydantic() if task_db else None

    def get_many(self, task_ids: Sequence[int]) -> List[Task]:
        """Get the tasks among ``task_ids`` that exist (in ID order)."""
        unique_ids = self._as_unique_ids(task_ids)
        if not unique_ids:
            return []
        tasks_db = self._read(
            f"load {len(unique_ids)} tasks",
            lambda: self.db.query(TaskDB).filter(TaskDB.id.in_(unique_ids)).order_by(TaskDB.id).all(),
        )
        return [task_db.to_pydantic() for task_db in tasks_db]

    def get_all(self) -> List[Task]:
        """Get all tasks in ID order."""
        tasks_db = self._read(
            "list tasks",
            lambda: self.db.query(TaskDB).order_by(TaskDB.id).all(),
        )
        return [task_db.to_pydantic() for task_db in tasks_db]

    def exists(self, task_id: int) -> bool:
        """Check whether a task ID is taken."""
        row = self._read(
            f"check task {task_id}",
            lambda: self.db.query(TaskDB.id).filter(TaskDB.id == task_id).first(),
        )
        return row is not None

    def create(self, task: Task) -> Task:
        """Create a new task. The database assigns the ID when ``task.id`` is None."""
        try:
            task_db = TaskDB.from_pydantic(task)
            self.db.add(task_db)
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Created task {task_db.id}: {task.title[:50]}")
            return task_db.to_pydantic()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create task {task.title[:50]!r}: {type(e).__name__}: {str(e)}")
            raise PersistenceError(f"Failed to create task {task.title[:50]!r}") from e

    def update(self, task: Task) -> bool:
        """Update an existing task.

        Returns:
            True if the row was written, False if no task has this ID
        """
        try:
            task_db = self.db.query(TaskDB).filter(TaskDB.id == task.id).first()
            if not task_db:
                return False
            task_db.apply(task)
            self.db.commit()
            logger.debug(f"Updated task {task.id}: {task.title[:50]}")
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update task {task.id}: {type(e).__name__}: {str(e)}")
            raise PersistenceError(f"Failed to update task {task.id}") from e

    def update_many(self, tasks: Sequence[Task]) -> List[Task]:
        """Update several tasks in a single transaction.

        Either every row is written and committed, or nothing is. A task
        whose row no longer exists fails the whole batch.

        Raises:
            TransactionRolledBackError: the batch failed and was rolled back
        """
        task_ids = [task.id for task in tasks]
        try:
            rows = {
                row.id: row
                for row in self.db.query(TaskDB).filter(TaskDB.id.in_(task_ids)).all()
            }
            for task in tasks:
                task_db = rows.get(task.id)
                if task_db is None:
                    raise LookupError(f"Task {task.id} not found")
                task_db.apply(task)
            self.db.flush()
            self.db.commit()
        except (SQLAlchemyError, LookupError) as e:
            self.db.rollback()
            logger.error(f"Failed to bulk update {len(task_ids)} tasks: {type(e).__name__}: {str(e)}")
            raise TransactionRolledBackError(
                f"Bulk update of {len(task_ids)} tasks was rolled back", task_ids
            ) from e

        logger.debug(f"Bulk updated {len(task_ids)} tasks")
        return [rows[task_id].to_pydantic() for task_id in task_ids]

    def delete(self, task_id: int) -> bool:
        """Delete a task by ID."""
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
            raise PersistenceError(f"Failed to delete task {task_id}") from e
