"""Task service for taskdesk.

Orchestrates the rule engine, the task store and the read cache for each
task operation. Reads are cache-aside: look in the cache, fall back to the
store and populate. Writes invalidate the cached entry, and only after the
store has confirmed the write.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from taskdesk.core.ports import TaskStore, TaskCache
from taskdesk.cache.memory_cache import task_cache_key
from taskdesk.database.errors import PersistenceError, TransactionRolledBackError
from taskdesk.engine.rules import validate_transition
from taskdesk.engine.ranking import rank_by_urgency
from taskdesk.models.task import Task, TaskStatus
from taskdesk.models.outcome import OperationResult, OutcomeKind
from taskdesk.models.constants import CACHE_TTL

logger = logging.getLogger(__name__)


def _not_found(task_id: Optional[int]) -> OperationResult:
    return OperationResult.failure(OutcomeKind.NOT_FOUND, f"Task with ID {task_id} was not found.")


class TaskService:
    """Task operations with transition rules and per-item caching."""

    def __init__(
        self,
        store: TaskStore,
        cache: TaskCache,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.store = store
        self.cache = cache
        self.clock = clock

    # ---- cache helpers (best-effort, never mistaken for storage faults) ----

    def _cached(self, task_id: int) -> Optional[Task]:
        try:
            return self.cache.get(task_cache_key(task_id))
        except Exception:
            logger.warning(f"Cache read failed for task {task_id}; falling back to storage", exc_info=True)
            return None

    def _populate(self, task: Task) -> None:
        try:
            self.cache.set(task_cache_key(task.id), task, CACHE_TTL)
        except Exception:
            logger.warning(f"Cache populate failed for task {task.id}", exc_info=True)

    def _invalidate(self, task_ids: Sequence[int]) -> None:
        """Post-commit step: evict cached entries for written tasks."""
        for task_id in task_ids:
            try:
                self.cache.remove(task_cache_key(task_id))
            except Exception:
                # The write is already committed; the TTL bounds how long this entry can be stale.
                logger.exception(f"Cache invalidation failed for task {task_id}")

    # ---- operations ----

    def list_tasks(self) -> OperationResult:
        """All tasks, most urgent first, then by due date."""
        try:
            tasks = self.store.get_all()
        except PersistenceError as e:
            logger.exception("Failed to list tasks")
            return OperationResult.failure(OutcomeKind.PERSISTENCE_FAILURE, str(e))
        return OperationResult.success(rank_by_urgency(tasks, self.clock()))

    def get_task(self, task_id: int) -> OperationResult:
        """Get a task by ID, reading through the cache."""
        cached = self._cached(task_id)
        if cached is not None:
            logger.debug(f"Cache hit for task {task_id}")
            return OperationResult.success(cached)

        try:
            task = self.store.get(task_id)
        except PersistenceError as e:
            logger.exception(f"Failed to load task {task_id}")
            return OperationResult.failure(OutcomeKind.PERSISTENCE_FAILURE, str(e))

        if task is None:
            return _not_found(task_id)

        self._populate(task)
        return OperationResult.success(task)

    def create_task(self, task: Task) -> OperationResult:
        """Create a task. The store assigns the ID; timestamps are stamped here."""
        try:
            if task.id is not None and self.store.exists(task.id):
                logger.info(f"Rejected create: task {task.id} already exists")
                return OperationResult.failure(
                    OutcomeKind.DUPLICATE_ID, f"Task with ID {task.id} already exists."
                )

            now = self.clock()
            created = self.store.create(
                task.model_copy(update={"id": None, "created_at": now, "updated_at": now})
            )
        except PersistenceError as e:
            logger.exception("Failed to create task")
            return OperationResult.failure(OutcomeKind.PERSISTENCE_FAILURE, str(e))

        logger.info(f"Created task {created.id}")
        return OperationResult.success(created)

    def update_task(self, task: Task) -> OperationResult:
        """Apply an update to an existing task, subject to the transition rules."""
        try:
            existing = self.store.get(task.id)
        except PersistenceError as e:
            logger.exception(f"Failed to load task {task.id}")
            return OperationResult.failure(OutcomeKind.PERSISTENCE_FAILURE, str(e))

        if existing is None:
            return _not_found(task.id)

        result = validate_transition(existing, task, self.clock())
        if not result.accepted:
            logger.info(f"Rejected update of task {task.id}: {result.violation.value}")
            return OperationResult.failure(result.violation, result.message)

        try:
            written = self.store.update(result.task)
        except PersistenceError as e:
            logger.exception(f"Failed to update task {task.id}")
            return OperationResult.failure(OutcomeKind.PERSISTENCE_FAILURE, str(e))

        if not written:
            return _not_found(task.id)

        self._invalidate([task.id])
        return OperationResult.success(result.task)

    def bulk_update(self, tasks: Sequence[Task]) -> OperationResult:
        """Overwrite several tasks as one atomic unit.

        Unknown IDs and completed tasks are dropped. If none are left the
        batch is empty. The other transition rules are not applied: this is
        a batch status sync.
        """
        if not tasks:
            return OperationResult.failure(OutcomeKind.EMPTY_BATCH, "No tasks to update.")

        # First occurrence of a repeated ID wins
        requested: Dict[int, Task] = {}
        for task in tasks:
            if task.id is not None and task.id not in requested:
                requested[task.id] = task

        try:
            existing = self.store.get_many(list(requested))
        except PersistenceError as e:
            logger.exception("Failed to load tasks for bulk update")
            return OperationResult.failure(OutcomeKind.PERSISTENCE_FAILURE, str(e))

        # Completed tasks are immutable, even in a batch
        completed = [task.id for task in existing if task.status == TaskStatus.COMPLETED]
        if completed:
            logger.info(f"Bulk update skips completed tasks {completed}")
            existing = [task for task in existing if task.status != TaskStatus.COMPLETED]

        if not existing:
            return OperationResult.failure(OutcomeKind.EMPTY_BATCH, "None of the given tasks can be updated.")

        now = self.clock()
        applied: List[Task] = []
        for current in existing:
            incoming = requested[current.id]
            applied.append(current.model_copy(update={
                "title": incoming.title,
                "description": incoming.description,
                "due_date": incoming.due_date,
                "status": incoming.status,
                "priority": incoming.priority,
                "updated_at": max(now, current.created_at) if current.created_at else now,
            }))

        try:
            updated = self.store.update_many(applied)
        except PersistenceError as e:
            # Any store failure here leaves the whole batch unapplied
            task_ids = e.task_ids if isinstance(e, TransactionRolledBackError) else []
            task_ids = task_ids or [task.id for task in applied]
            logger.exception(f"Bulk update of tasks {task_ids} rolled back")
            return OperationResult.failure(
                OutcomeKind.TRANSACTION_ROLLED_BACK,
                f"Bulk update of tasks {task_ids} was rolled back; no changes were saved.",
            )

        self._invalidate([task.id for task in updated])
        logger.info(f"Bulk updated {len(updated)} tasks")
        return OperationResult.success(updated)

    def delete_task(self, task_id: int) -> OperationResult:
        """Delete a task and evict it from the cache."""
        try:
            existing = self.store.get(task_id)
            if existing is None:
                return _not_found(task_id)
            deleted = self.store.delete(task_id)
        except PersistenceError as e:
            logger.exception(f"Failed to delete task {task_id}")
            return OperationResult.failure(OutcomeKind.PERSISTENCE_FAILURE, str(e))

        if not deleted:
            return _not_found(task_id)

        self._invalidate([task_id])
        logger.info(f"Deleted task {task_id}")
        return OperationResult.success(existing)
