"""
Ports (interfaces) used by the task service.

The service depends on Protocols instead of concrete implementations, so the
storage backend and the cache can be swapped (or faked in tests) freely.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Protocol, Sequence

from taskdesk.models.task import Task


class TaskStore(Protocol):
    """Durable task storage. Failures raise ``PersistenceError``."""

    def get(self, task_id: int) -> Task | None: ...
    def get_many(self, task_ids: Sequence[int]) -> list[Task]: ...
    def get_all(self) -> list[Task]: ...
    def exists(self, task_id: int) -> bool: ...
    def create(self, task: Task) -> Task: ...
    def update(self, task: Task) -> bool: ...

    # All-or-nothing; raises TransactionRolledBackError on failure
    def update_many(self, tasks: Sequence[Task]) -> list[Task]: ...

    def delete(self, task_id: int) -> bool: ...


class TaskCache(Protocol):
    """Best-effort key/value cache with per-entry expiration."""

    def get(self, key: str) -> Any | None: ...
    def set(self, key: str, value: Any, ttl: timedelta) -> None: ...
    def remove(self, key: str) -> None: ...
