"""Storage-layer exceptions for taskdesk.

These are the only exceptions the task service expects from a store.
They are kept apart from rule violations, which are returned as values.
"""

from typing import Iterable, Optional


class PersistenceError(Exception):
    """A storage operation failed (I/O, constraint violation, ...)."""


class TransactionRolledBackError(PersistenceError):
    """A multi-row write failed and every change in it was rolled back."""

    def __init__(self, message: str, task_ids: Optional[Iterable[int]] = None):
        super().__init__(message)
        self.task_ids = list(task_ids or [])
