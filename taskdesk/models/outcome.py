"""Operation outcomes for taskdesk.

Every task service operation returns an ``OperationResult``: either a success
value or a tagged failure from ``OutcomeKind``. Business rule violations are
expected outcomes and travel as values; only the storage layer raises.
"""

from enum import Enum
from typing import Any, Optional


class OutcomeKind(str, Enum):
    """Failure taxonomy for task operations."""
    NOT_FOUND = "not_found"
    DUPLICATE_ID = "duplicate_id"
    ALREADY_COMPLETED = "already_completed"
    COMPLETION_TOO_EARLY = "completion_too_early"
    EMPTY_BATCH = "empty_batch"
    PERSISTENCE_FAILURE = "persistence_failure"
    TRANSACTION_ROLLED_BACK = "transaction_rolled_back"
    INVALID_REQUEST = "invalid_request"  # request layer only


# Outcomes produced by the rule engine (never retry without changing input)
RULE_VIOLATIONS = frozenset({
    OutcomeKind.ALREADY_COMPLETED,
    OutcomeKind.COMPLETION_TOO_EARLY,
})

# Outcomes caused by storage faults (safe to retry)
STORAGE_FAILURES = frozenset({
    OutcomeKind.PERSISTENCE_FAILURE,
    OutcomeKind.TRANSACTION_ROLLED_BACK,
})


class OperationResult:
    """Result of a task service operation."""

    def __init__(
        self,
        value: Any = None,
        error: Optional[OutcomeKind] = None,
        message: Optional[str] = None,
    ):
        self.value = value
        self.error = error
        self.message = message

    @classmethod
    def success(cls, value: Any = None) -> "OperationResult":
        return cls(value=value)

    @classmethod
    def failure(cls, error: OutcomeKind, message: str) -> "OperationResult":
        return cls(error=error, message=message)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_rule_violation(self) -> bool:
        return self.error in RULE_VIOLATIONS

    @property
    def is_storage_failure(self) -> bool:
        return self.error in STORAGE_FAILURES

    def __repr__(self) -> str:
        if self.ok:
            return f"OperationResult(ok, value={self.value!r})"
        return f"OperationResult(error={self.error.value}, message={self.message!r})"
