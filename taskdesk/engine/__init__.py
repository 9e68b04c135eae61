"""Rule engine for taskdesk."""

from taskdesk.engine.rules import (
    derive_urgency,
    can_transition,
    validate_transition,
    TransitionResult,
    ALLOWED_TRANSITIONS,
)
from taskdesk.engine.ranking import rank_by_urgency

__all__ = [
    "derive_urgency",
    "can_transition",
    "validate_transition",
    "TransitionResult",
    "ALLOWED_TRANSITIONS",
    "rank_by_urgency",
]
