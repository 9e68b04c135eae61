"""Constants for taskdesk.

This module centralizes all magic numbers and default values used throughout the application.
"""

from datetime import timedelta

from taskdesk.models.task import TaskStatus, TaskPriority


# Task defaults
DEFAULT_STATUS = TaskStatus.PENDING
DEFAULT_PRIORITY = TaskPriority.LOW

# Urgency windows (relative to "now")
URGENT_WINDOW = timedelta(days=1)  # due within 24h
NORMAL_WINDOW = timedelta(days=3)  # due in 2-3 days

# A task due further out than this cannot be marked completed
COMPLETION_HORIZON = timedelta(days=3)

# Per-item read cache
CACHE_TTL = timedelta(minutes=5)
CACHE_KEY_PREFIX = "task_"
