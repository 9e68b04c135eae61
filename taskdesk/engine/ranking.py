"""Urgency ranking for taskdesk.

Sorts tasks by urgency derived from the due date, then by due date within
each urgency band. The derived urgency is only a sort key; it is never
written back to the tasks.
"""

from datetime import datetime
from typing import List
from taskdesk.models.task import Task
from taskdesk.engine.rules import derive_urgency


def rank_by_urgency(tasks: List[Task], now: datetime) -> List[Task]:
    """Order tasks most-urgent first.

    Tasks are sorted:
    1. By derived urgency (URGENT, then NORMAL, then LOW)
    2. Within an urgency band, by due date (earliest first)

    The sort is stable, so tasks with equal keys keep their storage order.

    Args:
        tasks: Tasks to rank
        now: Reference time for urgency derivation

    Returns:
        The same task objects, reordered
    """
    tasks_with_urgency = [(task, derive_urgency(task.due_date, now)) for task in tasks]

    sorted_tasks = sorted(
        tasks_with_urgency,
        key=lambda x: (-x[1].rank, x[0].due_date)
    )

    return [task for task, _ in sorted_tasks]
