"""Task suggestion for rightnow.

Picks the few open tasks that best fit the user's capacity and the time
they have right now.
"""

from datetime import datetime
from typing import List, Optional, Union

from rightnow.engine.clock import utc_now
from rightnow.engine.scoring import calculate_score
from rightnow.models.task import Task, Capacity
from rightnow.models.constants import DEFAULT_MAX_SUGGESTIONS


def suggest_tasks(
    tasks: List[Task],
    cap: Union[Capacity, str],
    available_min: float,
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
    now: Optional[datetime] = None,
) -> List[Task]:
    """Suggest the best tasks to work on right now.

    Pipeline:
    1. Drop completed tasks
    2. Prefer tasks whose estimate fits in `available_min` (tasks without an
       estimate always fit); if none fit, fall back to every open task
    3. Sort by score, highest first; ties keep their input order
    4. Keep the first `max_suggestions`

    This function is deterministic - same inputs always produce same outputs.

    Args:
        tasks: Snapshot of all tasks
        cap: User's current capacity
        available_min: Minutes available (zero or negative is accepted)
        max_suggestions: Maximum number of tasks to return
        now: Reference time for urgency (defaults to now, shared by every task)

    Returns:
        Suggested tasks, highest priority first
    """
    if max_suggestions <= 0:
        return []

    eligible = [task for task in tasks if task.completed_at is None]
    fits_time = [
        task for task in eligible
        if task.estimated_minutes is None or task.estimated_minutes <= available_min
    ]
    candidates = fits_time if fits_time else eligible

    if now is None:
        now = utc_now()

    # sorted() is stable, including with reverse=True
    ranked = sorted(
        candidates,
        key=lambda task: calculate_score(task, cap, available_min, now),
        reverse=True,
    )
    return ranked[:max_suggestions]


def score_tasks(
    tasks: List[Task],
    cap: Union[Capacity, str],
    available_min: float,
    now: Optional[datetime] = None,
) -> List[tuple]:
    """Pair each task with its score, preserving input order.

    Returns:
        List of (task, score) tuples
    """
    if now is None:
        now = utc_now()
    return [(task, calculate_score(task, cap, available_min, now)) for task in tasks]
