"""Multi-factor task scoring for rightnow.

Every sub-score is a pure function of task fields plus the request
parameters. Defaults for absent task fields are applied here and nowhere
else.
"""

from datetime import datetime, timedelta
from typing import Optional, Union

from rightnow.engine.clock import align_to, utc_now
from rightnow.models.task import Task, Capacity, EnergyLevel
from rightnow.models.constants import (
    BASE_SCORE,
    IMPORTANCE_WEIGHT,
    URGENCY_WEIGHT,
    ENERGY_FIT_WEIGHT,
    TIME_FIT_WEIGHT,
    EFFORT_PENALTY,
    DEFAULT_IMPORTANCE,
    DEFAULT_EFFORT,
    NO_DEADLINE_URGENCY,
    MIN_URGENCY_DAYS,
    MAX_URGENCY,
    UNKNOWN_ENERGY_FIT,
    ENERGY_FIT_TABLE,
    NO_ESTIMATE_TIME_FIT,
    FITS_TIME_BONUS,
)


def energy_fit(cap: Union[Capacity, str], task_energy: Optional[Union[EnergyLevel, str]] = None) -> float:
    """How well a task's required energy matches the user's capacity.

    Args:
        cap: User's current capacity
        task_energy: Task's required energy (None if unknown)

    Returns:
        Fit between 0.4 and 1.0; unknown energy scores as a poor match (0.4)
    """
    if not task_energy:
        return UNKNOWN_ENERGY_FIT
    return ENERGY_FIT_TABLE[Capacity(cap)][EnergyLevel(task_energy)]


def urgency(deadline: Optional[datetime] = None, now: Optional[datetime] = None) -> float:
    """Deadline-derived urgency.

    Overdue or near-due tasks (half a day or less) saturate at 2.0; far
    deadlines approach 0. Tasks without a deadline get a flat 0.8.
    """
    if deadline is None:
        return NO_DEADLINE_URGENCY

    now = align_to(deadline, now or utc_now())
    days = max(MIN_URGENCY_DAYS, (deadline - now) / timedelta(days=1))
    return min(MAX_URGENCY, 1 / days)


def time_fit(available_min: float, estimated_min: Optional[int] = None) -> float:
    """How well a task's estimate fits the time available.

    Returns:
        min(1.0, available/estimate) plus a 0.1 bonus when the task fits;
        0.8 when there is no estimate
    """
    if not estimated_min:
        return NO_ESTIMATE_TIME_FIT

    ratio = available_min / max(1, estimated_min)
    base = min(1.0, ratio)
    bonus = FITS_TIME_BONUS if estimated_min <= available_min else 0.0
    return base + bonus


def calculate_score(
    task: Task,
    cap: Union[Capacity, str],
    available_min: float,
    now: Optional[datetime] = None,
) -> float:
    """Composite priority score for a task (higher is better)."""
    importance = task.importance if task.importance is not None else DEFAULT_IMPORTANCE
    effort = task.effort if task.effort is not None else DEFAULT_EFFORT

    return (
        BASE_SCORE
        + IMPORTANCE_WEIGHT * importance
        + URGENCY_WEIGHT * urgency(task.deadline, now)
        + ENERGY_FIT_WEIGHT * energy_fit(cap, task.energy)
        + TIME_FIT_WEIGHT * time_fit(available_min, task.estimated_minutes)
        - EFFORT_PENALTY * (effort - 1)
    )
