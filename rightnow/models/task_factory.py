"""Task creation factory for rightnow.

Centralizes id and timestamp generation so every new task is built the same way.
"""

import uuid
from datetime import datetime
from typing import Optional, Any

from rightnow.models.task import Task


def create_task(
    title: str,
    notes: Optional[str] = None,
    deadline: Optional[datetime] = None,
    estimated_minutes: Optional[int] = None,
    importance: Optional[int] = None,
    effort: Optional[int] = None,
    energy: Optional[Any] = None,
    now: Optional[datetime] = None,
) -> Task:
    """Create a new open task.

    Optional details stay unset when not given; scoring supplies their
    defaults.

    Args:
        title: Task title (surrounding whitespace is stripped)
        notes: Free-form notes
        deadline: Task deadline
        estimated_minutes: Estimated duration in minutes
        importance: 1-3
        effort: 1-3
        energy: Required energy level
        now: Creation time (defaults to now, naive UTC)

    Returns:
        Task with a fresh UUID and created_at
    """
    return Task(
        id=str(uuid.uuid4()),
        title=title.strip(),
        notes=notes,
        created_at=now or datetime.utcnow(),
        deadline=deadline,
        estimated_minutes=estimated_minutes,
        importance=importance,
        effort=effort,
        energy=energy,
    )

