"""Repository layer for task storage.

The scoring engine never talks to the database; callers take a snapshot
with `TaskRepository.list()` and pass it in.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import desc

from rightnow.config import get_time_zone
from rightnow.engine.clock import local_today, to_naive_utc
from rightnow.models.task import Task
from rightnow.models.task_factory import create_task
from rightnow.models.constants import MAX_STARRED_PER_DAY, BRAIN_DUMP_SIZE
from rightnow.database.models import TaskDB

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = {"id", "created_at"}


class TaskNotFoundError(ValueError):
    """Raised when a task id does not exist."""


class StarLimitError(ValueError):
    """Raised when starring would exceed the per-day star limit."""


class TaskRepository:
    """Repository for Task database operations."""

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, task_id: str) -> TaskDB:
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        if not task_db:
            raise TaskNotFoundError(f"Task {task_id} not found")
        return task_db

    def _commit(self, task_db: TaskDB, action: str) -> Task:
        try:
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"{action} task {task_db.id}: {task_db.title[:50]}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save task {task_db.id} ({action.lower()}): {type(e).__name__}: {str(e)}")
            raise

    def list(self) -> List[Task]:
        """Get all tasks sorted by creation date (newest first)."""
        tasks_db = self.db.query(TaskDB).order_by(desc(TaskDB.created_at)).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def get(self, task_id: str) -> Optional[Task]:
        """Get task by ID."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        return task_db.to_pydantic() if task_db else None

    def create(self, task: Task) -> Task:
        """Insert an already-built task."""
        task_db = TaskDB.from_pydantic(task)
        self.db.add(task_db)
        return self._commit(task_db, "Created")

    def add(self, title: str, **details: Any) -> Task:
        """Create a new task from a title and optional details."""
        return self.create(create_task(title, **details))

    def update(self, task_id: str, updates: Dict[str, Any]) -> Task:
        """Apply field updates to a task.

        Raises:
            TaskNotFoundError: If the task does not exist
            ValueError: If an immutable field is updated or the result is invalid
        """
        immutable = IMMUTABLE_FIELDS.intersection(updates)
        if immutable:
            raise ValueError(f"Cannot update immutable fields: {sorted(immutable)}")

        task_db = self._get_row(task_id)
        # Validate the merged record before touching the row
        task = Task(**{**task_db.to_pydantic().model_dump(), **updates})
        task_db.apply(task)
        return self._commit(task_db, "Updated")

    def delete(self, task_id: str) -> bool:
        """Delete a task by ID."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        if not task_db:
            return False

        try:
            self.db.delete(task_db)
            self.db.commit()
            logger.debug(f"Deleted task {task_id}")
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete task {task_id}: {type(e).__name__}: {str(e)}")
            raise

    def toggle_complete(self, task_id: str, now: Optional[datetime] = None) -> Task:
        """Mark an open task completed, or reopen a completed one."""
        task_db = self._get_row(task_id)
        task_db.completed_at = None if task_db.completed_at else to_naive_utc(now or datetime.utcnow())
        return self._commit(task_db, "Completed" if task_db.completed_at else "Reopened")

    def toggle_star(self, task_id: str, today: Optional[date] = None) -> Task:
        """Star a task for today, or unstar it if it is already starred today.

        Raises:
            TaskNotFoundError: If the task does not exist
            StarLimitError: If three open tasks are already starred today
        """
        if today is None:
            today = local_today(time_zone=get_time_zone())

        task_db = self._get_row(task_id)
        if task_db.starred_for == today:
            task_db.starred_for = None
            return self._commit(task_db, "Unstarred")

        starred_today = self.db.query(TaskDB).filter(
            TaskDB.starred_for == today,
            TaskDB.completed_at.is_(None),
            TaskDB.id != task_id,
        ).count()
        if starred_today >= MAX_STARRED_PER_DAY:
            raise StarLimitError(f"At most {MAX_STARRED_PER_DAY} tasks can be starred for {today.isoformat()}")

        task_db.starred_for = today
        return self._commit(task_db, "Starred")

    def get_incomplete(self) -> List[Task]:
        """Get all open tasks, newest first."""
        tasks_db = self.db.query(TaskDB).filter(
            TaskDB.completed_at.is_(None),
        ).order_by(desc(TaskDB.created_at)).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def get_starred(self, today: Optional[date] = None) -> List[Task]:
        """Get today's featured priorities (open tasks starred today)."""
        if today is None:
            today = local_today(time_zone=get_time_zone())
        tasks_db = self.db.query(TaskDB).filter(
            TaskDB.completed_at.is_(None),
            TaskDB.starred_for == today,
        ).order_by(desc(TaskDB.created_at)).limit(MAX_STARRED_PER_DAY).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def get_brain_dump(self) -> List[Task]:
        """Get the most recent open tasks."""
        return self.get_incomplete()[:BRAIN_DUMP_SIZE]
