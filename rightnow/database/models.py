"""SQLAlchemy row model for stored tasks."""

from datetime import datetime
from typing import Optional
from sqlalchemy import Column, String, Integer, DateTime, Date

from rightnow.database.database import Base
from rightnow.engine.clock import to_naive_utc
from rightnow.models.task import Task, EnergyLevel

# Columns shared by TaskDB and Task
PLAIN_FIELDS = (
    "id",
    "title",
    "notes",
    "created_at",
    "deadline",
    "estimated_minutes",
    "importance",
    "effort",
    "starred_for",
    "completed_at",
    "calendar_block_id",
)

# DateTime columns hold naive UTC; offsets are converted before writing
DATETIME_FIELDS = {"created_at", "deadline", "completed_at"}


def enum_to_value(value) -> Optional[str]:
    """Enum member or plain string to its stored string (None stays None)."""
    if value is None:
        return None
    return getattr(value, "value", str(value))


def column_value(task: Task, name: str):
    value = getattr(task, name)
    if name in DATETIME_FIELDS and value is not None:
        return to_naive_utc(value)
    return value


def energy_from_value(value: Optional[str]) -> Optional[EnergyLevel]:
    """Stored energy string to EnergyLevel; unknown or empty values read as unset."""
    if not value:
        return None
    try:
        return EnergyLevel(value.lower())
    except ValueError:
        return None


class TaskDB(Base):
    """Task row. Optional details stay NULL until the user fills them in."""

    __tablename__ = "tasks"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    notes = Column(String)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    deadline = Column(DateTime)
    completed_at = Column(DateTime, index=True)

    estimated_minutes = Column(Integer)
    importance = Column(Integer)
    effort = Column(Integer)
    energy = Column(String(8))

    starred_for = Column(Date, index=True)
    calendar_block_id = Column(String)

    def to_pydantic(self) -> Task:
        values = {name: getattr(self, name) for name in PLAIN_FIELDS}
        return Task(energy=energy_from_value(self.energy), **values)

    @classmethod
    def from_pydantic(cls, task: Task) -> "TaskDB":
        values = {name: column_value(task, name) for name in PLAIN_FIELDS}
        return cls(energy=enum_to_value(task.energy), **values)

    def apply(self, task: Task) -> None:
        """Copy every mutable field from `task` onto this row."""
        for name in PLAIN_FIELDS:
            if name not in ("id", "created_at"):
                setattr(self, name, column_value(task, name))
        self.energy = enum_to_value(task.energy)
