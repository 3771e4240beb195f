"""Reminder data model for rightnow.

A Reminder is a planned notification. Delivery belongs to whatever
notification service the application wires up.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class ReminderKind(str, Enum):
    """Reminder kind enumeration."""
    DEADLINE = "deadline"
    EVENING = "evening"


class Reminder(BaseModel):
    """A notification the scheduler should fire."""

    kind: ReminderKind
    task_id: Optional[str] = Field(None, description="Task the reminder is about (null for digest reminders)")
    timing: str = Field(..., description="'24h', '2h', 'now' or 'daily'")
    fire_at: datetime = Field(..., description="When to fire (next occurrence for daily reminders)")
    title: str
    body: str

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
