"""Task data model for rightnow."""

from datetime import date, datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class EnergyLevel(str, Enum):
    """Mental energy a task requires."""
    LOW = "low"
    MED = "med"
    HIGH = "high"


class Capacity(str, Enum):
    """User's self-reported current mental energy (supplied per request, never stored)."""
    LOW = "low"
    MED = "med"
    HIGH = "high"


class Task(BaseModel):
    """Canonical Task model."""

    id: str = Field(..., description="Unique task identifier (UUID v4), immutable")
    title: str = Field(..., min_length=1, description="Task title")
    notes: Optional[str] = Field(None, description="Free-form notes")
    created_at: datetime = Field(..., description="Creation timestamp (naive UTC), immutable")
    deadline: Optional[datetime] = Field(None, description="Task deadline (absent = no urgency pressure)")
    estimated_minutes: Optional[int] = Field(None, gt=0, description="Estimated duration in minutes")
    importance: Optional[int] = Field(None, ge=1, le=3, description="1-3, 3 = most important (absent = 1)")
    effort: Optional[int] = Field(None, ge=1, le=3, description="1-3, 3 = most effort (absent = 1)")
    energy: Optional[EnergyLevel] = Field(None, description="Required mental energy")
    starred_for: Optional[date] = Field(None, description="Day this task is a featured priority for")
    completed_at: Optional[datetime] = Field(None, description="Completion timestamp (null if open)")
    calendar_block_id: Optional[str] = Field(None, description="Linked calendar event id, if any")

    @field_validator("title")
    @classmethod
    def _validate_title(cls, v):
        if not v.strip():
            raise ValueError("title must not be blank")
        return v

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
