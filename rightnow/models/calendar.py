"""Calendar data models for rightnow.

Busy intervals come from an external calendar; free blocks are computed per
call and never persisted.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class CalendarEvent(BaseModel):
    """A busy interval sourced from a calendar."""

    id: Optional[str] = Field(None, description="Event id in the source calendar")
    title: str = Field("", description="Display title")
    start: datetime = Field(..., description="Event start")
    end: datetime = Field(..., description="Event end")
    all_day: bool = Field(False, description="All-day events never block free time")


class CalendarFetchResult(BaseModel):
    """Events fetched for a window, plus whether calendar access was granted."""

    access_granted: bool = Field(False, description="Whether the calendar could be read")
    events: List[CalendarEvent] = Field(default_factory=list)


class FreeBlock(BaseModel):
    """A contiguous free interval inside a window."""

    start: datetime
    end: datetime
    duration_minutes: int = Field(..., description="Floor of (end - start) in minutes")
