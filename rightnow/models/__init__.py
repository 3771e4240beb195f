"""Data models for rightnow."""

from rightnow.models.task import Task, EnergyLevel, Capacity
from rightnow.models.calendar import CalendarEvent, CalendarFetchResult, FreeBlock
from rightnow.models.reminder import Reminder, ReminderKind

__all__ = [
    "Task",
    "EnergyLevel",
    "Capacity",
    "CalendarEvent",
    "CalendarFetchResult",
    "FreeBlock",
    "Reminder",
    "ReminderKind",
]
