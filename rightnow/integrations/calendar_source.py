"""Calendar sources for rightnow.

A calendar source reports busy events for a window and whether calendar
access was granted. Sources fail soft: no access means no events, never an
exception.
"""

from datetime import datetime
from typing import List, Optional

from rightnow.models.calendar import CalendarEvent, CalendarFetchResult


class CalendarSource:
    """Base class for anything that can list busy events."""

    def has_access(self) -> bool:
        raise NotImplementedError

    def fetch_events(self, start: datetime, end: datetime) -> CalendarFetchResult:
        """Fetch events intersecting [start, end]."""
        raise NotImplementedError


class NoAccessCalendarSource(CalendarSource):
    """Source used when no calendar has been connected."""

    def has_access(self) -> bool:
        return False

    def fetch_events(self, start: datetime, end: datetime) -> CalendarFetchResult:
        return CalendarFetchResult(access_granted=False, events=[])


class StaticCalendarSource(CalendarSource):
    """In-memory source over a fixed list of events."""

    def __init__(self, events: Optional[List[CalendarEvent]] = None):
        self.events = list(events or [])

    def has_access(self) -> bool:
        return True

    def fetch_events(self, start: datetime, end: datetime) -> CalendarFetchResult:
        events = [event for event in self.events if event.start < end and event.end > start]
        return CalendarFetchResult(access_granted=True, events=events)
