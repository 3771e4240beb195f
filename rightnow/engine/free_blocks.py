"""Free-time computation for rightnow.

Finds the gaps between calendar events inside a time window.

Overlapping events are not merged first: gaps are measured between
consecutive events ordered by start time, so an event that overlaps the next
one yields a negative "gap" that the minimum-duration filter drops.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from rightnow.engine.clock import align_to, end_of_day, utc_now
from rightnow.integrations.calendar_source import CalendarSource
from rightnow.models.calendar import CalendarEvent, FreeBlock
from rightnow.models.constants import MIN_FREE_BLOCK_MINUTES

logger = logging.getLogger(__name__)


def _duration_minutes(start: datetime, end: datetime) -> int:
    return (end - start) // timedelta(minutes=1)


def _block(start: datetime, end: datetime) -> FreeBlock:
    return FreeBlock(start=start, end=end, duration_minutes=_duration_minutes(start, end))


def _overlaps_window(start: datetime, end: datetime, window_start: datetime, window_end: datetime) -> bool:
    """True if the event starts or ends strictly inside the window, or spans it."""
    return (
        window_start < start < window_end
        or window_start < end < window_end
        or (start <= window_start and end >= window_end)
    )


def compute_free_blocks(
    events: List[CalendarEvent],
    window_start: datetime,
    window_end: datetime,
) -> List[FreeBlock]:
    """Compute free blocks between busy events within a window.

    Args:
        events: Busy intervals (any order; may fall outside the window)
        window_start: Start of the window
        window_end: End of the window

    Returns:
        Free blocks in ascending start order. Gaps between events and after
        the last event must be at least 5 minutes; the block before the first
        event has no minimum. Empty if the window is empty or inverted.
    """
    window_end = align_to(window_start, window_end)
    if window_end <= window_start:
        return []

    intervals = []
    for event in events:
        if event.all_day:
            continue
        start = align_to(window_start, event.start)
        end = align_to(window_start, event.end)
        if _overlaps_window(start, end, window_start, window_end):
            intervals.append((start, end))

    if not intervals:
        return [_block(window_start, window_end)]

    intervals.sort(key=lambda interval: interval[0])
    free_blocks: List[FreeBlock] = []

    first_start = intervals[0][0]
    if first_start > window_start:
        free_blocks.append(_block(window_start, first_start))

    for (_, current_end), (next_start, _) in zip(intervals, intervals[1:]):
        if current_end < next_start:
            gap = _block(current_end, next_start)
            if gap.duration_minutes >= MIN_FREE_BLOCK_MINUTES:
                free_blocks.append(gap)

    last_end = intervals[-1][1]
    if last_end < window_end:
        tail = _block(last_end, window_end)
        if tail.duration_minutes >= MIN_FREE_BLOCK_MINUTES:
            free_blocks.append(tail)

    return free_blocks


def next_free_block(
    source: CalendarSource,
    now: Optional[datetime] = None,
    time_zone: str = "UTC",
) -> Optional[FreeBlock]:
    """First free block between now and the end of today.

    A source without calendar access contributes no events, so the rest of
    the day counts as free.

    Args:
        source: Calendar source to read busy events from
        now: Reference time (naive UTC, defaults to now)
        time_zone: Zone that decides where "today" ends

    Returns:
        The first free block, or None if there is none
    """
    if now is None:
        now = utc_now()
    day_end = end_of_day(now, time_zone)

    result = source.fetch_events(now, day_end)
    events = result.events if result.access_granted else []
    free_blocks = compute_free_blocks(events, now, day_end)
    return free_blocks[0] if free_blocks else None


def clamp_to_next_conflict(
    requested_minutes: int,
    source: CalendarSource,
    now: Optional[datetime] = None,
    time_zone: str = "UTC",
) -> int:
    """Clamp requested minutes to the length of the next free block.

    Never raises: if the calendar cannot be read or there is no free block,
    the request comes back unchanged.
    """
    try:
        block = next_free_block(source, now=now, time_zone=time_zone)
    except Exception as e:
        logger.error(f"Failed to clamp to next calendar conflict: {type(e).__name__}: {str(e)}")
        return requested_minutes

    if block is None:
        return requested_minutes
    return min(requested_minutes, block.duration_minutes)
