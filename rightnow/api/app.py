"""FastAPI web application for rightnow."""

import logging
import math
import os
import re
from contextlib import asynccontextmanager
from datetime import date, datetime, timedelta
from typing import List, Optional, Union
from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from rightnow.config import get_default_available_minutes, get_google_calendar_token_path, get_time_zone
from rightnow.database.database import get_db, init_db
from rightnow.database.repository import TaskRepository, TaskNotFoundError, StarLimitError
from rightnow.engine.clock import utc_now
from rightnow.engine.free_blocks import compute_free_blocks, next_free_block, clamp_to_next_conflict
from rightnow.engine.suggestion import suggest_tasks, score_tasks
from rightnow.integrations.calendar_source import CalendarSource, NoAccessCalendarSource
from rightnow.integrations.google_calendar import GoogleCalendarClient
from rightnow.models.calendar import CalendarEvent, CalendarFetchResult, FreeBlock
from rightnow.models.constants import DEFAULT_MAX_SUGGESTIONS, DEFAULT_FREE_BLOCK_WINDOW_HOURS
from rightnow.models.reminder import Reminder
from rightnow.models.task import Task, Capacity, EnergyLevel
from rightnow.notifications.planner import plan_reminders

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r"^\s*([-+]?\d+(?:\.\d+)?)")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(
    title="rightnow API",
    description="Suggests the few tasks worth doing right now",
    version="0.1.0",
    lifespan=lifespan,
)


def get_task_repository(db: Session = Depends(get_db)) -> TaskRepository:
    return TaskRepository(db)


def get_calendar_source() -> CalendarSource:
    """Google Calendar when a token has been stored, otherwise a source with no access."""
    if not os.path.exists(get_google_calendar_token_path()):
        return NoAccessCalendarSource()
    return GoogleCalendarClient()


def parse_available_minutes(raw: Union[int, float, str, None], default: Optional[int] = None) -> int:
    """Turn user input into whole minutes.

    The leading number is used ("45 min" -> 45). A positive fraction rounds
    up to the next whole minute ("0.5" -> 1); negative values pass through
    truncated. Input with no leading number, non-finite numbers and zero all
    fall back to the default.
    """
    if default is None:
        default = get_default_available_minutes()
    if raw is None:
        return default
    if isinstance(raw, str):
        match = _LEADING_NUMBER.match(raw)
        if not match:
            return default
        raw = float(match.group(1))

    if not math.isfinite(raw) or raw == 0:
        return default
    return math.ceil(raw) if raw > 0 else int(raw)


# Request/response models
class TaskCreateRequest(BaseModel):
    """Request body for creating a task."""
    title: str = Field(..., min_length=1)
    notes: Optional[str] = None
    deadline: Optional[datetime] = None
    estimated_minutes: Optional[int] = Field(None, gt=0)
    importance: Optional[int] = Field(None, ge=1, le=3)
    effort: Optional[int] = Field(None, ge=1, le=3)
    energy: Optional[EnergyLevel] = None


class TaskUpdateRequest(BaseModel):
    """Request body for updating a task (only fields that are sent change)."""
    title: Optional[str] = Field(None, min_length=1)
    notes: Optional[str] = None
    deadline: Optional[datetime] = None
    estimated_minutes: Optional[int] = Field(None, gt=0)
    importance: Optional[int] = Field(None, ge=1, le=3)
    effort: Optional[int] = Field(None, ge=1, le=3)
    energy: Optional[EnergyLevel] = None
    starred_for: Optional[date] = None
    calendar_block_id: Optional[str] = None


class SuggestionRequest(BaseModel):
    """Request body for task suggestions."""
    capacity: Capacity = Capacity.MED
    available_minutes: Union[int, float, str, None] = None
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS
    clamp_to_calendar: bool = False


class ScoredTask(BaseModel):
    """A suggested task with the score it was ranked by."""
    task: Task
    score: float


class SuggestionResponse(BaseModel):
    """Response for suggestions."""
    capacity: Capacity
    requested_minutes: int
    available_minutes: int = Field(..., description="Minutes used for scoring (after calendar clamp)")
    calendar_access: Optional[bool] = Field(None, description="Null when the calendar was not consulted")
    suggestions: List[ScoredTask]


class FreeBlocksRequest(BaseModel):
    """Request body for computing free blocks from supplied events."""
    events: List[CalendarEvent] = Field(default_factory=list)
    window_start: datetime
    window_end: datetime


class CalendarViewResponse(BaseModel):
    """Busy events and free blocks for an upcoming window."""
    calendar_access: bool
    window_start: datetime
    window_end: datetime
    events: List[CalendarEvent]
    free_blocks: List[FreeBlock]


class NextFreeBlockResponse(BaseModel):
    """First free block before the end of today (null when the day is fully booked)."""
    calendar_access: bool
    free_block: Optional[FreeBlock]


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


@app.get("/tasks", response_model=List[Task])
async def list_tasks(repo: TaskRepository = Depends(get_task_repository)):
    """All tasks, newest first."""
    return repo.list()


@app.post("/tasks", response_model=Task, status_code=201)
async def create_task(request: TaskCreateRequest, repo: TaskRepository = Depends(get_task_repository)):
    """Create a task."""
    try:
        return repo.add(**request.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@app.get("/tasks/starred", response_model=List[Task])
async def starred_tasks(repo: TaskRepository = Depends(get_task_repository)):
    """Today's featured priorities."""
    return repo.get_starred()


@app.get("/tasks/brain-dump", response_model=List[Task])
async def brain_dump_tasks(repo: TaskRepository = Depends(get_task_repository)):
    """Most recent open tasks."""
    return repo.get_brain_dump()


@app.get("/tasks/{task_id}", response_model=Task)
async def get_task(task_id: str, repo: TaskRepository = Depends(get_task_repository)):
    task = repo.get(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return task


@app.patch("/tasks/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    request: TaskUpdateRequest,
    repo: TaskRepository = Depends(get_task_repository),
):
    """Update the fields present in the request body."""
    try:
        return repo.update(task_id, request.model_dump(exclude_unset=True))
    except TaskNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@app.delete("/tasks/{task_id}", status_code=204)
async def delete_task(task_id: str, repo: TaskRepository = Depends(get_task_repository)):
    if not repo.delete(task_id):
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")


@app.post("/tasks/{task_id}/complete", response_model=Task)
async def toggle_complete(task_id: str, repo: TaskRepository = Depends(get_task_repository)):
    """Complete an open task or reopen a completed one."""
    try:
        return repo.toggle_complete(task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.post("/tasks/{task_id}/star", response_model=Task)
async def toggle_star(task_id: str, repo: TaskRepository = Depends(get_task_repository)):
    """Star a task for today, or unstar it."""
    try:
        return repo.toggle_star(task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StarLimitError as e:
        raise HTTPException(status_code=409, detail=str(e))


@app.post("/suggestions", response_model=SuggestionResponse)
async def suggestions(
    request: SuggestionRequest,
    repo: TaskRepository = Depends(get_task_repository),
    source: CalendarSource = Depends(get_calendar_source),
):
    """Suggest tasks for the user's capacity and available time."""
    now = utc_now()
    requested = parse_available_minutes(request.available_minutes)
    available = requested
    calendar_access = None
    if request.clamp_to_calendar:
        calendar_access = source.has_access()
        available = clamp_to_next_conflict(requested, source, now=now, time_zone=get_time_zone())

    suggested = suggest_tasks(repo.list(), request.capacity, available, request.max_suggestions, now=now)
    return SuggestionResponse(
        capacity=request.capacity,
        requested_minutes=requested,
        available_minutes=available,
        calendar_access=calendar_access,
        suggestions=[
            ScoredTask(task=task, score=score)
            for task, score in score_tasks(suggested, request.capacity, available, now=now)
        ],
    )


@app.post("/free-blocks", response_model=List[FreeBlock])
async def free_blocks(request: FreeBlocksRequest):
    """Free blocks between the supplied events."""
    return compute_free_blocks(request.events, request.window_start, request.window_end)


@app.get("/free-blocks", response_model=CalendarViewResponse)
async def upcoming_free_blocks(
    hours: int = Query(DEFAULT_FREE_BLOCK_WINDOW_HOURS, ge=1, le=48),
    source: CalendarSource = Depends(get_calendar_source),
):
    """Busy events and free blocks from the connected calendar for the next few hours."""
    window_start = utc_now()
    window_end = window_start + timedelta(hours=hours)
    try:
        result = source.fetch_events(window_start, window_end)
    except Exception as e:
        logger.error(f"Failed to read calendar events: {type(e).__name__}: {str(e)}")
        result = CalendarFetchResult(access_granted=False, events=[])
    return CalendarViewResponse(
        calendar_access=result.access_granted,
        window_start=window_start,
        window_end=window_end,
        events=result.events,
        free_blocks=compute_free_blocks(result.events, window_start, window_end),
    )


@app.get("/free-blocks/next", response_model=NextFreeBlockResponse)
async def upcoming_free_block(source: CalendarSource = Depends(get_calendar_source)):
    """First free block between now and the end of today."""
    try:
        block = next_free_block(source, time_zone=get_time_zone())
    except Exception as e:
        logger.error(f"Failed to find next free block: {type(e).__name__}: {str(e)}")
        block = None
    return NextFreeBlockResponse(calendar_access=source.has_access(), free_block=block)


@app.get("/reminders", response_model=List[Reminder])
async def reminders(repo: TaskRepository = Depends(get_task_repository)):
    """Reminders a notification scheduler should register for open tasks."""
    return plan_reminders(repo.get_incomplete(), time_zone=get_time_zone())
