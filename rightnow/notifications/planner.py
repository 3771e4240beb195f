"""Reminder planning for rightnow.

Works out which reminders a notification scheduler should register. Nothing
here talks to a notification service.
"""

from datetime import datetime, time, timedelta
from typing import List, Optional

from rightnow.engine.clock import align_to, to_local, to_naive_utc, utc_now
from rightnow.models.task import Task
from rightnow.models.reminder import Reminder, ReminderKind
from rightnow.models.constants import (
    DEADLINE_REMINDER_OFFSETS_HOURS,
    EVENING_REMINDER_HOUR,
    EVENING_REMINDER_MINUTE,
)

_DEADLINE_TEXT = {
    "24h": ("Deadline Tomorrow", '"{title}" is due in 24 hours'),
    "2h": ("Deadline Soon", '"{title}" is due in 2 hours'),
    "now": ("Deadline Now", '"{title}" is due now!'),
}


def plan_deadline_reminders(task: Task, now: Optional[datetime] = None) -> List[Reminder]:
    """Reminders 24 hours before, 2 hours before and at a task's deadline.

    Only reminders that are still in the future are returned. Completed
    tasks and tasks without a deadline get none.
    """
    if task.deadline is None or task.completed_at is not None:
        return []

    now = align_to(task.deadline, now or utc_now())
    reminders = []
    for timing, hours in DEADLINE_REMINDER_OFFSETS_HOURS:
        fire_at = task.deadline - timedelta(hours=hours)
        if fire_at <= now:
            continue
        title, body = _DEADLINE_TEXT[timing]
        reminders.append(
            Reminder(
                kind=ReminderKind.DEADLINE,
                task_id=task.id,
                timing=timing,
                fire_at=fire_at,
                title=title,
                body=body.format(title=task.title),
            )
        )
    return reminders


def tasks_missing_details(tasks: List[Task]) -> List[Task]:
    """Open tasks with no deadline, no energy and no time estimate."""
    return [
        task for task in tasks
        if task.completed_at is None
        and task.deadline is None
        and not task.energy
        and not task.estimated_minutes
    ]


def next_evening_time(now: Optional[datetime] = None, time_zone: str = "UTC") -> datetime:
    """Next evening reminder time in the given zone, as naive UTC."""
    local_now = to_local(now or utc_now(), time_zone)

    evening = datetime.combine(
        local_now.date(),
        time(EVENING_REMINDER_HOUR, EVENING_REMINDER_MINUTE),
        tzinfo=local_now.tzinfo,
    )
    if evening <= local_now:
        evening = datetime.combine(
            local_now.date() + timedelta(days=1),
            time(EVENING_REMINDER_HOUR, EVENING_REMINDER_MINUTE),
            tzinfo=local_now.tzinfo,
        )
    return to_naive_utc(evening)


def plan_evening_reminder(
    tasks: List[Task],
    now: Optional[datetime] = None,
    time_zone: str = "UTC",
) -> Optional[Reminder]:
    """Daily nudge to fill in details for tasks that have none.

    Returns:
        The reminder, or None when every open task has some detail
    """
    missing = tasks_missing_details(tasks)
    if not missing:
        return None

    count = len(missing)
    plural = "s" if count > 1 else ""
    return Reminder(
        kind=ReminderKind.EVENING,
        timing="daily",
        fire_at=next_evening_time(now, time_zone),
        title="Evening Reminder",
        body=f"You have {count} task{plural} without details. Take a moment to add deadlines and estimates.",
    )


def plan_reminders(
    tasks: List[Task],
    now: Optional[datetime] = None,
    time_zone: str = "UTC",
) -> List[Reminder]:
    """All reminders for a task snapshot, soonest first."""
    now = now or utc_now()
    reminders: List[Reminder] = []
    for task in tasks:
        reminders.extend(plan_deadline_reminders(task, now))

    evening = plan_evening_reminder(tasks, now, time_zone)
    if evening is not None:
        reminders.append(evening)

    return sorted(reminders, key=lambda reminder: to_naive_utc(reminder.fire_at))
