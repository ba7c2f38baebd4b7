"""Weekly agenda bucketing and rendering."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable

from todo_agenda.parser import Task

AGENDA_SCHEMA_VERSION = "v1"
DEFAULT_DAYS = 7
TITLE = "Weekly Agenda"
PAST_DUE_HEADING = "[PAST DUE]"

_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class DayBucket:
    start: datetime
    tasks: tuple[Task, ...]

    @property
    def end(self) -> datetime:
        return self.start + _ONE_DAY


@dataclass(frozen=True)
class Agenda:
    now: datetime
    past_due: tuple[Task, ...]
    days: tuple[DayBucket, ...]


def admit(tasks: Iterable[Task]) -> list[Task]:
    """Keep incomplete tasks that carry a due date, in input order."""
    return [t for t in tasks if not t.completed and t.due is not None]


def sort_by_due(tasks: Iterable[Task]) -> list[Task]:
    # sorted() is stable: equal due dates keep file-then-line order
    return sorted(tasks, key=lambda t: t.due)


def build_agenda(tasks: Iterable[Task], now: datetime, days: int = DEFAULT_DAYS) -> Agenda:
    """
    Group admitted tasks into a past-due bucket and `days` daily buckets.

    Day boundaries are `now + i days`, not calendar midnight. A daily bucket
    holds tasks due strictly inside (start, start + 1 day); past due means
    strictly before `now`. A task due exactly at `now` falls in neither.
    """
    if days < 1:
        raise ValueError(f"days must be positive, got {days}")

    ordered = sort_by_due(admit(tasks))
    past_due = tuple(t for t in ordered if t.due < now)

    buckets = []
    for offset in range(days):
        start = now + offset * _ONE_DAY
        end = start + _ONE_DAY
        buckets.append(DayBucket(start, tuple(t for t in ordered if start < t.due < end)))

    return Agenda(now=now, past_due=past_due, days=tuple(buckets))


def format_day_heading(moment: datetime) -> str:
    """'Monday, January 2, 2006' style heading."""
    return f"{moment:%A, %B} {moment.day}, {moment.year}"


def _task_line(task: Task) -> str:
    return f"  - {task.description} ({task.source})"


def render_agenda(agenda: Agenda, hide_empty_past_due: bool = False) -> str:
    lines = [TITLE]

    if agenda.past_due or not hide_empty_past_due:
        lines.append("")
        lines.append(PAST_DUE_HEADING)
        lines.extend(_task_line(t) for t in agenda.past_due)

    for bucket in agenda.days:
        lines.append("")
        lines.append(format_day_heading(bucket.start))
        lines.extend(_task_line(t) for t in bucket.tasks)

    return "\n".join(lines) + "\n"


def _task_dict(task: Task) -> dict:
    return {
        "description": task.description,
        "source": task.source,
        "due": task.due.isoformat() if task.due else None,
    }


def agenda_to_dict(agenda: Agenda) -> dict:
    """JSON-serialisable view of an agenda."""
    return {
        "schema_version": AGENDA_SCHEMA_VERSION,
        "command": "agenda",
        "generated_at": agenda.now.isoformat(timespec="seconds"),
        "past_due": [_task_dict(t) for t in agenda.past_due],
        "days": [
            {
                "date": bucket.start.date().isoformat(),
                "heading": format_day_heading(bucket.start),
                "tasks": [_task_dict(t) for t in bucket.tasks],
            }
            for bucket in agenda.days
        ],
    }
