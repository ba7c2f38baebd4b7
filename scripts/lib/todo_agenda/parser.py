"""todo.txt line parser."""

import os
import re
from dataclasses import dataclass
from datetime import datetime, time
from pathlib import Path
from typing import Optional

LABEL_SUFFIX = ".todo.txt"
DUE_PREFIX = "due:"
DONE_MARKER = "x"

_DUE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_END_OF_DAY = time(23, 59, 59)


class ParseError(ValueError):
    """A task line carried a due: token that is not a valid YYYY-MM-DD date."""

    def __init__(self, value: str, path: Optional[str] = None, lineno: Optional[int] = None):
        self.value = value
        self.path = path
        self.lineno = lineno
        where = ""
        if path is not None:
            where = f" in {path}" + (f":{lineno}" if lineno is not None else "")
        super().__init__(f"invalid due date {value!r}{where} (expected YYYY-MM-DD)")


@dataclass(frozen=True)
class Task:
    description: str
    due: Optional[datetime]
    source: str
    completed: bool = False


def printable_path(path) -> str:
    """Path as text, with undecodable filename bytes shown as U+FFFD."""
    return os.fsencode(path).decode("utf-8", "replace")


def source_label(path) -> str:
    """Base file name with a trailing '.todo.txt' removed."""
    name = printable_path(Path(path).name)
    if name.endswith(LABEL_SUFFIX):
        return name[:-len(LABEL_SUFFIX)]
    return name


def parse_due_date(value: str) -> datetime:
    """
    Parse a YYYY-MM-DD string into a datetime at the end of that day.

    Raises ValueError for anything that is not zero-padded four-two-two
    digits naming a real calendar date.
    """
    if not _DUE_RE.match(value):
        raise ValueError(f"not a YYYY-MM-DD date: {value!r}")
    day = datetime.strptime(value, "%Y-%m-%d").date()
    return datetime.combine(day, _END_OF_DAY)


def parse_line(line: str, path, lineno: Optional[int] = None) -> Optional[Task]:
    """
    Parse one todo.txt line into a Task.

    Rules:
    - Token 0 is a priority/status marker and never part of the description
    - The first 'due:' or standalone 'x' token wins; scanning stops there
    - A malformed due date rejects the whole line with ParseError
    - A line with no tokens yields None
    """
    parts = line.split()
    if not parts:
        return None

    due = None
    completed = False
    for part in parts:
        if part.startswith(DUE_PREFIX):
            raw = part[len(DUE_PREFIX):]
            try:
                due = parse_due_date(raw)
            except ValueError:
                raise ParseError(raw, printable_path(path), lineno) from None
            break
        if part == DONE_MARKER:
            completed = True
            break

    return Task(
        description=" ".join(parts[1:]),
        due=due,
        source=source_label(path),
        completed=completed,
    )
