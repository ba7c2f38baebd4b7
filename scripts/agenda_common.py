#!/usr/bin/env python3
"""
Shared I/O helpers for the weekly agenda.

Configuration via environment variables:
- WEEKLY_AGENDA_DAYS: Number of daily sections to render (default 7)
"""

import logging
import os
import sys
from pathlib import Path
from typing import Callable, Optional

_SCRIPT_DIR = Path(__file__).parent.resolve()
if str(_SCRIPT_DIR / "lib") not in sys.path:
    sys.path.insert(0, str(_SCRIPT_DIR / "lib"))

from todo_agenda.builder import DEFAULT_DAYS
from todo_agenda.parser import ParseError, Task, parse_line, printable_path

logger = logging.getLogger(__name__)


def _env_days(raw: Optional[str]) -> int:
    if raw is None or not raw.strip():
        return DEFAULT_DAYS
    try:
        days = int(raw)
    except ValueError:
        logger.warning(f"Ignoring WEEKLY_AGENDA_DAYS={raw!r}: not an integer")
        return DEFAULT_DAYS
    if days < 1:
        logger.warning(f"Ignoring WEEKLY_AGENDA_DAYS={raw!r}: must be positive")
        return DEFAULT_DAYS
    return days


AGENDA_DAYS = _env_days(os.getenv("WEEKLY_AGENDA_DAYS"))


def home_directory() -> str:
    return str(Path.home())


def expand_tilde(path: str, home_dir: Callable[[], str] = home_directory) -> str:
    """Replace a leading '~' with the home directory.

    Plain prefix substitution: '~user/x' is not looked up, it becomes
    '<home>user/x'.
    """
    if path.startswith("~"):
        return home_dir() + path[1:]
    return path


def read_control_file(control_path, home_dir: Callable[[], str] = home_directory) -> list[str]:
    """Return the todo file paths listed in the control file, one per line.

    Non-UTF-8 bytes are kept via surrogateescape so the paths still open.
    OSError propagates; the caller treats it as fatal.
    """
    paths = []
    with open(control_path, encoding="utf-8", errors="surrogateescape") as fh:
        for line in fh:
            entry = line.rstrip("\r\n")
            if not entry.strip():
                continue
            paths.append(expand_tilde(entry, home_dir))
    return paths


def load_todo_file(path) -> list[Task]:
    """Parse every line of a todo file.

    Open failures and mid-file read errors are logged and yield whatever was
    parsed so far. Malformed lines are logged and skipped. Undecodable bytes
    become U+FFFD and only affect their own line.
    """
    tasks: list[Task] = []
    shown = printable_path(path)
    try:
        fh = open(path, encoding="utf-8", errors="replace")
    except OSError as e:
        logger.error(f"Failed to open file {shown}: {e}")
        return tasks

    with fh:
        lineno = 0
        try:
            for lineno, line in enumerate(fh, start=1):
                try:
                    task = parse_line(line, path, lineno)
                except ParseError as e:
                    logger.warning(f"Failed to parse task: {e}")
                    continue
                if task is None:
                    logger.debug(f"Skipping blank line {shown}:{lineno}")
                    continue
                tasks.append(task)
        except OSError as e:
            logger.error(f"Error reading file {shown} after line {lineno}: {e}")

    logger.debug(f"Parsed {len(tasks)} task(s) from {shown}")
    return tasks


def load_all_tasks(paths) -> list[Task]:
    """Concatenate tasks from each todo file in control-file order."""
    collected: list[Task] = []
    for path in paths:
        collected.extend(load_todo_file(path))
    return collected
