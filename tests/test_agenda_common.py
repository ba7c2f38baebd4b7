"""Tests for control-file and todo-file loading."""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

import agenda_common as common


def _home():
    return "/home/tester"


# ---------------------------------------------------------------------------
# expand_tilde()
# ---------------------------------------------------------------------------

class TestExpandTilde:
    def test_leading_tilde(self):
        assert common.expand_tilde("~/todo/work.todo.txt", _home) == "/home/tester/todo/work.todo.txt"

    def test_bare_tilde(self):
        assert common.expand_tilde("~", _home) == "/home/tester"

    def test_tilde_user_is_plain_prefix_substitution(self):
        assert common.expand_tilde("~bob/list.txt", _home) == "/home/testerbob/list.txt"

    def test_no_tilde(self):
        assert common.expand_tilde("/abs/path.txt", _home) == "/abs/path.txt"

    def test_inner_tilde_untouched(self):
        assert common.expand_tilde("/a/~/b", _home) == "/a/~/b"

    def test_default_provider_uses_home(self):
        assert common.expand_tilde("~/y") == str(Path.home()) + "/y"


# ---------------------------------------------------------------------------
# read_control_file()
# ---------------------------------------------------------------------------

def test_read_control_file(tmp_path):
    control = tmp_path / "files.txt"
    control.write_bytes(b"~/a.todo.txt\r\n/abs/b.todo.txt\n\n   \nrel/c.txt")
    assert common.read_control_file(control, _home) == [
        "/home/tester/a.todo.txt",
        "/abs/b.todo.txt",
        "rel/c.txt",
    ]


def test_read_control_file_missing_raises(tmp_path):
    with pytest.raises(OSError):
        common.read_control_file(tmp_path / "nope.txt", _home)


# ---------------------------------------------------------------------------
# load_todo_file() / load_all_tasks()
# ---------------------------------------------------------------------------

def test_load_todo_file_skips_bad_and_blank_lines(tmp_path, caplog):
    todo = tmp_path / "work.todo.txt"
    todo.write_text(
        "(A) Ship release due:2024-06-11\n"
        "\n"
        "(B) Broken due:2024-13-40\n"
        "(C) Someday maybe\n"
        "(A) x Done already due:2024-06-01\n",
        encoding="utf-8",
    )
    with caplog.at_level(logging.WARNING):
        tasks = common.load_todo_file(todo)

    assert [t.description for t in tasks] == [
        "Ship release due:2024-06-11",
        "Someday maybe",
        "x Done already due:2024-06-01",
    ]
    assert all(t.source == "work" for t in tasks)
    assert tasks[0].due == datetime(2024, 6, 11, 23, 59, 59)
    assert "Failed to parse task" in caplog.text
    assert "2024-13-40" in caplog.text
    assert "work.todo.txt:3" in caplog.text


def test_load_todo_file_missing_is_logged_and_empty(tmp_path, caplog):
    missing = tmp_path / "gone.todo.txt"
    with caplog.at_level(logging.ERROR):
        assert common.load_todo_file(missing) == []
    assert f"Failed to open file {missing}" in caplog.text


def test_load_todo_file_undecodable_bytes_affect_only_their_line(tmp_path, caplog):
    todo = tmp_path / "mixed.todo.txt"
    todo.write_bytes(b"(A) caf\xe9 due:2024-06-11\n(A) later due:2024-06-12\n")
    with caplog.at_level(logging.WARNING):
        tasks = common.load_todo_file(todo)

    assert [t.description for t in tasks] == [
        "caf\ufffd due:2024-06-11",
        "later due:2024-06-12",
    ]
    assert tasks[0].due == datetime(2024, 6, 11, 23, 59, 59)
    assert tasks[1].due == datetime(2024, 6, 12, 23, 59, 59)
    assert "Error reading file" not in caplog.text


def test_read_control_file_keeps_non_utf8_paths(tmp_path):
    raw_dir = os.fsencode(tmp_path)
    todo_bytes = raw_dir + b"/caf\xe9.todo.txt"
    with open(todo_bytes, "wb") as fh:
        fh.write(b"(A) Latin-1 named list due:2024-06-11\n")
    control = tmp_path / "files.txt"
    control.write_bytes(todo_bytes + b"\n")

    paths = common.read_control_file(control, _home)
    assert [os.fsencode(p) for p in paths] == [todo_bytes]

    tasks = common.load_all_tasks(paths)
    assert [(t.source, t.description) for t in tasks] == [
        ("caf\ufffd", "Latin-1 named list due:2024-06-11"),
    ]


def test_load_all_tasks_continues_past_missing_file(tmp_path, caplog):
    first = tmp_path / "a.todo.txt"
    first.write_text("(A) one due:2024-06-11\n")
    third = tmp_path / "c.todo.txt"
    third.write_text("(A) three due:2024-06-11\n")

    with caplog.at_level(logging.ERROR):
        tasks = common.load_all_tasks([first, tmp_path / "b.todo.txt", third])

    assert [(t.source, t.description) for t in tasks] == [
        ("a", "one due:2024-06-11"),
        ("c", "three due:2024-06-11"),
    ]
    assert "b.todo.txt" in caplog.text


# ---------------------------------------------------------------------------
# configuration
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "raw, expected",
    [(None, 7), ("", 7), ("3", 3), ("14", 14), ("0", 7), ("-2", 7), ("week", 7)],
)
def test_env_days(raw, expected):
    assert common._env_days(raw) == expected
