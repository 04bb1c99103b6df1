"""The interactive todo program: reads commands and forwards them to a task store."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator

from .cstring import is_digit, to_numeric_digit
from .errors import InvalidArgumentError, PeachOSError

MSG_WELCOME = "Todo App\n"
MSG_HINT = "Type 'help' for commands.\n\n"
MSG_PROMPT = "todo> "
MSG_BYE = "Bye\n"
MSG_UNKNOWN = "Unknown command\n"
MSG_USAGE_ADD = "Usage: add <task>\n"
MSG_BAD_ID = "ERROR: Invalid task ID\n"
MSG_ADD_OK = "Task added\n"
MSG_ADD_FAIL = "ERROR: Failed to add task\n"
MSG_LIST_FAIL = "ERROR: Failed to list tasks\n"
MSG_REMOVE_OK = "Task removed\n"
MSG_REMOVE_FAIL = "ERROR: Failed to remove task\n"

HELP_LINES = (
    "Commands:\n",
    "  add <task>\n",
    "  list\n",
    "  remove <id>\n",
    "  help\n",
    "  exit\n",
)

LINE_BUFFER_SIZE = 256
MAX_ID_DIGITS = 32
_ENTER = "\r"


class TodoBackend(ABC):
    """The store that keeps the tasks.

    Every method raises a PeachOSError subclass when the store refuses the
    request.
    """

    @abstractmethod
    def add(self, task: str) -> None:
        """Store a new task with the given description."""

    @abstractmethod
    def list_tasks(self) -> str:
        """Return the listing of all stored tasks, ready to be shown."""

    @abstractmethod
    def remove(self, task_id: int) -> None:
        """Remove the task with the given id."""


def parse_task_id(text: str) -> int:
    """Parse a non-negative decimal task id.

    Only the first 32 characters are looked at; every one of them must be a
    digit. The value wraps as a 32-bit signed integer.
    """
    digits = text.split("\0", 1)[0][:MAX_ID_DIGITS]
    if not digits:
        raise InvalidArgumentError("empty task id")
    value = 0
    for ch in digits:
        if not is_digit(ch):
            raise InvalidArgumentError(f"task id {text!r} is not a number")
        value = value * 10 + to_numeric_digit(ch)
    return ((value + 2**31) % 2**32) - 2**31


def _input_line(raw: str, buffer_size: int) -> str:
    """Reduce a raw input line to what a line read from the keyboard holds."""
    line = raw.split(_ENTER, 1)[0].split("\0", 1)[0]
    return line[: buffer_size - 1]


def _stdin_lines() -> Iterator[str]:
    for line in sys.stdin:
        yield line.rstrip("\n")


def _equals(text: str, word: str) -> bool:
    return text.startswith(word) and text[len(word) : len(word) + 1] in ("", "\n")


def run_todo(
    backend: TodoBackend,
    lines: Iterable[str] | None = None,
    write: Callable[[str], object] | None = None,
) -> int:
    """Run the todo command loop over ``lines`` and return 0.

    Lines default to standard input and output to standard output. The loop
    ends on 'exit' or when the input runs out.
    """
    out = sys.stdout.write if write is None else write
    feed = iter(_stdin_lines() if lines is None else lines)

    out(MSG_WELCOME)
    out(MSG_HINT)

    while True:
        out(MSG_PROMPT)
        raw = next(feed, None)
        if raw is None:
            return 0
        line = _input_line(raw, LINE_BUFFER_SIZE)
        out("\n")

        if not line:
            continue

        if line.startswith("add "):
            task_text = line[4:]
            if not task_text:
                out(MSG_USAGE_ADD)
                continue
            try:
                backend.add(task_text)
            except PeachOSError:
                out(MSG_ADD_FAIL)
            else:
                out(MSG_ADD_OK)
            continue

        if _equals(line, "list"):
            try:
                listing = backend.list_tasks()
            except PeachOSError:
                out(MSG_LIST_FAIL)
            else:
                if listing:
                    out(listing)
            continue

        if line.startswith("remove "):
            try:
                task_id = parse_task_id(line[7:])
            except InvalidArgumentError:
                out(MSG_BAD_ID)
                continue
            try:
                backend.remove(task_id)
            except PeachOSError:
                out(MSG_REMOVE_FAIL)
            else:
                out(MSG_REMOVE_OK)
            continue

        if _equals(line, "help"):
            for help_line in HELP_LINES:
                out(help_line)
            continue

        if _equals(line, "exit"):
            out(MSG_BYE)
            return 0

        out(MSG_UNKNOWN)