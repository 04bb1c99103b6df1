"""The interactive shell: reads command lines and runs each one."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterable, Iterator, Sequence

from .command import system_run
from .errors import PeachOSError

BANNER = "PeachOS v1.0.0\n"
PROMPT = "> "
LINE_BUFFER_SIZE = 1024
_ENTER = "\r"


def _input_line(raw: str) -> str:
    line = raw.split(_ENTER, 1)[0].split("\0", 1)[0]
    return line[: LINE_BUFFER_SIZE - 1]


def _stdin_lines() -> Iterator[str]:
    for line in sys.stdin:
        yield line.rstrip("\n")


def run_shell(
    lines: Iterable[str] | None = None,
    runner: Callable[[Sequence[str]], int] | None = None,
    write: Callable[[str], object] | None = None,
) -> None:
    """Run each input line as a command until the input runs out.

    ``runner`` receives the parsed arguments of every non-blank line. Lines
    default to standard input and output to standard output. A command that
    fails does not stop the shell.
    """
    if runner is None:
        raise TypeError("run_shell needs a runner to start commands")
    out = sys.stdout.write if write is None else write
    feed = iter(_stdin_lines() if lines is None else lines)

    out(BANNER)
    while True:
        out(PROMPT)
        raw = next(feed, None)
        if raw is None:
            return
        line = _input_line(raw)
        out("\n")
        try:
            system_run(line, runner)
        except PeachOSError:
            pass
        out("\n")