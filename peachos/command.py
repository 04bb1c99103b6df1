"""Command-line parsing, keyboard line input and running commands."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .cstring import tokenize
from .errors import InvalidArgumentError

MAX_COMMAND_LENGTH = 1024
MAX_ARGUMENT_LENGTH = 511
RUN_BUFFER_SIZE = 1024

KEY_ENTER = 13
KEY_BACKSPACE = 0x08


def parse_command(command: str, max_length: int) -> list[str]:
    """Split a command line on spaces into its arguments.

    The command is cut to 1024 characters and each argument to 511.
    ``max_length`` must be below 1025. An empty or blank command gives an
    empty list.
    """
    if max_length > MAX_COMMAND_LENGTH:
        raise InvalidArgumentError(
            f"command buffer larger than {MAX_COMMAND_LENGTH} characters"
        )
    text = command.split("\0", 1)[0][:MAX_COMMAND_LENGTH]
    return [token[:MAX_ARGUMENT_LENGTH] for token in tokenize(text, " ")]


def get_key_blocking(getkey: Callable[[], int]) -> int:
    """Call ``getkey`` until it returns a key other than zero."""
    while True:
        key = getkey()
        if key != 0:
            return key


def read_line(
    getkey: Callable[[], int],
    max_length: int,
    echo: Callable[[str], object] | None = None,
) -> str:
    """Read keys until Enter, holding at most ``max_length - 1`` characters.

    Every key except Enter is passed to ``echo`` when one is given. Backspace
    removes the last character; on an empty line it is kept as a character.
    """
    buffer: list[str] = []
    while len(buffer) < max_length - 1:
        key = get_key_blocking(getkey) & 0xFF
        if key == KEY_ENTER:
            break
        char = chr(key)
        if echo is not None:
            echo(char)
        if key == KEY_BACKSPACE and buffer:
            buffer.pop()
            continue
        buffer.append(char)
    return "".join(buffer)


def system_run(command: str, runner: Callable[[Sequence[str]], int]) -> int:
    """Parse ``command`` and hand its arguments to ``runner``, returning its result."""
    text = command.split("\0", 1)[0][: RUN_BUFFER_SIZE - 1]
    arguments = parse_command(text, RUN_BUFFER_SIZE)
    if not arguments:
        raise InvalidArgumentError("empty command")
    return runner(arguments)