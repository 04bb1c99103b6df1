"""Integer-to-text conversion and a minimal printf."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from typing import Any, TextIO

from .errors import InvalidArgumentError


def itoa(i: int) -> str:
    """Decimal text of ``i`` taken as a 32-bit signed integer."""
    value = ((int(i) + 2**31) % 2**32) - 2**31
    return str(value)


def _next_arg(values: Iterator[Any]) -> Any:
    try:
        return next(values)
    except StopIteration:
        raise InvalidArgumentError("not enough arguments for format") from None


def cformat(fmt: str, *args: Any) -> str:
    """Format ``fmt`` with '%i' (integer) and '%s' (string) conversions.

    '%' followed by any other character yields that character, so '%%' gives
    a single '%'. A NUL in the format or in a string argument ends it.
    """
    pieces: list[str] = []
    chars = iter(fmt)
    values = iter(args)
    for ch in chars:
        if ch == "\0":
            break
        if ch != "%":
            pieces.append(ch)
            continue
        spec = next(chars, "\0")
        if spec == "\0":
            break
        if spec == "i":
            pieces.append(itoa(_next_arg(values)))
        elif spec == "s":
            pieces.append(str(_next_arg(values)).split("\0", 1)[0])
        else:
            pieces.append(spec)
    return "".join(pieces)


def printf(fmt: str, *args: Any, out: TextIO | None = None) -> None:
    """Write ``cformat(fmt, *args)`` to ``out`` (standard output by default)."""
    stream = sys.stdout if out is None else out
    stream.write(cformat(fmt, *args))