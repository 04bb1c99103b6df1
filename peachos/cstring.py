"""Character and string helpers with the semantics of the user-space C library.

Strings are Python ``str`` objects; an embedded NUL character ends a string,
and reading past the end of a string behaves as if a NUL were found there.
"""

from __future__ import annotations

from collections.abc import Iterator
from itertools import islice, zip_longest

from .errors import InvalidArgumentError


def _until_nul(text: str) -> str:
    return text.split("\0", 1)[0]


def _codes(text: str) -> Iterator[int]:
    return (ord(ch) for ch in _until_nul(text))


def _lower_code(code: int) -> int:
    return code + 32 if 65 <= code <= 90 else code


def to_lower(c: str) -> str:
    """Lower-case a single ASCII letter; any other character is returned unchanged."""
    if "A" <= c <= "Z":
        return chr(ord(c) + 32)
    return c


def strnlen(text: str, maximum: int) -> int:
    """Length of ``text`` up to its first NUL, never more than ``maximum``."""
    return min(len(_until_nul(text)), max(maximum, 0))


def strnlen_terminator(text: str, maximum: int, terminator: str) -> int:
    """Length of ``text`` up to a NUL or ``terminator``, never more than ``maximum``."""
    length = 0
    for ch in islice(_until_nul(text), max(maximum, 0)):
        if ch == terminator:
            break
        length += 1
    return length


def strncmp(s1: str, s2: str, n: int) -> int:
    """Compare at most ``n`` characters; the sign of the result orders the strings."""
    for a, b in islice(zip_longest(_codes(s1), _codes(s2), fillvalue=0), max(n, 0)):
        if a != b:
            return a - b
        if a == 0:
            return 0
    return 0


def istrncmp(s1: str, s2: str, n: int) -> int:
    """Like :func:`strncmp`, but ASCII letters compare without regard to case."""
    for a, b in islice(zip_longest(_codes(s1), _codes(s2), fillvalue=0), max(n, 0)):
        if a != b and _lower_code(a) != _lower_code(b):
            return a - b
        if a == 0:
            return 0
    return 0


def is_digit(c: str) -> bool:
    """True for a single character in '0'..'9'."""
    return len(c) == 1 and "0" <= c <= "9"


def to_numeric_digit(c: str) -> int:
    """The numeric value of a digit character (offset from '0')."""
    return ord(c) - ord("0")


def tokenize(text: str, delimiters: str) -> Iterator[str]:
    """Yield the non-empty runs of ``text`` separated by any of ``delimiters``."""
    text = _until_nul(text)
    if not delimiters:
        if text:
            yield text
        return
    token: list[str] = []
    for ch in text:
        if ch in delimiters:
            if token:
                yield "".join(token)
                token = []
        else:
            token.append(ch)
    if token:
        yield "".join(token)


def _signed(byte: int) -> int:
    return byte - 256 if byte >= 128 else byte


def memcmp(s1: bytes, s2: bytes, count: int) -> int:
    """Compare the first ``count`` bytes as signed chars; return -1, 0 or 1."""
    if count > len(s1) or count > len(s2):
        raise InvalidArgumentError("count exceeds the length of a buffer")
    for a, b in zip(bytes(s1[:count]), bytes(s2[:count])):
        if a != b:
            return -1 if _signed(a) < _signed(b) else 1
    return 0