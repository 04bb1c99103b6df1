"""Parsing of drive-qualified paths such as '0:/dir/file.txt'."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import takewhile

from .errors import MAX_PATH, BadPathError


@dataclass(frozen=True)
class PathRoot:
    """A parsed path: the drive number and the path components in order."""

    drive_no: int
    parts: tuple[str, ...]

    @property
    def first(self) -> str:
        """The first path component."""
        return self.parts[0]

    def __iter__(self):
        return iter(self.parts)

    def __len__(self) -> int:
        return len(self.parts)


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def parse_path(path: str, current_directory_path: str | None = None) -> PathRoot:
    """Parse '<digit>:/a/b/...' into a PathRoot.

    Parsing stops at the first empty component, so a trailing slash or a
    doubled slash ends the path. A path with no components is rejected.
    """
    path = path.split("\0", 1)[0]
    if len(path) > MAX_PATH:
        raise BadPathError(f"path longer than {MAX_PATH} characters")
    if len(path) < 3 or not _is_digit(path[0]) or path[1:3] != ":/":
        raise BadPathError(f"path {path!r} is not of the form '<drive>:/...'")

    drive_no = ord(path[0]) - ord("0")
    parts = tuple(takewhile(bool, path[3:].split("/")))
    if not parts:
        raise BadPathError(f"path {path!r} names no file")
    return PathRoot(drive_no=drive_no, parts=parts)