"""The interface every filesystem driver provides, and its shared types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Any


class SeekMode(IntEnum):
    """Where a seek offset is measured from."""

    SET = 0
    CUR = 1
    END = 2


class FileMode(IntEnum):
    """The mode a file is opened in."""

    READ = 0
    WRITE = 1
    APPEND = 2
    INVALID = 3


class StatFlags(IntFlag):
    """Flags reported by a file status query."""

    NONE = 0
    READ_ONLY = 0b00000001


@dataclass(frozen=True)
class FileStat:
    """Status of an open file: its flags and size in bytes."""

    flags: StatFlags
    filesize: int

    @property
    def read_only(self) -> bool:
        """True when the file is marked read-only."""
        return bool(self.flags & StatFlags.READ_ONLY)


def file_mode_from_string(mode: str) -> FileMode:
    """Map a mode string to a FileMode by its first character ('r', 'w' or 'a')."""
    first = mode[:1]
    if first == "r":
        return FileMode.READ
    if first == "w":
        return FileMode.WRITE
    if first == "a":
        return FileMode.APPEND
    return FileMode.INVALID


class Filesystem(ABC):
    """A filesystem driver.

    Drivers raise a PeachOSError subclass on failure. ``resolve`` returns
    normally only when the driver takes charge of the disk.
    """

    name: str = ""

    @abstractmethod
    def resolve(self, disk: Any) -> None:
        """Claim ``disk`` for this filesystem, or raise if it is not ours."""

    @abstractmethod
    def open(self, disk: Any, path: Sequence[str], mode: FileMode) -> Any:
        """Open the file named by the path components and return a descriptor."""

    @abstractmethod
    def read(self, disk: Any, descriptor: Any, size: int, nmemb: int) -> bytes:
        """Read ``nmemb`` items of ``size`` bytes from the descriptor's position."""

    @abstractmethod
    def seek(self, descriptor: Any, offset: int, whence: SeekMode) -> None:
        """Move the descriptor's position."""

    @abstractmethod
    def stat(self, disk: Any, descriptor: Any) -> FileStat:
        """Return the status of the open file."""

    @abstractmethod
    def close(self, descriptor: Any) -> None:
        """Release the descriptor."""