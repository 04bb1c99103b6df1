"""The virtual file system: filesystem drivers, attached disks and file descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .disk import Disk
from .errors import (
    MAX_FILE_DESCRIPTORS,
    MAX_FILESYSTEMS,
    BadPathError,
    DiskIOError,
    InvalidArgumentError,
    OutOfMemoryError,
    PeachOSError,
)
from .fat16 import Fat16Filesystem
from .filesystem import FileMode, FileStat, Filesystem, SeekMode, file_mode_from_string
from .pathparser import parse_path


@dataclass
class _FileDescriptor:
    index: int
    filesystem: Filesystem
    private: Any
    disk: Disk


class VirtualFileSystem:
    """Routes file operations on '<drive>:/path' names to filesystem drivers.

    A FAT16 driver is installed from the start. File descriptors are numbered
    from 1.
    """

    def __init__(self) -> None:
        self._filesystems: list[Filesystem] = []
        self._descriptors: list[_FileDescriptor | None] = [None] * MAX_FILE_DESCRIPTORS
        self._disks: dict[int, Disk] = {}
        self.insert_filesystem(Fat16Filesystem())

    @property
    def filesystems(self) -> tuple[Filesystem, ...]:
        """The installed drivers, in the order they are tried."""
        return tuple(self._filesystems)

    def insert_filesystem(self, filesystem: Filesystem) -> None:
        """Install a driver after those already present."""
        if len(self._filesystems) >= MAX_FILESYSTEMS:
            raise OutOfMemoryError("no room to insert another filesystem")
        self._filesystems.append(filesystem)

    def resolve(self, disk: Disk) -> Filesystem | None:
        """Return the first driver that claims ``disk``, or None if none does."""
        for filesystem in self._filesystems:
            try:
                filesystem.resolve(disk)
            except PeachOSError:
                continue
            return filesystem
        return None

    def attach_disk(self, disk: Disk) -> Filesystem | None:
        """Make ``disk`` reachable by its id and bind it to the driver that claims it."""
        disk.filesystem = self.resolve(disk)
        self._disks[disk.id] = disk
        return disk.filesystem

    def _descriptor(self, fd: int) -> _FileDescriptor | None:
        if fd <= 0 or fd >= MAX_FILE_DESCRIPTORS:
            return None
        return self._descriptors[fd - 1]

    def fopen(self, filename: str, mode: str) -> int:
        """Open ``filename`` and return its descriptor number."""
        try:
            root = parse_path(filename)
        except BadPathError as exc:
            raise InvalidArgumentError(str(exc)) from exc

        disk = self._disks.get(root.drive_no)
        if disk is None:
            raise DiskIOError(f"no disk with number {root.drive_no}")
        filesystem = disk.filesystem
        if filesystem is None:
            raise DiskIOError(f"disk {root.drive_no} has no filesystem")

        file_mode = file_mode_from_string(mode)
        if file_mode is FileMode.INVALID:
            raise InvalidArgumentError(f"invalid file mode {mode!r}")

        private = filesystem.open(disk, root.parts, file_mode)
        try:
            slot = self._descriptors.index(None)
        except ValueError:
            filesystem.close(private)
            raise OutOfMemoryError("no free file descriptors") from None

        descriptor = _FileDescriptor(slot + 1, filesystem, private, disk)
        self._descriptors[slot] = descriptor
        return descriptor.index

    def fread(self, size: int, nmemb: int, fd: int) -> bytes:
        """Read ``nmemb`` items of ``size`` bytes from the open file ``fd``."""
        if size == 0 or nmemb == 0 or fd < 1:
            raise InvalidArgumentError("size, count and descriptor must be positive")
        descriptor = self._descriptor(fd)
        if descriptor is None:
            raise InvalidArgumentError(f"descriptor {fd} is not open")
        return descriptor.filesystem.read(descriptor.disk, descriptor.private, size, nmemb)

    def fseek(self, fd: int, offset: int, whence: SeekMode) -> None:
        """Move the position of the open file ``fd``."""
        descriptor = self._descriptor(fd)
        if descriptor is None:
            raise DiskIOError(f"descriptor {fd} is not open")
        descriptor.filesystem.seek(descriptor.private, offset, whence)

    def fstat(self, fd: int) -> FileStat:
        """Return the status of the open file ``fd``."""
        descriptor = self._descriptor(fd)
        if descriptor is None:
            raise DiskIOError(f"descriptor {fd} is not open")
        return descriptor.filesystem.stat(descriptor.disk, descriptor.private)

    def fclose(self, fd: int) -> None:
        """Close ``fd``; its number becomes free for reuse."""
        descriptor = self._descriptor(fd)
        if descriptor is None:
            raise DiskIOError(f"descriptor {fd} is not open")
        descriptor.filesystem.close(descriptor.private)
        self._descriptors[descriptor.index - 1] = None