"""Sector-addressed disks backed by an in-memory image, and byte streams over them."""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from .errors import SECTOR_SIZE, DiskIOError, InvalidArgumentError


class DiskType(IntEnum):
    """Kinds of disk the system knows about."""

    REAL = 0


class Disk:
    """A disk made of fixed-size sectors stored in a mutable byte image.

    ``filesystem`` and ``fs_private`` are left empty here; they are filled in
    when a filesystem driver claims the disk.
    """

    def __init__(
        self,
        image: bytes | bytearray | memoryview,
        disk_id: int = 0,
        sector_size: int = SECTOR_SIZE,
    ) -> None:
        if sector_size <= 0:
            raise InvalidArgumentError("sector size must be positive")
        self.image = image if isinstance(image, bytearray) else bytearray(image)
        self.id = disk_id
        self.sector_size = sector_size
        self.type = DiskType.REAL
        self.filesystem: Any = None
        self.fs_private: Any = None

    @property
    def total_sectors(self) -> int:
        """Number of whole sectors in the image."""
        return len(self.image) // self.sector_size

    def _span(self, lba: int, total: int) -> tuple[int, int]:
        if lba < 0:
            raise InvalidArgumentError("sector address must not be negative")
        if total < 0:
            raise InvalidArgumentError("sector count must not be negative")
        if lba + total > self.total_sectors:
            raise DiskIOError(
                f"sectors {lba}..{lba + total - 1} lie beyond the end of the disk"
            )
        start = lba * self.sector_size
        return start, start + total * self.sector_size

    def read_block(self, lba: int, total: int = 1) -> bytes:
        """Read ``total`` sectors starting at sector ``lba``."""
        start, end = self._span(lba, total)
        return bytes(self.image[start:end])

    def write_block(self, lba: int, data: bytes | bytearray | memoryview) -> None:
        """Write whole sectors of ``data`` starting at sector ``lba``."""
        payload = bytes(data)
        total, remainder = divmod(len(payload), self.sector_size)
        if remainder:
            raise InvalidArgumentError("data must be a whole number of sectors")
        start, end = self._span(lba, total)
        self.image[start:end] = payload

    def __repr__(self) -> str:
        return (
            f"Disk(id={self.id}, sector_size={self.sector_size}, "
            f"sectors={self.total_sectors})"
        )


class DiskStream:
    """A byte-addressed reader over a disk, with a current position."""

    def __init__(self, disk: Disk) -> None:
        self.disk = disk
        self.pos = 0

    def seek(self, pos: int) -> None:
        """Move the read position to byte ``pos``."""
        self.pos = pos

    def read(self, total: int) -> bytes:
        """Read ``total`` bytes from the current position and advance past them.

        The position advances sector by sector, so a read that fails part way
        leaves it after the last sector that was read successfully.
        """
        if total < 0:
            raise InvalidArgumentError("byte count must not be negative")
        if self.pos < 0:
            raise DiskIOError("stream position is negative")
        sector_size = self.disk.sector_size
        chunks: list[bytes] = []
        remaining = total
        while True:
            sector, offset = divmod(self.pos, sector_size)
            count = min(remaining, sector_size - offset)
            block = self.disk.read_block(sector, 1)
            chunks.append(block[offset : offset + count])
            self.pos += count
            remaining -= count
            if remaining == 0:
                break
        return b"".join(chunks)