"""A read-only FAT16 filesystem driver."""

from __future__ import annotations

import struct
from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntFlag
from typing import Any

from .cstring import istrncmp
from .disk import Disk, DiskStream
from .errors import (
    MAX_PATH,
    DiskIOError,
    FilesystemNotUsError,
    InvalidArgumentError,
    InvalidFormatError,
    PeachOSError,
    ReadOnlyError,
    UnimplementedError,
)
from .filesystem import FileMode, FileStat, Filesystem, SeekMode, StatFlags

FAT16_SIGNATURE = 0x29
FAT_ENTRY_SIZE = 2
BAD_SECTOR = 0xFF7
END_OF_CHAIN = (0xFFF8, 0xFFFF)
RESERVED_ENTRIES = (0xFF0, 0xFF6)
UNUSED = 0x00
DELETED_MARK = 0xE5

_PRIMARY_FORMAT = struct.Struct("<3s8sHBHBHHBHHHII")
_EXTENDED_FORMAT = struct.Struct("<BBBI11s8s")
_ITEM_FORMAT = struct.Struct("<8s3sBBBHHHHHHHI")


class FatAttribute(IntFlag):
    """Attribute bits of a directory entry."""

    NONE = 0x00
    READ_ONLY = 0x01
    HIDDEN = 0x02
    SYSTEM = 0x04
    VOLUME_LABEL = 0x08
    SUBDIRECTORY = 0x10
    ARCHIVED = 0x20
    DEVICE = 0x40
    RESERVED = 0x80


@dataclass(frozen=True)
class FatHeader:
    """The BIOS parameter block and extended boot record of a FAT16 volume."""

    short_jmp_ins: bytes
    oem_identifier: bytes
    bytes_per_sector: int
    sectors_per_cluster: int
    reserved_sectors: int
    fat_copies: int
    root_dir_entries: int
    number_of_sectors: int
    media_type: int
    sectors_per_fat: int
    sectors_per_track: int
    number_of_heads: int
    hidden_sectors: int
    sectors_big: int
    drive_number: int
    win_nt_bit: int
    signature: int
    volume_id: int
    volume_id_string: bytes
    system_id_string: bytes

    SIZE = _PRIMARY_FORMAT.size + _EXTENDED_FORMAT.size

    @classmethod
    def from_bytes(cls, data: bytes) -> FatHeader:
        """Decode the header from the first bytes of a boot sector."""
        raw = bytes(data)
        if len(raw) < cls.SIZE:
            raise InvalidFormatError(f"FAT header needs {cls.SIZE} bytes")
        primary = _PRIMARY_FORMAT.unpack_from(raw, 0)
        extended = _EXTENDED_FORMAT.unpack_from(raw, _PRIMARY_FORMAT.size)
        return cls(*primary, *extended)

    @property
    def root_dir_sector(self) -> int:
        """First sector of the root directory."""
        return self.fat_copies * self.sectors_per_fat + self.reserved_sectors


def _proper_string(raw: bytes) -> str:
    chars = []
    for byte in raw:
        if byte in (0x00, 0x20):
            break
        chars.append(byte)
    return bytes(chars).decode("latin-1")


@dataclass(frozen=True)
class FatDirectoryItem:
    """One 32-byte directory entry."""

    filename: bytes
    ext: bytes
    attribute: int
    reserved: int
    creation_time_tenths_of_a_sec: int
    creation_time: int
    creation_date: int
    last_access: int
    high_16_bits_first_cluster: int
    last_mod_time: int
    last_mod_date: int
    low_16_bits_first_cluster: int
    filesize: int

    SIZE = _ITEM_FORMAT.size

    @classmethod
    def from_bytes(cls, data: bytes) -> FatDirectoryItem:
        """Decode one directory entry."""
        raw = bytes(data)
        if len(raw) < cls.SIZE:
            raise InvalidFormatError(f"directory entry needs {cls.SIZE} bytes")
        return cls(*_ITEM_FORMAT.unpack_from(raw, 0))

    def full_name(self) -> str:
        """The name as 'NAME.EXT', or 'NAME' when there is no extension."""
        name = _proper_string(self.filename)
        if self.ext[:1] not in (b"\x00", b" ", b""):
            name += "." + _proper_string(self.ext)
        return name

    @property
    def first_cluster(self) -> int:
        """The first data cluster of the entry."""
        return (self.high_16_bits_first_cluster << 16) | self.low_16_bits_first_cluster

    @property
    def is_directory(self) -> bool:
        """True when the entry names a subdirectory."""
        return bool(self.attribute & FatAttribute.SUBDIRECTORY)

    @property
    def is_read_only(self) -> bool:
        """True when the entry is marked read-only."""
        return bool(self.attribute & FatAttribute.READ_ONLY)


def _parse_items(raw: bytes) -> list[FatDirectoryItem]:
    size = FatDirectoryItem.SIZE
    return [
        FatDirectoryItem.from_bytes(raw[start : start + size])
        for start in range(0, len(raw) - size + 1, size)
    ]


@dataclass
class _FatDirectory:
    items: list[FatDirectoryItem]
    total: int
    sector_pos: int = 0
    ending_sector_pos: int = 0

    @property
    def entries(self) -> list[FatDirectoryItem]:
        return self.items[: max(self.total, 0)]


@dataclass
class _FatPrivate:
    header: FatHeader
    root_directory: _FatDirectory
    cluster_read_stream: DiskStream
    fat_read_stream: DiskStream
    directory_stream: DiskStream


@dataclass
class _FatFileDescriptor:
    item: FatDirectoryItem | _FatDirectory | None
    pos: int = 0


def _count_directory_items(disk: Disk, stream: DiskStream, start_sector: int) -> int:
    """Count used entries from ``start_sector`` up to the first free entry."""
    stream.seek(start_sector * disk.sector_size)
    count = 0
    while True:
        first = stream.read(FatDirectoryItem.SIZE)[0]
        if first == UNUSED:
            return count
        if first != DELETED_MARK:
            count += 1


class Fat16Filesystem(Filesystem):
    """Read-only access to files on a FAT16 volume."""

    name = "FAT16"

    def resolve(self, disk: Disk) -> None:
        """Mount ``disk`` if it carries a FAT16 volume."""
        cluster_stream = DiskStream(disk)
        fat_stream = DiskStream(disk)
        directory_stream = DiskStream(disk)
        try:
            raw = DiskStream(disk).read(FatHeader.SIZE)
        except PeachOSError as exc:
            raise DiskIOError("cannot read the boot sector") from exc
        header = FatHeader.from_bytes(raw)
        if header.signature != FAT16_SIGNATURE:
            raise FilesystemNotUsError()
        try:
            root = self._load_root_directory(disk, header, directory_stream)
        except PeachOSError as exc:
            raise DiskIOError("cannot read the root directory") from exc
        disk.fs_private = _FatPrivate(
            header, root, cluster_stream, fat_stream, directory_stream
        )
        disk.filesystem = self

    @staticmethod
    def _load_root_directory(
        disk: Disk, header: FatHeader, stream: DiskStream
    ) -> _FatDirectory:
        sector_pos = header.root_dir_sector
        size = header.root_dir_entries * FatDirectoryItem.SIZE
        total_sectors = -(-size // disk.sector_size)
        total = _count_directory_items(disk, stream, sector_pos)
        stream.seek(sector_pos * disk.sector_size)
        items = _parse_items(stream.read(size)) if size else []
        return _FatDirectory(items, total, sector_pos, sector_pos + total_sectors)

    @staticmethod
    def _private(disk: Disk) -> _FatPrivate:
        private = getattr(disk, "fs_private", None)
        if not isinstance(private, _FatPrivate):
            raise InvalidArgumentError("disk is not mounted as FAT16")
        return private

    @staticmethod
    def _cluster_bytes(disk: Disk, private: _FatPrivate) -> int:
        size = private.header.sectors_per_cluster * disk.sector_size
        if size <= 0:
            raise InvalidFormatError("volume has no sectors per cluster")
        return size

    @staticmethod
    def _cluster_to_sector(private: _FatPrivate, cluster: int) -> int:
        return private.root_directory.ending_sector_pos + (
            (cluster - 2) * private.header.sectors_per_cluster
        )

    @staticmethod
    def _fat_entry(disk: Disk, private: _FatPrivate, cluster: int) -> int:
        stream = private.fat_read_stream
        fat_position = private.header.reserved_sectors * disk.sector_size
        stream.seek(fat_position + cluster * FAT_ENTRY_SIZE)
        return int.from_bytes(stream.read(FAT_ENTRY_SIZE), "little")

    def _cluster_for_offset(
        self, disk: Disk, private: _FatPrivate, starting_cluster: int, offset: int
    ) -> int:
        cluster = starting_cluster
        for _ in range(offset // self._cluster_bytes(disk, private)):
            entry = self._fat_entry(disk, private, cluster)
            if entry in END_OF_CHAIN:
                raise DiskIOError("read past the end of the cluster chain")
            if entry == BAD_SECTOR:
                raise DiskIOError("cluster is marked bad")
            if entry in RESERVED_ENTRIES:
                raise DiskIOError("cluster is reserved")
            if entry == UNUSED:
                raise DiskIOError("cluster chain leads to a free cluster")
            cluster = entry
        return cluster

    def _read_internal(
        self, disk: Disk, private: _FatPrivate, starting_cluster: int, offset: int, total: int
    ) -> bytes:
        stream = private.cluster_read_stream
        cluster_bytes = self._cluster_bytes(disk, private)
        chunks: list[bytes] = []
        while True:
            cluster = self._cluster_for_offset(disk, private, starting_cluster, offset)
            sector = self._cluster_to_sector(private, cluster)
            count = min(total, cluster_bytes)
            stream.seek(sector * disk.sector_size + offset % cluster_bytes)
            chunks.append(stream.read(count))
            total -= count
            offset += count
            if total <= 0:
                return b"".join(chunks)

    def _load_directory(
        self, disk: Disk, private: _FatPrivate, item: FatDirectoryItem
    ) -> _FatDirectory:
        if not item.is_directory:
            raise InvalidArgumentError("entry is not a directory")
        cluster = item.first_cluster
        sector = self._cluster_to_sector(private, cluster)
        total = _count_directory_items(disk, private.directory_stream, sector)
        size = total * FatDirectoryItem.SIZE
        raw = self._read_internal(disk, private, cluster, 0, size)
        return _FatDirectory(_parse_items(raw), total)

    def _find_in_directory(
        self, disk: Disk, private: _FatPrivate, directory: _FatDirectory, name: str
    ) -> FatDirectoryItem | _FatDirectory | None:
        matches = [
            entry
            for entry in directory.entries
            if istrncmp(entry.full_name(), name, MAX_PATH) == 0
        ]
        if not matches:
            return None
        found = matches[-1]
        if found.is_directory:
            return self._load_directory(disk, private, found)
        return found

    def open(self, disk: Disk, path: Iterable[str], mode: FileMode) -> _FatFileDescriptor:
        """Open the entry named by the path components for reading."""
        if mode != FileMode.READ:
            raise ReadOnlyError("FAT16 volumes can only be opened for reading")
        parts = list(path)
        if not parts:
            raise InvalidArgumentError("empty path")
        private = self._private(disk)
        current = self._find_in_directory(disk, private, private.root_directory, parts[0])
        for part in parts[1:]:
            if not isinstance(current, _FatDirectory):
                current = None
                break
            current = self._find_in_directory(disk, private, current, part)
        if current is None:
            raise DiskIOError(f"no such file: {'/'.join(parts)}")
        return _FatFileDescriptor(current)

    @staticmethod
    def _file_item(descriptor: Any) -> FatDirectoryItem:
        if not isinstance(descriptor, _FatFileDescriptor) or descriptor.item is None:
            raise InvalidArgumentError("descriptor is not open")
        if not isinstance(descriptor.item, FatDirectoryItem):
            raise InvalidArgumentError("descriptor refers to a directory")
        return descriptor.item

    def read(self, disk: Disk, descriptor: Any, size: int, nmemb: int) -> bytes:
        """Read ``nmemb`` items of ``size`` bytes and advance the position."""
        item = self._file_item(descriptor)
        if size < 0 or nmemb < 0:
            raise InvalidArgumentError("size and count must not be negative")
        private = self._private(disk)
        offset = descriptor.pos
        chunks = []
        for _ in range(nmemb):
            chunks.append(
                self._read_internal(disk, private, item.first_cluster, offset, size)
            )
            offset += size
        descriptor.pos = offset
        return b"".join(chunks)

    def seek(self, descriptor: Any, offset: int, whence: SeekMode) -> None:
        """Move the position; the offset must lie inside the file."""
        item = self._file_item(descriptor)
        offset &= 0xFFFFFFFF
        if offset >= item.filesize:
            raise DiskIOError("seek offset beyond the end of the file")
        try:
            mode = SeekMode(whence)
        except ValueError:
            raise InvalidArgumentError(f"unknown seek mode {whence!r}") from None
        if mode is SeekMode.SET:
            descriptor.pos = offset
        elif mode is SeekMode.CUR:
            descriptor.pos += offset
        else:
            raise UnimplementedError("seeking from the end is not supported")

    def stat(self, disk: Disk, descriptor: Any) -> FileStat:
        """Return the size and flags of the open file."""
        item = self._file_item(descriptor)
        flags = StatFlags.READ_ONLY if item.is_read_only else StatFlags.NONE
        return FileStat(flags=flags, filesize=item.filesize)

    def close(self, descriptor: Any) -> None:
        """Release the descriptor; it cannot be used afterwards."""
        if not isinstance(descriptor, _FatFileDescriptor):
            raise InvalidArgumentError("not a FAT16 descriptor")
        descriptor.item = None
        descriptor.pos = 0