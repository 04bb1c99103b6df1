"""Status codes, the exceptions raised for them, and system-wide limits."""

from __future__ import annotations

from enum import IntEnum

# Segment selectors
KERNEL_CODE_SELECTOR = 0x08
KERNEL_DATA_SELECTOR = 0x10
USER_DATA_SEGMENT = 0x23
USER_CODE_SEGMENT = 0x1B

TOTAL_INTERRUPTS = 512

# Kernel heap
HEAP_SIZE_BYTES = 104857600
HEAP_BLOCK_SIZE = 4096
HEAP_ADDRESS = 0x01000000
HEAP_TABLE_ADDRESS = 0x00007E00

SECTOR_SIZE = 512

MAX_FILESYSTEMS = 12
MAX_FILE_DESCRIPTORS = 512
MAX_PATH = 108

TOTAL_GDT_SEGMENTS = 6

# User program layout
PROGRAM_VIRTUAL_ADDRESS = 0x400000
USER_PROGRAM_STACK_SIZE = 1024 * 16
PROGRAM_VIRTUAL_STACK_ADDRESS_START = 0x3FF000
PROGRAM_VIRTUAL_STACK_ADDRESS_END = (
    PROGRAM_VIRTUAL_STACK_ADDRESS_START - USER_PROGRAM_STACK_SIZE
)

MAX_PROGRAM_ALLOCATIONS = 1024
MAX_PROCESSES = 12
MAX_ISR80H_COMMANDS = 1024
KEYBOARD_BUFFER_SIZE = 1024


class Status(IntEnum):
    """Numeric status codes used throughout the system."""

    ALL_OK = 0
    EIO = 1
    EINVARG = 2
    ENOMEM = 3
    EBADPATH = 4
    EFSNOTUS = 5
    ERDONLY = 6
    EUNIMP = 7
    EISTKN = 8
    EINFORMAT = 9


class PeachOSError(Exception):
    """Base class for every error the system reports."""

    status: Status = Status.EISTKN
    default_message = "operation failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class DiskIOError(PeachOSError):
    """An input/output operation on a disk failed."""

    status = Status.EIO
    default_message = "input/output error"


class InvalidArgumentError(PeachOSError, ValueError):
    """An argument was outside what the operation accepts."""

    status = Status.EINVARG
    default_message = "invalid argument"


class OutOfMemoryError(PeachOSError, MemoryError):
    """No room was left to satisfy a request."""

    status = Status.ENOMEM
    default_message = "out of memory"


class BadPathError(PeachOSError, ValueError):
    """A path was not in the form '<drive>:/<part>/...'."""

    status = Status.EBADPATH
    default_message = "bad path"


class FilesystemNotUsError(PeachOSError):
    """A filesystem driver does not handle the given disk."""

    status = Status.EFSNOTUS
    default_message = "filesystem does not recognise this disk"


class ReadOnlyError(PeachOSError):
    """A write was attempted on something read-only."""

    status = Status.ERDONLY
    default_message = "read-only"


class UnimplementedError(PeachOSError, NotImplementedError):
    """The requested operation is not supported."""

    status = Status.EUNIMP
    default_message = "not supported"


class InvalidFormatError(PeachOSError, ValueError):
    """Data was not in the expected format."""

    status = Status.EINFORMAT
    default_message = "invalid format"


_ERRORS: dict[Status, type[PeachOSError]] = {
    Status.EIO: DiskIOError,
    Status.EINVARG: InvalidArgumentError,
    Status.ENOMEM: OutOfMemoryError,
    Status.EBADPATH: BadPathError,
    Status.EFSNOTUS: FilesystemNotUsError,
    Status.ERDONLY: ReadOnlyError,
    Status.EUNIMP: UnimplementedError,
    Status.EISTKN: PeachOSError,
    Status.EINFORMAT: InvalidFormatError,
}


def error_for(status: int) -> PeachOSError:
    """Return the exception for a status code; negative codes are accepted too."""
    try:
        code = Status(abs(int(status)))
    except ValueError:
        raise ValueError(f"unknown status code {status}") from None
    if code is Status.ALL_OK:
        raise ValueError("status ALL_OK is not an error")
    return _ERRORS[code]()