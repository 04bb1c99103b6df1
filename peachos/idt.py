"""Interrupt descriptors, interrupt callbacks and system-call command dispatch."""

from __future__ import annotations

import struct
from collections.abc import Callable
from dataclasses import astuple, dataclass
from typing import Any, ClassVar

from .errors import (
    KERNEL_CODE_SELECTOR,
    MAX_ISR80H_COMMANDS,
    TOTAL_INTERRUPTS,
    InvalidArgumentError,
    InvalidFormatError,
    PeachOSError,
    Status,
)

IDT_TYPE_ATTR = 0xEE
SYSCALL_INTERRUPT = 0x80
CLOCK_INTERRUPT = 0x20
TOTAL_EXCEPTIONS = 0x20

_FRAME = struct.Struct("<13I")
_DESCRIPTOR = struct.Struct("<HHBBH")


@dataclass
class InterruptFrame:
    """The registers saved when an interrupt arrives."""

    edi: int = 0
    esi: int = 0
    ebp: int = 0
    reserved: int = 0
    ebx: int = 0
    edx: int = 0
    ecx: int = 0
    eax: int = 0
    ip: int = 0
    cs: int = 0
    flags: int = 0
    esp: int = 0
    ss: int = 0

    SIZE: ClassVar[int] = _FRAME.size

    @classmethod
    def from_bytes(cls, data: bytes) -> InterruptFrame:
        """Decode a frame from its packed little-endian layout."""
        raw = bytes(data)
        if len(raw) < cls.SIZE:
            raise InvalidFormatError(f"interrupt frame needs {cls.SIZE} bytes")
        return cls(*_FRAME.unpack_from(raw, 0))

    def to_bytes(self) -> bytes:
        """Encode the frame in its packed little-endian layout."""
        return _FRAME.pack(*(value & 0xFFFFFFFF for value in astuple(self)))


class CommandTakenError(PeachOSError):
    """A system-call command number is already registered."""

    status = Status.EISTKN
    default_message = "command already registered"


InterruptCallback = Callable[[InterruptFrame], Any]
Command = Callable[[InterruptFrame], Any]


def encode_idt_descriptor(address: int) -> bytes:
    """Encode an 8-byte interrupt gate pointing at ``address`` in kernel code."""
    address &= 0xFFFFFFFF
    return _DESCRIPTOR.pack(
        address & 0xFFFF, KERNEL_CODE_SELECTOR, 0x00, IDT_TYPE_ATTR, address >> 16
    )


class InterruptTable:
    """Callbacks per interrupt number and commands per system-call number.

    ``save_state`` is called with the frame before a callback runs;
    ``acknowledge`` is called after every dispatched interrupt.
    """

    def __init__(
        self,
        save_state: Callable[[InterruptFrame], Any] | None = None,
        acknowledge: Callable[[], Any] | None = None,
    ) -> None:
        self._callbacks: dict[int, InterruptCallback] = {}
        self._commands: dict[int, Command] = {}
        self._save_state = save_state
        self._acknowledge = acknowledge

    def register_callback(self, interrupt: int, callback: InterruptCallback) -> None:
        """Set the callback for ``interrupt``, replacing any earlier one."""
        if not 0 <= interrupt < TOTAL_INTERRUPTS:
            raise InvalidArgumentError(f"interrupt {interrupt} out of range")
        self._callbacks[interrupt] = callback

    def dispatch(self, interrupt: int, frame: InterruptFrame) -> bool:
        """Run the callback for ``interrupt``; return whether one was registered."""
        if not 0 <= interrupt < TOTAL_INTERRUPTS:
            raise InvalidArgumentError(f"interrupt {interrupt} out of range")
        callback = self._callbacks.get(interrupt)
        if callback is not None:
            if self._save_state is not None:
                self._save_state(frame)
            callback(frame)
        if self._acknowledge is not None:
            self._acknowledge()
        return callback is not None

    def register_command(self, command_id: int, command: Command) -> None:
        """Register a system-call command; a number may be used only once."""
        if not 0 <= command_id < MAX_ISR80H_COMMANDS:
            raise InvalidArgumentError(f"command {command_id} out of range")
        if command_id in self._commands:
            raise CommandTakenError(f"command {command_id} is already registered")
        self._commands[command_id] = command

    def handle_command(self, command: int, frame: InterruptFrame) -> Any:
        """Run command ``command`` and return its result; None if there is none."""
        if not 0 <= command < MAX_ISR80H_COMMANDS:
            return None
        handler = self._commands.get(command)
        if handler is None:
            return None
        return handler(frame)