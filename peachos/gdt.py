"""Encoding of x86 global descriptor table entries."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .errors import InvalidArgumentError

_BYTE_GRANULARITY_LIMIT = 65536


@dataclass(frozen=True)
class GdtEntry:
    """A descriptor in readable form: base address, limit and access type."""

    base: int
    limit: int
    type: int


def encode_gdt_entry(entry: GdtEntry) -> bytes:
    """Encode one descriptor into its 8-byte hardware layout.

    Limits above 64 KiB are stored with 4 KiB granularity, which requires the
    low 12 bits of the limit to be all ones.
    """
    limit = entry.limit & 0xFFFFFFFF
    base = entry.base & 0xFFFFFFFF

    if limit > _BYTE_GRANULARITY_LIMIT and (limit & 0xFFF) != 0xFFF:
        raise InvalidArgumentError("GDT limit above 64 KiB must end in 0xFFF")

    flags = 0x40
    if limit > _BYTE_GRANULARITY_LIMIT:
        limit >>= 12
        flags = 0xC0

    return bytes(
        (
            limit & 0xFF,
            (limit >> 8) & 0xFF,
            base & 0xFF,
            (base >> 8) & 0xFF,
            (base >> 16) & 0xFF,
            entry.type & 0xFF,
            flags | ((limit >> 16) & 0x0F),
            (base >> 24) & 0xFF,
        )
    )


def encode_gdt(entries: Iterable[GdtEntry]) -> bytes:
    """Encode a whole table, entries in the order given."""
    return b"".join(encode_gdt_entry(entry) for entry in entries)