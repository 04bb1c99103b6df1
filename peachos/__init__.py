"""Teaching-kernel building blocks: a read-only FAT16 reader over disk images, path
parsing, GDT/IDT encoding, C-style string helpers and shell/todo command loops."""

__version__ = "0.1.0"