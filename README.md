# peachos

The pieces of a small 32-bit teaching kernel and its user-space runtime as
a plain Python library. Everything works on in-memory data and disk images:
read files from a FAT16 image, see how segment and interrupt descriptors are
laid out, or drive the shell and todo loops from your own code and tests.

The package has no dependencies beyond the standard library.

## Modules

| Module | What it provides |
| --- | --- |
| `peachos.errors` | `Status` codes, the `PeachOSError` family (`DiskIOError`, `InvalidArgumentError`, `OutOfMemoryError`, `BadPathError`, `FilesystemNotUsError`, `ReadOnlyError`, `UnimplementedError`, `InvalidFormatError`), `error_for(status)`, and system limits such as `SECTOR_SIZE`, `MAX_PATH`, `MAX_FILE_DESCRIPTORS` |
| `peachos.pathparser` | `parse_path(path, current_directory_path)` turns `0:/bin/shell.elf` into a `PathRoot` with `drive_no` and `parts` |
| `peachos.gdt` | `GdtEntry`, `encode_gdt_entry(entry)` and `encode_gdt(entries)` for 8-byte segment descriptors |
| `peachos.idt` | `InterruptTable` (interrupt callbacks and system-call commands), `InterruptFrame`, `encode_idt_descriptor(address)` |
| `peachos.cstring` | String helpers with C-library behaviour: `to_lower`, `strnlen`, `strnlen_terminator`, `strncmp`, `istrncmp`, `is_digit`, `to_numeric_digit`, `tokenize`, `memcmp` |
| `peachos.textio` | `itoa(i)`, `cformat(fmt, *args)` and `printf(fmt, *args, out=...)` with `%i` and `%s` |
| `peachos.command` | `parse_command`, `get_key_blocking`, `read_line`, `system_run` |
| `peachos.disk` | `Disk`, a sector-addressed disk over a byte image, and `DiskStream` for byte-level reads |
| `peachos.filesystem` | `FileMode`, `SeekMode`, `StatFlags`, `FileStat`, the abstract `Filesystem` driver interface, `file_mode_from_string` |
| `peachos.fat16` | `Fat16Filesystem`, a read-only FAT16 driver, with `FatHeader` and `FatDirectoryItem` |
| `peachos.vfs` | `VirtualFileSystem`: drivers, attached disks and numbered descriptors with `fopen`, `fread`, `fseek`, `fstat`, `fclose` |
| `peachos.todo` | `run_todo(backend, lines, write)`, the todo command loop, against a `TodoBackend` you supply; `parse_task_id` |
| `peachos.shell` | `run_shell(lines, runner, write)`, the command prompt loop |

## Reading a file from a FAT16 image

```python
from peachos.disk import Disk
from peachos.vfs import VirtualFileSystem

with open("os.bin", "rb") as handle:
    image = bytearray(handle.read())

vfs = VirtualFileSystem()          # a FAT16 driver is installed already
vfs.attach_disk(Disk(image, 0, 512))

fd = vfs.fopen("0:/hello.txt", "r")
size = vfs.fstat(fd).filesize
data = vfs.fread(size, 1, fd)
vfs.fclose(fd)
```

Descriptors are numbered from 1. File names are matched without regard to
case. Opening with `"w"` or `"a"` raises `ReadOnlyError`; seeking with
`SeekMode.END` raises `UnimplementedError`, and a seek offset at or past the
end of the file raises `DiskIOError`.

## Small helpers

```python
from peachos.textio import itoa, cformat
from peachos.cstring import tokenize
from peachos.command import parse_command

itoa(-42)                          # "-42"
cformat("pid %i: %s", 3, "shell")  # "pid 3: shell"
list(tokenize("ls  -l", " "))      # ["ls", "-l"]
parse_command("run blank.elf", 1024)  # ["run", "blank.elf"]
```

## The shell and todo loops

`run_shell` and `run_todo` read lines from any iterable (standard input by
default) and write through any callable (standard output by default).

```python
from peachos.shell import run_shell

run_shell(["echo hi"], runner=lambda args: print(args) or 0)
```

`run_todo` expects a `TodoBackend` subclass implementing `add`, `list_tasks`
and `remove`; backend methods signal refusal by raising a `PeachOSError`.

## Errors

Failures are raised as subclasses of `peachos.errors.PeachOSError`. Each
class carries the `Status` code it stands for in its `status` attribute, and
`error_for(status)` returns an exception instance for a status code (negative
codes are accepted).

## What this package does not do

- There is no command-line program; the package is used as a library.
- Files cannot be written through the filesystem layer: FAT16 access is
  read-only. Only `Disk.write_block` changes raw sectors of an image.
- `run_shell` does not load or start programs itself; it hands each parsed
  command to the `runner` you pass and raises `TypeError` without one.
- There is no built-in task store for `run_todo`; you provide the backend.
- `parse_path` accepts `current_directory_path` but does not use it; only
  absolute `<drive>:/...` paths are understood.

## Tests

The test suite uses pytest, available through the `test` extra:

```
pip install -e .[test]
pytest
```