import pytest

from peachos.filesystem import (
    FileMode,
    FileStat,
    Filesystem,
    SeekMode,
    StatFlags,
    file_mode_from_string,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("r", FileMode.READ),
        ("rb", FileMode.READ),
        ("w", FileMode.WRITE),
        ("w+", FileMode.WRITE),
        ("a", FileMode.APPEND),
        ("", FileMode.INVALID),
        ("x", FileMode.INVALID),
        ("R", FileMode.INVALID),
    ],
)
def test_file_mode_from_string(text, expected):
    assert file_mode_from_string(text) is expected


def test_mode_and_seek_numbering_matches_the_wire_values():
    assert [int(m) for m in FileMode] == [0, 1, 2, 3]
    assert SeekMode(1) is SeekMode.CUR


def test_stat_read_only_flag():
    assert FileStat(StatFlags.READ_ONLY, 10).read_only is True
    assert FileStat(StatFlags.NONE, 10).read_only is False
    assert FileStat(StatFlags(1), 0).flags == StatFlags.READ_ONLY


def test_stat_is_immutable():
    stat = FileStat(StatFlags.NONE, 5)
    with pytest.raises(AttributeError):
        stat.filesize = 6
    assert stat.filesize == 5


class _Partial(Filesystem):
    def resolve(self, disk):
        return None


class _Memory(Filesystem):
    name = "MEM"

    def resolve(self, disk):
        return None

    def open(self, disk, path, mode):
        return {"path": tuple(path), "mode": mode, "pos": 0}

    def read(self, disk, descriptor, size, nmemb):
        return bytes(size * nmemb)

    def seek(self, descriptor, offset, whence):
        descriptor["pos"] = offset

    def stat(self, disk, descriptor):
        return FileStat(StatFlags.READ_ONLY, descriptor["pos"])

    def close(self, descriptor):
        return None


def test_filesystem_is_abstract():
    with pytest.raises(TypeError):
        Filesystem()
    with pytest.raises(TypeError):
        _Partial()


def test_complete_driver_is_usable():
    driver = _Memory()
    handle = driver.open(None, ["a", "b"], file_mode_from_string("r"))
    driver.seek(handle, 7, SeekMode.SET)
    assert handle == {"path": ("a", "b"), "mode": FileMode.READ, "pos": 7}
    assert driver.read(None, handle, 2, 3) == bytes(6)
    stat = driver.stat(None, handle)
    assert stat.filesize == 7
    assert stat.read_only is True