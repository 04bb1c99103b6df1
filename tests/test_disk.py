import pytest

from peachos.disk import Disk, DiskStream, DiskType
from peachos.errors import SECTOR_SIZE, DiskIOError, InvalidArgumentError


def _image(sectors=3):
    return bytes(i % 251 for i in range(SECTOR_SIZE * sectors))


def test_defaults_follow_configuration():
    disk = Disk(_image())
    assert disk.sector_size == SECTOR_SIZE
    assert disk.id == 0
    assert disk.type == DiskType.REAL == 0
    assert disk.filesystem is None
    assert disk.total_sectors == 3


def test_read_block_returns_the_sectors_asked_for():
    image = _image()
    disk = Disk(image)
    assert disk.read_block(1, 2) == image[SECTOR_SIZE:]
    assert disk.read_block(0) == image[:SECTOR_SIZE]


def test_read_zero_sectors_is_empty():
    assert Disk(_image()).read_block(0, 0) == b""


def test_read_past_end_raises_io_error():
    disk = Disk(_image())
    with pytest.raises(DiskIOError):
        disk.read_block(2, 2)
    with pytest.raises(DiskIOError):
        disk.read_block(3)


def test_negative_arguments_are_rejected():
    disk = Disk(_image())
    with pytest.raises(InvalidArgumentError):
        disk.read_block(-1)
    with pytest.raises(InvalidArgumentError):
        disk.read_block(0, -1)


def test_write_then_read_round_trip():
    disk = Disk(_image())
    data = bytes([0xAB]) * SECTOR_SIZE
    disk.write_block(2, data)
    assert disk.read_block(2) == data
    assert disk.read_block(0) == _image()[:SECTOR_SIZE]


def test_write_mutates_a_bytearray_image_in_place():
    image = bytearray(_image(2))
    disk = Disk(image)
    data = bytes(SECTOR_SIZE)
    disk.write_block(1, data)
    assert image[SECTOR_SIZE:] == data


def test_write_of_partial_sector_is_rejected():
    disk = Disk(_image())
    with pytest.raises(InvalidArgumentError):
        disk.write_block(0, b"abc")


def test_write_past_end_raises_io_error():
    disk = Disk(_image(1))
    with pytest.raises(DiskIOError):
        disk.write_block(1, bytes(SECTOR_SIZE))


def test_custom_sector_size():
    image = bytes(range(64))
    disk = Disk(image, disk_id=4, sector_size=16)
    assert disk.total_sectors == 4
    assert disk.id == 4
    assert disk.read_block(3) == image[48:]


def test_nonpositive_sector_size_is_rejected():
    with pytest.raises(InvalidArgumentError):
        Disk(b"", sector_size=0)


def test_stream_reads_within_one_sector():
    image = _image()
    stream = DiskStream(Disk(image))
    stream.seek(10)
    assert stream.read(20) == image[10:30]
    assert stream.pos == 30


def test_stream_reads_across_sector_boundaries():
    image = _image()
    stream = DiskStream(Disk(image))
    start = SECTOR_SIZE - 12
    stream.seek(start)
    length = SECTOR_SIZE + 40
    assert stream.read(length) == image[start : start + length]
    assert stream.pos == start + length


def test_stream_consecutive_reads_continue():
    image = _image()
    stream = DiskStream(Disk(image))
    first = stream.read(300)
    second = stream.read(300)
    assert first + second == image[:600]


def test_stream_reads_last_bytes_of_disk():
    image = _image(2)
    stream = DiskStream(Disk(image))
    stream.seek(SECTOR_SIZE)
    assert stream.read(SECTOR_SIZE) == image[SECTOR_SIZE:]


def test_stream_read_zero_bytes():
    stream = DiskStream(Disk(_image()))
    stream.seek(5)
    assert stream.read(0) == b""
    assert stream.pos == 5


def test_stream_read_past_end_raises_and_keeps_progress():
    image = _image(2)
    stream = DiskStream(Disk(image))
    stream.seek(SECTOR_SIZE + 100)
    with pytest.raises(DiskIOError):
        stream.read(SECTOR_SIZE)
    assert stream.pos == 2 * SECTOR_SIZE


def test_stream_negative_count_is_rejected():
    stream = DiskStream(Disk(_image()))
    with pytest.raises(InvalidArgumentError):
        stream.read(-1)