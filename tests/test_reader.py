"""Tests for resolving virtual addresses against a parsed minidump."""
import struct

import pytest

from dumpparse.minidump import (
    PROCESSOR_ARCHITECTURE,
    MinidumpFile,
    MinidumpMemorySegment,
    OutOfRangeError,
)

from conftest import MEMORY64_LIST, MinidumpBuilder, pack_memory_info, pack_thread


def _dump(ranges, architecture=9, modules=(), regions=()):
    builder = MinidumpBuilder()
    builder.add_memory64(ranges)
    if architecture is not None:
        builder.add_system_info(architecture=architecture)
    if modules:
        builder.add_modules(modules)
    if regions:
        builder.add_memory_info(regions)
    builder.add_threads([pack_thread(1)])
    return MinidumpFile.parse_buffer(builder.build())


@pytest.fixture
def reader():
    heap = struct.pack("<Q", 0x00007FF6DEADBEEF) + b"hello\x00world" + b"\x00" * 13
    stack = bytes(range(0x40))
    minidump = _dump(
        [(0x10000, heap), (0x20000, stack)],
        modules=[
            (0x7FF600000000, 0x10000, "C:\\Windows\\System32\\ntdll.dll"),
            (0x7FF600010000, 0x8000, "C:\\Windows\\System32\\kernel32.dll"),
        ],
        regions=[pack_memory_info(0x10000, 0x1000), pack_memory_info(0x11000, 0x1000, state=0x10000)],
    )
    with minidump.open_reader() as reader:
        yield reader


def test_segment_contains_is_half_open():
    segment = MinidumpMemorySegment(0x1000, 0x10, 0x200)
    assert segment.contains(0x1000)
    assert segment.contains(0x100F)
    assert not segment.contains(0x1010)
    assert not segment.contains(0xFFF)
    assert segment.file_offset(0x1004) == 0x204


def test_find_segment(reader):
    assert reader.find_segment(0x10000).start_virtual_address == 0x10000
    assert reader.find_segment(0x2003F).start_virtual_address == 0x20000
    assert reader.find_segment(0x20040) is None
    assert reader.find_segment(0) is None


def test_find_segment_overlap_first_wins():
    """With overlapping segments, the one stored first answers."""
    minidump = _dump([(0x1000, b"A" * 0x100), (0x1080, b"B" * 0x100)])
    with minidump.open_reader() as reader:
        segment = reader.find_segment(0x10A0)
        assert segment is minidump.memory_segments[0]
        assert reader.read_memory(0x10A0, 4) == b"AAAA"
        assert reader.read_memory(0x1100, 4) == b"BBBB"


def test_read_memory(reader):
    assert reader.read_memory(0x10008, 5) == b"hello"
    assert reader.read_memory(0x20010, 4) == bytes([0x10, 0x11, 0x12, 0x13])


def test_read_memory_up_to_segment_end(reader):
    assert reader.read_memory(0x2003C, 4) == bytes([0x3C, 0x3D, 0x3E, 0x3F])


def test_read_memory_unmapped_address(reader):
    with pytest.raises(OutOfRangeError):
        reader.read_memory(0x30000, 1)


def test_read_memory_past_segment_end(reader):
    with pytest.raises(OutOfRangeError):
        reader.read_memory(0x2003C, 5)


def test_read_memory_does_not_cross_adjacent_segments():
    """Contiguous segments are still not stitched together."""
    minidump = _dump([(0x1000, b"a" * 0x10), (0x1010, b"b" * 0x10)])
    with minidump.open_reader() as reader:
        assert reader.read_memory(0x1008, 8) == b"a" * 8
        assert reader.read_memory(0x1010, 8) == b"b" * 8
        with pytest.raises(OutOfRangeError):
            reader.read_memory(0x1008, 16)


def test_reads_restore_cursor_position(reader):
    cursor = reader._cursor
    cursor.seek(3)
    reader.read_memory(0x10008, 5)
    assert cursor.tell() == 3
    with pytest.raises(OutOfRangeError):
        reader.read_memory(0x2003C, 5)
    assert cursor.tell() == 3


def test_read_pointer_64bit(reader):
    assert reader.pointer_size() == 8
    assert reader.read_pointer(0x10000) == 0x00007FF6DEADBEEF


def test_read_pointer_32bit():
    minidump = _dump([(0x1000, struct.pack("<II", 0xCAFEBABE, 0x11111111))], architecture=0)
    with minidump.open_reader() as reader:
        assert reader.pointer_size() == 4
        assert reader.read_pointer(0x1000) == 0xCAFEBABE


def test_read_pointer_failure_is_none(reader):
    assert reader.read_pointer(0x30000) is None
    # Only 4 bytes left in the segment, a 64-bit pointer does not fit
    assert reader.read_pointer(0x2003C) is None


def test_read_string(reader):
    assert reader.read_string(0x10008, 16) == "hello"
    assert reader.read_string(0x1000E, 16) == "world"


def test_read_string_without_terminator(reader):
    assert reader.read_string(0x10008, 3) == "hel"


def test_read_string_failure_is_empty(reader):
    """Unlike pointers, a failed string read gives an empty string."""
    assert reader.read_string(0x30000) == ""
    # The default length runs past the end of the segment
    assert reader.read_string(0x10008) == ""


def test_read_string_negative_length_is_empty(reader):
    assert reader.read_string(0x10008, -1) == ""


def test_read_memory_negative_size(reader):
    with pytest.raises(ValueError):
        reader.read_memory(0x10008, -1)


def test_segment_data_past_end_of_file():
    """A range whose bytes were never written is out of range, not a parse failure."""
    builder = MinidumpBuilder(reserve_streams=1)
    # Range data would start right after the 32-byte stream payload, at end of file
    base_rva = len(builder.data) + 32
    builder.add_stream(
        MEMORY64_LIST,
        struct.pack("<QQ", 1, base_rva) + struct.pack("<QQ", 0x30000, 0x100),
    )
    minidump = MinidumpFile.parse_buffer(builder.build())
    assert minidump.memory_segments[0].start_file_address == base_rva

    with minidump.open_reader() as reader:
        with pytest.raises(OutOfRangeError):
            reader.read_memory(0x30000, 8)
        assert reader.read_pointer(0x30000) is None
        assert reader.read_string(0x30000, 16) == ""
        with pytest.raises(OutOfRangeError):
            list(reader.iter_memory())


@pytest.mark.parametrize(
    "architecture, expected_size",
    [(9, 8), (6, 8), (12, 8), (15, 8), (0, 4), (5, 4), (14, 4)],
)
def test_pointer_size_by_architecture(architecture, expected_size):
    minidump = _dump([(0x1000, b"\x00" * 8)], architecture=architecture)
    with minidump.open_reader() as reader:
        assert reader.pointer_size() == expected_size
        assert reader.is_64bit() == (expected_size == 8)


def test_architecture_without_system_info():
    minidump = _dump([(0x1000, b"\x00" * 8)], architecture=None)
    with minidump.open_reader() as reader:
        assert reader.get_architecture() == PROCESSOR_ARCHITECTURE.UNKNOWN
        assert reader.pointer_size() == 4


def test_unlisted_architecture_is_unknown():
    minidump = _dump([(0x1000, b"\x00" * 8)], architecture=0x1234)
    with minidump.open_reader() as reader:
        assert reader.get_architecture() == PROCESSOR_ARCHITECTURE.UNKNOWN
        assert reader.pointer_size() == 4


def test_get_architecture(reader):
    assert reader.get_architecture() == PROCESSOR_ARCHITECTURE.AMD64


def test_find_module_by_address(reader):
    assert reader.find_module_by_address(0x7FF600000000).ModuleName.endswith("ntdll.dll")
    assert reader.find_module_by_address(0x7FF60000FFFF).ModuleName.endswith("ntdll.dll")
    # End address is exclusive and belongs to the next module
    assert reader.find_module_by_address(0x7FF600010000).ModuleName.endswith("kernel32.dll")
    assert reader.find_module_by_address(0x7FF600018000) is None


def test_find_module_by_name_substring(reader):
    assert reader.find_module_by_name("kernel32").BaseOfImage == 0x7FF600010000
    assert reader.find_module_by_name("System32").BaseOfImage == 0x7FF600000000
    assert reader.find_module_by_name("KERNEL32") is None


def test_find_region(reader):
    assert reader.find_region(0x10500).BaseAddress == 0x10000
    assert reader.find_region(0x11000).State == 0x10000
    assert reader.find_region(0x12000) is None


def test_iter_memory(reader):
    chunks = list(reader.iter_memory())
    assert [segment.start_virtual_address for segment, _ in chunks] == [0x10000, 0x20000]
    assert chunks[1][1] == bytes(range(0x40))


def test_reader_from_file(builder, write_dump):
    """Readers on a file dump open their own handle."""
    builder.add_memory64([(0x4000, b"filedata")])
    minidump = MinidumpFile(write_dump(builder.build()))
    with minidump.open_reader() as first, minidump.open_reader() as second:
        assert first.read_memory(0x4000, 4) == b"file"
        assert second.read_memory(0x4004, 4) == b"data"
