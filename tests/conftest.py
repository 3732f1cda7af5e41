"""Helpers that assemble synthetic minidumps byte by byte"""
import struct
from typing import List, Optional, Sequence, Tuple

import pytest

SIGNATURE = 0x504D444D

THREAD_LIST = 3
MODULE_LIST = 4
MEMORY_LIST = 5
EXCEPTION = 6
SYSTEM_INFO = 7
MEMORY64_LIST = 9
HANDLE_DATA = 12
MISC_INFO = 15
MEMORY_INFO_LIST = 16


def utf16_name(text: str) -> bytes:
    data = text.encode("utf-16-le")
    return struct.pack("<I", len(data)) + data


def pack_thread(
    thread_id, suspend=0, priority_class=8, priority=8, teb=0,
    stack_rva=0, stack_size=0, context_rva=0, context_size=0,
) -> bytes:
    return struct.pack(
        "<IIIIQIIII", thread_id, suspend, priority_class, priority, teb,
        stack_rva, stack_size, context_rva, context_size,
    )


def pack_module(base, size, name_rva=0, checksum=0, timestamp=0, version=None) -> bytes:
    version = version or [0] * 13
    return (
        struct.pack("<QIIII", base, size, checksum, timestamp, name_rva)
        + struct.pack("<13I", *version)
        + struct.pack("<IIII", 0, 0, 0, 0)
        + struct.pack("<QQ", 0, 0)
    )


def pack_system_info(
    architecture=9, level=6, revision=0x9E0A, processors=8, product_type=1,
    major=10, minor=0, build=19045, platform_id=2, csd_rva=0, suite_mask=0x100,
    features=(0, 0),
) -> bytes:
    return struct.pack(
        "<HHHBBIIIIIHHQQ", architecture, level, revision, processors, product_type,
        major, minor, build, platform_id, csd_rva, suite_mask, 0, *features,
    )


def pack_memory_info(
    base, size, allocation_base=0, allocation_protect=0x04,
    state=0x1000, protect=0x04, mem_type=0x20000,
) -> bytes:
    return struct.pack(
        "<QQIIQIIII", base, allocation_base, allocation_protect, 0, size,
        state, protect, mem_type, 0,
    )


class MinidumpBuilder:
    """Lays out blobs after a 32-byte header.

    The directory is appended last, unless `reserve_streams` slots are set
    aside right after the header, which leaves the last stream at end of file.
    """

    def __init__(self, reserve_streams: int = 0):
        self.reserve_streams = reserve_streams
        self.data = bytearray(32 + 12 * reserve_streams)
        self.directory: List[Tuple[int, int, int]] = []

    def add_blob(self, blob: bytes) -> int:
        rva = len(self.data)
        self.data += blob
        return rva

    def add_name(self, text: str) -> int:
        return self.add_blob(utf16_name(text))

    def add_stream(self, stream_type: int, payload: bytes) -> int:
        rva = self.add_blob(payload)
        self.directory.append((stream_type, len(payload), rva))
        return rva

    def add_threads(self, threads: Sequence[bytes]) -> int:
        return self.add_stream(THREAD_LIST, struct.pack("<I", len(threads)) + b"".join(threads))

    def add_modules(self, modules: Sequence[Tuple[int, int, Optional[str]]]) -> int:
        records = []
        for base, size, name in modules:
            name_rva = self.add_name(name) if name is not None else 0
            records.append(pack_module(base, size, name_rva))
        return self.add_stream(
            MODULE_LIST, struct.pack("<I", len(records)) + b"".join(records)
        )

    def add_memory64(self, ranges: Sequence[Tuple[int, bytes]], declared=None) -> int:
        """Stores the range data back to back and returns its base RVA"""
        base_rva = self.add_blob(b"".join(data for _, data in ranges))
        count = len(ranges) if declared is None else declared
        payload = struct.pack("<QQ", count, base_rva) + b"".join(
            struct.pack("<QQ", address, len(data)) for address, data in ranges
        )
        self.add_stream(MEMORY64_LIST, payload)
        return base_rva

    def add_memory_list(self, ranges: Sequence[Tuple[int, bytes]]) -> None:
        descriptors = []
        for address, data in ranges:
            rva = self.add_blob(data)
            descriptors.append(struct.pack("<QII", address, len(data), rva))
        self.add_stream(
            MEMORY_LIST, struct.pack("<I", len(descriptors)) + b"".join(descriptors)
        )

    def add_memory_info(self, entries: Sequence[bytes], entry_size=48) -> None:
        payload = struct.pack("<IIQ", 16, entry_size, len(entries)) + b"".join(entries)
        self.add_stream(MEMORY_INFO_LIST, payload)

    def add_system_info(self, **kwargs) -> None:
        self.add_stream(SYSTEM_INFO, pack_system_info(**kwargs))

    def add_exception(self, thread_id, code, address, parameters=()) -> None:
        information = list(parameters) + [0] * (15 - len(parameters))
        payload = (
            struct.pack("<II", thread_id, 0)
            + struct.pack("<IIQQII", code, 0, 0, address, len(parameters), 0)
            + struct.pack("<15Q", *information)
            + struct.pack("<II", 0x4D0, 0x1000)
        )
        self.add_stream(EXCEPTION, payload)

    def add_misc_info(self, process_id) -> None:
        self.add_stream(
            MISC_INFO, struct.pack("<11I", 44, 0x3, process_id, 1700000000, 5, 7, 3000, 2900, 3000, 1, 0)
        )

    def add_handles(self, handles: Sequence[Tuple[int, Optional[str], Optional[str]]]) -> None:
        descriptors = []
        for handle, type_name, object_name in handles:
            type_rva = self.add_name(type_name) if type_name is not None else 0
            object_rva = self.add_name(object_name) if object_name is not None else 0
            descriptors.append(
                struct.pack("<QIIIIII", handle, type_rva, object_rva, 0, 0x1F0003, 2, 3)
            )
        payload = struct.pack("<IIII", 16, 32, len(descriptors), 0) + b"".join(descriptors)
        self.add_stream(HANDLE_DATA, payload)

    def build(self, signature=SIGNATURE, stream_count=None) -> bytes:
        data = bytearray(self.data)
        directory = b"".join(struct.pack("<III", *entry) for entry in self.directory)
        if self.reserve_streams:
            assert len(self.directory) <= self.reserve_streams
            directory_rva = 32
            data[32 : 32 + len(directory)] = directory
        else:
            directory_rva = len(data)
            data += directory
        count = len(self.directory) if stream_count is None else stream_count
        data[:32] = struct.pack(
            "<IHHIIIIQ", signature, 0xA793, 0, count, directory_rva, 0, 1700000000, 0x2
        )
        return bytes(data)


@pytest.fixture
def builder():
    return MinidumpBuilder()


@pytest.fixture
def write_dump(tmp_path):
    """Writes built bytes to a file and returns its path"""

    def _write(data: bytes, name: str = "test.dmp"):
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write
