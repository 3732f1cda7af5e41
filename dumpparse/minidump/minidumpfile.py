import io
import logging
from itertools import accumulate
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

import construct

from .constants import (
    MAX_MEMORY_INFO_ENTRIES,
    MAX_MEMORY_RANGES,
    MINIDUMP_SIGNATURE,
    MINIDUMP_STREAM_TYPE,
)
from .cursor import BinaryCursor
from .exceptions import InvalidHeaderError, MinidumpParseError, ShortReadError
from .memory import MinidumpMemorySegment
from .reader import MinidumpReader
from .structs import *

log = logging.getLogger("rich")


class MinidumpFile:
    """Minidump class that parses Windows Minidump format

    Parsing happens entirely in the constructor. If any recognized stream fails
    to decode the constructor raises and no object is produced, so every
    instance is a complete, read-only model of the dump.
    """

    def __init__(self, filepath: Optional[Path] = None, *, buffer: Optional[bytes] = None):
        if (filepath is None) == (buffer is None):
            raise TypeError("Pass exactly one of filepath or buffer")

        self.file = Path(filepath) if filepath is not None else None
        self._buffer = bytes(buffer) if buffer is not None else None

        self.header = None
        self.directories: Tuple = ()
        self.threads: Tuple = ()
        self.modules: Tuple = ()
        self.memory_segments: Tuple[MinidumpMemorySegment, ...] = ()
        self.memory_regions: Tuple = ()
        self.handles: Tuple = ()
        self.system_info = None
        self.exception = None
        self.misc_info = None

        with self._open_cursor() as cursor:
            self._parse(cursor)

    @classmethod
    def parse(cls, filepath: Union[str, Path]) -> "MinidumpFile":
        return cls(Path(filepath))

    @classmethod
    def parse_buffer(cls, data: bytes) -> "MinidumpFile":
        """Parses a minidump held in memory, no temporary file involved"""
        return cls(buffer=data)

    def _open_cursor(self) -> BinaryCursor:
        if self._buffer is not None:
            return BinaryCursor(io.BytesIO(self._buffer))
        return BinaryCursor.open(self.file)

    def open_reader(self) -> MinidumpReader:
        """Creates a reader with its own handle on the underlying bytes"""
        return MinidumpReader(self, self._open_cursor())

    ############################################################################
    ### PARSING ###
    ############################################################################

    def _parse(self, cursor: BinaryCursor) -> None:
        # Lists are collected here and frozen into tuples once everything decoded
        self._threads: List = []
        self._modules: List = []
        self._segments: List[MinidumpMemorySegment] = []
        self._regions: List = []
        self._handles: List = []

        try:
            self._parse_header(cursor)
            self._parse_directories(cursor)
            self._parse_streams(cursor)
        except construct.ConstructError as e:
            raise MinidumpParseError(f"Malformed minidump record: {e}") from e

        self.threads = tuple(self._threads)
        self.modules = tuple(self._modules)
        self.memory_segments = tuple(self._segments)
        self.memory_regions = tuple(self._regions)
        self.handles = tuple(self._handles)
        del self._threads, self._modules, self._segments, self._regions, self._handles

        log.debug(
            f"Parsed {len(self.threads)} threads, {len(self.modules)} modules, "
            f"{len(self.memory_segments)} memory segments"
        )

    def _parse_header(self, cursor: BinaryCursor) -> None:
        cursor.seek(0)
        header = cursor.read_struct(MINIDUMP_HEADER)

        if header.Signature != MINIDUMP_SIGNATURE:
            raise InvalidHeaderError(f"Bad minidump signature {header.Signature:#x}")
        if header.NumberOfStreams == 0:
            raise InvalidHeaderError("Minidump declares no streams")
        self.header = header

    def _parse_directories(self, cursor: BinaryCursor) -> None:
        cursor.seek(self.header.StreamDirectoryRva)
        self.directories = tuple(
            cursor.read_struct(MINIDUMP_DIRECTORY)
            for _ in range(self.header.NumberOfStreams)
        )

    def _stream_parsers(self) -> Dict[int, Callable]:
        return {
            MINIDUMP_STREAM_TYPE.ThreadListStream: self._parse_thread_list,
            MINIDUMP_STREAM_TYPE.ModuleListStream: self._parse_module_list,
            MINIDUMP_STREAM_TYPE.MemoryListStream: self._parse_memory_list,
            MINIDUMP_STREAM_TYPE.ExceptionStream: self._parse_exception,
            MINIDUMP_STREAM_TYPE.SystemInfoStream: self._parse_system_info,
            MINIDUMP_STREAM_TYPE.Memory64ListStream: self._parse_memory64_list,
            MINIDUMP_STREAM_TYPE.HandleDataStream: self._parse_handle_data,
            MINIDUMP_STREAM_TYPE.MiscInfoStream: self._parse_misc_info,
            MINIDUMP_STREAM_TYPE.MemoryInfoListStream: self._parse_memory_info_list,
        }

    def _parse_streams(self, cursor: BinaryCursor) -> None:
        parsers = self._stream_parsers()
        for directory in self.directories:
            stream_type = int(directory.StreamType)
            parser = parsers.get(stream_type)
            if parser is None:
                log.debug(f"Skipping stream {directory.StreamType} ({stream_type:#x})")
                continue

            cursor.seek(directory.Location.Rva)
            try:
                parser(cursor, directory)
            except ShortReadError as e:
                raise MinidumpParseError(
                    f"Truncated {directory.StreamType} at {directory.Location.Rva:#x}: {e}"
                ) from e

    def _parse_thread_list(self, cursor: BinaryCursor, directory) -> None:
        count = cursor.read_struct(MINIDUMP_THREAD_LIST_HEADER).NumberOfThreads
        self._threads.extend(cursor.read_struct(MINIDUMP_THREAD) for _ in range(count))

    def _parse_module_list(self, cursor: BinaryCursor, directory) -> None:
        count = cursor.read_struct(MINIDUMP_MODULE_LIST_HEADER).NumberOfModules
        for _ in range(count):
            module = cursor.read_struct(MINIDUMP_MODULE)
            module.ModuleName = read_minidump_string(cursor, module.ModuleNameRva)
            self._modules.append(module)

    def _parse_memory64_list(self, cursor: BinaryCursor, directory) -> None:
        header = cursor.read_struct(MINIDUMP_MEMORY64_LIST_HEADER)
        if header.NumberOfMemoryRanges > MAX_MEMORY_RANGES:
            log.warning(
                f"Memory64 list declares {header.NumberOfMemoryRanges} ranges, "
                f"reading the first {MAX_MEMORY_RANGES}"
            )

        memranges = []
        for _ in range(min(header.NumberOfMemoryRanges, MAX_MEMORY_RANGES)):
            try:
                memranges.append(cursor.read_struct(MINIDUMP_MEMORY_DESCRIPTOR64))
            except ShortReadError:
                log.warning(f"Memory64 list truncated after {len(memranges)} ranges")
                break

        # Range data is stored back to back starting at BaseRva, so each range's
        # file offset is BaseRva plus the sizes of every range before it
        memranges = [memrange for memrange in memranges if memrange.DataSize]
        rva_list = accumulate(
            [memrange.DataSize for memrange in memranges], initial=header.BaseRva
        )
        self._segments.extend(
            MinidumpMemorySegment(
                int(memrange.StartOfMemoryRange), int(memrange.DataSize), int(rva)
            )
            for memrange, rva in zip(memranges, rva_list)
        )

    def _parse_memory_list(self, cursor: BinaryCursor, directory) -> None:
        count = cursor.read_struct(MINIDUMP_MEMORY_LIST_HEADER).NumberOfMemoryRanges
        for index in range(min(count, MAX_MEMORY_RANGES)):
            try:
                memrange = cursor.read_struct(MINIDUMP_MEMORY_DESCRIPTOR)
            except ShortReadError:
                log.warning(f"Memory list truncated after {index} ranges")
                break
            if memrange.Memory.DataSize:
                self._segments.append(
                    MinidumpMemorySegment(
                        int(memrange.StartOfMemoryRange),
                        int(memrange.Memory.DataSize),
                        int(memrange.Memory.Rva),
                    )
                )

    def _parse_memory_info_list(self, cursor: BinaryCursor, directory) -> None:
        header = cursor.read_struct(MINIDUMP_MEMORY_INFO_LIST_HEADER)
        if header.SizeOfEntry != MINIDUMP_MEMORY_INFO.sizeof():
            raise MinidumpParseError(
                f"Unexpected memory info entry size {header.SizeOfEntry}"
            )

        for index in range(min(header.NumberOfEntries, MAX_MEMORY_INFO_ENTRIES)):
            try:
                self._regions.append(cursor.read_struct(MINIDUMP_MEMORY_INFO))
            except ShortReadError:
                log.warning(f"Memory info list truncated after {index} entries")
                break

    def _parse_system_info(self, cursor: BinaryCursor, directory) -> None:
        system_info = cursor.read_struct(MINIDUMP_SYSTEM_INFO)
        system_info.CSDVersion = read_minidump_string(cursor, system_info.CSDVersionRva)
        self.system_info = system_info

    def _parse_exception(self, cursor: BinaryCursor, directory) -> None:
        self.exception = cursor.read_struct(MINIDUMP_EXCEPTION_STREAM)

    def _parse_misc_info(self, cursor: BinaryCursor, directory) -> None:
        self.misc_info = cursor.read_struct(MINIDUMP_MISC_INFO)

    def _parse_handle_data(self, cursor: BinaryCursor, directory) -> None:
        header = cursor.read_struct(MINIDUMP_HANDLE_DATA_STREAM)
        for index in range(header.NumberOfDescriptors):
            try:
                handle = cursor.read_struct(MINIDUMP_HANDLE_DESCRIPTOR)
            except ShortReadError:
                log.warning(f"Handle data truncated after {index} descriptors")
                break
            handle.TypeName = read_minidump_string(cursor, handle.TypeNameRva)
            handle.ObjectName = read_minidump_string(cursor, handle.ObjectNameRva)
            self._handles.append(handle)

    ############################################################################
    ### QUERIES ###
    ############################################################################

    @property
    def unknown_streams(self) -> Tuple:
        """Directory entries whose stream type this parser does not decode"""

        parsers = self._stream_parsers()
        return tuple(
            directory
            for directory in self.directories
            if int(directory.StreamType) not in parsers
        )

    def get_stream(self, stream_type: int):
        """Returns the first directory entry of the given type"""

        return next(
            (dir for dir in self.directories if int(dir.StreamType) == stream_type),
            None,
        )
