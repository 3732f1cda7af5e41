import logging
from typing import TYPE_CHECKING, Generator, Optional, Tuple

from construct import BytesInteger

from .constants import ARCHITECTURES_64BIT, PROCESSOR_ARCHITECTURE
from .cursor import BinaryCursor
from .exceptions import MinidumpError, OutOfRangeError, ShortReadError
from .memory import MinidumpMemorySegment

if TYPE_CHECKING:
    from .minidumpfile import MinidumpFile

log = logging.getLogger("rich")


class MinidumpReader:
    """Resolves virtual addresses of the captured process against a parsed minidump.

    The reader borrows the MinidumpFile and owns one byte source. Every read
    saves the source position, reads and restores it, so interleaved queries on
    the same reader never see each other's cursor state. Use one reader per
    thread.
    """

    def __init__(self, minidump: "MinidumpFile", cursor: BinaryCursor):
        self.minidump = minidump
        self._cursor = cursor

    def close(self) -> None:
        self._cursor.close()

    def __enter__(self) -> "MinidumpReader":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    ############################################################################
    ### ARCHITECTURE ###
    ############################################################################

    def get_architecture(self) -> PROCESSOR_ARCHITECTURE:
        system_info = self.minidump.system_info
        if system_info is None:
            return PROCESSOR_ARCHITECTURE.UNKNOWN
        try:
            return PROCESSOR_ARCHITECTURE(system_info.ProcessorArchitecture)
        except ValueError:
            return PROCESSOR_ARCHITECTURE.UNKNOWN

    def is_64bit(self) -> bool:
        return self.get_architecture() in ARCHITECTURES_64BIT

    def pointer_size(self) -> int:
        return 8 if self.is_64bit() else 4

    ############################################################################
    ### LOOKUPS ###
    ############################################################################

    def find_segment(self, address: int) -> Optional[MinidumpMemorySegment]:
        """Finds the segment of captured memory where the address lives.

        Segments may overlap, in which case the first one in stored order wins.
        """

        for segment in self.minidump.memory_segments:
            if segment.contains(address):
                return segment
        return None

    def find_region(self, address: int):
        """Finds the memory info region describing the address, if any"""

        for region in self.minidump.memory_regions:
            if region.BaseAddress <= address < region.BaseAddress + region.RegionSize:
                return region
        return None

    def find_module_by_address(self, address: int):
        for module in self.minidump.modules:
            if module.BaseOfImage <= address < module.EndAddress:
                return module
        return None

    def find_module_by_name(self, name: str):
        """Returns the first module whose name contains `name`"""

        for module in self.minidump.modules:
            if module.ModuleName is not None and name in module.ModuleName:
                return module
        return None

    ############################################################################
    ### READS ###
    ############################################################################

    def read_memory(self, address: int, size: int) -> bytes:
        """Reads `size` bytes at a virtual address.

        The whole span has to sit inside one segment. Two adjacent segments are
        not stitched together, even if they are contiguous in memory. A segment
        whose bytes run past the end of the file is just as unreadable as an
        unmapped address.
        """

        if size < 0:
            raise ValueError(f"Negative read size: {size}")

        segment = self.find_segment(address)
        if segment is None or not segment.contains_range(address, size):
            raise OutOfRangeError(address, size)

        with self._cursor.saved_position():
            self._cursor.seek(segment.file_offset(address))
            try:
                return self._cursor.read_exact(size)
            except ShortReadError as e:
                raise OutOfRangeError(address, size) from e

    def read_pointer(self, address: int) -> Optional[int]:
        """Reads a pointer sized for the captured process. None if unreadable."""

        size = self.pointer_size()
        try:
            data = self.read_memory(address, size)
        except MinidumpError as e:
            log.debug(f"Pointer read at {address:#x} failed: {e}")
            return None
        return BytesInteger(size, swapped=True).parse(data)

    def read_string(self, address: int, max_length: int = 1024) -> str:
        """Reads a NUL terminated byte string. Empty if unreadable.

        Note that this is more forgiving than read_pointer, which returns None.
        Exactly `max_length` bytes must be readable for anything to come back.
        """

        try:
            data = self.read_memory(address, max_length)
        except (MinidumpError, ValueError) as e:
            log.debug(f"String read at {address:#x} failed: {e}")
            return ""
        return data.split(b"\x00", 1)[0].decode("latin-1")

    def read_segment(self, segment: MinidumpMemorySegment) -> bytes:
        return self.read_memory(segment.start_virtual_address, segment.size)

    def iter_memory(
        self,
    ) -> Generator[Tuple[MinidumpMemorySegment, bytes], None, None]:
        """Generator to read all captured memory segments of minidump"""

        for segment in self.minidump.memory_segments:
            yield segment, self.read_segment(segment)
