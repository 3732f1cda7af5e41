from dataclasses import dataclass


@dataclass(frozen=True)
class MinidumpMemorySegment:
    """A contiguous range of captured process memory and where it sits in the file"""

    start_virtual_address: int
    size: int
    start_file_address: int

    @property
    def end_virtual_address(self) -> int:
        return self.start_virtual_address + self.size

    def contains(self, address: int) -> bool:
        return self.start_virtual_address <= address < self.end_virtual_address

    def contains_range(self, address: int, size: int) -> bool:
        return self.contains(address) and address + size <= self.end_virtual_address

    def file_offset(self, address: int) -> int:
        return self.start_file_address + (address - self.start_virtual_address)
