from construct import Hex, Int32ul, Int64ul, Struct

from .common import MINIDUMP_LOCATION_DESCRIPTOR

MINIDUMP_MEMORY_DESCRIPTOR = Struct(
    "StartOfMemoryRange" / Hex(Int64ul),
    "Memory" / MINIDUMP_LOCATION_DESCRIPTOR,
)

MINIDUMP_MEMORY_LIST_HEADER = Struct("NumberOfMemoryRanges" / Int32ul)
