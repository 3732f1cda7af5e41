from construct import Hex, Int64ul, Struct

MINIDUMP_MEMORY_DESCRIPTOR64 = Struct(
    "StartOfMemoryRange" / Hex(Int64ul),
    "DataSize" / Hex(Int64ul),
)

# The ranges follow the header back to back and their data is stored contiguously from BaseRva
MINIDUMP_MEMORY64_LIST_HEADER = Struct(
    "NumberOfMemoryRanges" / Int64ul,
    "BaseRva" / Hex(Int64ul),
)
