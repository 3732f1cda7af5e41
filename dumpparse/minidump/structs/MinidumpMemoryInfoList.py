from construct import Hex, Int32ul, Int64ul, Padding, Struct

MINIDUMP_MEMORY_INFO = Struct(
    "BaseAddress" / Hex(Int64ul),
    "AllocationBase" / Hex(Int64ul),
    "AllocationProtect" / Hex(Int32ul),
    Padding(4),
    "RegionSize" / Hex(Int64ul),
    "State" / Hex(Int32ul),
    "Protect" / Hex(Int32ul),
    "Type" / Hex(Int32ul),
    Padding(4),
)

MINIDUMP_MEMORY_INFO_LIST_HEADER = Struct(
    "SizeOfHeader" / Int32ul,
    "SizeOfEntry" / Int32ul,
    "NumberOfEntries" / Int64ul,
)
