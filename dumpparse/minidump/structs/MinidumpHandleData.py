from construct import Hex, Int32ul, Int64ul, Pass, Struct

MINIDUMP_HANDLE_DATA_STREAM = Struct(
    "SizeOfHeader" / Int32ul,
    "SizeOfDescriptor" / Int32ul,
    "NumberOfDescriptors" / Int32ul,
    "Reserved" / Int32ul,
)

MINIDUMP_HANDLE_DESCRIPTOR = Struct(
    "Handle" / Hex(Int64ul),
    "TypeNameRva" / Hex(Int32ul),
    "ObjectNameRva" / Hex(Int32ul),
    "Attributes" / Hex(Int32ul),
    "GrantedAccess" / Hex(Int32ul),
    "HandleCount" / Int32ul,
    "PointerCount" / Int32ul,
    "TypeName" / Pass,  # Placeholders filled in from the name RVAs
    "ObjectName" / Pass,
)
