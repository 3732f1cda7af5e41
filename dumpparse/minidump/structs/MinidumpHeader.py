from construct import FlagsEnum, Hex, Int16ul, Int32ul, Int64ul, Struct, Timestamp

from ..constants import MINIDUMP_TYPE

MINIDUMP_HEADER = Struct(
    "Signature" / Hex(Int32ul),
    "Version" / Int16ul,
    "ImplementationVersion" / Int16ul,
    "NumberOfStreams" / Int32ul,
    "StreamDirectoryRva" / Hex(Int32ul),
    "CheckSum" / Hex(Int32ul),
    "TimeDateStamp" / Timestamp(Int32ul, 1, 1970),
    "Flags" / FlagsEnum(Int64ul, MINIDUMP_TYPE),
)
