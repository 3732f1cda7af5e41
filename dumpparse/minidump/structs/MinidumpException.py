from construct import Hex, Int32ul, Int64ul, Padding, Struct

from .common import MINIDUMP_LOCATION_DESCRIPTOR

EXCEPTION_MAXIMUM_PARAMETERS = 15

MINIDUMP_EXCEPTION = Struct(
    "ExceptionCode" / Hex(Int32ul),
    "ExceptionFlags" / Hex(Int32ul),
    "ExceptionRecord" / Hex(Int64ul),
    "ExceptionAddress" / Hex(Int64ul),
    "NumberParameters" / Int32ul,
    Padding(4),
    "ExceptionInformation" / Hex(Int64ul)[EXCEPTION_MAXIMUM_PARAMETERS],
)

MINIDUMP_EXCEPTION_STREAM = Struct(
    "ThreadId" / Hex(Int32ul),
    Padding(4),
    "ExceptionRecord" / MINIDUMP_EXCEPTION,
    "ThreadContext" / MINIDUMP_LOCATION_DESCRIPTOR,
)
