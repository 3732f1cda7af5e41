from construct import Hex, Int32ul, Struct

MINIDUMP_MISC_INFO = Struct(
    "SizeOfInfo" / Int32ul,
    "Flags1" / Hex(Int32ul),
    "ProcessId" / Int32ul,
    "ProcessCreateTime" / Int32ul,
    "ProcessUserTime" / Int32ul,
    "ProcessKernelTime" / Int32ul,
    "ProcessorMaxMhz" / Int32ul,
    "ProcessorCurrentMhz" / Int32ul,
    "ProcessorMhzLimit" / Int32ul,
    "ProcessorMaxIdleState" / Int32ul,
    "ProcessorCurrentIdleState" / Int32ul,
)
