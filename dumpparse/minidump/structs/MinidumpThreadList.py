from construct import Hex, Int32ul, Int64ul, Struct

# The context locator is offset first, unlike MINIDUMP_LOCATION_DESCRIPTOR
MINIDUMP_THREAD = Struct(
    "ThreadId" / Hex(Int32ul),
    "SuspendCount" / Int32ul,
    "PriorityClass" / Int32ul,
    "Priority" / Int32ul,
    "Teb" / Hex(Int64ul),
    "StackRva" / Hex(Int32ul),
    "StackSize" / Int32ul,
    "ThreadContextRva" / Hex(Int32ul),
    "ThreadContextSize" / Int32ul,
)

MINIDUMP_THREAD_LIST_HEADER = Struct("NumberOfThreads" / Int32ul)
