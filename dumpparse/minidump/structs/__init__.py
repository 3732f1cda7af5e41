from .common import (
    MINIDUMP_LOCATION_DESCRIPTOR,
    MINIDUMP_LOCATION_DESCRIPTOR_64,
    decode_utf16_ascii,
    read_minidump_string,
)
from .MinidumpDirectory import MINIDUMP_DIRECTORY
from .MinidumpException import MINIDUMP_EXCEPTION, MINIDUMP_EXCEPTION_STREAM
from .MinidumpHandleData import MINIDUMP_HANDLE_DATA_STREAM, MINIDUMP_HANDLE_DESCRIPTOR
from .MinidumpHeader import MINIDUMP_HEADER
from .MinidumpMemory64List import (
    MINIDUMP_MEMORY64_LIST_HEADER,
    MINIDUMP_MEMORY_DESCRIPTOR64,
)
from .MinidumpMemoryInfoList import (
    MINIDUMP_MEMORY_INFO,
    MINIDUMP_MEMORY_INFO_LIST_HEADER,
)
from .MinidumpMemoryList import MINIDUMP_MEMORY_DESCRIPTOR, MINIDUMP_MEMORY_LIST_HEADER
from .MinidumpMiscInfo import MINIDUMP_MISC_INFO
from .MinidumpModuleList import (
    MINIDUMP_MODULE,
    MINIDUMP_MODULE_LIST_HEADER,
    VS_FIXEDFILEINFO,
)
from .MinidumpSystemInfo import MINIDUMP_SYSTEM_INFO
from .MinidumpThreadList import MINIDUMP_THREAD, MINIDUMP_THREAD_LIST_HEADER
