from .constants import MINIDUMP_STREAM_TYPE, MINIDUMP_TYPE, PROCESSOR_ARCHITECTURE
from .cursor import BinaryCursor
from .exceptions import (
    InvalidHeaderError,
    MinidumpError,
    MinidumpParseError,
    OutOfRangeError,
    ShortReadError,
)
from .memory import MinidumpMemorySegment
from .minidumpfile import MinidumpFile
from .reader import MinidumpReader
