import construct
from construct import Int32ul, Struct

from ..constants import MINIDUMP_STREAM_TYPE
from .common import MINIDUMP_LOCATION_DESCRIPTOR

# Unknown stream types parse to their plain integer value, known ones to the enum name
MINIDUMP_DIRECTORY = Struct(
    "StreamType" / construct.Enum(Int32ul, MINIDUMP_STREAM_TYPE),
    "Location" / MINIDUMP_LOCATION_DESCRIPTOR,
)
