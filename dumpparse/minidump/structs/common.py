from typing import Optional

from construct import Hex, Int16ul, Int32ul, Int64ul, Struct

from ..constants import MAX_NAME_LENGTH
from ..cursor import BinaryCursor
from ..exceptions import ShortReadError

MINIDUMP_LOCATION_DESCRIPTOR = Struct("DataSize" / Int32ul, "Rva" / Hex(Int32ul))
MINIDUMP_LOCATION_DESCRIPTOR_64 = Struct("DataSize" / Int64ul, "Rva" / Hex(Int64ul))

# Length is in bytes, not characters
MINIDUMP_STRING_LENGTH = Int32ul


def decode_utf16_ascii(data: bytes) -> str:
    """Decodes UTF-16LE bytes, keeping only the ASCII code units.

    Surrogates, non-ASCII characters and NULs are dropped rather than replaced.
    A trailing odd byte is ignored.
    """

    units = Int16ul[len(data) // 2].parse(data)
    return "".join(chr(unit) for unit in units if 0 < unit < 128)


def read_minidump_string(cursor: BinaryCursor, rva: int) -> Optional[str]:
    """Reads the name sub-record at `rva` without moving the cursor.

    Returns None when there is no usable name: a zero RVA, a length outside
    (0, MAX_NAME_LENGTH), or a sub-record cut short by the end of the file.
    """

    if not rva:
        return None

    with cursor.saved_position():
        cursor.seek(rva)
        try:
            length = cursor.read_struct(MINIDUMP_STRING_LENGTH)
            if not 0 < length < MAX_NAME_LENGTH:
                return None
            return decode_utf16_ascii(cursor.read_exact(length))
        except ShortReadError:
            return None
