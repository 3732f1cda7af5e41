class MinidumpError(Exception):
    """Base class for everything this package raises"""


class MinidumpParseError(MinidumpError):
    """The file is not a well-formed minidump. No model is produced."""


class InvalidHeaderError(MinidumpParseError):
    """Bad signature or an empty stream directory"""


class ShortReadError(MinidumpParseError):
    """Fewer bytes were available than a record requires"""

    def __init__(self, offset: int, expected: int, actual: int):
        self.offset = offset
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Short read at {offset:#x}: expected {expected} bytes, got {actual}"
        )


class OutOfRangeError(MinidumpError):
    """A virtual address span is not covered by a single captured segment"""

    def __init__(self, address: int, size: int):
        self.address = address
        self.size = size
        super().__init__(f"No memory segment contains {address:#x}+{size:#x}")
