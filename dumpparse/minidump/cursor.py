from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from construct import Construct

from .exceptions import ShortReadError


class BinaryCursor:
    """Seekable byte source that never hands out partial reads"""

    def __init__(self, stream: BinaryIO):
        self._stream = stream

    @classmethod
    def open(cls, filepath: Path) -> "BinaryCursor":
        return cls(Path(filepath).open("rb"))

    def seek(self, offset: int) -> None:
        self._stream.seek(offset)

    def tell(self) -> int:
        return self._stream.tell()

    def read_exact(self, size: int) -> bytes:
        """Reads exactly `size` bytes or raises ShortReadError"""

        if size < 0:
            raise ValueError(f"Negative read size: {size}")

        offset = self.tell()
        data = self._stream.read(size)
        if len(data) != size:
            raise ShortReadError(offset, size, len(data))
        return data

    def read_struct(self, struct: Construct):
        """Parses a fixed-size construct at the current position"""

        return struct.parse(self.read_exact(struct.sizeof()))

    @contextmanager
    def saved_position(self) -> Iterator["BinaryCursor"]:
        """Restores the current position when the block exits, even on error"""

        position = self.tell()
        try:
            yield self
        finally:
            self.seek(position)

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> "BinaryCursor":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
