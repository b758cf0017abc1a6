"""Big-endian binary reader for parsing Blu-ray BDMV structures."""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Union

from bdcat.errors import ReadError


class BinaryReader:
    """Reads big-endian binary data with cursor tracking and helpful errors.

    Seeking or skipping past the end of the data is allowed; the failure
    surfaces as a :class:`ReadError` on the next read.
    """

    __slots__ = ("_data", "_pos")

    def __init__(self, source: Union[bytes, bytearray, memoryview, str, Path]) -> None:
        if isinstance(source, (str, Path)):
            path = Path(source)
            try:
                self._data = memoryview(path.read_bytes())
            except OSError as exc:
                raise ReadError(f"cannot read {path}: {exc}") from exc
        else:
            self._data = memoryview(source) if not isinstance(source, memoryview) else source
        self._pos: int = 0

    # -- context manager --

    def __enter__(self) -> BinaryReader:
        return self

    def __exit__(self, *_: object) -> None:
        self._data.release()

    # -- cursor --

    def tell(self) -> int:
        """Return the current read position."""
        return self._pos

    def seek(self, offset: int) -> None:
        """Set the absolute read position."""
        if offset < 0:
            raise ReadError(f"seek to negative offset {offset}")
        self._pos = offset

    def skip(self, n: int) -> None:
        """Advance the read position by *n* bytes."""
        self.seek(self._pos + n)

    @property
    def remaining(self) -> int:
        """Number of unread bytes from the current position."""
        return max(0, len(self._data) - self._pos)

    # -- guards --

    def require(self, n: int) -> None:
        """Raise if fewer than *n* bytes remain at the current position."""
        if self.remaining < n:
            raise ReadError(
                f"need {n} bytes at offset {self._pos}, but only {self.remaining} remain"
            )

    # -- primitive reads (big-endian) --

    def read_bytes(self, n: int) -> bytes:
        """Read *n* raw bytes and advance the cursor."""
        self.require(n)
        result = bytes(self._data[self._pos : self._pos + n])
        self._pos += n
        return result

    def _read_fmt(self, fmt: str, size: int) -> int:
        self.require(size)
        (value,) = struct.unpack_from(fmt, self._data, self._pos)
        self._pos += size
        return value

    def u8(self) -> int:
        """Read an unsigned 8-bit integer."""
        return self._read_fmt(">B", 1)

    def u16(self) -> int:
        """Read a big-endian unsigned 16-bit integer."""
        return self._read_fmt(">H", 2)

    def u32(self) -> int:
        """Read a big-endian unsigned 32-bit integer."""
        return self._read_fmt(">I", 4)

    # -- string reads --

    def read_string(self, n: int) -> str:
        """Read *n* bytes and decode as ASCII, stripping null bytes."""
        return self.read_bytes(n).replace(b"\x00", b"").decode("ascii", errors="replace")