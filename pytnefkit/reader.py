"""
Bounds-checked little-endian reader over a byte window
"""

import struct
from typing import Optional, Union

from .exceptions import TruncatedError

Buffer = Union[bytes, bytearray, memoryview]

_U8 = struct.Struct('<B')
_U16 = struct.Struct('<H')
_U32 = struct.Struct('<I')
_U64 = struct.Struct('<Q')
_I16 = struct.Struct('<h')
_I32 = struct.Struct('<i')
_I64 = struct.Struct('<q')
_F32 = struct.Struct('<f')
_F64 = struct.Struct('<d')


class ByteReader:
    """
    Cursor over a byte window.

    Every read checks the remaining length first and raises TruncatedError
    instead of slicing past the end, so a length field taken from the input
    can never make the reader touch bytes outside the window.
    """

    def __init__(self, data: Buffer, offset: int = 0, end: Optional[int] = None):
        self._view = memoryview(data)
        if end is None:
            end = len(self._view)
        self._end = min(end, len(self._view))
        self._offset = offset

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return max(self._end - self._offset, 0)

    @property
    def at_end(self) -> bool:
        return self._offset >= self._end

    def _require(self, size: int):
        if size < 0 or size > self.remaining:
            raise TruncatedError(self._offset, size, self.remaining)

    def _unpack(self, fmt: struct.Struct):
        self._require(fmt.size)
        value = fmt.unpack_from(self._view, self._offset)[0]
        self._offset += fmt.size
        return value

    def read_u8(self) -> int:
        return self._unpack(_U8)

    def read_u16(self) -> int:
        return self._unpack(_U16)

    def read_u32(self) -> int:
        return self._unpack(_U32)

    def read_u64(self) -> int:
        return self._unpack(_U64)

    def read_i16(self) -> int:
        return self._unpack(_I16)

    def read_i32(self) -> int:
        return self._unpack(_I32)

    def read_i64(self) -> int:
        return self._unpack(_I64)

    def read_f32(self) -> float:
        return self._unpack(_F32)

    def read_f64(self) -> float:
        return self._unpack(_F64)

    def read_view(self, size: int) -> memoryview:
        """Return the next `size` bytes as a view into the source buffer."""
        self._require(size)
        view = self._view[self._offset:self._offset + size]
        self._offset += size
        return view

    def read_bytes(self, size: int) -> bytes:
        return bytes(self.read_view(size))

    def read_utf16(self, size: int) -> str:
        """
        Decode exactly `size` bytes as UTF-16LE.

        An odd trailing byte is consumed and decodes to U+FFFD, as do
        unpaired surrogates.
        """
        return self.read_bytes(size).decode('utf-16-le', errors='replace')

    def skip(self, size: int):
        self._require(size)
        self._offset += size

    def skip_padding(self, start: int, boundary: int = 4):
        """
        Advance so that (offset - start) is a multiple of `boundary`.

        Padding is never read, and a padding run cut off by the end of the
        window is tolerated: the cursor stops at the end.
        """
        pad = -(self._offset - start) % boundary
        self._offset = min(self._offset + pad, max(self._end, self._offset))
