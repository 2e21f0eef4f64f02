"""Buffered writer for the Avro binary encoding."""

from __future__ import annotations

import struct
from typing import BinaryIO, Callable, Optional

_INT_MIN, _INT_MAX = -(1 << 31), (1 << 31) - 1
_LONG_MIN, _LONG_MAX = -(1 << 63), (1 << 63) - 1

_FLOAT = struct.Struct("<f")
_DOUBLE = struct.Struct("<d")

# Room reserved for a block header: two longs of at most 9 bytes each.
_BLOCK_HEADER_RESERVE = 18


class Writer:
    """Accumulates Avro-encoded values in memory and flushes them to a stream.

    ``out`` is any object with a ``write(bytes)`` method, or ``None`` when the
    writer is only used to build a buffer. ``buf_size`` is the expected size
    of the buffer; it must not be negative.
    """

    def __init__(self, out: Optional[BinaryIO], buf_size: int = 512) -> None:
        if buf_size < 0:
            raise ValueError(f"buffer size must not be negative, got {buf_size}")
        self.out = out
        self.buf_size = buf_size
        self._buf = bytearray()
        self.error: Optional[BaseException] = None

    def reset(self, out: Optional[BinaryIO]) -> None:
        """Attach a new output stream and discard buffered data."""
        self.out = out
        self._buf.clear()

    def buffered(self) -> int:
        """Return the number of buffered bytes."""
        return len(self._buf)

    def buffer(self) -> bytes:
        """Return a copy of the buffered bytes."""
        return bytes(self._buf)

    def flush(self) -> None:
        """Write buffered data to the output stream.

        Does nothing when no stream is attached. Raises the stored error if an
        earlier write failed; a failing write is stored and re-raised.
        """
        if self.out is None:
            return
        if self.error is not None:
            raise self.error
        try:
            written = self.out.write(bytes(self._buf))
        except Exception as exc:
            if self.error is None:
                self.error = exc
            raise
        if written is None:
            written = len(self._buf)
        del self._buf[:written]

    def write(self, data: bytes) -> int:
        """Append raw bytes and return how many were appended."""
        self._buf += data
        return len(data)

    def write_bool(self, value: bool) -> None:
        """Append a boolean as a single byte."""
        self._buf.append(0x01 if value else 0x00)

    def write_int(self, value: int) -> None:
        """Append a 32-bit int in zig-zag variable-length encoding."""
        if not _INT_MIN <= value <= _INT_MAX:
            raise ValueError(f"int out of 32-bit range: {value}")
        self._encode_varint((value << 1) ^ (value >> 31))

    def write_long(self, value: int) -> None:
        """Append a 64-bit long in zig-zag variable-length encoding."""
        if not _LONG_MIN <= value <= _LONG_MAX:
            raise ValueError(f"long out of 64-bit range: {value}")
        self._encode_varint((value << 1) ^ (value >> 63))

    def _encode_varint(self, value: int) -> None:
        if value == 0:
            self._buf.append(0)
            return
        while value > 0:
            byte = value & 0x7F
            value >>= 7
            if value:
                byte |= 0x80
            self._buf.append(byte)

    def write_float(self, value: float) -> None:
        """Append a single-precision float, little endian."""
        self._buf += _FLOAT.pack(value)

    def write_double(self, value: float) -> None:
        """Append a double-precision float, little endian."""
        self._buf += _DOUBLE.pack(value)

    def write_bytes(self, data: bytes) -> None:
        """Append a length-prefixed byte sequence."""
        self.write_long(len(data))
        self._buf += data

    def write_string(self, value: str) -> None:
        """Append a length-prefixed UTF-8 string."""
        self.write_bytes(value.encode("utf-8"))

    def write_block_header(self, length: int, size: int) -> None:
        """Append a block header; a positive size is written with a negated count."""
        if size > 0:
            self.write_long(-length)
            self.write_long(size)
            return
        self.write_long(length)

    def write_block_cb(self, callback: Callable[["Writer"], int]) -> int:
        """Write a block whose items are produced by ``callback``.

        The callback writes the block's items to this writer and returns how
        many it wrote. The block is prefixed with its count and byte size.
        Returns the callback's count.
        """
        header_start = len(self._buf)
        self._buf += bytes(_BLOCK_HEADER_RESERVE)

        data_start = len(self._buf)
        length = callback(self)
        captured = bytes(self._buf[data_start:])

        del self._buf[header_start:]
        self.write_block_header(length, len(captured))
        self._buf += captured
        return length