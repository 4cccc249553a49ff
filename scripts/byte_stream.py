"""
Byte cursor and fixed-width integer helpers for RIFF parsing.

ByteStream owns an immutable copy of the input and a single read offset.
Reads return new ``bytes`` slices; skips only move the offset.

Usage:
    from byte_stream import ByteStream, read_u32_le

    stream = ByteStream(data)
    tag = stream.read(4)
    size = read_u32_le(stream)
"""
import struct

from wave_errors import OutOfBoundsError


class ByteStream:
    """
    Movable read position over a byte buffer.

    Invariant: ``0 <= offset <= len(stream)``. The exact end of the buffer
    is reachable by reading, never by seeking.
    """

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self.offset = 0

    def __len__(self) -> int:
        return len(self._data)

    def eof(self) -> bool:
        """True if the offset sits at the end of the buffer."""
        return self.offset == len(self._data)

    def remaining(self) -> int:
        """Number of bytes left after the offset."""
        return len(self._data) - self.offset

    def peek(self, count: int) -> bytes:
        """
        Return the next ``count`` bytes without moving the offset.

        Raises:
            OutOfBoundsError: If fewer than ``count`` bytes remain.
        """
        if count < 0:
            raise ValueError(f"Cannot read a negative byte count: {count}")
        end = self.offset + count
        if end > len(self._data):
            raise OutOfBoundsError(
                f"Read of {count} bytes at offset {self.offset} exceeds "
                f"buffer length {len(self._data)}"
            )
        return self._data[self.offset:end]

    def read(self, count: int) -> bytes:
        """Return the next ``count`` bytes and advance past them."""
        data = self.peek(count)
        self.offset += count
        return data

    def skip(self, count: int) -> None:
        """
        Advance past the next ``count`` bytes without copying them.

        Raises:
            OutOfBoundsError: If fewer than ``count`` bytes remain.
        """
        if count < 0:
            raise ValueError(f"Cannot skip a negative byte count: {count}")
        if count > self.remaining():
            raise OutOfBoundsError(
                f"Skip of {count} bytes at offset {self.offset} exceeds "
                f"buffer length {len(self._data)}"
            )
        self.offset += count

    def seek(self, offset: int) -> None:
        """
        Move the offset to an absolute position inside the buffer.

        Raises:
            OutOfBoundsError: If ``offset`` is negative or not strictly
                before the end of the buffer.
        """
        if offset < 0 or offset >= len(self._data):
            raise OutOfBoundsError(
                f"Seek to {offset} outside buffer of length {len(self._data)}"
            )
        self.offset = offset


# Big-endian interpretation. RIFF fields are little-endian on disk, so the
# read_*_le helpers reverse stream order first.
def to_u16(data: bytes) -> int:
    return struct.unpack(">H", data)[0]


def to_u32(data: bytes) -> int:
    return struct.unpack(">I", data)[0]


def to_i16(data: bytes) -> int:
    return struct.unpack(">h", data)[0]


def read_u16_le(stream: ByteStream) -> int:
    return to_u16(stream.read(2)[::-1])


def read_u32_le(stream: ByteStream) -> int:
    return to_u32(stream.read(4)[::-1])


def read_i16_le(stream: ByteStream) -> int:
    return to_i16(stream.read(2)[::-1])
