"""Little-endian integer helpers over binary streams.

Integers are assembled and split one byte at a time, the same way the BMP
header fields are laid out on disk.
"""

from __future__ import annotations

from typing import BinaryIO


def read_bytes(stream: BinaryIO, count: int) -> bytes:
    """Read exactly ``count`` bytes or raise ``EOFError``."""
    data = stream.read(count)
    if len(data) < count:
        raise EOFError(f"Expected {count} bytes, got {len(data)}")
    return data


def read_byte(stream: BinaryIO) -> int:
    return read_bytes(stream, 1)[0]


def skip(stream: BinaryIO, count: int) -> None:
    """Consume ``count`` bytes. Non-positive counts are a no-op."""
    if count > 0:
        read_bytes(stream, count)


def read_uint16(stream: BinaryIO) -> int:
    return read_byte(stream) | (read_byte(stream) << 8)


def read_int16(stream: BinaryIO) -> int:
    """Read a signed 16-bit integer (little-endian)"""
    value = read_uint16(stream)
    # two's complement
    if value >= 2**15:
        value -= 2**16
    return value


def read_uint32(stream: BinaryIO) -> int:
    return (read_byte(stream) |
            (read_byte(stream) << 8) |
            (read_byte(stream) << 16) |
            (read_byte(stream) << 24))


def read_int32(stream: BinaryIO) -> int:
    """Read a signed 32-bit integer (little-endian)"""
    value = read_uint32(stream)
    if value >= 2**31:
        value -= 2**32
    return value


def write_byte(stream: BinaryIO, value: int) -> None:
    stream.write(bytes((value & 0xFF,)))


def write_int16(stream: BinaryIO, value: int) -> None:
    """Write the low 16 bits of ``value`` (little-endian)"""
    write_byte(stream, value)
    write_byte(stream, value >> 8)


def write_int32(stream: BinaryIO, value: int) -> None:
    """Write the low 32 bits of ``value`` (little-endian)"""
    write_byte(stream, value)
    write_byte(stream, value >> 8)
    write_byte(stream, value >> 16)
    write_byte(stream, value >> 24)
