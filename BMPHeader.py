#!/usr/bin/env python3
# BMP header codec - 54-byte BITMAPFILEHEADER + BITMAPINFOHEADER

from __future__ import annotations

import logging
from typing import BinaryIO

import binarycodec
from errors import InvalidArgumentError, NotABitmapError, NullArgumentError

logger = logging.getLogger(__name__)

SIGNATURE = b"BM"
HEADER_SIZE = 54
INFO_HEADER_SIZE = 40
PLANES = 1
BITS_PER_PIXEL = 24
COMPRESSION = 0
RESOLUTION = 72
TRAILER_SIZE = 2


class BMPHeader:
    """Dimensions of a 24-bit bitmap and the sizes derived from them.

    Instances are never resized in place; build a new header instead.
    """

    def __init__(self, width: int, height: int):
        if width < 0 or height < 0:
            raise InvalidArgumentError("width and/or height should be positive.")
        self.width = width
        self.height = height
        # Each row is padded to a multiple of 4 bytes
        self.row_bytes = width * 3
        self.padding = (4 - self.row_bytes % 4) % 4
        self.data_size = height * (self.row_bytes + self.padding)
        self.file_size = HEADER_SIZE + self.data_size + TRAILER_SIZE

    def __repr__(self):
        return f"BMPHeader(width={self.width}, height={self.height})"

    def __eq__(self, other):
        if not isinstance(other, BMPHeader):
            return NotImplemented
        return self.width == other.width and self.height == other.height

    @classmethod
    def from_dimensions(cls, width: int, height: int) -> BMPHeader:
        return cls(width, height)

    @classmethod
    def parse(cls, stream: BinaryIO) -> BMPHeader:
        """Read the fixed 54-byte header and leave ``stream`` at the pixel data.

        Raises NotABitmapError for anything other than an uncompressed
        24-bit BITMAPINFOHEADER bitmap, and EOFError if the stream ends early.
        """
        if stream is None:
            raise NullArgumentError("stream")
        path = getattr(stream, "name", None)

        def reject(reason):
            logger.warning("Rejecting %s: %s", path or "stream", reason)
            return NotABitmapError(path, f"Not a valid 24-bit bitmap ({reason}): {path}")

        # Bytes 0-1: Signature
        if binarycodec.read_bytes(stream, 2) != SIGNATURE:
            raise reject("missing 'BM' signature")

        file_size = binarycodec.read_int32(stream)
        binarycodec.skip(stream, 4)  # reserved
        data_offset = binarycodec.read_int32(stream)

        if binarycodec.read_int32(stream) != INFO_HEADER_SIZE:
            raise reject("unsupported info header size")

        width = binarycodec.read_int32(stream)
        height = binarycodec.read_int32(stream)
        if width < 0 or height < 0:
            raise reject(f"negative dimensions {width}x{height}")

        if binarycodec.read_int16(stream) != PLANES:
            raise reject("planes must be 1")
        bits_per_pixel = binarycodec.read_int16(stream)
        if bits_per_pixel != BITS_PER_PIXEL:
            raise reject(f"{bits_per_pixel}-bit images are not supported")
        compression = binarycodec.read_int32(stream)
        if compression != COMPRESSION:
            raise reject(describe_compression(compression))

        # image size, resolution and palette counts are not round-tripped
        binarycodec.skip(stream, 20)
        binarycodec.skip(stream, data_offset - HEADER_SIZE)

        logger.debug("Parsed header: %dx%d, file size %d, pixel data at %d",
                     width, height, file_size, data_offset)
        return cls(width, height)

    def serialize(self, stream: BinaryIO) -> None:
        """Write exactly HEADER_SIZE bytes, in the layout parse() reads."""
        if stream is None:
            raise NullArgumentError("stream")
        stream.write(SIGNATURE)
        binarycodec.write_int32(stream, self.file_size)
        binarycodec.write_int32(stream, 0)  # reserved
        binarycodec.write_int32(stream, HEADER_SIZE)
        binarycodec.write_int32(stream, INFO_HEADER_SIZE)
        binarycodec.write_int32(stream, self.width)
        binarycodec.write_int32(stream, self.height)
        binarycodec.write_int16(stream, PLANES)
        binarycodec.write_int16(stream, BITS_PER_PIXEL)
        binarycodec.write_int32(stream, COMPRESSION)
        binarycodec.write_int32(stream, self.data_size)
        binarycodec.write_int32(stream, RESOLUTION)  # horizontal
        binarycodec.write_int32(stream, RESOLUTION)  # vertical
        binarycodec.write_int32(stream, 0)  # colors
        binarycodec.write_int32(stream, 0)  # important colors

    def get_summary(self) -> dict:
        """Return a dictionary of key-value pairs for display"""
        return {
            "File Size": describe_size(self.file_size),
            "Image Dimensions": f"{self.width} × {self.height} pixels",
            "Bits per pixel": "24-bit (True Color)",
            "Row Padding": f"{self.padding} bytes",
            "Compression": describe_compression(COMPRESSION),
        }

    def display_info(self, name: str = "") -> None:
        print("BMP File Analysis: " + name)
        print("=" * 50)
        for field, value in self.get_summary().items():
            print(f"  {field}: {value}")


def describe_compression(code: int) -> str:
    # BI_RGB is the only method this codec reads or writes
    if code == COMPRESSION:
        return "BI_RGB (uncompressed)"
    return f"unsupported compression type {code}"


def describe_size(size_bytes: int) -> str:
    """Render a byte count, adding a KiB/MiB figure once it passes 1 KiB."""
    text = f"{size_bytes:,} bytes"
    for unit, scale in (("MiB", 1024 ** 2), ("KiB", 1024)):
        if size_bytes >= scale:
            return f"{text} ({size_bytes / scale:.1f} {unit})"
    return text
