"""
Tests for the little-endian integer helpers and the 54-byte BMP header.
"""

import io

import pytest

import binarycodec
from BMPHeader import BMPHeader, HEADER_SIZE, describe_compression, describe_size
from errors import InvalidArgumentError, NotABitmapError


def header_bytes(width=4, height=2):
    out = io.BytesIO()
    BMPHeader.from_dimensions(width, height).serialize(out)
    return bytearray(out.getvalue())


class TestBinaryCodec:
    def test_int32_is_little_endian(self):
        out = io.BytesIO()
        binarycodec.write_int32(out, 0x12345678)
        assert out.getvalue() == b"\x78\x56\x34\x12"

    def test_int16_is_little_endian(self):
        out = io.BytesIO()
        binarycodec.write_int16(out, 0x0118)
        assert out.getvalue() == b"\x18\x01"

    def test_negative_values_use_twos_complement(self):
        out = io.BytesIO()
        binarycodec.write_int32(out, -2)
        binarycodec.write_int16(out, -1)
        assert out.getvalue() == b"\xfe\xff\xff\xff\xff\xff"

        stream = io.BytesIO(out.getvalue())
        assert binarycodec.read_int32(stream) == -2
        assert binarycodec.read_int16(stream) == -1

    def test_unsigned_reads(self):
        stream = io.BytesIO(b"\xff\xff\xff\xff\xff\xff")
        assert binarycodec.read_uint32(stream) == 0xFFFFFFFF
        assert binarycodec.read_uint16(stream) == 0xFFFF

    def test_exhausted_stream_raises(self):
        with pytest.raises(EOFError):
            binarycodec.read_int32(io.BytesIO(b"\x01\x02\x03"))

    def test_skip_consumes_bytes(self):
        stream = io.BytesIO(b"abcdef")
        binarycodec.skip(stream, 4)
        binarycodec.skip(stream, -3)
        assert stream.read() == b"ef"


class TestHeaderDerivation:
    def test_padded_width(self):
        header = BMPHeader.from_dimensions(10, 3)
        assert header.row_bytes == 30
        assert header.padding == 2
        assert header.data_size == 3 * 32
        assert header.file_size == 54 + 96 + 2

    def test_unpadded_width(self):
        header = BMPHeader.from_dimensions(4, 2)
        assert header.row_bytes == 12
        assert header.padding == 0
        assert header.data_size == 24
        assert header.file_size == 80

    @pytest.mark.parametrize("width,padding", [(0, 0), (1, 1), (2, 2), (3, 3), (5, 1)])
    def test_padding_rounds_rows_to_four_bytes(self, width, padding):
        header = BMPHeader.from_dimensions(width, 1)
        assert header.padding == padding
        assert (header.row_bytes + header.padding) % 4 == 0

    def test_negative_dimensions_rejected(self):
        with pytest.raises(InvalidArgumentError):
            BMPHeader.from_dimensions(-1, 4)
        with pytest.raises(InvalidArgumentError):
            BMPHeader.from_dimensions(4, -1)


class TestHeaderSerialization:
    def test_layout(self):
        data = header_bytes(10, 3)
        assert len(data) == HEADER_SIZE
        assert data[0:2] == b"BM"
        assert int.from_bytes(data[2:6], "little") == 152
        assert data[6:10] == b"\x00\x00\x00\x00"
        assert int.from_bytes(data[10:14], "little") == 54
        assert int.from_bytes(data[14:18], "little") == 40
        assert int.from_bytes(data[18:22], "little") == 10
        assert int.from_bytes(data[22:26], "little") == 3
        assert int.from_bytes(data[26:28], "little") == 1
        assert int.from_bytes(data[28:30], "little") == 24
        assert int.from_bytes(data[30:34], "little") == 0
        assert int.from_bytes(data[34:38], "little") == 96
        assert int.from_bytes(data[38:42], "little") == 72
        assert int.from_bytes(data[42:46], "little") == 72
        assert data[46:54] == bytes(8)

    def test_parse_reads_what_serialize_writes(self):
        stream = io.BytesIO(bytes(header_bytes(7, 5)) + b"pixels")
        header = BMPHeader.parse(stream)
        assert header == BMPHeader(7, 5)
        assert stream.read() == b"pixels"

    def test_parse_skips_bytes_before_pixel_data(self):
        data = header_bytes(2, 2)
        data[10:14] = (HEADER_SIZE + 4).to_bytes(4, "little")
        stream = io.BytesIO(bytes(data) + b"\xaa\xbb\xcc\xdd" + b"pixels")
        BMPHeader.parse(stream)
        assert stream.read() == b"pixels"


class TestHeaderRejection:
    def test_wrong_signature(self):
        data = header_bytes()
        data[1] = ord("A")
        with pytest.raises(NotABitmapError):
            BMPHeader.parse(io.BytesIO(bytes(data)))

    def test_eight_bit_depth(self):
        data = header_bytes()
        data[28:30] = (8).to_bytes(2, "little")
        with pytest.raises(NotABitmapError):
            BMPHeader.parse(io.BytesIO(bytes(data)))

    def test_info_header_length(self):
        data = header_bytes()
        data[14:18] = (124).to_bytes(4, "little")
        with pytest.raises(NotABitmapError):
            BMPHeader.parse(io.BytesIO(bytes(data)))

    def test_compressed(self):
        data = header_bytes()
        data[30:34] = (1).to_bytes(4, "little")
        with pytest.raises(NotABitmapError, match="compression type 1"):
            BMPHeader.parse(io.BytesIO(bytes(data)))

    def test_planes(self):
        data = header_bytes()
        data[26:28] = (2).to_bytes(2, "little")
        with pytest.raises(NotABitmapError):
            BMPHeader.parse(io.BytesIO(bytes(data)))

    def test_top_down_height(self):
        data = header_bytes()
        data[22:26] = (-2).to_bytes(4, "little", signed=True)
        with pytest.raises(NotABitmapError):
            BMPHeader.parse(io.BytesIO(bytes(data)))

    def test_truncated_header(self):
        with pytest.raises(EOFError):
            BMPHeader.parse(io.BytesIO(bytes(header_bytes()[:20])))


def test_summary():
    summary = BMPHeader(10, 3).get_summary()
    assert summary["Image Dimensions"] == "10 × 3 pixels"
    assert summary["File Size"] == "152 bytes"
    assert summary["Row Padding"] == "2 bytes"


def test_describe_size():
    assert describe_size(100) == "100 bytes"
    assert describe_size(2048) == "2,048 bytes (2.0 KiB)"
    assert describe_size(3 * 1024 * 1024) == "3,145,728 bytes (3.0 MiB)"


def test_describe_compression():
    assert describe_compression(0) == "BI_RGB (uncompressed)"
    assert describe_compression(3) == "unsupported compression type 3"
