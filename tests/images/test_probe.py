"""
Unit tests for image header probing.
"""

import base64
import struct

import pytest

from docforge.core.errors import InvalidFieldValue
from docforge.images.probe import (
    CorruptImage,
    ImageSize,
    UnsupportedImageFormat,
    decode_image_data_uri,
    detect_format,
    get_image_dimension,
    probe_image_size,
)

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def _ihdr(width: int, height: int) -> bytes:
    return struct.pack(">I", 13) + b"IHDR" + struct.pack(">II", width, height) + b"\x08\x06\x00\x00\x00"


class TestPng:
    """Tests for PNG header reads."""

    def test_when_minimal_png_header_then_reads_size(self):
        assert probe_image_size(PNG_MAGIC + _ihdr(1, 1)) == ImageSize(width=1, height=1)

    def test_when_pillow_png_then_matches_pillow_size(self, make_image):
        assert probe_image_size(make_image(123, 45, "PNG")) == ImageSize(123, 45)

    def test_when_apple_fried_png_then_skips_cgbi_chunk(self):
        cgbi = struct.pack(">I", 4) + b"CgBI" + b"\x50\x00\x20\x02" + b"\x00" * 4
        data = PNG_MAGIC + cgbi + _ihdr(640, 480)
        assert probe_image_size(data) == ImageSize(640, 480)

    def test_when_first_chunk_not_ihdr_then_corrupt(self):
        data = PNG_MAGIC + struct.pack(">I", 0) + b"IDAT" + b"\x00" * 16
        with pytest.raises(CorruptImage):
            probe_image_size(data)

    def test_when_png_header_truncated_then_corrupt(self):
        data = PNG_MAGIC + struct.pack(">I", 13) + b"IHDR" + b"\x00\x00"
        with pytest.raises(CorruptImage):
            probe_image_size(data)


class TestJpeg:
    """Tests for JPEG frame header reads."""

    def test_when_baseline_jpeg_then_reads_size(self, jpeg_bytes):
        assert probe_image_size(jpeg_bytes) == ImageSize(width=64, height=48)

    def test_when_progressive_jpeg_then_reads_size(self, progressive_jpeg_bytes):
        assert probe_image_size(progressive_jpeg_bytes) == ImageSize(width=30, height=70)

    def test_when_segment_length_past_end_then_corrupt(self):
        data = b"\xff\xd8\xff\xe0\x00\x10JFIF"
        with pytest.raises(CorruptImage):
            probe_image_size(data)

    def test_when_marker_table_broken_then_corrupt(self):
        data = b"\xff\xd8\xff\xe0\x00\x04\x00\x00\x12\x34\x00\x00"
        with pytest.raises(CorruptImage):
            probe_image_size(data)


class TestDetectFormat:
    """Tests for signature detection."""

    def test_when_png_then_png(self, png_bytes):
        assert detect_format(png_bytes) == "png"

    def test_when_jpeg_then_jpg(self, jpeg_bytes):
        assert detect_format(jpeg_bytes) == "jpg"

    @pytest.mark.parametrize("data", [b"", b"\x00" * 32, b"GIF89a" + b"\x00" * 20])
    def test_when_unknown_signature_then_unsupported(self, data):
        assert detect_format(data) is None
        with pytest.raises(UnsupportedImageFormat):
            probe_image_size(data)


class TestDataUri:
    """Tests for base64 data URI values."""

    def test_when_data_uri_then_probes_payload(self, png_data_uri):
        size = get_image_dimension(png_data_uri)
        assert (size.width, size.height) == (40, 20)
        assert size.aspect_ratio == pytest.approx(2.0)

    def test_when_bare_base64_then_decoded(self, png_bytes):
        assert decode_image_data_uri(base64.b64encode(png_bytes).decode()) == png_bytes

    def test_when_not_base64_then_invalid_field_value(self):
        with pytest.raises(InvalidFieldValue):
            decode_image_data_uri("data:image/png;base64,***not base64***", "logo")
