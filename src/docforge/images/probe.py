"""
Module: images.probe

Purpose:
    Recover the intrinsic pixel size of a PNG or JPEG from its header
    bytes without decoding the image. The image and signature renderers
    need the size to fit an asset into its schema box before anything
    is drawn.

Key Functions:
    - probe_image_size(): Width/height from raw bytes
    - get_image_dimension(): Width/height from a base64 data URI
    - decode_image_data_uri(): Data URI -> raw bytes

Algorithm:
    Detect the format from the first byte (0x89 PNG, 0xFF JPEG), then
    fall back to trying every handler.
    PNG: width/height are big-endian uint32 at offsets 16/20. Apple's
    "fried" PNGs carry an extra CgBI chunk before IHDR, moving them to
    32/36.
    JPEG: skip the 4-byte SOI/APPn framing, then walk marker segments by
    their length fields until the first SOF0/SOF1/SOF2 marker; height
    and width follow 5 bytes into that segment.

Dependencies:
    - struct (std)

Used By:
    - plugins.graphics: image and signature renderers
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from docforge.core.errors import DocforgeError, InvalidFieldValue
from docforge.core.models.template import decode_base64_payload

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"PNG\r\n\x1a\n"
PNG_IMAGE_HEADER_CHUNK = b"IHDR"
# Used to detect "fried" PNGs: http://www.jongware.com/pngdefry.html
PNG_FRIED_CHUNK = b"CgBI"

JPEG_SOI = b"\xff\xd8"
# 0xFFC0 baseline, 0xFFC1 extended sequential, 0xFFC2 progressive
JPEG_SOF_MARKERS = frozenset({0xC0, 0xC1, 0xC2})


class ImageProbeError(DocforgeError, ValueError):
    """Base error for image header probing."""


class UnsupportedImageFormat(ImageProbeError):
    """Raised when the bytes are neither PNG nor JPEG."""


class CorruptImage(ImageProbeError):
    """Raised when a recognised header is truncated or malformed."""


@dataclass(frozen=True, slots=True)
class ImageSize:
    """Intrinsic image size in source pixels."""

    width: int
    height: int

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height if self.height else 0.0


def _read_uint16(data: bytes, offset: int) -> int:
    return struct.unpack_from(">H", data, offset)[0]


def _read_uint32(data: bytes, offset: int) -> int:
    return struct.unpack_from(">I", data, offset)[0]


# ─────────────────────────────────────────────────────────────────────────────
# PNG
# ─────────────────────────────────────────────────────────────────────────────

def _png_validate(data: bytes) -> bool:
    if data[1:8] != PNG_SIGNATURE:
        return False
    chunk_name = data[12:16]
    if chunk_name == PNG_FRIED_CHUNK:
        chunk_name = data[28:32]
    if chunk_name != PNG_IMAGE_HEADER_CHUNK:
        raise CorruptImage("Invalid PNG: first chunk is not IHDR")
    return True


def _png_calculate(data: bytes) -> ImageSize:
    width_offset = 32 if data[12:16] == PNG_FRIED_CHUNK else 16
    if len(data) < width_offset + 8:
        raise CorruptImage("Corrupt PNG, header truncated")
    return ImageSize(
        width=_read_uint32(data, width_offset),
        height=_read_uint32(data, width_offset + 4),
    )


# ─────────────────────────────────────────────────────────────────────────────
# JPEG
# ─────────────────────────────────────────────────────────────────────────────

def _jpeg_validate(data: bytes) -> bool:
    return data[0:2] == JPEG_SOI


def _jpeg_calculate(data: bytes) -> ImageSize:
    # Skip SOI and the APPn marker; `offset` points at a segment length field.
    offset = 4
    end = len(data)
    while offset < end:
        if offset + 2 > end:
            raise CorruptImage("Corrupt JPG, exceeded buffer limits")
        marker_at = offset + _read_uint16(data, offset)
        if marker_at > end:
            raise CorruptImage("Corrupt JPG, exceeded buffer limits")
        # Every JPEG block must begin with 0xFF
        if marker_at + 1 >= end or data[marker_at] != 0xFF:
            raise CorruptImage("Invalid JPG, marker table corrupted")

        if data[marker_at + 1] in JPEG_SOF_MARKERS:
            size_at = marker_at + 5
            if size_at + 4 > end:
                raise CorruptImage("Corrupt JPG, frame header truncated")
            return ImageSize(
                width=_read_uint16(data, size_at + 2),
                height=_read_uint16(data, size_at),
            )

        offset = marker_at + 2

    raise CorruptImage("Invalid JPG, no size found")


_HANDLERS: Dict[str, tuple[Callable[[bytes], bool], Callable[[bytes], ImageSize]]] = {
    "png": (_png_validate, _png_calculate),
    "jpg": (_jpeg_validate, _jpeg_calculate),
}

_FIRST_BYTES = {0x89: "png", 0xFF: "jpg"}


def detect_format(data: bytes) -> Optional[str]:
    """
    Identify the image format from its signature.

    Returns:
        "png", "jpg" or None

    Raises:
        CorruptImage: If a PNG signature is followed by a chunk other than IHDR
    """
    if not data:
        return None
    candidate = _FIRST_BYTES.get(data[0])
    if candidate is not None and _HANDLERS[candidate][0](data):
        return candidate
    for name, (validate, _) in _HANDLERS.items():
        if validate(data):
            return name
    return None


def probe_image_size(data: bytes) -> ImageSize:
    """
    Read width and height from PNG or JPEG header bytes.

    Args:
        data: Raw (already base64-decoded) image bytes

    Returns:
        ImageSize in source pixels

    Raises:
        UnsupportedImageFormat: If the signature matches neither PNG nor JPEG
        CorruptImage: If the header is truncated or malformed

    Example:
        >>> png = (b"\\x89PNG\\r\\n\\x1a\\n" + b"\\x00\\x00\\x00\\x0d" + b"IHDR"
        ...        + (1).to_bytes(4, "big") + (1).to_bytes(4, "big") + b"\\x08\\x06\\x00\\x00\\x00")
        >>> probe_image_size(png)
        ImageSize(width=1, height=1)
    """
    image_type = detect_format(data)
    if image_type is None:
        raise UnsupportedImageFormat("Unsupported file type: undefined")
    size = _HANDLERS[image_type][1](data)
    logger.debug(f"Probed {image_type} image: {size.width}x{size.height}px")
    return size


def decode_image_data_uri(value: str, schema_name: str = "") -> bytes:
    """
    Decode a ``data:<mime>;base64,<payload>`` image value to bytes.

    Raises:
        InvalidFieldValue: If the payload is not valid base64
    """
    try:
        return decode_base64_payload(value)
    except ValueError as exc:
        raise InvalidFieldValue(f"Image value is not a base64 data URI: {exc}", schema_name) from exc


def get_image_dimension(value: str) -> ImageSize:
    """Probe the size of an image given as a base64 data URI."""
    return probe_image_size(decode_image_data_uri(value))
