"""
Module: images

Purpose:
    Header-only image inspection (PNG and JPEG) for placing raster
    assets before they are drawn.

Key Functions:
    - probe_image_size(): Width/height from raw bytes
    - get_image_dimension(): Width/height from a data URI

Used By:
    - plugins.graphics: image and signature renderers
"""

from .probe import (
    ImageSize,
    ImageProbeError,
    UnsupportedImageFormat,
    CorruptImage,
    detect_format,
    probe_image_size,
    decode_image_data_uri,
    get_image_dimension,
)

__all__ = [
    "ImageSize",
    "ImageProbeError",
    "UnsupportedImageFormat",
    "CorruptImage",
    "detect_format",
    "probe_image_size",
    "decode_image_data_uri",
    "get_image_dimension",
]
