import base64
import io
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import docforge
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from docforge.common.fonts import FontSet  # noqa: E402
from docforge.core.cache import ComputationCache  # noqa: E402
from docforge.plugins import default_registry  # noqa: E402


def image_bytes(width: int, height: int, fmt: str = "PNG", **save_options) -> bytes:
    """Encode a solid image with Pillow."""
    img = Image.new("RGB", (width, height), color="red")
    buffer = io.BytesIO()
    img.save(buffer, format=fmt, **save_options)
    return buffer.getvalue()


def data_uri(data: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64," + base64.b64encode(data).decode("ascii")


# Common test fixtures
@pytest.fixture
def fonts() -> FontSet:
    return FontSet.standard()


@pytest.fixture
def cache() -> ComputationCache:
    return ComputationCache()


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def make_image():
    """Factory for encoded images: make_image(width, height, fmt, **save_options)."""
    return image_bytes


@pytest.fixture
def make_data_uri():
    return data_uri


@pytest.fixture
def png_bytes() -> bytes:
    return image_bytes(40, 20, "PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return image_bytes(64, 48, "JPEG")


@pytest.fixture
def progressive_jpeg_bytes() -> bytes:
    return image_bytes(30, 70, "JPEG", progressive=True)


@pytest.fixture
def png_data_uri(png_bytes) -> str:
    return data_uri(png_bytes)


@pytest.fixture
def blank_base() -> dict:
    """A5-ish blank page with 10mm padding."""
    return {"width": 100, "height": 100, "padding": [10, 10, 10, 10]}


@pytest.fixture
def make_schema():
    """Factory for schema dictionaries."""
    def _create(name: str, type_: str = "text", *, x: float = 10, y: float = 10,
                width: float = 50, height: float = 10, **extra):
        data = {
            "name": name,
            "type": type_,
            "position": {"x": x, "y": y},
            "width": width,
            "height": height,
        }
        data.update(extra)
        return data
    return _create
