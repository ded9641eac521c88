import struct
import zlib
from pathlib import Path

import numpy as np
import pytest
from PIL import Image as PILImage

from ascii_converter.models.image import Image
from ascii_converter.models.luminance import LuminanceMap


@pytest.fixture
def write_image(tmp_path):
    """Factory: write a solid-colour image with Pillow and return its path."""
    def _write(name: str, size=(4, 4), color=(0, 0, 0), mode: str = "RGB") -> Path:
        path = tmp_path / name
        PILImage.new(mode, size, color).save(path)
        return path
    return _write


@pytest.fixture
def uniform_luminance():
    def _make(value: int, width: int, height: int) -> LuminanceMap:
        return LuminanceMap(values=np.full((height, width), value, dtype=np.uint8))
    return _make


@pytest.fixture
def solid_image():
    def _make(rgb, width: int, height: int) -> Image:
        pixels = np.empty((height, width, 3), dtype=np.uint8)
        pixels[:, :] = rgb
        return Image(pixels=pixels)
    return _make


def _png_chunk(kind: bytes, data: bytes) -> bytes:
    body = kind + data
    return struct.pack(">I", len(data)) + body + struct.pack(">I", zlib.crc32(body) & 0xFFFFFFFF)


@pytest.fixture
def oversized_png(tmp_path) -> Path:
    """Valid PNG whose header claims 60000x60000 RGB but holds a single tiny row."""
    ihdr = struct.pack(">IIBBBBB", 60000, 60000, 8, 2, 0, 0, 0)
    path = tmp_path / "huge.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\n"
                     + _png_chunk(b"IHDR", ihdr)
                     + _png_chunk(b"IDAT", zlib.compress(b"\x00" * 4))
                     + _png_chunk(b"IEND", b""))
    return path
