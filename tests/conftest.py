"""
Shared fixtures for texprep tests.
"""
import io

import numpy as np
import pytest
from PIL import Image

from texprep.pixel import RGB, PixelBuffer


def encode_png(pixels: np.ndarray) -> bytes:
    """Encode an 8- or 16-bit array as PNG bytes."""
    buf = io.BytesIO()
    Image.fromarray(pixels).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def noise_rgb():
    """Seeded 12x20 RGB noise array."""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(12, 20, 3), dtype=np.uint8)


@pytest.fixture
def noise_rgba():
    """Seeded 10x10 RGBA noise array with mixed alpha."""
    rng = np.random.default_rng(99)
    return rng.integers(0, 256, size=(10, 10, 4), dtype=np.uint8)


@pytest.fixture
def noise_png(noise_rgb):
    return encode_png(noise_rgb)


@pytest.fixture
def mid_grey_rgb():
    """4x4 opaque RGB buffer filled with (128, 128, 128)."""
    return PixelBuffer(np.full((4, 4, 3), 128, dtype=np.uint8), RGB)


@pytest.fixture
def png_encoder():
    """Function turning a uint8 array into PNG bytes."""
    return encode_png
