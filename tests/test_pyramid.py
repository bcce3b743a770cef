"""
Test Gaussian pyramid construction.
"""
import numpy as np
import pytest

from texprep.pixel import LUMA, LUMA_ALPHA, RGB, PixelBuffer
from texprep.pyramid import ImagePyramid


@pytest.mark.parametrize("levels", [1, 2, 3, 5])
def test_pyramid_shape_invariant(noise_rgb, levels):
    """Every level keeps the input's dimensions, one entry per level."""
    buffer = PixelBuffer(noise_rgb, RGB)
    pyramid = ImagePyramid(buffer, levels)

    assert pyramid.levels == levels
    assert len(pyramid.pyramid) == levels
    for level in pyramid:
        assert level.dimensions == (20, 12)
        assert level.pixels.shape == noise_rgb.shape
        assert level.pixel_format is RGB


def test_pyramid_auto_levels():
    """Levels default to log2 of the largest dimension."""
    buffer = PixelBuffer(np.zeros((128, 256, 1), dtype=np.uint8), LUMA)
    pyramid = ImagePyramid(buffer)

    assert pyramid.levels == 8
    assert len(pyramid) == 8


def test_pyramid_single_pixel():
    """A 1x1 image still gets one level."""
    buffer = PixelBuffer(np.full((1, 1, 3), 5, dtype=np.uint8), RGB)
    pyramid = ImagePyramid(buffer)

    assert pyramid.levels == 1
    assert pyramid.bottom() is buffer


def test_uniform_image_is_invariant(mid_grey_rgb):
    """A uniform image survives blur, downsample and upsample unchanged."""
    pyramid = ImagePyramid(mid_grey_rgb, levels=2)

    assert len(pyramid) == 2
    for level in pyramid:
        assert level.pixels.shape == (4, 4, 3)
        assert np.all(level.pixels == 128)


def test_bottom_is_original(noise_rgb):
    """The last level is the untouched input buffer."""
    buffer = PixelBuffer(noise_rgb, RGB)
    pyramid = ImagePyramid(buffer, levels=3)

    assert pyramid.bottom() is buffer
    assert pyramid[-1] is buffer
    assert np.array_equal(pyramid.bottom().pixels, noise_rgb)


def test_coarse_levels_are_smoother():
    """Coarser levels carry less high-frequency content."""
    checker = (np.indices((16, 16)).sum(axis=0) % 2 * 255).astype(np.uint8)
    buffer = PixelBuffer(checker[:, :, np.newaxis], LUMA)
    pyramid = ImagePyramid(buffer, levels=3)

    assert pyramid[0].pixels.std() < pyramid.bottom().pixels.std()
    assert pyramid[1].pixels.std() < pyramid.bottom().pixels.std()


def test_pyramid_with_alpha_and_thin_image():
    """Thin images clamp their coarse sizes to one pixel."""
    pixels = np.zeros((2, 64, 2), dtype=np.uint8)
    pixels[..., 0] = np.arange(64, dtype=np.uint8)
    pixels[..., 1] = 255
    pyramid = ImagePyramid(PixelBuffer(pixels, LUMA_ALPHA), levels=6)

    assert len(pyramid) == 6
    for level in pyramid:
        assert level.pixels.shape == (2, 64, 2)
        assert np.all(level.pixels[..., 1] == 255)


def test_pyramid_is_deterministic(noise_rgb):
    """Identical input builds byte-identical pyramids."""
    first = ImagePyramid(PixelBuffer(noise_rgb.copy(), RGB), levels=4)
    second = ImagePyramid(PixelBuffer(noise_rgb.copy(), RGB), levels=4)

    for a, b in zip(first, second):
        assert np.array_equal(a.pixels, b.pixels)


def test_pyramid_rejects_zero_levels(mid_grey_rgb):
    """At least one level is required."""
    with pytest.raises(ValueError):
        ImagePyramid(mid_grey_rgb, levels=0)
