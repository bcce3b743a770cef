"""
This module provides I/O utilities for the preprocessing pipeline. It includes functions for:
- Decoding images from bytes, paths or already-decoded PIL images.
- Converting them into uniform pixel buffers, optionally resized.
- Deriving blurred greyscale guide maps.
- Handing finished buffers to the encoder.

Dependencies:
- Pillow (PIL): decoding and encoding.
- OpenCV (cv2): resizing.
- SciPy: Gaussian blur for guide maps.
- scikit-image (skimage): desaturation.
"""

import io
import logging
import os
from typing import Optional, Tuple, Union

import cv2
import numpy as np
from PIL import Image as PILImage
from PIL import UnidentifiedImageError
from scipy.ndimage import gaussian_filter
from skimage.color import rgb2gray

from texprep.config import Config
from texprep.exceptions import DecodeError
from texprep.pixel import PixelBuffer, PixelFormat

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, bytearray, str, os.PathLike, PILImage.Image]


def decode_image(source: ImageSource) -> PILImage.Image:
    """
    Decode an image source into a PIL image.

    Args:
        source: Encoded bytes, a filesystem path, or an already decoded image.

    Returns:
        PIL.Image.Image: Decoded image with its pixel data loaded.

    Raises:
        DecodeError: If the data or file cannot be read or decoded.
        TypeError: If ``source`` is none of the supported kinds.
    """
    if isinstance(source, PILImage.Image):
        return source

    if isinstance(source, (bytes, bytearray)):
        origin = f"<{len(source)} bytes>"
        fp = io.BytesIO(bytes(source))
    elif isinstance(source, (str, os.PathLike)):
        origin = os.fspath(source)
        fp = origin
    else:
        raise TypeError(f"Unsupported image source type: {type(source).__name__}")

    image = None
    # PIL plugins report some broken chunks as SyntaxError
    try:
        image = PILImage.open(fp)
        image.load()
    except (
        UnidentifiedImageError,
        PILImage.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
    ) as e:
        if image is not None:
            image.close()
        logger.warning(f"Failed to decode image from {origin}: {e}")
        raise DecodeError(f"Failed to decode image from {origin}: {e}") from e

    logger.debug(f"Decoded {origin}: {image.format} {image.mode} {image.size[0]}x{image.size[1]}")
    return image


def resize_image(image, shape, interpolation=cv2.INTER_LINEAR):
    """
    Resample buffer pixels to (height, width) with cv2.

    Callers pass the filter from Config (bicubic for examples, triangle for
    guide maps and pyramid levels). Works on uint8 buffers and on the float32
    working copies of the pyramid. cv2 drops a trailing axis of 1, which is
    put back so luma data stays (H, W, 1).
    """
    resized = cv2.resize(image, (shape[1], shape[0]), interpolation=interpolation)
    if image.ndim == 3 and resized.ndim == 2:
        resized = resized[:, :, np.newaxis]
    return resized


def load_image(
    source: ImageSource,
    pixel_format: PixelFormat,
    size: Optional[Tuple[int, int]] = None,
) -> PixelBuffer:
    """
    Load an image source into a uniform pixel buffer.

    Args:
        source: Encoded bytes, a filesystem path, or a decoded PIL image.
        pixel_format: Format of the returned buffer.
        size: Optional target (width, height). Images already at this size
            are only converted, never resampled.

    Returns:
        PixelBuffer: Fresh buffer in ``pixel_format``.

    Raises:
        DecodeError: If the source cannot be decoded.
    """
    image = decode_image(source)
    buffer = pixel_format.to_uniform(image)

    if size is None or tuple(size) == buffer.dimensions:
        return buffer

    width, height = size
    logger.debug(f"Resizing {buffer.width}x{buffer.height} -> {width}x{height} (bicubic)")
    pixels = resize_image(buffer.pixels, (height, width), interpolation=Config.RESIZE_INTERPOLATION)
    return PixelBuffer(pixels, pixel_format)


def transform_to_guide_map(
    buffer: PixelBuffer,
    size: Optional[Tuple[int, int]] = None,
    blur_sigma: float = Config.GUIDE_BLUR_SIGMA,
) -> PixelBuffer:
    """
    Turn a buffer into a blurred greyscale guide map.

    Resizes with a triangle filter when ``size`` differs, blurs with a
    Gaussian of ``blur_sigma``, desaturates, and converts back into the
    buffer's own pixel format (alpha is carried through).

    Args:
        buffer: Source buffer. Consumed; the result is a new buffer.
        size: Optional target (width, height).
        blur_sigma: Gaussian standard deviation in pixels.

    Returns:
        PixelBuffer: Guide map in ``buffer.pixel_format``.
    """
    if blur_sigma < 0:
        raise ValueError(f"blur_sigma must be non-negative, got {blur_sigma}")

    pixel_format = buffer.pixel_format
    pixels = buffer.pixels

    if size is not None and tuple(size) != buffer.dimensions:
        width, height = size
        logger.debug(f"Resizing guide {buffer.width}x{buffer.height} -> {width}x{height} (triangle)")
        pixels = resize_image(pixels, (height, width), interpolation=Config.GUIDE_INTERPOLATION)

    data = pixels.astype(np.float32)
    if blur_sigma > 0:
        data = gaussian_filter(data, sigma=(blur_sigma, blur_sigma, 0), mode="nearest")
    data = np.clip(np.rint(data), 0, 255).astype(np.uint8)

    count = pixel_format.color_channel_count()
    if count == 3:
        luma = rgb2gray(data[..., :3])
        luma = np.clip(np.rint(luma * 255.0), 0, 255).astype(np.uint8)
    else:
        luma = data[..., 0]

    if pixel_format.has_alpha:
        grey = PILImage.fromarray(np.dstack([luma, data[..., count]]))
    else:
        grey = PILImage.fromarray(luma)

    return pixel_format.to_uniform(grey)


def save_image(buffer: PixelBuffer, path) -> None:
    """
    Hand a buffer to the encoder. The file format follows the extension.

    Args:
        buffer: Buffer to write.
        path: Destination path.
    """
    image = buffer.pixel_format.from_uniform(buffer)
    image.save(path)
    logger.debug(f"Saved {buffer.width}x{buffer.height} {image.mode} image to {path}")
