"""
Pixel Abstraction
-----------------

Uniform pixel buffers and the four pixel formats they can be laid out in:

- Rgb        (R, G, B)
- Rgba       (R, G, B, A)
- Luma       (L)
- LumaAlpha  (L, A)

Every format implements the same capability set (``PixelFormat``) so the
loader, histogram matcher and pyramid builder never branch on a concrete
format.

Alpha is a weight on color, not a separate color: premultiplied writes scale
color channels by normalized alpha so a transparent bright pixel counts as
black. Byte <-> float scaling is symmetric:

    normalized = (b + 0.5) / 256
    byte       = floor(normalized * 256)

which keeps repeated round-trips from drifting toward 0 or 255.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from PIL import Image as PILImage

from texprep.exceptions import DecodeError


def normalized_from_byte(value):
    """Map a byte (or uint8 array) to the open interval (0, 1)."""
    return (np.asarray(value, dtype=np.float64) + 0.5) / 256.0


def byte_from_normalized(value):
    """Map a normalized float (or array) back to a clamped byte."""
    return np.clip(np.floor(np.asarray(value, dtype=np.float64) * 256.0), 0, 255).astype(np.uint8)


def _premultiply(colors: np.ndarray, alpha: np.ndarray) -> np.ndarray:
    return byte_from_normalized(normalized_from_byte(alpha) * normalized_from_byte(colors))


def _to_8bit(image: PILImage.Image) -> PILImage.Image:
    """
    Rescale single-channel wide images to 8-bit "L".

    Pillow's own conversion clips these modes instead of scaling them.
    Integer modes ("I;16*", "I") are read as 16-bit samples, "F" as [0, 1].
    """
    if image.mode.startswith("I;16") or image.mode == "I":
        data = np.clip(np.asarray(image, dtype=np.float64), 0, 65535) / 257.0
    elif image.mode == "F":
        data = np.clip(np.asarray(image, dtype=np.float64), 0.0, 1.0) * 255.0
    else:
        return image
    return PILImage.fromarray(np.rint(data).astype(np.uint8))


# --------------------------------------------------------
# Pixel formats
# --------------------------------------------------------
class PixelFormat(ABC):
    """
    Capability set shared by all supported pixel formats.

    A pixel is a 1-D ``uint8`` array of length ``channels``.
    """

    mode: str = ""
    channels: int = 0
    has_alpha: bool = False

    @abstractmethod
    def color_channel_count(self) -> int:
        """Number of non-alpha channels."""

    @abstractmethod
    def alpha(self, pixel) -> Optional[int]:
        """Alpha byte of ``pixel`` or None for opaque formats."""

    @abstractmethod
    def make_grey(self, intensity: int) -> np.ndarray:
        """Flat grey pixel of ``intensity``, fully opaque."""

    def colors(self, pixel) -> np.ndarray:
        return np.asarray(pixel, dtype=np.uint8)[: self.color_channel_count()]

    def write_premultiplied(self, pixel, out) -> None:
        """
        Write the color channels of ``pixel`` into ``out``.

        Colors are premultiplied by normalized alpha when the format has
        alpha, otherwise copied straight.
        """
        count = self.color_channel_count()
        colors = self.colors(pixel)
        alpha = self.alpha(pixel)
        if alpha is None:
            out[:count] = colors
        else:
            out[:count] = _premultiply(colors, alpha)

    def premultiplied_colors(self, buffer: "PixelBuffer") -> np.ndarray:
        """
        Whole-buffer form of ``write_premultiplied``.

        Returns:
            np.ndarray: (H, W, color_channel_count) uint8 array.
        """
        count = self.color_channel_count()
        colors = buffer.pixels[..., :count]
        if not self.has_alpha:
            return colors.copy()
        return _premultiply(colors, buffer.pixels[..., count:count + 1])

    def to_uniform(self, image: PILImage.Image) -> "PixelBuffer":
        """
        Convert a decoded image into a buffer in this format.

        Raises:
            DecodeError: If the image's mode cannot be converted.
        """
        try:
            image = _to_8bit(image)
            converted = image if image.mode == self.mode else image.convert(self.mode)
        except ValueError as e:
            raise DecodeError(f"Cannot convert {image.mode} image to {self.mode}: {e}") from e
        pixels = np.array(converted, dtype=np.uint8)
        if pixels.ndim == 2:
            pixels = pixels[:, :, np.newaxis]
        return PixelBuffer(pixels, self)

    def from_uniform(self, buffer: "PixelBuffer") -> PILImage.Image:
        """Convert a buffer in this format back into a decoded image."""
        pixels = buffer.pixels
        if self.channels == 1:
            pixels = pixels[:, :, 0]
        return PILImage.fromarray(np.ascontiguousarray(pixels))

    def __repr__(self):
        return f"{type(self).__name__}()"


class Rgb(PixelFormat):
    mode = "RGB"
    channels = 3

    def color_channel_count(self) -> int:
        return 3

    def alpha(self, pixel) -> Optional[int]:
        return None

    def make_grey(self, intensity: int) -> np.ndarray:
        return np.array([intensity, intensity, intensity], dtype=np.uint8)


class Rgba(PixelFormat):
    mode = "RGBA"
    channels = 4
    has_alpha = True

    def color_channel_count(self) -> int:
        return 3

    def alpha(self, pixel) -> Optional[int]:
        return int(pixel[3])

    def make_grey(self, intensity: int) -> np.ndarray:
        return np.array([intensity, intensity, intensity, 255], dtype=np.uint8)


class Luma(PixelFormat):
    mode = "L"
    channels = 1

    def color_channel_count(self) -> int:
        return 1

    def alpha(self, pixel) -> Optional[int]:
        return None

    def make_grey(self, intensity: int) -> np.ndarray:
        return np.array([intensity], dtype=np.uint8)


class LumaAlpha(PixelFormat):
    mode = "LA"
    channels = 2
    has_alpha = True

    def color_channel_count(self) -> int:
        return 1

    def alpha(self, pixel) -> Optional[int]:
        return int(pixel[1])

    def make_grey(self, intensity: int) -> np.ndarray:
        return np.array([intensity, 255], dtype=np.uint8)


RGB = Rgb()
RGBA = Rgba()
LUMA = Luma()
LUMA_ALPHA = LumaAlpha()

PIXEL_FORMATS = {fmt.mode: fmt for fmt in (RGB, RGBA, LUMA, LUMA_ALPHA)}


def get_pixel_format(name: str) -> PixelFormat:
    """Resolve a PIL mode string ("RGB", "RGBA", "L", "LA") to its format."""
    try:
        return PIXEL_FORMATS[name]
    except KeyError:
        raise ValueError(
            f"Unsupported pixel format: {name}. "
            f"Supported: {', '.join(PIXEL_FORMATS)}"
        ) from None


# --------------------------------------------------------
# Uniform pixel buffer
# --------------------------------------------------------
@dataclass(eq=False)
class PixelBuffer:
    """
    Row-major grid of fixed-width uint8 pixels.

    ``pixels`` always has shape (H, W, C), with C equal to the format's
    channel count (so luma buffers keep a trailing axis of 1).
    """

    pixels: np.ndarray
    pixel_format: PixelFormat

    def __post_init__(self):
        if self.pixels.ndim != 3:
            raise ValueError(f"Expected a (H, W, C) array, got shape {self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixels, got {self.pixels.dtype}")
        if self.pixels.shape[2] != self.pixel_format.channels:
            raise ValueError(
                f"{self.pixel_format.mode} buffers need {self.pixel_format.channels} "
                f"channels, got {self.pixels.shape[2]}"
            )

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def dimensions(self) -> Tuple[int, int]:
        return self.width, self.height

    def get_pixel(self, x: int, y: int) -> np.ndarray:
        return self.pixels[y, x].copy()

    def put_pixel(self, x: int, y: int, pixel) -> None:
        self.pixels[y, x] = pixel

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.pixels.copy(), self.pixel_format)
