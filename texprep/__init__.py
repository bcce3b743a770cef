"""
texprep: image preprocessing for patch-based texture synthesis.

Typical usage:
    >>> from texprep import RGBA, load_image, ImagePyramid
    >>> example = load_image("imgs/transparency.png", RGBA, size=(400, 400))
    >>> pyramid = ImagePyramid(example, levels=5)
"""

from .config import Config
from .exceptions import DecodeError, TexPrepError
from .pipeline import PreparedExample, prepare_example, prepare_target_guide
from .pixel import (
    LUMA,
    LUMA_ALPHA,
    RGB,
    RGBA,
    Luma,
    LumaAlpha,
    PixelBuffer,
    PixelFormat,
    Rgb,
    Rgba,
    byte_from_normalized,
    get_pixel_format,
    normalized_from_byte,
)
from .pyramid import ImagePyramid
from .utils.color_transfer import get_cdf, get_histogram, match_histograms
from .utils.io import ImageSource, decode_image, load_image, save_image, transform_to_guide_map

__version__ = "0.1.0"

__all__ = [
    "Config",
    "TexPrepError",
    "DecodeError",
    "PixelFormat",
    "Rgb",
    "Rgba",
    "Luma",
    "LumaAlpha",
    "RGB",
    "RGBA",
    "LUMA",
    "LUMA_ALPHA",
    "PixelBuffer",
    "get_pixel_format",
    "normalized_from_byte",
    "byte_from_normalized",
    "ImageSource",
    "decode_image",
    "load_image",
    "save_image",
    "transform_to_guide_map",
    "get_histogram",
    "get_cdf",
    "match_histograms",
    "ImagePyramid",
    "PreparedExample",
    "prepare_example",
    "prepare_target_guide",
]
