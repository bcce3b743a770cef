"""
Histogram / CDF tone matching
-----------------------------

Single-channel tone transfer between two uniform pixel buffers:
- 256-bucket histogram of channel 0
- normalized cumulative distribution
- source intensity -> first target intensity whose cumulative mass is larger

Only channel 0 is matched. Matched pixels are rebuilt as flat greys in the
source's own pixel format, so any other color information is dropped.
"""

import logging

import numpy as np

from texprep.config import Config
from texprep.pixel import PixelBuffer

logger = logging.getLogger(__name__)


def get_histogram(buffer: PixelBuffer) -> np.ndarray:
    """Count channel-0 intensities, one bucket per byte value."""
    return np.bincount(buffer.pixels[..., 0].ravel(), minlength=Config.HISTOGRAM_BINS)


def get_cdf(histogram) -> np.ndarray:
    """
    Normalized cumulative distribution of a histogram.

    Raises:
        ValueError: If the histogram is empty (zero-pixel buffer).
    """
    cdf = np.cumsum(np.asarray(histogram, dtype=np.float64))
    total = cdf[-1]
    if total <= 0:
        raise ValueError("Cannot build a CDF from an empty histogram")
    return cdf / total


def build_match_table(source_cdf: np.ndarray, target_cdf: np.ndarray) -> np.ndarray:
    """
    Map every source intensity to a target intensity.

    For value v the first index whose target CDF strictly exceeds
    ``source_cdf[v]`` is taken and one subtracted. When no such index exists
    the index falls back to ``v + 1``, which leaves v unchanged. An index of 0
    clamps to intensity 0.

    Returns:
        np.ndarray: 256-entry uint8 lookup table.
    """
    bins = len(source_cdf)
    index = np.searchsorted(target_cdf, source_cdf, side="right")
    index = np.where(index >= bins, np.arange(bins) + 1, index)
    return np.clip(index - 1, 0, bins - 1).astype(np.uint8)


def match_histograms(source: PixelBuffer, target: PixelBuffer) -> None:
    """
    Remap ``source`` in place so its channel-0 distribution follows ``target``.

    Each pixel becomes ``source.pixel_format.make_grey(matched)``.

    Args:
        source: Buffer to modify. Must contain at least one pixel.
        target: Reference buffer. Must contain at least one pixel.
    """
    source_cdf = get_cdf(get_histogram(source))
    target_cdf = get_cdf(get_histogram(target))

    table = build_match_table(source_cdf, target_cdf)

    pixel_format = source.pixel_format
    greys = np.stack([pixel_format.make_grey(i) for i in range(Config.HISTOGRAM_BINS)])
    source.pixels[...] = greys[table[source.pixels[..., 0]]]

    logger.debug(
        f"Matched {source.width}x{source.height} {pixel_format.mode} histogram "
        f"against {target.width}x{target.height}"
    )
