import logging
import math
from typing import Iterator, List, Optional, Tuple

import numpy as np
from scipy.ndimage import gaussian_filter

from texprep.config import Config
from texprep.pixel import PixelBuffer
from texprep.utils.io import resize_image

logger = logging.getLogger(__name__)


def _gaussian_resize(pixels: np.ndarray, shape: Tuple[int, int]) -> np.ndarray:
    """
    Resample with a Gaussian filter to (height, width).

    Shrinking blurs the source first, enlarging blurs the result, with sigma
    scaled by the resample ratio along each axis.
    """
    src_h, src_w = pixels.shape[:2]
    dst_h, dst_w = shape
    data = pixels.astype(np.float32)

    shrink = (max(src_h / dst_h, 1.0), max(src_w / dst_w, 1.0))
    if shrink != (1.0, 1.0):
        sigma = (Config.PYRAMID_GAUSSIAN_SIGMA * shrink[0], Config.PYRAMID_GAUSSIAN_SIGMA * shrink[1], 0)
        data = gaussian_filter(data, sigma=sigma, mode="nearest")

    data = resize_image(data, shape, interpolation=Config.PYRAMID_INTERPOLATION)

    grow = (max(dst_h / src_h, 1.0), max(dst_w / src_w, 1.0))
    if grow != (1.0, 1.0):
        sigma = (Config.PYRAMID_GAUSSIAN_SIGMA * grow[0], Config.PYRAMID_GAUSSIAN_SIGMA * grow[1], 0)
        data = gaussian_filter(data, sigma=sigma, mode="nearest")

    return np.clip(np.rint(data), 0, 255).astype(np.uint8)


class ImagePyramid:
    """
    Coarse-to-fine sequence of progressively blurred copies of a buffer.

    Every level keeps the original's dimensions: coarser levels are
    downsampled and then upsampled back, so synthesis can compare
    same-shaped neighbourhoods across levels. Index 0 is the coarsest level,
    the last index is the untouched original.
    """

    def __init__(self, buffer: PixelBuffer, levels: Optional[int] = None):
        if levels is None:
            # 2**levels ~ largest dimension
            levels = max(1, int(math.log2(max(buffer.width, buffer.height))))
        if levels < 1:
            raise ValueError(f"Pyramid needs at least one level, got {levels}")

        self.levels = levels
        self.pyramid = self.build_gaussian(levels, buffer)

    @staticmethod
    def build_gaussian(levels: int, buffer: PixelBuffer) -> List[PixelBuffer]:
        """Build the levels from lowest to highest resolution, original last."""
        width, height = buffer.dimensions
        pyramid = []

        for i in range(levels - 1, 0, -1):
            factor = 2 ** i
            small = (max(1, height // factor), max(1, width // factor))
            down = _gaussian_resize(buffer.pixels, small)
            up = _gaussian_resize(down, (height, width))
            pyramid.append(PixelBuffer(up, buffer.pixel_format))

        pyramid.append(buffer)
        logger.debug(f"Built {levels}-level pyramid for {width}x{height} {buffer.pixel_format.mode} buffer")
        return pyramid

    def bottom(self) -> PixelBuffer:
        """Full-resolution, unblurred level."""
        return self.pyramid[self.levels - 1]

    def __len__(self) -> int:
        return len(self.pyramid)

    def __iter__(self) -> Iterator[PixelBuffer]:
        return iter(self.pyramid)

    def __getitem__(self, index) -> PixelBuffer:
        return self.pyramid[index]
