# texprep/pipeline.py
import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from texprep.config import Config
from texprep.pixel import PixelBuffer, PixelFormat
from texprep.pyramid import ImagePyramid
from texprep.utils.color_transfer import match_histograms
from texprep.utils.io import ImageSource, load_image, transform_to_guide_map

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class PreparedExample:
    """Everything the synthesis engine needs from one example image."""

    image: PixelBuffer
    pyramid: Optional[ImagePyramid] = None
    guide: Optional[PixelBuffer] = None


def prepare_example(
    source: ImageSource,
    pixel_format: PixelFormat,
    *,
    size: Optional[Tuple[int, int]] = None,
    levels: Optional[int] = None,
    build_pyramid: bool = True,
    guide: Optional[ImageSource] = None,
    guide_blur_sigma: float = Config.GUIDE_BLUR_SIGMA,
) -> PreparedExample:
    """
    Load an example and derive what synthesis reads from it.

    Args:
        source: Example image source.
        pixel_format: Format every buffer is produced in.
        size: Optional (width, height) to resize the example to.
        levels: Pyramid depth; derived from the image size when None.
        build_pyramid: Skip the pyramid when False.
        guide: Optional guide image source, resized to the example's size.
        guide_blur_sigma: Gaussian sigma of the guide map.

    Returns:
        PreparedExample
    """
    # ======================
    # 1. Load
    # ======================
    image = load_image(source, pixel_format, size)
    logger.debug(f"Loaded example {image.width}x{image.height} as {pixel_format.mode}")

    # ======================
    # 2. Guide map
    # ======================
    guide_map = None
    if guide is not None:
        guide_map = transform_to_guide_map(
            load_image(guide, pixel_format),
            image.dimensions,
            guide_blur_sigma,
        )

    # ======================
    # 3. Pyramid
    # ======================
    pyramid = None
    if build_pyramid:
        pyramid = ImagePyramid(image, levels)
        image = pyramid.bottom()

    return PreparedExample(image=image, pyramid=pyramid, guide=guide_map)


def prepare_target_guide(
    source: ImageSource,
    pixel_format: PixelFormat,
    *,
    size: Tuple[int, int],
    example_guides: Sequence[PixelBuffer] = (),
    blur_sigma: float = Config.GUIDE_BLUR_SIGMA,
) -> PixelBuffer:
    """
    Load the target guide and align its tones with the example guides.

    The target guide is resized to the output ``size`` and turned into a
    guide map. When example guides are given, its histogram is matched to
    the first one so both sides of the guided comparison share a tonal range.

    Args:
        source: Target guide image source.
        pixel_format: Format of the returned buffer.
        size: Output (width, height).
        example_guides: Guide maps of the examples, as built by
            ``prepare_example``.
        blur_sigma: Gaussian sigma of the guide map.

    Returns:
        PixelBuffer: Target guide map.
    """
    target_guide = transform_to_guide_map(load_image(source, pixel_format), size, blur_sigma)

    if example_guides:
        match_histograms(target_guide, example_guides[0])
        logger.debug("Matched target guide histogram to the first example guide")

    return target_guide
