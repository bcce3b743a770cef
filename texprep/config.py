"""
Configuration for the texprep preprocessing core.

All values are plain class attributes so they can be read without
instantiating anything:

    >>> from texprep.config import Config
    >>> Config.GUIDE_BLUR_SIGMA
    2.0
    >>> logger = Config.setup_logging("DEBUG")
"""

import logging
import sys
from typing import Optional

import cv2


class Config:
    """Central defaults for loading, resampling and matching."""

    # Histogram / CDF
    HISTOGRAM_BINS: int = 256

    # Loader
    RESIZE_INTERPOLATION: int = cv2.INTER_CUBIC

    # Guide maps
    GUIDE_INTERPOLATION: int = cv2.INTER_LINEAR
    GUIDE_BLUR_SIGMA: float = 2.0

    # Pyramid
    PYRAMID_INTERPOLATION: int = cv2.INTER_LINEAR
    PYRAMID_GAUSSIAN_SIGMA: float = 0.5  # in source pixels, scaled by the resample ratio

    # Logging
    LOGGER_NAME: str = "texprep"
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @staticmethod
    def setup_logging(level: Optional[str] = None) -> logging.Logger:
        """
        Attach a console handler to the package logger.

        Calling this again replaces the previous handler instead of stacking
        a second one. The root logger is left alone.

        Args:
            level: Logging level name. Defaults to ``Config.LOG_LEVEL``.

        Returns:
            logging.Logger: The configured ``texprep`` logger.
        """
        logger = logging.getLogger(Config.LOGGER_NAME)
        logger.setLevel(getattr(logging, (level or Config.LOG_LEVEL).upper()))

        for handler in list(logger.handlers):
            logger.removeHandler(handler)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(Config.LOG_FORMAT))
        logger.addHandler(console_handler)

        return logger
