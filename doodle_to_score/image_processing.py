"""Raster loading and canvas helpers.

This module turns image files into RasterBuffer snapshots and creates
blank canvases. Images are read with OpenCV, which hands back BGR(A)
channel order, and converted to RGBA before they reach the transcriber.
"""

import logging

import cv2
import numpy as np

from doodle_to_score.errors import InputError
from doodle_to_score.models.core_models import RasterBuffer

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)
# A cleared drawing surface is opaque white
CLEAR_FILL = (255, 255, 255, 255)


def to_rgba(image: np.ndarray) -> np.ndarray:
    """Convert an OpenCV image (gray, BGR or BGRA) to RGBA.

    Args:
        image: Image as returned by ``cv2.imread``.

    Returns:
        ``H x W x 4`` uint8 RGBA array.

    Raises:
        InputError: If the channel layout is not recognised.
    """
    if image.dtype != np.uint8:
        # 16-bit PNGs scale down, float images (HDR, EXR) are 0-1
        if np.issubdtype(image.dtype, np.integer):
            scale = 255.0 / np.iinfo(image.dtype).max
        else:
            scale = 255.0
        image = cv2.convertScaleAbs(image, alpha=scale)

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
    if image.ndim == 3 and image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
    if image.ndim == 3 and image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
    raise InputError(f"unsupported image layout with shape {image.shape}")


def load_raster(path: str) -> RasterBuffer:
    """Load an image file as a RasterBuffer, keeping its alpha channel.

    Args:
        path: Path to a PNG, JPEG or any other format OpenCV can read.

    Returns:
        Read-only RGBA snapshot of the image.

    Raises:
        InputError: If the file cannot be read as an image.
    """
    image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise InputError(f"Could not read image: {path}")

    raster = RasterBuffer(pixels=to_rgba(image))
    logger.debug(f"Loaded {raster.width}x{raster.height} raster from {path}")
    return raster


def blank_raster(
    width: int, height: int, fill: tuple[int, int, int, int] = TRANSPARENT
) -> RasterBuffer:
    """Create a canvas filled with a single RGBA color.

    Args:
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        fill: RGBA fill color; transparent by default, ``CLEAR_FILL`` for a
            cleared drawing surface.

    Returns:
        A RasterBuffer of the requested size.

    Raises:
        InputError: If the size is not positive.
    """
    if width < 1 or height < 1:
        raise InputError(f"canvas size must be positive, got {width}x{height}")
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :] = fill
    return RasterBuffer(pixels=pixels)
