"""Nearest-reference-color classification.

A sampled pixel belongs to the palette color closest to it in RGB space,
as long as that distance is strictly below a rejection threshold. The
threshold keeps anti-aliased stroke edges, which fade toward the background,
from being heard as notes. Ties go to the color listed first in the palette.
"""

import logging
import re
from collections.abc import Sequence

import numpy as np

from doodle_to_score.models.core_models import ReferenceColor

logger = logging.getLogger(__name__)

HEX_COLOR_PATTERN = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)

# Largest possible RGB distance, between black and white
MAX_RGB_DISTANCE = float(np.sqrt(3 * 255**2))


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Parse a ``#RRGGBB`` color string.

    Args:
        hex_color: Six hex digits, optionally prefixed with ``#``.

    Returns:
        The ``(r, g, b)`` channels as integers.

    Raises:
        ValueError: If ``hex_color`` is not a six-digit hex color.
    """
    match = HEX_COLOR_PATTERN.match(hex_color)
    if match is None:
        raise ValueError(f"not a #RRGGBB color: {hex_color!r}")
    r, g, b = (int(part, 16) for part in match.groups())
    return r, g, b


def color_distance(rgb1: Sequence[int], rgb2: Sequence[int]) -> float:
    """Euclidean distance between two RGB colors (0 to ~441.67)."""
    diff = np.asarray(rgb1, dtype=np.int64) - np.asarray(rgb2, dtype=np.int64)
    return float(np.sqrt(np.sum(diff * diff)))


def palette_to_array(palette: Sequence[ReferenceColor]) -> np.ndarray:
    """Stack the palette's RGB triples into an ``N x 3`` int64 array."""
    return np.array([color.rgb for color in palette], dtype=np.int64).reshape(-1, 3)


def color_distances(rgb: np.ndarray, palette: Sequence[ReferenceColor]) -> np.ndarray:
    """Distances from every color in ``rgb`` to every palette color.

    Args:
        rgb: Array of shape ``(..., 3)``.
        palette: Ordered reference colors.

    Returns:
        Float array of shape ``(..., len(palette))``.
    """
    diff = np.asarray(rgb, dtype=np.int64)[..., None, :] - palette_to_array(palette)
    return np.sqrt(np.sum(diff * diff, axis=-1))


def find_closest_color(
    rgb: Sequence[int],
    palette: Sequence[ReferenceColor],
    max_distance: float = 100.0,
) -> ReferenceColor | None:
    """Classify one color against the palette.

    Args:
        rgb: The sampled ``(r, g, b)`` color.
        palette: Ordered reference colors.
        max_distance: Distances at or above this value are rejected.

    Returns:
        The nearest reference color, or None when even the nearest one is
        ``max_distance`` or further away.
    """
    if not palette:
        return None
    distances = color_distances(np.asarray(rgb)[:3], palette)
    index = int(np.argmin(distances))  # first minimum wins ties
    if distances[index] < max_distance:
        return palette[index]
    return None


def classify_pixels(
    pixels: np.ndarray,
    palette: Sequence[ReferenceColor],
    max_distance: float = 100.0,
    min_alpha: int = 128,
) -> np.ndarray:
    """Classify an array of RGBA samples against the palette.

    Vectorised counterpart of :func:`find_closest_color` with the alpha
    visibility gate applied first.

    Args:
        pixels: RGBA samples of shape ``(..., 4)``.
        palette: Ordered reference colors.
        max_distance: Distances at or above this value are rejected.
        min_alpha: Samples need an alpha strictly greater than this.

    Returns:
        Integer array of shape ``(...)`` holding the palette index of each
        sample, or -1 where the sample is background.
    """
    pixels = np.asarray(pixels)
    distances = color_distances(pixels[..., :3], palette)
    nearest = np.argmin(distances, axis=-1)
    nearest_distance = np.take_along_axis(distances, nearest[..., None], axis=-1)[..., 0]

    painted = (pixels[..., 3] > min_alpha) & (nearest_distance < max_distance)
    logger.debug(
        f"Classified {pixels[..., 0].size} samples, {int(painted.sum())} painted"
    )
    return np.where(painted, nearest, -1)
