import numpy as np
import pytest

from doodle_to_score.models import GridParams, TranscriptionParams


@pytest.fixture
def blank_pixels():
    # 640×480 fully transparent RGBA canvas
    return np.zeros((480, 640, 4), dtype=np.uint8)


@pytest.fixture
def paint():
    # Set one pixel in place and hand the array back
    def _paint(pixels, x, y, rgb, alpha=255):
        pixels[y, x] = (*rgb, alpha)
        return pixels

    return _paint


@pytest.fixture
def cell_center():
    # Sample point of (column, row) on a 640×480 canvas with the default grid:
    # stepWidth = 10, noteHeight = 8
    def _center(x_step, y_note):
        return 10 * x_step + 5, 8 * y_note + 4

    return _center


@pytest.fixture
def default_params():
    return TranscriptionParams()


@pytest.fixture
def small_params():
    # 4 columns × 4 rows over a 2 second loop
    return TranscriptionParams(
        grid=GridParams(
            time_steps=4, min_pitch=60, max_pitch=64, loop_duration_seconds=2.0
        )
    )
