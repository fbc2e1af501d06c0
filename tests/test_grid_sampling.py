import numpy as np
import pytest

from doodle_to_score.grid_sampling import (
    row_frequencies,
    sample_columns,
    sample_rows,
    scan_grid,
)
from doodle_to_score.models import DEFAULT_PALETTE, GridParams, RasterBuffer
from doodle_to_score.music_utils import midi_to_frequency

RED = DEFAULT_PALETTE[0].rgb
BLUE = DEFAULT_PALETTE[1].rgb


def test_sample_columns_reference_grid():
    xs, times = sample_columns(640, GridParams())
    assert len(xs) == 64
    assert xs[0] == 5
    assert xs[-1] == 635
    assert times[0] == 0.0
    assert times[1] == 0.125
    assert times[-1] == pytest.approx(8.0 - 0.125)


def test_sample_rows_reference_grid():
    ys = sample_rows(480, GridParams())
    assert len(ys) == 60
    assert ys[0] == 4
    assert ys[59] == 476


def test_sample_coordinates_stay_in_bounds_on_tiny_raster():
    grid = GridParams()
    xs, _ = sample_columns(3, grid)
    ys = sample_rows(2, grid)
    assert xs.min() >= 0 and xs.max() < 3
    assert ys.min() >= 0 and ys.max() < 2


def test_sample_columns_uneven_width():
    xs, _ = sample_columns(100, GridParams(time_steps=3))
    # stepWidth = 33.33…, midpoints 16.67, 50, 83.33
    assert xs.tolist() == [16, 50, 83]


def test_row_frequencies_inverted():
    freqs = row_frequencies(GridParams())
    assert freqs[0] == pytest.approx(midi_to_frequency(96))
    assert freqs[59] == pytest.approx(midi_to_frequency(37))
    assert freqs == sorted(freqs, reverse=True)


def test_scan_grid_blank(blank_pixels, default_params):
    raster = RasterBuffer(pixels=blank_pixels)
    assert list(scan_grid(raster, default_params)) == []


def test_scan_grid_groups_column_into_chord(blank_pixels, paint, cell_center, default_params):
    paint(blank_pixels, *cell_center(2, 0), RED)
    paint(blank_pixels, *cell_center(2, 10), RED)
    paint(blank_pixels, *cell_center(2, 5), BLUE)

    emitted = list(scan_grid(RasterBuffer(pixels=blank_pixels), default_params))

    assert [index for index, _ in emitted] == [0, 1]
    red_chord = emitted[0][1]
    assert red_chord.time == 0.25
    assert red_chord.pitches == [
        pytest.approx(midi_to_frequency(96)),
        pytest.approx(midi_to_frequency(86)),
    ]
    assert emitted[1][1].pitches == [pytest.approx(midi_to_frequency(91))]


def test_scan_grid_ignores_pixels_between_sample_points(
    blank_pixels, paint, cell_center, default_params
):
    x, y = cell_center(0, 0)
    paint(blank_pixels, x + 1, y, RED)
    paint(blank_pixels, x, y + 1, RED)
    assert list(scan_grid(RasterBuffer(pixels=blank_pixels), default_params)) == []


def test_scan_grid_small_grid(small_params):
    # 8×8 canvas, 4 columns of width 2, 4 rows of height 2; sample at (1,1), (3,1) …
    pixels = np.zeros((8, 8, 4), dtype=np.uint8)
    pixels[:, 5] = (*RED, 255)  # whole column 2

    emitted = list(scan_grid(RasterBuffer(pixels=pixels), small_params))

    assert len(emitted) == 1
    index, chord = emitted[0]
    assert index == 0
    assert chord.time == 1.0
    assert chord.pitches == pytest.approx([midi_to_frequency(n) for n in (64, 63, 62, 61)])
