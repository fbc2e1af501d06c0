"""Time/pitch grid sampling of a raster.

The canvas is divided into ``time_steps`` columns and ``pitch_range`` rows
and one pixel at the middle of every cell is sampled. Columns become
instants of the loop, rows become pitches with the top row mapped to the
highest note. Painted cells of the same color in one column are merged
into a single chord.
"""

import logging
from collections.abc import Iterator

import numpy as np

from doodle_to_score.color_matching import classify_pixels
from doodle_to_score.models.core_models import ChordEvent, RasterBuffer
from doodle_to_score.models.settings_models import GridParams, TranscriptionParams
from doodle_to_score.music_utils import midi_to_frequency

logger = logging.getLogger(__name__)


def sample_columns(width: int, grid: GridParams) -> tuple[np.ndarray, list[float]]:
    """Compute the sample X coordinate and loop time of every column.

    Args:
        width: Raster width in pixels.
        grid: Sampling grid parameters.

    Returns:
        Tuple of (xs, times): an int array of pixel columns at each cell's
        horizontal midpoint, and the matching times in seconds, evenly
        spaced over ``[0, loop_duration_seconds)``.
    """
    step_width = width / grid.time_steps
    steps = np.arange(grid.time_steps)
    xs = np.floor(steps * step_width + step_width / 2).astype(np.int64)
    times = [
        (x_step / grid.time_steps) * grid.loop_duration_seconds
        for x_step in range(grid.time_steps)
    ]
    return xs, times


def sample_rows(height: int, grid: GridParams) -> np.ndarray:
    """Compute the sample Y coordinate of every pitch row.

    Args:
        height: Raster height in pixels.
        grid: Sampling grid parameters.

    Returns:
        Int array of pixel rows at each cell's vertical midpoint, top first.
    """
    note_height = height / grid.pitch_range
    rows = np.arange(grid.pitch_range)
    return np.floor(rows * note_height + note_height / 2).astype(np.int64)


def row_frequencies(grid: GridParams) -> list[float]:
    """Frequency of every pitch row; row 0 is ``max_pitch``."""
    return [midi_to_frequency(grid.max_pitch - y_note) for y_note in range(grid.pitch_range)]


def scan_grid(
    raster: RasterBuffer, params: TranscriptionParams
) -> Iterator[tuple[int, ChordEvent]]:
    """Sample the raster and group painted cells into chords.

    Columns are visited left to right. Within a column the pitches of each
    color are collected top to bottom and emitted as one ChordEvent per
    color that was painted in that column.

    Args:
        raster: Snapshot of the canvas.
        params: Transcription parameters.

    Yields:
        Tuples of (palette index, ChordEvent), in increasing time order.
    """
    grid = params.grid
    xs, times = sample_columns(raster.width, grid)
    ys = sample_rows(raster.height, grid)
    frequencies = row_frequencies(grid)

    # One read of every sampled pixel: rows x columns x RGBA
    samples = raster.pixels[np.ix_(ys, xs)]
    labels = classify_pixels(
        samples,
        params.palette,
        max_distance=params.max_color_distance,
        min_alpha=params.min_alpha,
    )

    for x_step, time in enumerate(times):
        chords: list[list[float]] = [[] for _ in params.palette]
        for y_note in range(grid.pitch_range):
            color_index = int(labels[y_note, x_step])
            if color_index < 0:
                continue
            chords[color_index].append(frequencies[y_note])

        for color_index, pitches in enumerate(chords):
            if pitches:
                yield color_index, ChordEvent(
                    time=time, pitches=pitches, duration=params.note_value
                )
