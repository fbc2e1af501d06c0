"""
Visualization functions for doodle-to-score.

This module renders the two views a user needs to check a transcription:
the canvas with every sample point marked, and a piano roll of the chord
events colored by reference color.
"""

import cv2
import numpy as np
from collections.abc import Sequence
from matplotlib.figure import Figure
import matplotlib.patches as patches

from doodle_to_score.color_matching import classify_pixels
from doodle_to_score.grid_sampling import sample_columns, sample_rows
from doodle_to_score.models.core_models import RasterBuffer, ReferenceColor
from doodle_to_score.models.pipeline_models import TranscriptionResult
from doodle_to_score.models.settings_models import GridParams, TranscriptionParams
from doodle_to_score.models.visualization_models import VisualizationSet
from doodle_to_score.music_utils import frequency_to_midi, get_key_name

BACKGROUND_MARK = (200, 200, 200)


def composite_on_white(raster: RasterBuffer) -> np.ndarray:
    """Flatten an RGBA raster onto a white background.

    Returns:
        ``H x W x 3`` uint8 RGB array.
    """
    rgba = raster.pixels.astype(np.float32)
    alpha = rgba[..., 3:4] / 255.0
    rgb = rgba[..., :3] * alpha + 255.0 * (1.0 - alpha)
    return np.clip(np.rint(rgb), 0, 255).astype(np.uint8)


def create_sampling_visualization(
    raster: RasterBuffer, params: TranscriptionParams
) -> np.ndarray:
    """Mark every grid sample point on the canvas.

    Painted samples get a ring in their reference color, background samples
    a small gray dot.

    Args:
        raster: Canvas snapshot.
        params: Transcription parameters (grid and palette).

    Returns:
        RGB image as ``H x W x 3`` uint8 array.
    """
    canvas = composite_on_white(raster)
    xs, _ = sample_columns(raster.width, params.grid)
    ys = sample_rows(raster.height, params.grid)
    labels = classify_pixels(
        raster.pixels[np.ix_(ys, xs)],
        params.palette,
        max_distance=params.max_color_distance,
        min_alpha=params.min_alpha,
    )

    for row, y in enumerate(ys):
        for column, x in enumerate(xs):
            color_index = int(labels[row, column])
            if color_index < 0:
                cv2.circle(canvas, (int(x), int(y)), 1, BACKGROUND_MARK, -1)
            else:
                rgb = params.palette[color_index].rgb
                cv2.circle(canvas, (int(x), int(y)), 3, tuple(int(c) for c in rgb), 1)

    return canvas


def create_piano_roll_visualization(
    result: TranscriptionResult,
    palette: Sequence[ReferenceColor],
    grid: GridParams,
    *,
    width_px: int = 1200,
    note_h_in: float = 0.12,
    max_h_in: float = 12.0,
    min_h_in: float = 2.0,
    dpi: int = 150,
    margin_frac: float = 0.05,
) -> Figure:
    """Create a piano roll of the chord events, one color per palette entry.

    Every pitch of every chord is drawn as a bar one time step long on the
    row of its MIDI note.

    Args:
        result: Transcription to draw.
        palette: Reference colors used to fill the bars.
        grid: Grid the transcription was sampled on.
        width_px: Logical bitmap width in pixels (default 1200).
        note_h_in: Physical height per pitch row in inches.
        max_h_in: Maximum figure height in inches (default 12.0).
        min_h_in: Minimum figure height in inches (default 2.0).
        dpi: Raster resolution for output (default 150).
        margin_frac: Fraction of row height to leave as margin (default 0.05).

    Returns:
        Matplotlib Figure. Shows a "No chord events" message if the
        transcription is empty.
    """
    width_in = width_px / dpi

    # ---------- empty case ----------
    if result.is_empty:
        fig = Figure(figsize=(width_in, min_h_in), dpi=dpi)
        ax = fig.add_subplot()
        ax.text(
            0.5, 0.5, "No chord events", ha="center", va="center", transform=ax.transAxes
        )
        ax.axis("off")
        return fig

    colors = {color.identifier: color for color in palette}
    step_seconds = grid.loop_duration_seconds / grid.time_steps

    bars = []
    for identifier, chords in result.items():
        rgb = np.array(colors[identifier].rgb) / 255.0
        for chord in chords:
            for frequency in chord.pitches:
                bars.append((chord.time, frequency_to_midi(frequency), rgb))

    lo_note = min(note for _, note, _ in bars)
    hi_note = max(note for _, note, _ in bars)
    pitch_span = hi_note - lo_note + 1

    height_in = max(min_h_in, min(max_h_in, pitch_span * note_h_in))
    fig = Figure(figsize=(width_in, height_in), dpi=dpi, layout="tight")
    ax = fig.add_subplot()

    ax.set_xlim(0, grid.loop_duration_seconds)
    ax.set_ylim(lo_note - 0.5, hi_note + 0.5)  # rows are centred on ints

    cell_h = 1 - 2 * margin_frac
    y_shift = 0.5 - margin_frac
    for time, note, rgb in bars:
        ax.add_patch(
            patches.Rectangle(
                (time, note - y_shift),
                step_seconds,
                cell_h,
                facecolor=rgb,
                edgecolor="black",
                linewidth=0.3,
                zorder=1,
            )
        )

    # Label only C notes once the range gets tall
    label_every = 1 if pitch_span <= 24 else 12
    y_ticks = [
        n for n in range(lo_note, hi_note + 1) if label_every == 1 or n % 12 == 0
    ]
    ax.set_yticks(y_ticks)
    ax.set_yticklabels([get_key_name(n) for n in y_ticks], fontsize=8)

    ax.set_xlabel("Time (s)", fontsize=10)
    ax.set_ylabel("Note", fontsize=10)
    for spine_name, spine in ax.spines.items():
        if spine_name not in ("left", "bottom"):
            spine.set_visible(False)

    ax.set_facecolor("white")
    return fig


def create_all_visualizations(
    raster: RasterBuffer | None,
    result: TranscriptionResult | None,
    params: TranscriptionParams,
) -> VisualizationSet:
    """Create the complete set of visualizations for one transcription.

    Args:
        raster: Canvas snapshot, or None.
        result: Transcription of ``raster``, or None.
        params: Parameters the transcription was made with.

    Returns:
        VisualizationSet; fields are None where inputs were missing.
    """
    sampling_grid = None
    if raster is not None:
        sampling_grid = create_sampling_visualization(raster, params)

    piano_roll = None
    if result is not None:
        piano_roll = create_piano_roll_visualization(result, params.palette, params.grid)

    return VisualizationSet(sampling_grid=sampling_grid, piano_roll=piano_roll)
