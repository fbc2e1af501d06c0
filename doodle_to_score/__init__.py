"""Doodle-to-score transcription library.

This package turns a free-form drawing into a short looping score. Pixels
painted in one of a handful of reference colors are sampled on a time/pitch
grid and grouped into chord events, one event list per color. Each color is
bound to its own instrument voice downstream.

The processing pipeline consists of:
1. Snapshotting the canvas into an immutable RGBA raster
2. Sampling one pixel per time/pitch cell and classifying its color
3. Grouping same-instant pixels into chords per reference color
4. Scheduling the chords on a repeating timeline
5. Exporting MIDI (and optionally WAV and visualizations)

Example:
    Basic usage through the transcription API:

    >>> from doodle_to_score.image_processing import load_raster
    >>> from doodle_to_score.transcription import Transcriber
    >>>
    >>> raster = load_raster("doodle.png")
    >>> result = Transcriber().transcribe(raster)
    >>> result["#EF4444"]
"""

__version__ = "0.1.0"
