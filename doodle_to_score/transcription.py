"""
Transcription of a raster into per-color chord events.

The Transcriber validates its configuration once, then turns any number of
raster snapshots into TranscriptionResults. It keeps no state between calls,
so a single instance can be shared across threads.
"""

import logging

import numpy as np

from doodle_to_score.errors import ConfigurationError, InputError
from doodle_to_score.grid_sampling import scan_grid
from doodle_to_score.models.core_models import ChordEvent, RasterBuffer, ReferenceColor
from doodle_to_score.models.pipeline_models import TranscriptionResult
from doodle_to_score.models.settings_models import TranscriptionParams

logger = logging.getLogger(__name__)


class Transcriber:
    """Turns raster snapshots into per-color chord events.

    Attributes:
        params: The validated transcription parameters.
    """

    def __init__(self, params: TranscriptionParams | None = None):
        """Initialize the transcriber.

        Args:
            params: Transcription parameters. Defaults to the reference
                configuration (64 steps, MIDI 36-96, 8 s loop, five colors).

        Raises:
            ConfigurationError: If ``params`` is not a TranscriptionParams.
        """
        if params is None:
            params = TranscriptionParams()
        if not isinstance(params, TranscriptionParams):
            raise ConfigurationError(
                f"expected TranscriptionParams, got {type(params).__name__}"
            )
        self.params = params

    @property
    def palette(self) -> tuple[ReferenceColor, ...]:
        """Reference colors in classification order."""
        return self.params.palette

    def transcribe(self, raster: RasterBuffer | np.ndarray) -> TranscriptionResult:
        """Transcribe one raster snapshot.

        Args:
            raster: A RasterBuffer, or an RGB/RGBA array that is snapshotted
                before scanning.

        Returns:
            TranscriptionResult with one entry per palette color, in palette
            order, each holding its chords in increasing time order.

        Raises:
            InputError: If ``raster`` is not a usable image.
        """
        if not isinstance(raster, RasterBuffer):
            if raster is None:
                raise InputError("No raster provided for transcription")
            raster = RasterBuffer.from_array(raster)

        events: dict[str, list[ChordEvent]] = {
            color.identifier: [] for color in self.palette
        }
        for color_index, chord in scan_grid(raster, self.params):
            events[self.palette[color_index].identifier].append(chord)

        result = TranscriptionResult(events=events)
        logger.info(
            f"Transcribed {raster.width}x{raster.height} raster into "
            f"{result.event_count} chord events"
        )
        return result


def transcribe(
    raster: RasterBuffer | np.ndarray, params: TranscriptionParams | None = None
) -> TranscriptionResult:
    """Transcribe a raster with a one-off Transcriber.

    Args:
        raster: A RasterBuffer or an RGB/RGBA array.
        params: Transcription parameters, or None for the defaults.

    Returns:
        The TranscriptionResult for ``raster``.
    """
    return Transcriber(params).transcribe(raster)
