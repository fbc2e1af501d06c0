"""
End-to-end processing for doodle-to-score.

This module chains the transcriber with its downstream collaborators:
the loop scheduler, MIDI export, optional audio rendering and optional
visualizations. Configuration and input errors propagate to the caller;
failures of the optional rendering stages are logged and leave their
outputs empty.
"""

import logging
import tempfile
from collections.abc import Mapping

import numpy as np

from doodle_to_score.errors import ConfigurationError, RenderError
from doodle_to_score.midi_utils import midi_to_audio, write_midi_file
from doodle_to_score.models.core_models import RasterBuffer
from doodle_to_score.models.pipeline_models import (
    MidiResult,
    ScheduleResult,
    TranscriptionResult,
)
from doodle_to_score.models.settings_models import (
    DEFAULT_VOICES,
    InstrumentVoice,
    PlaybackParams,
    TranscriptionParams,
)
from doodle_to_score.models.visualization_models import VisualizationSet
from doodle_to_score.scheduler import LoopScheduler
from doodle_to_score.transcription import Transcriber
from doodle_to_score.visualization import create_all_visualizations

logger = logging.getLogger(__name__)


def generate_midi(
    schedule: ScheduleResult,
    params: TranscriptionParams,
    voices: Mapping[str, InstrumentVoice],
    playback: PlaybackParams,
    midi_path: str | None = None,
    render_audio: bool = False,
    wav_path: str | None = None,
) -> MidiResult:
    """Write the schedule as MIDI and optionally render it to WAV.

    Args:
        schedule: Scheduled notes.
        params: Transcription parameters (for the palette).
        voices: Playback voice per instrument role.
        playback: Playback settings.
        midi_path: Where to write the MIDI file; a temporary file if None.
        render_audio: Whether to synthesize a WAV file as well.
        wav_path: Where to write the WAV file; next to the MIDI file if None.

    Returns:
        MidiResult with the MIDI bytes and the written paths.

    Raises:
        RenderError: If the MIDI file cannot be built or written.
    """
    midi_bytes = write_midi_file(schedule, params.palette, voices, playback)

    try:
        if midi_path is None:
            with tempfile.NamedTemporaryFile(suffix=".mid", delete=False) as tmp:
                tmp.write(midi_bytes)
                midi_path = tmp.name
        else:
            with open(midi_path, "wb") as f:
                f.write(midi_bytes)
    except OSError as e:
        raise RenderError(f"Could not write MIDI file: {e}") from e

    audio_path = None
    if render_audio:
        audio_path = midi_to_audio(midi_path, wav_path, playback.sample_rate)
        if audio_path is None:
            logger.warning("Audio rendering failed; continuing with MIDI only")

    return MidiResult(
        midi_bytes=midi_bytes, midi_file_path=midi_path, audio_path=audio_path
    )


def process_complete_pipeline(
    raster: RasterBuffer | np.ndarray,
    params: TranscriptionParams | None = None,
    playback: PlaybackParams | None = None,
    voices: Mapping[str, InstrumentVoice] | None = None,
    midi_path: str | None = None,
    render_audio: bool = False,
    wav_path: str | None = None,
    visualize: bool = False,
) -> tuple[TranscriptionResult, ScheduleResult, MidiResult, VisualizationSet]:
    """Process a canvas from raster to MIDI.

    Args:
        raster: Canvas snapshot or RGB/RGBA array.
        params: Transcription parameters, defaults if None.
        playback: Playback settings, defaults if None.
        voices: Voice per instrument role, defaults if None.
        midi_path: Destination of the MIDI file; temporary if None.
        render_audio: Whether to synthesize a WAV file.
        wav_path: Destination of the WAV file.
        visualize: Whether to build the visualizations.

    Returns:
        Tuple of (transcription, schedule, midi_result, visualizations).

    Raises:
        ConfigurationError: If a palette color has no voice.
        InputError: If the raster is unusable.
        RenderError: If the MIDI file cannot be produced.
    """
    params = params or TranscriptionParams()
    playback = playback or PlaybackParams()
    voices = dict(DEFAULT_VOICES if voices is None else voices)

    missing = [c.instrument for c in params.palette if c.instrument not in voices]
    if missing:
        raise ConfigurationError(f"No voice for instrument(s): {', '.join(missing)}")

    transcriber = Transcriber(params)
    if not isinstance(raster, RasterBuffer):
        raster = RasterBuffer.from_array(raster)

    # Step 1: Transcription
    result = transcriber.transcribe(raster)

    # Step 2: Scheduling
    scheduler = LoopScheduler(voices, params.grid.loop_duration_seconds, playback)
    schedule = scheduler.schedule(result, params.palette)

    # Step 3: MIDI (and audio) output
    midi_result = generate_midi(
        schedule, params, voices, playback, midi_path, render_audio, wav_path
    )

    # Step 4: Visualizations
    vis_set = VisualizationSet()
    if visualize:
        try:
            vis_set = create_all_visualizations(raster, result, params)
        except Exception as e:
            logger.error(f"Error creating visualizations: {str(e)}")

    return result, schedule, midi_result, vis_set
