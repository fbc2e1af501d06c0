"""
Looping playback schedule for transcribed chords.

The scheduler owns the instrument voices and lays every color's chords out
on a repeating timeline. Voices are passed in explicitly; nothing here is a
process-wide singleton, and the transcriber never sees any of it.
"""

import logging
from collections.abc import Mapping, Sequence

from doodle_to_score.errors import ConfigurationError
from doodle_to_score.models.core_models import ReferenceColor, ScheduledNote
from doodle_to_score.models.pipeline_models import ScheduleResult, TranscriptionResult
from doodle_to_score.models.settings_models import (
    DEFAULT_VOICES,
    InstrumentVoice,
    PlaybackParams,
)
from doodle_to_score.music_utils import frequency_to_midi, note_value_to_seconds

logger = logging.getLogger(__name__)


class LoopScheduler:
    """Lays transcribed chords out on a repeating timeline.

    Attributes:
        voices: Playback voice per instrument role.
        loop_duration_seconds: Length of one loop pass.
        playback: Tempo, repeat count and velocity settings.
    """

    def __init__(
        self,
        voices: Mapping[str, InstrumentVoice] | None = None,
        loop_duration_seconds: float = 8.0,
        playback: PlaybackParams | None = None,
    ):
        if loop_duration_seconds <= 0:
            raise ConfigurationError(
                f"loop duration must be positive, got {loop_duration_seconds}"
            )
        self.voices = dict(DEFAULT_VOICES if voices is None else voices)
        self.loop_duration_seconds = loop_duration_seconds
        self.playback = playback or PlaybackParams()

    def voice_for(self, color: ReferenceColor) -> InstrumentVoice:
        """Look up the voice bound to a color's instrument role.

        Raises:
            ConfigurationError: If no voice is registered for the role.
        """
        try:
            return self.voices[color.instrument]
        except KeyError:
            raise ConfigurationError(
                f"No voice for instrument {color.instrument!r} "
                f"(color {color.identifier})"
            ) from None

    def schedule(
        self, result: TranscriptionResult, palette: Sequence[ReferenceColor]
    ) -> ScheduleResult:
        """Place every chord of ``result`` on the timeline.

        Each pitch of a chord becomes its own ScheduledNote. The loop is
        laid out ``playback.repeats`` times back to back.

        Args:
            result: Transcription to schedule.
            palette: The palette ``result`` was transcribed with.

        Returns:
            ScheduleResult with notes sorted by start time; notes starting
            together keep palette order.

        Raises:
            ConfigurationError: If a color of ``result`` is missing from the
                palette or has no voice.
        """
        colors = {color.identifier: color for color in palette}
        notes: list[ScheduledNote] = []

        for identifier, chords in result.items():
            if identifier not in colors:
                raise ConfigurationError(f"Color {identifier} is not in the palette")
            color = colors[identifier]
            self.voice_for(color)

            for repeat in range(self.playback.repeats):
                offset = repeat * self.loop_duration_seconds
                for chord in chords:
                    duration = note_value_to_seconds(
                        chord.duration, self.playback.tempo_bpm
                    )
                    for frequency in chord.pitches:
                        notes.append(
                            ScheduledNote(
                                color=identifier,
                                instrument=color.instrument,
                                start=offset + chord.time,
                                duration=duration,
                                note=frequency_to_midi(frequency),
                                velocity=self.playback.velocity,
                            )
                        )

        notes.sort(key=lambda n: n.start)
        logger.info(
            f"Scheduled {len(notes)} notes over {self.playback.repeats} "
            f"loop(s) of {self.loop_duration_seconds}s"
        )
        return ScheduleResult(
            notes=notes,
            loop_duration_seconds=self.loop_duration_seconds,
            repeats=self.playback.repeats,
        )
