"""Models for representing pipeline processing stages.

This module contains Pydantic models that hold the output of each stage of
the doodle-to-score pipeline: the per-color transcription, the playback
schedule laid out on a timeline, and the exported MIDI/audio artifacts.
"""

from collections.abc import ItemsView

from pydantic import BaseModel, Field

from doodle_to_score.models.core_models import ChordEvent, ScheduledNote


class TranscriptionResult(BaseModel):
    """Chord events grouped by reference color.

    Holds exactly one entry per configured reference color, in palette
    order, even when that color was never painted. Every event list is in
    strictly increasing time order.

    Attributes:
        events: Mapping of color identifier to its ordered chord events.
    """

    events: dict[str, list[ChordEvent]] = Field(
        default_factory=dict, description="Chord events per color identifier"
    )

    def __getitem__(self, identifier: str) -> list[ChordEvent]:
        return self.events[identifier]

    def __contains__(self, identifier: object) -> bool:
        return identifier in self.events

    def colors(self) -> list[str]:
        """Color identifiers in palette order."""
        return list(self.events)

    def items(self) -> ItemsView[str, list[ChordEvent]]:
        """(identifier, events) pairs in palette order."""
        return self.events.items()

    @property
    def is_empty(self) -> bool:
        """True when no color produced any event."""
        return not any(self.events.values())

    @property
    def event_count(self) -> int:
        """Total number of chord events across all colors."""
        return sum(len(chords) for chords in self.events.values())

    def to_dict(self) -> dict[str, list[dict]]:
        """Plain, JSON-ready form keyed by color identifier."""
        return {
            identifier: [chord.model_dump() for chord in chords]
            for identifier, chords in self.events.items()
        }


class ScheduleResult(BaseModel):
    """Notes laid out on the playback timeline.

    Attributes:
        notes: Scheduled notes sorted by start time.
        loop_duration_seconds: Length of one loop pass.
        repeats: Number of loop passes laid out.
    """

    notes: list[ScheduledNote] = Field(
        default_factory=list, description="Scheduled notes sorted by start"
    )
    loop_duration_seconds: float = Field(0.0, ge=0.0, description="Loop length")
    repeats: int = Field(1, ge=1, description="Loop passes")

    @property
    def total_seconds(self) -> float:
        """Length of the whole timeline, ``loop * repeats``."""
        return self.loop_duration_seconds * self.repeats


class MidiResult(BaseModel):
    """MIDI export and synthesis results.

    Attributes:
        midi_bytes: Serialized MIDI file data, or None if export failed.
        midi_file_path: Path to the written MIDI file, empty if not written.
        audio_path: Path to the rendered WAV file, or None if not rendered.
    """

    midi_bytes: bytes | None = Field(None, description="Serialized MIDI file data")
    midi_file_path: str = Field("", description="Path to MIDI file")
    audio_path: str | None = Field(None, description="Path to rendered WAV file")
