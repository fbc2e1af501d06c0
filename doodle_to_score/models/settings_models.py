"""Parameter models for transcription and playback configuration.

This module defines Pydantic models that hold every configurable value of
the doodle-to-score pipeline: the sampling grid, the reference palette, the
color-matching thresholds and the playback voices. Invalid combinations are
rejected when the model is built, never halfway through a scan.
"""

from pydantic import BaseModel, Field, field_validator, model_validator

from doodle_to_score.models.core_models import ReferenceColor
from doodle_to_score.music_utils import NOTE_VALUE_TO_TYPE


# Reference palette, in tie-break order. Black draws with a thicker brush.
DEFAULT_PALETTE: tuple[ReferenceColor, ...] = (
    ReferenceColor(identifier="#EF4444", rgb=(239, 68, 68), instrument="triangle"),
    ReferenceColor(identifier="#3B82F6", rgb=(59, 130, 246), instrument="fm"),
    ReferenceColor(identifier="#22C55E", rgb=(34, 197, 94), instrument="am"),
    ReferenceColor(identifier="#F97316", rgb=(249, 115, 22), instrument="pluck"),
    ReferenceColor(
        identifier="#000000", rgb=(0, 0, 0), instrument="membrane", brush_size=8
    ),
)


class GridParams(BaseModel):
    """Configuration of the time/pitch sampling grid.

    The canvas is cut into ``time_steps`` columns and ``pitch_range`` rows.
    Row 0 is the top of the canvas and maps to ``max_pitch``.

    Attributes:
        time_steps: Number of columns sampled along the X axis (default 64).
        min_pitch: Lowest MIDI note of the range (default 36, C2).
        max_pitch: Highest MIDI note of the range (default 96, C7).
        loop_duration_seconds: Length of one loop in seconds (default 8.0).
    """

    time_steps: int = Field(64, gt=0, description="Columns sampled along X")
    min_pitch: int = Field(36, ge=0, le=127, description="Lowest MIDI note")
    max_pitch: int = Field(96, ge=0, le=127, description="Highest MIDI note")
    loop_duration_seconds: float = Field(
        8.0, gt=0.0, description="Loop length in seconds"
    )

    @model_validator(mode="after")
    def _check_pitch_bounds(self) -> "GridParams":
        if self.min_pitch >= self.max_pitch:
            raise ValueError(
                f"min_pitch ({self.min_pitch}) must be below max_pitch ({self.max_pitch})"
            )
        return self

    @property
    def pitch_range(self) -> int:
        """Number of pitch rows, ``max_pitch - min_pitch``."""
        return self.max_pitch - self.min_pitch


class TranscriptionParams(BaseModel):
    """Complete configuration for a transcriber.

    Attributes:
        grid: Sampling grid parameters.
        palette: Ordered reference colors; order decides classification ties.
        max_color_distance: Nearest-color distances at or above this value
            are treated as background (default 100.0, on a 0-441 scale).
        min_alpha: Pixels need an alpha strictly above this to count as
            painted (default 128).
        note_value: Note-value token given to every emitted chord.
    """

    grid: GridParams = Field(
        default_factory=GridParams, description="Sampling grid parameters"
    )
    palette: tuple[ReferenceColor, ...] = Field(
        DEFAULT_PALETTE, description="Ordered reference colors"
    )
    max_color_distance: float = Field(
        100.0, gt=0.0, description="Color-match rejection distance"
    )
    min_alpha: int = Field(128, ge=0, le=255, description="Visibility alpha gate")
    note_value: str = Field("16n", description="Note value of every chord")

    @field_validator("palette")
    @classmethod
    def _check_palette(
        cls, value: tuple[ReferenceColor, ...]
    ) -> tuple[ReferenceColor, ...]:
        if not value:
            raise ValueError("palette must contain at least one reference color")
        identifiers = [color.identifier for color in value]
        if len(set(identifiers)) != len(identifiers):
            raise ValueError(f"palette identifiers must be unique: {identifiers}")
        return value

    @field_validator("note_value")
    @classmethod
    def _check_note_value(cls, value: str) -> str:
        if value not in NOTE_VALUE_TO_TYPE:
            raise ValueError(f"unknown note value {value!r}")
        return value


class InstrumentVoice(BaseModel):
    """Playback voice bound to one instrument role.

    Attributes:
        name: Human-readable instrument name.
        program: General MIDI program number (0-127).
        volume_db: Channel gain in decibels (default -12).
    """

    name: str = Field(..., description="Instrument name")
    program: int = Field(0, ge=0, le=127, description="General MIDI program")
    volume_db: float = Field(-12.0, le=0.0, description="Channel gain in dB")


# Voices keyed by instrument role, approximating the original synth patches.
DEFAULT_VOICES: dict[str, InstrumentVoice] = {
    "triangle": InstrumentVoice(name="Triangle Lead", program=79),
    "fm": InstrumentVoice(name="FM Electric Piano", program=5),
    "am": InstrumentVoice(name="AM Pad", program=88),
    "pluck": InstrumentVoice(name="Pluck", program=25),
    "membrane": InstrumentVoice(name="Membrane Drum", program=117),
}


class PlaybackParams(BaseModel):
    """Configuration of the looping playback timeline.

    Attributes:
        tempo_bpm: Tempo used to turn note values into seconds (default 120).
        repeats: Number of loop passes to lay out (default 1).
        ticks_per_beat: MIDI resolution (default 480).
        velocity: Note-on velocity of every scheduled note (default 64).
        sample_rate: Sample rate of rendered audio (default 44100).
    """

    tempo_bpm: int = Field(120, ge=30, le=300, description="Tempo in BPM")
    repeats: int = Field(1, ge=1, le=64, description="Loop passes")
    ticks_per_beat: int = Field(480, ge=24, description="MIDI ticks per beat")
    velocity: int = Field(64, ge=1, le=127, description="Note-on velocity")
    sample_rate: int = Field(44100, ge=8000, description="Audio sample rate")
