"""Core domain models for doodle-to-score transcription."""

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

from doodle_to_score.music_utils import NOTE_VALUE_TO_TYPE


class ReferenceColor(BaseModel):
    """One palette color bound to an instrument role.

    The transcriber only looks at ``identifier`` and ``rgb``; the instrument
    role and brush size are carried along for the scheduler and the drawing
    surface. Palette order matters: it decides ties during classification
    and the key order of every transcription result.

    Attributes:
        identifier: Opaque token naming the color, usually its hex string.
        rgb: Red, green and blue channels (0-255 each).
        instrument: Instrument role key used to look up a playback voice.
        brush_size: Default stroke width in pixels on the drawing surface.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(..., min_length=1, description="Color identifier")
    rgb: tuple[int, int, int] = Field(..., description="RGB channels (0-255)")
    instrument: str = Field(..., min_length=1, description="Instrument role key")
    brush_size: int = Field(5, ge=1, description="Default stroke width in pixels")

    @field_validator("rgb")
    @classmethod
    def _check_channels(cls, value: tuple[int, int, int]) -> tuple[int, int, int]:
        if any(channel < 0 or channel > 255 for channel in value):
            raise ValueError(f"RGB channels must be within 0-255, got {value}")
        return value

    @classmethod
    def from_hex(
        cls, hex_color: str, instrument: str, brush_size: int = 5
    ) -> "ReferenceColor":
        """Build a reference color from a ``#RRGGBB`` string.

        The hex string itself becomes the identifier.

        Args:
            hex_color: Color as ``#RRGGBB`` (the ``#`` is optional).
            instrument: Instrument role key.
            brush_size: Default stroke width in pixels.

        Returns:
            A new ReferenceColor.

        Raises:
            ValueError: If ``hex_color`` is not a valid six-digit hex color.
        """
        from doodle_to_score.color_matching import hex_to_rgb

        return cls(
            identifier=hex_color,
            rgb=hex_to_rgb(hex_color),
            instrument=instrument,
            brush_size=brush_size,
        )


class RasterBuffer(BaseModel):
    """Immutable RGBA snapshot of the drawing surface.

    Pixels are stored row-major as a ``height x width x 4`` uint8 array with
    the origin at the top-left. The array is copied on construction and the
    copy is marked read-only, so later strokes on the caller's canvas never
    leak into a transcription that is already running.

    Attributes:
        pixels: RGBA pixel data.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    pixels: np.ndarray = Field(..., description="H x W x 4 uint8 RGBA pixels")

    @field_validator("pixels")
    @classmethod
    def _snapshot(cls, value: np.ndarray) -> np.ndarray:
        if value.ndim != 3 or value.shape[2] != 4:
            raise ValueError(f"expected an H x W x 4 array, got shape {value.shape}")
        if value.shape[0] < 1 or value.shape[1] < 1:
            raise ValueError("raster must be at least 1 x 1 pixels")
        if value.dtype != np.uint8:
            raise ValueError(f"expected uint8 pixels, got {value.dtype}")
        snapshot = value.copy()
        snapshot.setflags(write=False)
        return snapshot

    @classmethod
    def from_array(cls, image) -> "RasterBuffer":
        """Snapshot an RGB or RGBA array.

        Three-channel images are treated as fully opaque.

        Args:
            image: Array-like of shape ``H x W x 3`` or ``H x W x 4`` with
                values in 0-255.

        Returns:
            A read-only RasterBuffer.

        Raises:
            InputError: If the array has the wrong shape or value range.
        """
        from doodle_to_score.errors import InputError

        array = np.asarray(image)
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise InputError(
                f"expected an H x W x 3 or H x W x 4 image, got shape {array.shape}"
            )
        if array.size == 0:
            raise InputError("raster must be at least 1 x 1 pixels")
        if array.dtype != np.uint8:
            if array.min() < 0 or array.max() > 255:
                raise InputError("pixel values must be within 0-255")
            array = array.astype(np.uint8)
        if array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array, alpha], axis=2)
        return cls(pixels=array)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Read one pixel as an ``(r, g, b, a)`` tuple."""
        r, g, b, a = self.pixels[y, x]
        return int(r), int(g), int(b), int(a)


class ChordEvent(BaseModel):
    """Simultaneous pitches sounding at one instant for one color.

    Attributes:
        time: Offset into the loop in seconds (non-negative).
        pitches: Frequencies in Hz, top row of the canvas first.
        duration: Note-value token such as ``"16n"``.
    """

    time: float = Field(..., ge=0.0, description="Offset into the loop in seconds")
    pitches: list[float] = Field(
        ..., min_length=1, description="Frequencies in Hz sounding together"
    )
    duration: str = Field("16n", description="Note-value token")

    @field_validator("pitches")
    @classmethod
    def _check_pitches(cls, value: list[float]) -> list[float]:
        if any(freq <= 0 for freq in value):
            raise ValueError("pitch frequencies must be positive")
        return value

    @field_validator("duration")
    @classmethod
    def _check_duration(cls, value: str) -> str:
        if value not in NOTE_VALUE_TO_TYPE:
            raise ValueError(
                f"unknown note value {value!r}, expected one of "
                f"{sorted(NOTE_VALUE_TO_TYPE)}"
            )
        return value


class ScheduledNote(BaseModel):
    """A single note placed on the playback timeline.

    Attributes:
        color: Identifier of the reference color that produced the note.
        instrument: Instrument role used to voice the note.
        start: Absolute start time in seconds.
        duration: Length in seconds.
        note: MIDI note number (0-127).
        velocity: MIDI note-on velocity (1-127).
    """

    color: str = Field(..., description="Reference color identifier")
    instrument: str = Field(..., description="Instrument role key")
    start: float = Field(..., ge=0.0, description="Start time in seconds")
    duration: float = Field(..., gt=0.0, description="Length in seconds")
    note: int = Field(..., ge=0, le=127, description="MIDI note number (0-127)")
    velocity: int = Field(64, ge=1, le=127, description="Note-on velocity")
