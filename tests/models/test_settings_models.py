import pytest
from pydantic import ValidationError

from doodle_to_score.models import (
    DEFAULT_PALETTE,
    DEFAULT_VOICES,
    GridParams,
    InstrumentVoice,
    PlaybackParams,
    ReferenceColor,
    TranscriptionParams,
)


def test_gridparams_default():
    p = GridParams()
    assert p.time_steps == 64
    assert (p.min_pitch, p.max_pitch) == (36, 96)
    assert p.loop_duration_seconds == 8.0
    assert p.pitch_range == 60


@pytest.mark.parametrize(
    "kwargs",
    [
        {"time_steps": 0},
        {"min_pitch": 96, "max_pitch": 36},
        {"min_pitch": 60, "max_pitch": 60},
        {"loop_duration_seconds": 0.0},
        {"max_pitch": 128},
    ],
)
def test_gridparams_invalid(kwargs):
    with pytest.raises(ValidationError):
        GridParams(**kwargs)


def test_default_palette_order_and_brushes():
    identifiers = [c.identifier for c in DEFAULT_PALETTE]
    assert identifiers == ["#EF4444", "#3B82F6", "#22C55E", "#F97316", "#000000"]
    brushes = {c.identifier: c.brush_size for c in DEFAULT_PALETTE}
    assert brushes["#000000"] > brushes["#EF4444"]


def test_default_voices_cover_palette():
    for color in DEFAULT_PALETTE:
        assert color.instrument in DEFAULT_VOICES


def test_transcriptionparams_defaults():
    p = TranscriptionParams()
    assert p.palette == DEFAULT_PALETTE
    assert p.max_color_distance == 100.0
    assert p.min_alpha == 128
    assert p.note_value == "16n"


def test_transcriptionparams_empty_palette():
    with pytest.raises(ValidationError):
        TranscriptionParams(palette=())


def test_transcriptionparams_duplicate_identifiers():
    color = ReferenceColor(identifier="a", rgb=(0, 0, 0), instrument="fm")
    with pytest.raises(ValidationError):
        TranscriptionParams(palette=(color, color))


def test_transcriptionparams_note_value():
    with pytest.raises(ValidationError):
        TranscriptionParams(note_value="5n")


def test_instrumentvoice_bounds():
    with pytest.raises(ValidationError):
        InstrumentVoice(name="x", program=128)
    with pytest.raises(ValidationError):
        InstrumentVoice(name="x", volume_db=3.0)


def test_playbackparams_default():
    p = PlaybackParams()
    assert p.tempo_bpm == 120
    assert p.repeats == 1
