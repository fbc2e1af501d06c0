"""
Pitch and note-value helpers.

Frequencies follow twelve-tone equal temperament with A4 (MIDI 69) at
440 Hz. Note values use the ``"16n"`` style tokens of the playback side,
where ``"Nn"`` is a 1/N note.
"""

import logging

import music21
import pretty_midi

logger = logging.getLogger(__name__)


# Note-value token -> music21 duration type
NOTE_VALUE_TO_TYPE = {
    "1n": "whole",
    "2n": "half",
    "4n": "quarter",
    "8n": "eighth",
    "16n": "16th",
    "32n": "32nd",
    "64n": "64th",
}


def midi_to_frequency(note: int) -> float:
    """Convert a MIDI note number to a frequency in Hz (mtof).

    Args:
        note: MIDI note number.

    Returns:
        ``440 * 2 ** ((note - 69) / 12)``.
    """
    return float(pretty_midi.note_number_to_hz(note))


def frequency_to_midi(frequency: float) -> int:
    """Convert a frequency in Hz to the nearest MIDI note number (ftom).

    Args:
        frequency: Positive frequency in Hz.

    Returns:
        Nearest MIDI note number, clamped to 0-127.

    Raises:
        ValueError: If ``frequency`` is not positive.
    """
    if frequency <= 0:
        raise ValueError(f"frequency must be positive, got {frequency}")
    note = int(round(pretty_midi.hz_to_note_number(frequency)))
    return max(0, min(127, note))


def note_value_to_beats(token: str) -> float:
    """Length of a note-value token in quarter-note beats.

    Raises:
        ValueError: If ``token`` is not a known note value.
    """
    if token not in NOTE_VALUE_TO_TYPE:
        raise ValueError(f"unknown note value {token!r}")
    return float(music21.duration.Duration(type=NOTE_VALUE_TO_TYPE[token]).quarterLength)


def note_value_to_seconds(token: str, tempo_bpm: float) -> float:
    """Length of a note-value token in seconds at the given tempo.

    Args:
        token: Note-value token such as ``"16n"``.
        tempo_bpm: Tempo in quarter-note beats per minute.

    Returns:
        Duration in seconds (``"16n"`` at 120 BPM is 0.125 s).
    """
    return note_value_to_beats(token) * 60.0 / tempo_bpm


def get_key_name(midi_note: int) -> str:
    """Convert a MIDI note number to a key name (e.g., "C4").

    Args:
        midi_note: MIDI note number (0–127).

    Returns:
        The pitch name with octave (e.g., "C4", "G#3").
    """
    p = music21.pitch.Pitch()
    p.midi = midi_note
    return p.nameWithOctave
