"""MIDI export and audio synthesis utilities.

This module writes a playback schedule as a standard MIDI file, one track
per reference color, and renders MIDI files to WAV audio with a software
synthesizer.
"""

import io
import logging
import math
import os
from collections.abc import Mapping, Sequence

import mido
import numpy as np
import pretty_midi
import soundfile as sf
from mido import MidiFile, MidiTrack, Message, MetaMessage

from doodle_to_score.errors import RenderError
from doodle_to_score.models import (
    InstrumentVoice,
    PlaybackParams,
    ReferenceColor,
    ScheduleResult,
)

logger = logging.getLogger(__name__)

DRUM_CHANNEL = 9
MELODIC_CHANNELS = [channel for channel in range(16) if channel != DRUM_CHANNEL]


def volume_to_cc(volume_db: float) -> int:
    """Convert a gain in dB to a MIDI channel-volume (CC7) value.

    General MIDI maps CC7 to gain as ``40 * log10(value / 127)`` dB.

    Args:
        volume_db: Gain in decibels (0 or below).

    Returns:
        CC7 value in 0-127; -12 dB gives 64.
    """
    if volume_db == -math.inf:
        return 0
    value = round(127 * 10 ** (volume_db / 40))
    return max(0, min(127, value))


def seconds_to_ticks(seconds: float, tempo_bpm: int, ticks_per_beat: int) -> int:
    """Convert a time in seconds to MIDI ticks at a fixed tempo."""
    tempo = mido.bpm2tempo(tempo_bpm)
    return int(round(mido.second2tick(seconds, ticks_per_beat, tempo)))


def write_midi_file(
    schedule: ScheduleResult,
    palette: Sequence[ReferenceColor],
    voices: Mapping[str, InstrumentVoice],
    playback: PlaybackParams | None = None,
) -> bytes:
    """Generate a type-1 MIDI file from a playback schedule.

    Track 0 carries the tempo. Every palette color gets its own track, named
    after the color identifier, on its own channel with the program and
    channel volume of its voice.

    Args:
        schedule: Notes to write.
        palette: Reference colors, deciding track and channel order.
        voices: Playback voice per instrument role.
        playback: Tempo and resolution settings.

    Returns:
        MIDI file data as bytes.

    Raises:
        RenderError: If the palette needs more channels than MIDI offers or
            a color has no voice.
    """
    playback = playback or PlaybackParams()
    if len(palette) > len(MELODIC_CHANNELS):
        raise RenderError(
            f"{len(palette)} colors exceed the {len(MELODIC_CHANNELS)} melodic channels"
        )

    midi_file = MidiFile(type=1, ticks_per_beat=playback.ticks_per_beat)
    tempo_track = MidiTrack()
    midi_file.tracks.append(tempo_track)
    tempo_track.append(
        MetaMessage("set_tempo", tempo=mido.bpm2tempo(playback.tempo_bpm), time=0)
    )

    for channel, color in zip(MELODIC_CHANNELS, palette):
        voice = voices.get(color.instrument)
        if voice is None:
            raise RenderError(f"No voice for instrument {color.instrument!r}")

        track = MidiTrack()
        midi_file.tracks.append(track)
        track.append(MetaMessage("track_name", name=color.identifier, time=0))
        track.append(Message("program_change", program=voice.program, channel=channel))
        track.append(
            Message(
                "control_change",
                control=7,
                value=volume_to_cc(voice.volume_db),
                channel=channel,
            )
        )

        # [start, end, note, velocity] in ticks
        spans: list[list[int]] = []
        for note in schedule.notes:
            if note.color != color.identifier:
                continue
            start = seconds_to_ticks(note.start, playback.tempo_bpm, playback.ticks_per_beat)
            end = seconds_to_ticks(
                note.start + note.duration, playback.tempo_bpm, playback.ticks_per_beat
            )
            spans.append([start, max(end, start + 1), note.note, note.velocity])
        spans.sort(key=lambda span: span[0])

        # One channel holds one voice per pitch: a new onset ends the
        # sounding note of the same pitch
        sounding: dict[int, list[int]] = {}
        for span in spans:
            previous = sounding.get(span[2])
            if previous is not None and previous[1] > span[0]:
                previous[1] = span[0]
            sounding[span[2]] = span

        # (tick, order, type, note, velocity); note-offs sort before note-ons
        timeline: list[tuple[int, int, str, int, int]] = []
        for start, end, note_number, velocity in spans:
            if end <= start:
                continue
            timeline.append((start, 1, "note_on", note_number, velocity))
            timeline.append((end, 0, "note_off", note_number, 0))
        timeline.sort(key=lambda x: (x[0], x[1]))

        previous_tick = 0
        for tick, _, message_type, note_number, velocity in timeline:
            track.append(
                Message(
                    message_type,
                    note=note_number,
                    velocity=velocity,
                    channel=channel,
                    time=tick - previous_tick,
                )
            )
            previous_tick = tick

    buffer = io.BytesIO()
    midi_file.save(file=buffer)
    return buffer.getvalue()


def midi_to_audio(
    midi_path: str, wav_path: str | None = None, sample_rate: int = 44100
) -> str | None:
    """Synthesize a MIDI file to audio using software synthesis.

    The output is normalized to a peak of 1.0 to prevent clipping.

    Args:
        midi_path: Path to the input MIDI file.
        wav_path: Destination WAV path. Defaults to the MIDI path with a
            ``.wav`` extension.
        sample_rate: Output sample rate in Hz.

    Returns:
        Path to the generated WAV file, or None if synthesis failed.
    """
    try:
        pretty_midi_obj = pretty_midi.PrettyMIDI(midi_path)
        audio_data = pretty_midi_obj.synthesize(fs=sample_rate)

        peak_amplitude = np.max(np.abs(audio_data)) if audio_data.size else 0.0
        if peak_amplitude > 0:
            audio_data = audio_data / peak_amplitude

        if wav_path is None:
            wav_path = os.path.splitext(midi_path)[0] + ".wav"
        sf.write(wav_path, audio_data, sample_rate)

        return wav_path

    except Exception as e:
        logger.error(f"Failed to synthesize MIDI to audio: {e}")
        return None
