"""doodle-to-score CLI entry point."""

import json
import logging
import sys
from pathlib import Path

import click
import cv2
from pydantic import ValidationError

from doodle_to_score import __version__
from doodle_to_score.errors import DoodleError
from doodle_to_score.image_processing import load_raster
from doodle_to_score.models import (
    DEFAULT_PALETTE,
    DEFAULT_VOICES,
    GridParams,
    PlaybackParams,
    TranscriptionParams,
)
from doodle_to_score.music_utils import frequency_to_midi, get_key_name
from doodle_to_score.pipeline import process_complete_pipeline


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="doodle-to-score")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """doodle-to-score: turn a colored drawing into a looping score."""
    _configure_logging(verbose)


# ── palette subcommand ─────────────────────────────────────────────────────────

@main.command()
def palette() -> None:
    """List the reference colors and the voice each one plays."""
    for color in DEFAULT_PALETTE:
        voice = DEFAULT_VOICES[color.instrument]
        click.echo(
            f"{color.identifier}  rgb{color.rgb}  brush {color.brush_size}px  "
            f"{voice.name} (program {voice.program})"
        )


# ── transcribe subcommand ──────────────────────────────────────────────────────

@main.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option("--time-steps", type=int, default=64, show_default=True,
              help="Number of time columns sampled across the image.")
@click.option("--min-pitch", type=int, default=36, show_default=True,
              help="Lowest MIDI note (bottom of the image).")
@click.option("--max-pitch", type=int, default=96, show_default=True,
              help="Highest MIDI note (top of the image).")
@click.option("--loop-seconds", type=float, default=8.0, show_default=True,
              help="Length of one loop in seconds.")
@click.option("--tempo", type=click.IntRange(30, 300), default=120, show_default=True,
              help="Tempo in BPM used for note lengths.")
@click.option("--repeats", type=click.IntRange(1, 64), default=1, show_default=True,
              help="Number of loop passes written to the MIDI file.")
@click.option("--output", "-o", default=None, metavar="PATH",
              help="Destination MIDI file. Defaults to <image>.mid.")
@click.option("--wav", default=None, metavar="PATH",
              help="Also render the loop to this WAV file.")
@click.option("--piano-roll", default=None, metavar="PATH",
              help="Save a piano-roll image of the transcription.")
@click.option("--sampling", default=None, metavar="PATH",
              help="Save the image with every sample point marked.")
@click.option("--json", "json_path", default=None, metavar="PATH",
              help="Write the chord events as JSON ('-' for stdout).")
def transcribe(
    image: str,
    time_steps: int,
    min_pitch: int,
    max_pitch: int,
    loop_seconds: float,
    tempo: int,
    repeats: int,
    output: str | None,
    wav: str | None,
    piano_roll: str | None,
    sampling: str | None,
    json_path: str | None,
) -> None:
    """
    Transcribe IMAGE into per-color chord events and write a MIDI loop.

    \b
    Examples:
      doodle-to-score transcribe doodle.png
      doodle-to-score transcribe doodle.png -o loop.mid --wav loop.wav --repeats 4
      doodle-to-score transcribe doodle.png --json - --piano-roll roll.png
    """
    try:
        params = TranscriptionParams(
            grid=GridParams(
                time_steps=time_steps,
                min_pitch=min_pitch,
                max_pitch=max_pitch,
                loop_duration_seconds=loop_seconds,
            )
        )
        playback = PlaybackParams(tempo_bpm=tempo, repeats=repeats)
    except ValidationError as exc:
        click.echo(f"  ERROR: Invalid settings: {exc}", err=True)
        sys.exit(1)

    midi_path = output if output is not None else str(Path(image).with_suffix(".mid"))
    quiet = json_path == "-"

    def say(message: str = "") -> None:
        if not quiet:
            click.echo(message)


    say(f"doodle-to-score v{__version__}")
    say(f"  Image  : {image}")
    say(f"  Grid   : {time_steps} steps x {params.grid.pitch_range} pitches  |  "
        f"Loop: {loop_seconds}s  |  Tempo: {tempo} BPM")
    say()

    try:
        raster = load_raster(image)
        result, schedule, midi_result, visuals = process_complete_pipeline(
            raster,
            params,
            playback,
            midi_path=midi_path,
            render_audio=wav is not None,
            wav_path=wav,
            visualize=piano_roll is not None or sampling is not None,
        )
    except DoodleError as exc:
        click.echo(f"  ERROR: {exc}", err=True)
        sys.exit(1)

    for identifier, chords in result.items():
        notes = sorted({frequency_to_midi(f) for chord in chords for f in chord.pitches})
        span = f"{get_key_name(notes[0])}-{get_key_name(notes[-1])}" if notes else "-"
        say(f"  {identifier}  {len(chords):3d} chord(s)  {span}")
    say()

    if result.is_empty:
        click.echo("  WARNING: No painted pixels matched the palette.", err=True)

    if json_path is not None:
        payload = json.dumps(result.to_dict(), indent=2)
        if json_path == "-":
            click.echo(payload)
        else:
            try:
                Path(json_path).write_text(payload)
            except OSError as exc:
                click.echo(f"  ERROR: Could not write {json_path}: {exc}", err=True)
                sys.exit(1)
            say(f"  JSON   : {json_path}")

    if piano_roll is not None and visuals.piano_roll is not None:
        try:
            visuals.piano_roll.savefig(piano_roll)
        except (OSError, ValueError) as exc:
            click.echo(f"  ERROR: Could not write {piano_roll}: {exc}", err=True)
            sys.exit(1)
        say(f"  Roll   : {piano_roll}")
    if sampling is not None and visuals.sampling_grid is not None:
        try:
            written = cv2.imwrite(
                sampling, cv2.cvtColor(visuals.sampling_grid, cv2.COLOR_RGB2BGR)
            )
        except cv2.error as exc:
            click.echo(f"  ERROR: Could not write {sampling}: {exc}", err=True)
            sys.exit(1)
        if not written:
            click.echo(f"  ERROR: Could not write {sampling}", err=True)
            sys.exit(1)
        say(f"  Samples: {sampling}")

    say(f"  MIDI   : {midi_result.midi_file_path}  ({len(schedule.notes)} notes)")
    if wav is not None:
        if midi_result.audio_path is None:
            click.echo("  ERROR: Could not render audio.", err=True)
            sys.exit(1)
        say(f"  WAV    : {midi_result.audio_path}")


if __name__ == "__main__":
    main()
