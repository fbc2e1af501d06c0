"""Exception hierarchy for doodle-to-score."""


class DoodleError(Exception):
    """Base exception for transcription and rendering errors."""

    pass


class ConfigurationError(DoodleError):
    """Exception raised when the palette, voices or parameters are unusable."""

    pass


class InputError(DoodleError):
    """Exception raised when a raster cannot be read or has the wrong shape."""

    pass


class RenderError(DoodleError):
    """Exception raised when MIDI or audio output cannot be produced."""

    pass
