"""Domain models for the doodle-to-score application.

This module provides a centralized location for all data models used by the
transcriber and its collaborators:

- Core domain models (ReferenceColor, RasterBuffer, ChordEvent, ScheduledNote)
- Configuration parameters (GridParams, TranscriptionParams, ...)
- Pipeline stage results (TranscriptionResult, ScheduleResult, MidiResult)
- Visualization data containers

All models are built using Pydantic for data validation and serialization.
"""

# Re-export core models
from doodle_to_score.models.core_models import (
    ReferenceColor,
    RasterBuffer,
    ChordEvent,
    ScheduledNote,
)

# Re-export setting models
from doodle_to_score.models.settings_models import (
    DEFAULT_PALETTE,
    DEFAULT_VOICES,
    GridParams,
    TranscriptionParams,
    InstrumentVoice,
    PlaybackParams,
)

# Re-export pipeline models
from doodle_to_score.models.pipeline_models import (
    TranscriptionResult,
    ScheduleResult,
    MidiResult,
)

# Re-export visualization models
from doodle_to_score.models.visualization_models import VisualizationSet
