"""Models for visualization outputs.

The VisualizationSet model bundles every visual product of a run so a
caller can display or save them together.
"""

from typing import Any

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


class VisualizationSet(BaseModel):
    """Complete set of visualizations for a transcription.

    Attributes:
        sampling_grid: RGB image of the canvas with every sample point
            marked, or None.
        piano_roll: Matplotlib Figure of the chord events per color, or None.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    sampling_grid: np.ndarray | None = Field(
        None, description="Canvas with sample points overlaid"
    )
    piano_roll: Any | None = Field(
        None, description="Piano roll figure of the transcription"
    )
