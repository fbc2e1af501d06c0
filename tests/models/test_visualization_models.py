import numpy as np
from doodle_to_score.models.visualization_models import VisualizationSet


def test_visualizationset_defaults():
    v = VisualizationSet()
    assert v.sampling_grid is None
    assert v.piano_roll is None


def test_visualizationset_accepts_arrays():
    v = VisualizationSet(sampling_grid=np.zeros((2, 2, 3), dtype=np.uint8))
    assert v.sampling_grid.shape == (2, 2, 3)
