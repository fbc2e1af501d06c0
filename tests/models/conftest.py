import pytest
from doodle_to_score.models import ReferenceColor, ChordEvent


@pytest.fixture
def valid_color():
    return ReferenceColor(identifier="#EF4444", rgb=(239, 68, 68), instrument="triangle")


@pytest.fixture
def valid_chord():
    return ChordEvent(time=0.0, pitches=[440.0], duration="16n")
