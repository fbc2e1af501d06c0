import numpy as np
import pytest

from doodle_to_score.color_matching import (
    MAX_RGB_DISTANCE,
    classify_pixels,
    color_distance,
    find_closest_color,
    hex_to_rgb,
)
from doodle_to_score.models import DEFAULT_PALETTE, ReferenceColor


@pytest.mark.parametrize(
    "hex_color, rgb",
    [("#EF4444", (239, 68, 68)), ("3b82f6", (59, 130, 246)), ("#000000", (0, 0, 0))],
)
def test_hex_to_rgb(hex_color, rgb):
    assert hex_to_rgb(hex_color) == rgb


@pytest.mark.parametrize(
    "bad", ["", "#FFF", "#GG0000", "#1234567", "#\u0663\u06630000"]
)
def test_hex_to_rgb_invalid(bad):
    with pytest.raises(ValueError):
        hex_to_rgb(bad)


def test_color_distance():
    assert color_distance((0, 0, 0), (60, 80, 0)) == 100.0
    assert color_distance((0, 0, 0), (255, 255, 255)) == pytest.approx(MAX_RGB_DISTANCE)


def test_find_closest_color_exact_match():
    closest = find_closest_color((59, 130, 246), DEFAULT_PALETTE)
    assert closest.identifier == "#3B82F6"


def test_find_closest_color_rejects_at_threshold():
    # Exactly 100 away from black, far from every other color
    assert find_closest_color((60, 80, 0), DEFAULT_PALETTE) is None


def test_find_closest_color_accepts_below_threshold():
    # sqrt(99² + 14² + 1²) = sqrt(9998) ≈ 99.99
    closest = find_closest_color((99, 14, 1), DEFAULT_PALETTE)
    assert closest.identifier == "#000000"


def test_find_closest_color_rejects_background_gray():
    assert find_closest_color((255, 255, 255), DEFAULT_PALETTE) is None
    assert find_closest_color((180, 180, 180), DEFAULT_PALETTE) is None


def test_find_closest_color_tie_goes_to_first():
    first = ReferenceColor(identifier="first", rgb=(0, 0, 0), instrument="a")
    second = ReferenceColor(identifier="second", rgb=(20, 0, 0), instrument="b")
    assert find_closest_color((10, 0, 0), [first, second]).identifier == "first"
    assert find_closest_color((10, 0, 0), [second, first]).identifier == "second"


def test_find_closest_color_empty_palette():
    assert find_closest_color((0, 0, 0), []) is None


def test_classify_pixels_alpha_gate():
    pixels = np.array([[[239, 68, 68, 100], [239, 68, 68, 200], [239, 68, 68, 128]]])
    labels = classify_pixels(pixels, DEFAULT_PALETTE)
    assert labels.tolist() == [[-1, 0, -1]]


def test_classify_pixels_threshold():
    pixels = np.array([[60, 80, 0, 255], [99, 14, 1, 255]])
    labels = classify_pixels(pixels, DEFAULT_PALETTE)
    assert labels.tolist() == [-1, 4]


def test_classify_pixels_agrees_with_scalar_classifier():
    rng = np.random.default_rng(0)
    rgb = rng.integers(0, 256, size=(500, 3))
    # Pull half the samples toward palette colors so both outcomes occur
    anchors = np.array([c.rgb for c in DEFAULT_PALETTE])
    rgb[::2] = np.clip(
        anchors[rng.integers(0, len(anchors), 250)] + rng.integers(-60, 61, (250, 3)),
        0,
        255,
    )
    pixels = np.concatenate([rgb, np.full((500, 1), 255)], axis=1)

    labels = classify_pixels(pixels, DEFAULT_PALETTE)
    for sample, label in zip(rgb, labels):
        expected = find_closest_color(sample, DEFAULT_PALETTE)
        if expected is None:
            assert label == -1
        else:
            assert DEFAULT_PALETTE[label] is expected
