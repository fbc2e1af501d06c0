import cv2
import numpy as np
import pytest

from doodle_to_score.errors import InputError
from doodle_to_score.image_processing import (
    CLEAR_FILL,
    blank_raster,
    load_raster,
    to_rgba,
)


def test_blank_raster_transparent():
    raster = blank_raster(640, 480)
    assert (raster.width, raster.height) == (640, 480)
    assert raster.pixels.dtype == np.uint8
    assert not raster.pixels.any()


def test_blank_raster_cleared_is_white():
    raster = blank_raster(4, 3, fill=CLEAR_FILL)
    assert raster.pixel(3, 2) == (255, 255, 255, 255)


@pytest.mark.parametrize("size", [(0, 10), (10, 0)])
def test_blank_raster_invalid_size(size):
    with pytest.raises(InputError):
        blank_raster(*size)


def test_to_rgba_from_bgr():
    bgr = np.array([[[68, 68, 239]]], dtype=np.uint8)
    assert to_rgba(bgr).tolist() == [[[239, 68, 68, 255]]]


def test_to_rgba_from_gray():
    gray = np.array([[0, 200]], dtype=np.uint8)
    assert to_rgba(gray).tolist() == [[[0, 0, 0, 255], [200, 200, 200, 255]]]


def test_load_raster_keeps_alpha(tmp_path):
    bgra = np.zeros((6, 8, 4), dtype=np.uint8)
    bgra[2, 3] = (246, 130, 59, 200)
    path = tmp_path / "doodle.png"
    cv2.imwrite(str(path), bgra)

    raster = load_raster(str(path))
    assert (raster.width, raster.height) == (8, 6)
    assert raster.pixel(3, 2) == (59, 130, 246, 200)
    assert raster.pixel(0, 0) == (0, 0, 0, 0)


def test_load_raster_missing_file(tmp_path):
    with pytest.raises(InputError):
        load_raster(str(tmp_path / "missing.png"))
