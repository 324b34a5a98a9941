"""Tests for imaging — Pillow decode/encode glue."""

import numpy as np
import pytest
from PIL import Image

from imaging import load_image, save_image

pytestmark = pytest.mark.smoke


def test_round_trip_png(tmp_path, frame):
    path = save_image(frame, tmp_path / "nested" / "out.png")
    loaded = load_image(path)
    assert loaded.dtype == np.uint8
    assert loaded.flags.writeable
    np.testing.assert_array_equal(loaded, frame)


def test_load_converts_to_rgb(tmp_path):
    Image.new("RGBA", (3, 2), (10, 20, 30, 128)).save(tmp_path / "a.png")
    loaded = load_image(tmp_path / "a.png")
    assert loaded.shape == (2, 3, 3)
    assert loaded[0, 0].tolist() == [10, 20, 30]


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_image(tmp_path / "nope.png")


def test_load_garbage_file(tmp_path):
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"not an image")
    with pytest.raises(ValueError, match="error decoding image"):
        load_image(bad)


def test_save_jpeg(tmp_path, frame):
    path = save_image(frame, tmp_path / "out.jpg")
    with Image.open(path) as img:
        assert img.format == "JPEG"
        assert img.size == (frame.shape[1], frame.shape[0])
