"""Tests for the pixelsort command line."""

import numpy as np
import pytest

from imaging import load_image, save_image
from main import build_parser, run

pytestmark = pytest.mark.smoke


@pytest.fixture
def image_file(tmp_path, frame):
    return save_image(frame, tmp_path / "in.png")


def test_parser_requires_input_and_output():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_run_sorts_and_saves(tmp_path, image_file, frame, multiset):
    out = tmp_path / "out" / "sorted.png"
    code = run(
        [
            "-f", str(image_file),
            "-o", str(out),
            "--by", "intensity",
            "--interval", "40",
            "--progressive-amount", "40",
            "--seed", "3",
        ]
    )
    assert code == 0
    result = load_image(out)
    assert multiset(result) == multiset(frame)
    keys = result.astype(np.uint16).sum(axis=2) // 3
    assert (np.diff(keys.astype(int), axis=1) >= 0).all()


def test_run_is_reproducible_with_seed(tmp_path, image_file):
    args = ["-f", str(image_file), "--shuffle", "--interval", "7", "--seed", "11"]
    assert run(args + ["-o", str(tmp_path / "a.png")]) == 0
    assert run(args + ["-o", str(tmp_path / "b.png")]) == 0
    np.testing.assert_array_equal(
        load_image(tmp_path / "a.png"), load_image(tmp_path / "b.png")
    )


def test_run_unsupported_direction_exits_2(tmp_path, image_file, capsys):
    out = tmp_path / "never.png"
    code = run(["-f", str(image_file), "-o", str(out), "--direction", "concentric"])
    assert code == 2
    assert not out.exists()
    assert "concentric" in capsys.readouterr().err


def test_run_conflicting_options_exits_2(tmp_path, image_file, capsys):
    code = run(
        ["-f", str(image_file), "-o", str(tmp_path / "x.png"), "--by", "hue",
         "--channel", "red"]
    )
    assert code == 2
    assert "channel" in capsys.readouterr().err


def test_run_missing_input_exits_1(tmp_path, capsys):
    code = run(["-f", str(tmp_path / "missing.png"), "-o", str(tmp_path / "x.png")])
    assert code == 1
    assert "not found" in capsys.readouterr().err


def test_run_negative_workers_exits_2(tmp_path, image_file, capsys):
    out = tmp_path / "never.png"
    code = run(["-f", str(image_file), "-o", str(out), "--workers", "-1"])
    assert code == 2
    assert not out.exists()
    assert "workers" in capsys.readouterr().err
