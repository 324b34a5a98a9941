"""Tests for sorting.intervals — step selection and block partitioning."""

import numpy as np
import pytest

from sorting.determinism import make_rng
from sorting.intervals import block_indices, partition, step_size

pytestmark = pytest.mark.smoke


def test_interval_one_always_steps_one():
    rng = make_rng(0)
    assert {step_size(1, rng) for _ in range(50)} == {1}


def test_step_within_bounds():
    rng = make_rng(1)
    steps = {step_size(6, rng) for _ in range(500)}
    assert steps == {1, 2, 3, 4, 5, 6}


def test_progressive_amount_clamps_to_interval():
    rng = make_rng(2)
    assert {step_size(4, rng, progressive_amount=5) for _ in range(50)} == {4}


def test_progressive_bias_grows_per_line():
    steps = [step_size(64, make_rng(9), progressive_amount=0, outer=o) for o in range(10)]
    assert steps == sorted(steps)
    assert steps[-1] == min(steps[0] + 9, 64)


def test_same_seed_same_step():
    assert step_size(50, make_rng(77)) == step_size(50, make_rng(77))


def test_stepped_blocks_cover_line_once():
    blocks = block_indices(10, step=4)
    assert [b.tolist() for b in blocks] == [[0, 1, 2, 3], [4, 5, 6, 7], [8, 9]]


def test_stepped_single_pixel_steps():
    blocks = block_indices(3, step=1)
    assert [b.tolist() for b in blocks] == [[0], [1], [2]]


def test_windowed_blocks_clamp_to_last_index():
    blocks = block_indices(4, step=2, discretize=3)
    assert [b.tolist() for b in blocks] == [[0, 1, 2], [2, 3, 3]]


def test_windowed_blocks_overlap_when_step_is_short():
    blocks = block_indices(5, step=1, discretize=2)
    assert [b.tolist() for b in blocks] == [[0, 1], [1, 2], [2, 3], [3, 4], [4, 4]]


def test_invalid_step_rejected():
    with pytest.raises(ValueError):
        block_indices(4, step=0)


def test_partition_returns_copies():
    line = np.arange(12, dtype=np.uint8).reshape(4, 3)
    blocks = partition(line, step=2)
    blocks[0][0, 0] = 255
    assert line[0, 0] == 0
    np.testing.assert_array_equal(np.concatenate(blocks), np.where(line == 0, 255, line))
