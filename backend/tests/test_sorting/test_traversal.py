"""Tests for sorting.traversal — direction to outer/inner mapping."""

import numpy as np
import pytest

from sorting.errors import UnsupportedTraversal
from sorting.options import Direction
from sorting.traversal import plan

pytestmark = pytest.mark.smoke


def test_horizontal_walks_rows():
    p = plan(width=5, height=3, direction=Direction.HORIZONTAL)
    assert (p.outer_limit, p.inner_limit) == (3, 5)


def test_vertical_walks_columns():
    p = plan(width=5, height=3, direction=Direction.VERTICAL)
    assert (p.outer_limit, p.inner_limit) == (5, 3)


def test_line_views():
    image = np.arange(2 * 3 * 3, dtype=np.uint8).reshape(2, 3, 3)
    row = plan(3, 2, Direction.HORIZONTAL).line(image, 1)
    col = plan(3, 2, Direction.VERTICAL).line(image, 2)
    np.testing.assert_array_equal(row, image[1])
    np.testing.assert_array_equal(col, image[:, 2])
    # Views, not copies
    assert np.shares_memory(row, image)
    assert np.shares_memory(col, image)


@pytest.mark.parametrize("direction", [Direction.CONCENTRIC, Direction.DIAGONAL])
def test_unimplemented_directions_fail_fast(direction):
    with pytest.raises(UnsupportedTraversal) as exc_info:
        plan(4, 4, direction)
    assert exc_info.value.direction is direction
    assert isinstance(exc_info.value, NotImplementedError)
    assert direction.value in str(exc_info.value)
