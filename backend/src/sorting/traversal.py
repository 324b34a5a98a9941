"""Traversal planner — maps a direction onto outer/inner line iteration.

Everything downstream addresses pixels as (inner, outer). The plan owns
the translation to real image coordinates, so partitioning, block
transforms and write-back never branch on direction themselves.
"""

from dataclasses import dataclass

import numpy as np

from sorting.errors import UnsupportedTraversal
from sorting.options import Direction

IMPLEMENTED_DIRECTIONS = frozenset({Direction.HORIZONTAL, Direction.VERTICAL})


@dataclass(frozen=True)
class TraversalPlan:
    direction: Direction
    outer_limit: int
    inner_limit: int

    def line(self, image: np.ndarray, outer: int) -> np.ndarray:
        """Pixels of one traversal line, in inner-index order (a view)."""
        if self.direction is Direction.HORIZONTAL:
            return image[outer, :, :]
        return image[:, outer, :]


def plan(width: int, height: int, direction: Direction) -> TraversalPlan:
    """Build the traversal plan for a ``width`` x ``height`` image.

    Raises:
        UnsupportedTraversal: For directions without a coordinate mapping.
    """
    if direction not in IMPLEMENTED_DIRECTIONS:
        raise UnsupportedTraversal(direction)
    if direction is Direction.HORIZONTAL:
        return TraversalPlan(direction, outer_limit=height, inner_limit=width)
    return TraversalPlan(direction, outer_limit=width, inner_limit=height)
