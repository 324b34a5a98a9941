"""Scatter-gather writer — collects finished lines and writes them back.

Workers finish in any order and each posts exactly one message to a
shared queue. A single collector drains the queue; it is the only code
that ever writes into the image buffer.
"""

import logging
import queue
from dataclasses import dataclass
from typing import Callable

import numpy as np

from sorting.traversal import TraversalPlan

logger = logging.getLogger(__name__)


@dataclass
class LineResult:
    outer: int
    blocks: list[np.ndarray]

    @property
    def pixels(self) -> np.ndarray:
        """Blocks concatenated in block-list order."""
        if not self.blocks:
            return np.empty((0, 3), dtype=np.uint8)
        return np.concatenate(self.blocks, axis=0)


@dataclass
class LineFailure:
    outer: int
    error: BaseException


def write_line(image: np.ndarray, plan: TraversalPlan, outer: int, pixels: np.ndarray):
    """Write ``pixels`` along line ``outer``, clamping past-the-end indices.

    Position ``i`` maps to ``min(i, inner_limit - 1)``. Every element past
    the end lands on the last pixel in turn, so the last element of the
    sequence is what remains there.
    """
    line = plan.line(image, outer)
    last = plan.inner_limit - 1
    head = min(len(pixels), last)
    line[:head] = pixels[:head]
    if len(pixels) > last:
        line[last] = pixels[-1]


class Collector:
    """Single consumer for line messages.

    ``collect`` blocks until ``expected`` messages arrived; nothing is
    written until ``commit``.
    """

    def __init__(self, channel: queue.Queue, expected: int):
        self.channel = channel
        self.expected = expected
        self.results: list[LineResult] = []
        self.failures: list[LineFailure] = []

    @property
    def received(self) -> int:
        return len(self.results) + len(self.failures)

    def collect(self, on_message: Callable[[int], None] | None = None):
        while self.received < self.expected:
            message = self.channel.get()
            if isinstance(message, LineFailure):
                self.failures.append(message)
            else:
                self.results.append(message)
            if on_message is not None:
                on_message(self.received)
        return self

    def commit(self, image: np.ndarray, plan: TraversalPlan) -> int:
        """Write all collected lines in arrival order. Returns lines written."""
        for result in self.results:
            write_line(image, plan, result.outer, result.pixels)
        logger.debug("Committed %d lines", len(self.results))
        return len(self.results)
