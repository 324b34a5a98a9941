"""Interval partitioner — splits one traversal line into pixel blocks.

Two policies, picked by ``discretize``:

- stepped (discretize == 1): each step of size ``s`` becomes the block
  ``[inner, inner + s)``, cut at the end of the line. Every pixel lands
  in exactly one block.
- windowed (discretize > 1): each step gathers the window
  ``[inner, inner + discretize)``. Indices past the end clamp to the last
  pixel, so the tail pixel may be read more than once.

The step size is random per line. That is intended for the effect;
pass a seeded generator for reproducible output.
"""

import numpy as np


def step_size(
    interval: int,
    rng: np.random.Generator,
    progressive_amount: int | None = None,
    outer: int = 0,
) -> int:
    """Pick the step for one line: ``min(base + bias, interval)``.

    ``base`` is uniform in ``[1, interval]``. With a progressive amount
    the bias is ``progressive_amount + outer``, growing by one per line.
    """
    base = int(rng.integers(1, interval + 1))
    bias = 0 if progressive_amount is None else progressive_amount + outer
    return min(base + bias, interval)


def block_indices(inner_limit: int, step: int, discretize: int = 1) -> list[np.ndarray]:
    """Inner-index arrays for every block of a line of ``inner_limit`` pixels."""
    if step < 1:
        raise ValueError(f"step must be >= 1, got {step}")
    starts = range(0, inner_limit, step)
    if discretize == 1:
        return [np.arange(s, min(s + step, inner_limit)) for s in starts]
    last = inner_limit - 1
    return [np.minimum(np.arange(s, s + discretize), last) for s in starts]


def partition(line: np.ndarray, step: int, discretize: int = 1) -> list[np.ndarray]:
    """Gather the blocks of ``line`` (shape (L, 3)) as independent copies."""
    return [line[idx] for idx in block_indices(len(line), step, discretize)]
