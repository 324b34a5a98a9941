"""Block transformer — shuffle, reverse and score-order one pixel block."""

import numpy as np

from sorting.options import SortOptions


def order_by_key(block: np.ndarray, keys: np.ndarray, reverse: bool = False) -> np.ndarray:
    """Reorder ``block`` by ``keys``.

    Ascending by default. With ``reverse`` the block is flipped, sorted
    and flipped back: descending by key. With the stable sort used here,
    ties come out in their original order.
    """
    if not reverse:
        return block[np.argsort(keys, kind="stable")]
    flipped = block[::-1]
    order = np.argsort(keys[::-1], kind="stable")
    return flipped[order][::-1]


def transform_block(
    block: np.ndarray, options: SortOptions, rng: np.random.Generator
) -> np.ndarray:
    """Apply the configured reordering to one (N, 3) block.

    Shuffle takes precedence and skips score ordering entirely.
    """
    if len(block) < 2:
        return block
    if options.shuffle:
        return block[rng.permutation(len(block))]
    return order_by_key(block, options.scorer(block), options.reverse)
