"""Seeded randomness for reproducible sort passes."""

import hashlib

import numpy as np


def derive_seed(base_seed: int, *parts) -> int:
    """Derive a deterministic seed from context. Same inputs = same output, always."""
    key = ":".join(str(p) for p in (base_seed, *parts))
    return int(hashlib.sha256(key.encode()).hexdigest()[:16], 16)


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Create an RNG. ``None`` seeds from OS entropy."""
    return np.random.default_rng(seed)


def draw_base_seed(rng: np.random.Generator | None = None, seed: int | None = None) -> int:
    """Pick the base seed for one pass.

    An explicit ``seed`` wins, then the caller's generator, then fresh entropy.
    """
    if seed is not None:
        return int(seed)
    if rng is None:
        rng = make_rng()
    return int(rng.integers(0, 2**63 - 1))


def line_rng(base_seed: int, outer: int) -> np.random.Generator:
    """Generator for one traversal line; independent of worker scheduling."""
    return make_rng(derive_seed(base_seed, "line", outer))
