import numpy as np
import pytest


def _pixel_multiset(image: np.ndarray) -> list[tuple[int, int, int]]:
    return sorted(map(tuple, image.reshape(-1, 3).tolist()))


@pytest.fixture
def multiset():
    """Sorted list of pixels, for order-independent comparison."""
    return _pixel_multiset


@pytest.fixture
def frame():
    """Deterministic 24x32 RGB frame with varied pixel values."""
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, (24, 32, 3), dtype=np.uint8)


@pytest.fixture
def gray_row():
    """1x4 grayscale row: 40, 10, 30, 20."""
    values = np.array([40, 10, 30, 20], dtype=np.uint8)
    return np.repeat(values[:, np.newaxis], 3, axis=1)[np.newaxis, :, :].copy()
