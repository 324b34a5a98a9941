"""Score functions — map pixels to 8-bit ordering keys.

All kernels are vectorised over an (N, 3) uint8 block and return an (N,)
uint8 key array. Brightness, chroma and intensity use wrapping 8-bit
arithmetic on purpose: uint8 numpy operations roll over modulo 256
instead of saturating, and that rollover shows up in the sort order.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable

import numpy as np

from sorting.errors import ConfigurationError

BlockScorer = Callable[[np.ndarray], np.ndarray]

LUMA_WEIGHTS = (0.2126, 0.7152, 0.0722)


class ScoreFunction(Enum):
    LUMA = "luma"
    BRIGHTNESS = "brightness"
    CHROMA = "chroma"
    SATURATION = "saturation"
    HUE = "hue"
    INTENSITY = "intensity"


class ColorChannel(Enum):
    RED = "red"
    GREEN = "green"
    BLUE = "blue"

    @property
    def index(self) -> int:
        return ("red", "green", "blue").index(self.value)


# Functions that read the relationship between channels have no meaning
# on a single isolated channel.
CHANNEL_ISOLATION_UNSUPPORTED = frozenset({ScoreFunction.HUE, ScoreFunction.SATURATION})


@dataclass(frozen=True)
class Coefficients:
    """Per-channel weights. Zero means "leave this channel unweighted"."""

    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0

    @classmethod
    def default_for(cls, by: ScoreFunction) -> "Coefficients":
        if by is ScoreFunction.LUMA:
            return cls(*LUMA_WEIGHTS)
        return cls()

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.red, self.green, self.blue)


def _to_u8(values: np.ndarray) -> np.ndarray:
    """Truncate toward zero and saturate into [0, 255] (float -> u8 cast)."""
    return np.clip(np.trunc(values), 0, 255).astype(np.uint8)


def prescale(block: np.ndarray, coefficients: Coefficients) -> np.ndarray:
    """Multiply each channel by its non-zero coefficient, truncating to 8 bits."""
    weights = coefficients.as_tuple()
    if not any(weights):
        return block
    out = block.copy()
    for ch, weight in enumerate(weights):
        if weight != 0:
            out[:, ch] = _to_u8(block[:, ch].astype(np.float64) * weight)
    return out


def isolate(block: np.ndarray, channel: ColorChannel) -> np.ndarray:
    """Zero every channel except ``channel``."""
    out = np.zeros_like(block)
    out[:, channel.index] = block[:, channel.index]
    return out


# --- Kernels ---------------------------------------------------------------


def luma_keys(block: np.ndarray, weights=LUMA_WEIGHTS) -> np.ndarray:
    rgb = block.astype(np.float64)
    total = rgb[:, 0] * weights[0] + rgb[:, 1] * weights[1] + rgb[:, 2] * weights[2]
    return _to_u8(total)


def brightness_keys(block: np.ndarray) -> np.ndarray:
    # uint8 add wraps: (250 + 10) -> 4
    hi = block.max(axis=1)
    lo = block.min(axis=1)
    return (hi + lo) // np.uint8(2)


def chroma_keys(block: np.ndarray) -> np.ndarray:
    return block.max(axis=1) - block.min(axis=1)


def saturation_keys(block: np.ndarray) -> np.ndarray:
    hi = block.max(axis=1)
    lo = block.min(axis=1)
    spread = hi - lo
    safe_hi = np.where(hi == 0, np.uint8(1), hi)
    return np.where(hi == 0, np.uint8(0), spread // safe_hi).astype(np.uint8)


def hue_keys(block: np.ndarray) -> np.ndarray:
    """HSV hue in degrees, truncated and wrapped to 8 bits.

    Grayscale pixels score 0. Hues of 256 degrees and above alias onto
    0..103 after the wrap.
    """
    rgb = block.astype(np.float64)
    r, g, b = rgb[:, 0], rgb[:, 1], rgb[:, 2]
    hi = rgb.max(axis=1)
    lo = rgb.min(axis=1)
    delta = hi - lo
    gray = delta == 0
    safe = np.where(gray, 1.0, delta)

    hue = np.where(
        hi == r,
        np.mod((g - b) / safe, 6.0),
        np.where(hi == g, (b - r) / safe + 2.0, (r - g) / safe + 4.0),
    )
    degrees = np.trunc(hue * 60.0).astype(np.int64) % 360
    degrees[gray] = 0
    return (degrees % 256).astype(np.uint8)


def intensity_keys(block: np.ndarray) -> np.ndarray:
    total = block.astype(np.uint16).sum(axis=1)
    return (total // 3).astype(np.uint8)


_KERNELS: dict[ScoreFunction, BlockScorer] = {
    ScoreFunction.BRIGHTNESS: brightness_keys,
    ScoreFunction.CHROMA: chroma_keys,
    ScoreFunction.SATURATION: saturation_keys,
    ScoreFunction.HUE: hue_keys,
    ScoreFunction.INTENSITY: intensity_keys,
}


def resolve_scorer(
    by: ScoreFunction,
    coefficients: Coefficients | None = None,
    channel: ColorChannel | None = None,
) -> BlockScorer:
    """Bind a score function, its coefficients and channel into one callable.

    Dispatch on ``by`` happens here, once. The returned function maps an
    (N, 3) uint8 block to (N,) uint8 keys.

    Raises:
        ConfigurationError: If ``channel`` is combined with hue or saturation.
    """
    if channel is not None and by in CHANNEL_ISOLATION_UNSUPPORTED:
        raise ConfigurationError(
            f"channel isolation is not supported for '{by.value}' scoring"
        )
    if coefficients is None:
        coefficients = Coefficients.default_for(by)

    if by is ScoreFunction.LUMA:
        weights = coefficients.as_tuple()

        def kernel(block):
            return luma_keys(block, weights)

    else:
        base = _KERNELS[by]

        def kernel(block):
            return base(prescale(block, coefficients))

    if channel is None:
        return kernel

    def isolated(block):
        return kernel(isolate(block, channel))

    return isolated


def score_pixel(
    pixel,
    by: ScoreFunction,
    coefficients: Coefficients | None = None,
    channel: ColorChannel | None = None,
) -> int:
    """Score a single (r, g, b) pixel."""
    block = np.asarray(pixel, dtype=np.uint8).reshape(1, 3)
    return int(resolve_scorer(by, coefficients, channel)(block)[0])


def luma(pixel, coefficients: Coefficients | None = None) -> int:
    return score_pixel(pixel, ScoreFunction.LUMA, coefficients)


def brightness(pixel, coefficients: Coefficients | None = None) -> int:
    return score_pixel(pixel, ScoreFunction.BRIGHTNESS, coefficients)


def chroma(pixel, coefficients: Coefficients | None = None) -> int:
    return score_pixel(pixel, ScoreFunction.CHROMA, coefficients)


def saturation(pixel, coefficients: Coefficients | None = None) -> int:
    return score_pixel(pixel, ScoreFunction.SATURATION, coefficients)


def hue(pixel, coefficients: Coefficients | None = None) -> int:
    return score_pixel(pixel, ScoreFunction.HUE, coefficients)


def intensity(pixel, coefficients: Coefficients | None = None) -> int:
    return score_pixel(pixel, ScoreFunction.INTENSITY, coefficients)
