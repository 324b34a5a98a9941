"""Sort options — immutable per-pass settings plus the parameter schema."""

import logging
import math
import numbers
from dataclasses import dataclass, field
from enum import Enum

from sorting.errors import ConfigurationError
from sorting.scores import (
    BlockScorer,
    Coefficients,
    ColorChannel,
    ScoreFunction,
    resolve_scorer,
)

logger = logging.getLogger(__name__)


class Direction(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    CONCENTRIC = "concentric"
    DIAGONAL = "diagonal"


PARAMS: dict = {
    "by": {
        "type": "choice",
        "choices": [f.value for f in ScoreFunction],
        "default": "luma",
        "label": "Sort By",
    },
    "interval": {
        "type": "int",
        "min": 1,
        "max": 65535,
        "default": 1,
        "label": "Interval",
        "description": "Maximum step between blocks along a line",
    },
    "reverse": {
        "type": "bool",
        "default": False,
        "label": "Reverse Sort",
    },
    "discretize": {
        "type": "int",
        "min": 1,
        "max": 65535,
        "default": 1,
        "label": "Block Size",
        "description": "Window width gathered per step (1 = contiguous steps)",
    },
    "progressive_amount": {
        "type": "int",
        "min": 0,
        "max": 65535,
        "default": None,
        "label": "Progressive Amount",
        "description": "Step bias that grows by one per line",
    },
    "direction": {
        "type": "choice",
        "choices": [d.value for d in Direction],
        "default": "horizontal",
        "label": "Direction",
    },
    "shuffle": {
        "type": "bool",
        "default": False,
        "label": "Shuffle",
    },
    "channel": {
        "type": "choice",
        "choices": [c.value for c in ColorChannel],
        "default": None,
        "label": "Channel",
    },
    "red": {
        "type": "float",
        "min": -16.0,
        "max": 16.0,
        "default": None,
        "label": "Red Coefficient",
    },
    "green": {
        "type": "float",
        "min": -16.0,
        "max": 16.0,
        "default": None,
        "label": "Green Coefficient",
    },
    "blue": {
        "type": "float",
        "min": -16.0,
        "max": 16.0,
        "default": None,
        "label": "Blue Coefficient",
    },
    "splice": {
        "type": "float",
        "min": 0.0,
        "max": 1.0,
        "default": None,
        "label": "Splice",
    },
    "edge_threshold": {
        "type": "int",
        "min": 0,
        "max": 255,
        "default": None,
        "label": "Edge Threshold",
    },
    "image_threshold": {
        "type": "int",
        "min": 0,
        "max": 255,
        "default": None,
        "label": "Image Threshold",
    },
    "image_mask": {
        "type": "str",
        "default": None,
        "label": "Image Mask",
    },
}

_RESERVED = ("splice", "edge_threshold", "image_threshold", "image_mask")


@dataclass(frozen=True)
class SortOptions:
    """All tunables for one sort pass.

    Validated on construction; the resolved block scorer is stored in
    ``scorer`` so the engine never re-dispatches on ``by``.
    """

    by: ScoreFunction = ScoreFunction.LUMA
    interval: int = 1
    reverse: bool = False
    coefficients: Coefficients | None = None
    discretize: int = 1
    progressive_amount: int | None = None
    direction: Direction = Direction.HORIZONTAL
    shuffle: bool = False
    channel: ColorChannel | None = None
    splice: float | None = None
    edge_threshold: int | None = None
    image_threshold: int | None = None
    image_mask: str | None = None
    scorer: BlockScorer = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not isinstance(self.by, ScoreFunction):
            raise ConfigurationError(f"unknown score function: {self.by!r}")
        if not isinstance(self.direction, Direction):
            raise ConfigurationError(f"unknown direction: {self.direction!r}")
        if self.channel is not None and not isinstance(self.channel, ColorChannel):
            raise ConfigurationError(f"unknown channel: {self.channel!r}")
        _require_int("interval", self.interval, minimum=1)
        _require_int("discretize", self.discretize, minimum=1)
        if self.progressive_amount is not None:
            _require_int("progressive_amount", self.progressive_amount, minimum=0)
        if self.splice is not None:
            if isinstance(self.splice, bool) or not isinstance(self.splice, numbers.Real):
                raise ConfigurationError(f"splice must be a number, got {self.splice!r}")
            if not 0.0 <= self.splice <= 1.0:
                raise ConfigurationError(f"splice must be in [0, 1], got {self.splice}")
        for name in ("edge_threshold", "image_threshold"):
            value = getattr(self, name)
            if value is not None:
                _require_int(name, value, minimum=0, maximum=255)

        # Normalise numpy integers so equality and hashing match plain ints.
        for name in ("interval", "discretize", "progressive_amount"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, int(value))

        object.__setattr__(
            self, "scorer", resolve_scorer(self.by, self.coefficients, self.channel)
        )

        reserved = [name for name in _RESERVED if getattr(self, name) is not None]
        if reserved:
            logger.debug("Reserved options have no effect yet: %s", reserved)

    @property
    def windowed(self) -> bool:
        """True when fixed-width windows are gathered per step."""
        return self.discretize > 1

    @property
    def effective_coefficients(self) -> Coefficients:
        return self.coefficients or Coefficients.default_for(self.by)

    @classmethod
    def from_params(cls, params: dict) -> "SortOptions":
        """Build options from a loose params dict (CLI, JSON, ...).

        Unknown keys are ignored, NaN/Inf floats fall back to defaults,
        numeric values are clamped into the PARAMS range.

        Raises:
            ConfigurationError: On an unknown choice or an uncoercible value.
        """
        values = {}
        for name, spec in PARAMS.items():
            raw = params.get(name)
            if isinstance(raw, float) and (math.isnan(raw) or math.isinf(raw)):
                raw = None
            values[name] = spec["default"] if raw is None else _coerce(name, spec, raw)

        coefficients = None
        weights = (values.pop("red"), values.pop("green"), values.pop("blue"))
        if any(w is not None for w in weights):
            by = ScoreFunction(values["by"])
            default = Coefficients.default_for(by).as_tuple()
            coefficients = Coefficients(
                *(d if w is None else w for w, d in zip(weights, default))
            )

        return cls(
            by=ScoreFunction(values["by"]),
            interval=values["interval"],
            reverse=values["reverse"],
            coefficients=coefficients,
            discretize=values["discretize"],
            progressive_amount=values["progressive_amount"],
            direction=Direction(values["direction"]),
            shuffle=values["shuffle"],
            channel=ColorChannel(values["channel"]) if values["channel"] else None,
            splice=values["splice"],
            edge_threshold=values["edge_threshold"],
            image_threshold=values["image_threshold"],
            image_mask=values["image_mask"],
        )


def _coerce(name: str, spec: dict, raw):
    ptype = spec["type"]
    if ptype == "choice":
        value = str(raw).strip().lower()
        if value not in spec["choices"]:
            raise ConfigurationError(
                f"{name} must be one of {spec['choices']}, got {raw!r}"
            )
        return value
    if ptype == "bool":
        if isinstance(raw, str):
            return raw.strip().lower() in ("1", "true", "yes", "on")
        return bool(raw)
    if ptype == "str":
        return str(raw)
    try:
        number = int(raw) if ptype == "int" else float(raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name}: cannot parse {raw!r} as {ptype}") from e
    return max(spec["min"], min(spec["max"], number))


def _require_int(name: str, value, minimum: int, maximum: int | None = None):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(f"{name} must be an int, got {value!r}")
    if value < minimum or (maximum is not None and value > maximum):
        bound = f">= {minimum}" if maximum is None else f"in [{minimum}, {maximum}]"
        raise ConfigurationError(f"{name} must be {bound}, got {value}")
