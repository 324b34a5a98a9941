"""Sort engine — one pixel-sort pass over an RGB image, in place.

Pass lifecycle: IDLE -> PLANNING -> DISPATCHED -> COLLECTING -> DONE.
Any worker failure moves the pass to FAILED and raises WorkerFailure
before a single pixel of the caller's image is written.
"""

import dataclasses
import logging
import numbers
import os
import queue
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import numpy as np
import sentry_sdk

from sorting.blocks import transform_block
from sorting.determinism import draw_base_seed, line_rng
from sorting.errors import ConfigurationError, WorkerFailure
from sorting.intervals import partition, step_size
from sorting.options import SortOptions
from sorting.scores import ScoreFunction
from sorting.traversal import TraversalPlan, plan
from sorting.writer import Collector, LineFailure, LineResult

logger = logging.getLogger(__name__)

# Pass timing threshold (milliseconds)
SORT_WARN_MS = 2000


class SortPhase(Enum):
    IDLE = "idle"
    PLANNING = "planning"
    DISPATCHED = "dispatched"
    COLLECTING = "collecting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class SortPass:
    """Tracks the state of one sort pass."""

    phase: SortPhase = SortPhase.IDLE
    lines_total: int = 0
    lines_collected: int = 0
    base_seed: int | None = None
    error: str | None = None

    @property
    def progress(self) -> float:
        if self.lines_total == 0:
            return 0.0
        return self.lines_collected / self.lines_total


ProgressFn = Callable[[SortPass], None]


def default_workers() -> int:
    env = os.environ.get("PIXELSORT_WORKERS", "")
    if env.isdigit() and int(env) > 0:
        return int(env)
    return min(32, (os.cpu_count() or 1) + 4)


def _validate_image(image) -> None:
    if not isinstance(image, np.ndarray):
        raise ConfigurationError(
            f"image must be a numpy array, got {type(image).__name__}"
        )
    if image.ndim != 3 or image.shape[2] != 3:
        raise ConfigurationError(
            f"image must have shape (height, width, 3), got {image.shape}"
        )
    if image.dtype != np.uint8:
        raise ConfigurationError(f"image must be uint8, got {image.dtype}")
    if not image.flags.writeable:
        raise ConfigurationError("image buffer is read-only")


def _validate_workers(workers) -> None:
    if workers is None:
        return
    if isinstance(workers, bool) or not isinstance(workers, numbers.Integral):
        raise ConfigurationError(f"workers must be an int, got {workers!r}")
    if workers < 1:
        raise ConfigurationError(f"workers must be >= 1, got {workers}")


def sort_line(
    snapshot: np.ndarray,
    traversal: TraversalPlan,
    options: SortOptions,
    outer: int,
    base_seed: int,
) -> LineResult:
    """Partition and reorder one traversal line of ``snapshot``."""
    rng = line_rng(base_seed, outer)
    step = step_size(options.interval, rng, options.progressive_amount, outer)
    blocks = partition(traversal.line(snapshot, outer), step, options.discretize)
    return LineResult(outer, [transform_block(b, options, rng) for b in blocks])


def _capture_line_failure(e: BaseException, options: SortOptions, extra: dict):
    """Capture a worker exception to Sentry with pass-level context."""
    with sentry_sdk.new_scope() as scope:
        scope.set_tag("sort_by", options.by.value)
        scope.set_tag("direction", options.direction.value)
        scope.fingerprint = ["sort-worker-crash", options.by.value, type(e).__name__]
        scope.set_context("sort", extra)
        sentry_sdk.capture_exception(e, scope=scope)


def sort(
    image: np.ndarray,
    options: SortOptions | None = None,
    *,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
    workers: int | None = None,
    on_progress: ProgressFn | None = None,
) -> SortPass:
    """Pixel-sort ``image`` (H, W, 3) uint8 in place.

    Args:
        image:       RGB pixel grid, mutated in place.
        options:     Sort settings; defaults to ``SortOptions()``.
        rng:         Generator the pass seed is drawn from.
        seed:        Explicit pass seed; overrides ``rng``.
        workers:     Thread count; defaults to ``default_workers()``.
        on_progress: Called from the collector after every received line.

    Returns:
        The finished SortPass record.

    Raises:
        ConfigurationError:   Invalid image or options. Nothing dispatched.
        UnsupportedTraversal: Direction without a mapping. Nothing dispatched.
        WorkerFailure:        A line failed. The image is left untouched.
    """
    if options is None:
        options = SortOptions()
    if not isinstance(options, SortOptions):
        raise ConfigurationError(
            f"options must be SortOptions, got {type(options).__name__}"
        )

    state = SortPass(phase=SortPhase.PLANNING)
    _validate_image(image)
    _validate_workers(workers)
    height, width = image.shape[:2]
    traversal = plan(width, height, options.direction)

    state.lines_total = traversal.outer_limit
    state.base_seed = draw_base_seed(rng, seed)
    logger.debug(
        "Planned %s sort by %s: %d lines x %d px, interval=%d, discretize=%d",
        options.direction.value,
        options.by.value,
        traversal.outer_limit,
        traversal.inner_limit,
        options.interval,
        options.discretize,
    )

    if traversal.outer_limit == 0 or traversal.inner_limit == 0:
        state.phase = SortPhase.DONE
        return state

    sentry_sdk.add_breadcrumb(
        category="sort",
        message=f"Sorting {width}x{height} by {options.by.value}",
        data={"direction": options.direction.value, "interval": options.interval},
        level="info",
    )

    snapshot = image.copy()
    channel: queue.Queue = queue.Queue()

    def work(outer: int):
        try:
            channel.put(sort_line(snapshot, traversal, options, outer, state.base_seed))
        except BaseException as e:
            # Every line posts exactly one message or the collector never returns.
            channel.put(LineFailure(outer, e))

    def progressed(received: int):
        state.lines_collected = received
        if on_progress is not None:
            on_progress(state)

    t0 = time.monotonic()
    collector = Collector(channel, traversal.outer_limit)

    if workers is None:
        workers = default_workers()
    with ThreadPoolExecutor(max_workers=workers) as pool:
        state.phase = SortPhase.DISPATCHED
        for outer in range(traversal.outer_limit):
            pool.submit(work, outer)
        state.phase = SortPhase.COLLECTING
        collector.collect(progressed)

    if collector.failures:
        state.phase = SortPhase.FAILED
        first = min(collector.failures, key=lambda f: f.outer)
        failed = [f.outer for f in collector.failures]
        _capture_line_failure(
            first.error,
            options,
            {
                "outer": first.outer,
                "failed_lines": len(failed),
                "image_shape": list(image.shape),
                "seed": state.base_seed,
            },
        )
        state.error = f"{len(failed)} of {state.lines_total} lines failed"
        logger.error(
            "Sort pass aborted: %s (first at line %d: %s)",
            state.error,
            first.outer,
            type(first.error).__name__,
        )
        raise WorkerFailure(f"sort pass aborted: {state.error}", failed) from first.error

    collector.commit(image, traversal)
    state.phase = SortPhase.DONE

    elapsed_ms = (time.monotonic() - t0) * 1000
    if elapsed_ms > SORT_WARN_MS:
        logger.warning(
            "Sort pass took %.0fms (>%dms warn threshold) on %dx%d",
            elapsed_ms,
            SORT_WARN_MS,
            width,
            height,
        )
    else:
        logger.info("Sorted %d lines in %.0fms", state.lines_total, elapsed_ms)
    return state


def _variant(by: ScoreFunction):
    def sort_by(image: np.ndarray, options: SortOptions | None = None, **kwargs):
        base = options if options is not None else SortOptions(by=by)
        if base.by is not by:
            # Coefficients are tuned per score function; fall back to defaults.
            base = dataclasses.replace(base, by=by, coefficients=None)
        return sort(image, base, **kwargs)

    sort_by.__name__ = f"sort_by_{by.value}"
    sort_by.__doc__ = f"Sort ``image`` in place by {by.value}, ignoring ``options.by``."
    return sort_by


sort_by_luma = _variant(ScoreFunction.LUMA)
sort_by_brightness = _variant(ScoreFunction.BRIGHTNESS)
sort_by_chroma = _variant(ScoreFunction.CHROMA)
sort_by_saturation = _variant(ScoreFunction.SATURATION)
sort_by_hue = _variant(ScoreFunction.HUE)
sort_by_intensity = _variant(ScoreFunction.INTENSITY)
