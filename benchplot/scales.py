from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
import logging
import math
import sys

import numpy as np

from benchplot.errors import PlotDataError
from benchplot.values import DomainValue


LOGGER = logging.getLogger(__name__)

PIXEL_EPSILON = 1e-3
MAX_REFINE_PASSES = 32
NICE_DIVISORS = (2.0, 5.0, 10.0)

_FLOAT_EPSILON = sys.float_info.epsilon


@dataclass(frozen=True)
class TickPlan(Sequence[DomainValue]):
    """Tick marks for one axis plus the step and rounding unit that produced them."""

    ticks: tuple[DomainValue, ...]
    step: float
    granularity: float

    def __len__(self) -> int:
        return len(self.ticks)

    def __getitem__(self, index):  # type: ignore[override]
        return self.ticks[index]

    def __iter__(self) -> Iterator[DomainValue]:
        return iter(self.ticks)

    def labels(self) -> list[str]:
        return [format_value(v) for v in self.ticks]


def map_fraction(fraction: float, pixels: tuple[int, int]) -> int:
    p0, p1 = pixels
    length = p1 - p0
    if length == 0:
        return p1
    if math.isinf(fraction):
        return p1 if fraction > 0 else p0
    if math.isnan(fraction):
        return p0
    # Bias away from the interval edge so boundary values stay on their side.
    if length > 0:
        return p0 + math.floor(length * fraction + PIXEL_EPSILON)
    return p0 + math.ceil(length * fraction - PIXEL_EPSILON)


def map_value(value: DomainValue, low: DomainValue, high: DomainValue, pixels: tuple[int, int]) -> int:
    if high == low:
        return (pixels[0] + pixels[1]) // 2
    offset = float(value) - float(low)
    extent = float(high) - float(low)
    if extent == 0.0:
        fraction = math.copysign(math.inf, offset) if offset else 0.0
    else:
        fraction = offset / extent
    return map_fraction(fraction, pixels)


def generate_nice_ticks(vmin: float, vmax: float, max_points: int, *, min_step: float = 0.0) -> np.ndarray:
    ticks, _, _ = _nice_ticks(vmin, vmax, max_points, min_step)
    return np.asarray(ticks, dtype=np.float64)


def generate_tick_plan(low: DomainValue, high: DomainValue, max_points: int, *, min_step: float = 0.0) -> TickPlan:
    """Tick plan over [low, high]; refinement never goes below ``min_step``."""
    lo = float(min(low, high))
    hi = float(max(low, high))
    ticks, step, granularity = _nice_ticks(lo, hi, max_points, min_step)
    LOGGER.debug("tick plan for [%r, %r]: step=%r granularity=%r count=%d", lo, hi, step, granularity, len(ticks))
    return TickPlan(
        ticks=tuple(DomainValue.from_float(t) for t in ticks),
        step=step,
        granularity=granularity,
    )


def format_value(value: DomainValue) -> str:
    return value.format()


def _nice_ticks(vmin: float, vmax: float, max_points: int, min_step: float = 0.0) -> tuple[list[float], float, float]:
    if max_points <= 0:
        return [], 0.0, 0.0
    if math.isnan(vmin) or math.isnan(vmax):
        raise PlotDataError("tick range must not contain NaN")
    if not (math.isfinite(vmin) and math.isfinite(vmax)):
        raise PlotDataError("tick range must be finite")
    lo, hi = min(vmin, vmax), max(vmin, vmax)
    if abs(hi - lo) < _FLOAT_EPSILON:
        return [lo], 0.0, 0.0

    scale, granularity = _choose_scale(lo, hi, max_points, min_step)
    return _emit_ticks(lo, hi, scale, granularity, max_points), scale, granularity


def _choose_scale(lo: float, hi: float, max_points: int, min_step: float = 0.0) -> tuple[float, float]:
    span = hi - lo
    scale = 10.0 ** math.floor(math.log10(span))
    # Ticks are snapped to multiples of the granularity to hide float noise.
    granularity = scale / 10.0

    if 1 + math.floor(span / scale) > max_points:
        scale *= 10.0
        granularity *= 10.0

    for _ in range(MAX_REFINE_PASSES):
        base = scale
        for divisor in NICE_DIVISORS:
            candidate = base / divisor
            if candidate <= 0.0 or candidate < min_step or _aligned_count(lo, hi, candidate) > max_points:
                return scale, granularity
            scale = candidate
        granularity /= 10.0
    LOGGER.debug("tick refinement capped after %d passes for [%r, %r]", MAX_REFINE_PASSES, lo, hi)
    return scale, granularity


def _aligned_count(lo: float, hi: float, step: float) -> int:
    left = _first_multiple_at_or_above(lo, step)
    right = hi - _rem_euclid(hi, step)
    return math.floor(1.0 + (right - left) / step + 0.5)


def _emit_ticks(lo: float, hi: float, scale: float, granularity: float, max_points: int) -> list[float]:
    left = _first_multiple_at_or_above(lo, scale)
    right = hi - _rem_euclid(hi, scale)
    snap = granularity > 0.0 and math.isfinite(granularity)
    if snap:
        # Separate base and offset so tiny steps still advance at large magnitudes.
        base = math.floor(left / granularity) * granularity
        digits = max(0, round(-math.log10(granularity)))
    else:
        base = 0.0
        digits = 0
    offset = left - base

    out: list[float] = []
    while right - offset - base >= -_FLOAT_EPSILON and len(out) < max_points:
        if snap:
            value = base + round(offset / granularity) * granularity
            if digits <= 15:
                value = round(value, digits)
        else:
            value = base + offset
        out.append(0.0 if value == 0.0 else value)
        offset += scale
    return out


def _first_multiple_at_or_above(value: float, step: float) -> float:
    left = value - _rem_euclid(value, step)
    if left < value:
        left += step
    return left


def _rem_euclid(a: float, b: float) -> float:
    if b > 0.0:
        ret = a - math.floor(a / b) * b
    else:
        ret = a - math.ceil(a / b) * b
    if abs(ret - b) < _FLOAT_EPSILON:
        return 0.0
    return ret
