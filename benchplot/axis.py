from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from benchplot.errors import PlotDataError
from benchplot.scales import TickPlan, format_value, generate_nice_ticks, generate_tick_plan, map_fraction, map_value
from benchplot.values import DomainValue


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
SECONDS_PER_DAY = 86400.0
COUNT_MIN_STEP = 1.0


@dataclass(frozen=True)
class ValueAxis:
    """Value axis over a padded span, consumed by the chart renderer."""

    low: DomainValue
    high: DomainValue

    def __post_init__(self) -> None:
        if self.high < self.low:
            raise PlotDataError(f"axis span is inverted: {self.low} > {self.high}")

    @property
    def span(self) -> tuple[DomainValue, DomainValue]:
        return (self.low, self.high)

    @property
    def counts_only(self) -> bool:
        return self.low.kind != "fixed" and self.high.kind != "fixed"

    def map(self, value: DomainValue, pixels: tuple[int, int]) -> int:
        return map_value(value, self.low, self.high, pixels)

    def tick_plan(self, max_points: int) -> TickPlan:
        # Counts never tick between whole numbers.
        return generate_tick_plan(self.low, self.high, max_points, min_step=COUNT_MIN_STEP if self.counts_only else 0.0)

    def format(self, value: DomainValue) -> str:
        if self.counts_only and value.as_fraction().denominator == 1:
            return str(value.to_unsigned())
        return format_value(value)


@dataclass(frozen=True)
class DateAxis:
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", as_utc(self.start))
        object.__setattr__(self, "end", as_utc(self.end))
        if self.end < self.start:
            raise PlotDataError(f"date span is inverted: {self.start.isoformat()} > {self.end.isoformat()}")

    @property
    def span(self) -> tuple[datetime, datetime]:
        return (self.start, self.end)

    def map(self, when: datetime, pixels: tuple[int, int]) -> int:
        if self.end == self.start:
            return (pixels[0] + pixels[1]) // 2
        offset = (as_utc(when) - self.start).total_seconds()
        extent = (self.end - self.start).total_seconds()
        return map_fraction(offset / extent, pixels)

    def key_points(self, max_points: int) -> list[datetime]:
        days = generate_nice_ticks(_epoch_days(self.start), _epoch_days(self.end), max_points)
        return [EPOCH + timedelta(days=float(d)) for d in days]

    def format(self, when: datetime) -> str:
        when = as_utc(when)
        if when.hour == 0 and when.minute == 0 and when.second == 0:
            return when.strftime("%Y-%m-%d")
        return when.strftime("%Y-%m-%d %H:%M")


def as_utc(when: datetime) -> datetime:
    if when.tzinfo is None:
        return when.replace(tzinfo=timezone.utc)
    return when.astimezone(timezone.utc)


def _epoch_days(when: datetime) -> float:
    return (when - EPOCH).total_seconds() / SECONDS_PER_DAY
