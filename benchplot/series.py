from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple

from benchplot.errors import PlotDataError
from benchplot.values import DomainValue


BENCHMARK_PREFIX = "Benchmark"
PRIMARY_PREFIX = "Total"


class TimeSeriesPoint(NamedTuple):
    timestamp: datetime
    value: DomainValue


@dataclass(frozen=True)
class Series:
    """Named points in insertion order; not necessarily chronological."""

    name: str
    points: tuple[TimeSeriesPoint, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(TimeSeriesPoint(*p) for p in self.points))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[TimeSeriesPoint]:
        return iter(self.points)

    def values(self) -> list[DomainValue]:
        return [p.value for p in self.points]

    def timestamps(self) -> list[datetime]:
        return [p.timestamp for p in self.points]

    def is_benchmark(self, prefix: str = BENCHMARK_PREFIX) -> bool:
        return self.name.startswith(prefix)

    def chronological(self) -> Series:
        return Series(self.name, tuple(sorted(self.points, key=lambda p: p.timestamp)))

    def to_fixed(self) -> Series:
        return Series(self.name, tuple(TimeSeriesPoint(p.timestamp, p.value.to_fixed()) for p in self.points))


def find_benchmark_series(series: Mapping[str, Series], prefix: str = BENCHMARK_PREFIX) -> Series:
    for item in series.values():
        if item.is_benchmark(prefix):
            return item
    raise PlotDataError(f"no series named {prefix}...")


def find_primary_series(
    series: Mapping[str, Series],
    *,
    primary_prefix: str = PRIMARY_PREFIX,
    benchmark_prefix: str = BENCHMARK_PREFIX,
) -> Series:
    candidates = [s for s in series.values() if not s.is_benchmark(benchmark_prefix)]
    if not candidates:
        raise PlotDataError("no analytics series besides the benchmark")
    for item in candidates:
        if item.name.startswith(primary_prefix):
            return item
    return candidates[0]


def all_points(series: Iterable[Series]) -> list[TimeSeriesPoint]:
    return [p for s in series for p in s.points]
