from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
import json
import logging
from pathlib import Path
import re
from typing import Any

from benchplot.errors import BenchmarkDecodeError, CannotParse, ValueOutOfRange
from benchplot.series import BENCHMARK_PREFIX, Series, TimeSeriesPoint
from benchplot.values import DomainValue


LOGGER = logging.getLogger(__name__)

BENCHMARK_TIME_FORMATS = ("%Y-%m-%dT%H:%M:%S.%fZ", "%Y-%m-%dT%H:%M:%SZ")

_DIGITS = re.compile(r"\d")


class KpiType(str, Enum):
    DAILY_ACTIVE_USERS = "DailyActiveUsers"
    MONTHLY_ACTIVE_USERS = "MonthlyActiveUsers"
    VISITS = "Visits"
    TOTAL_PLAY_TIME_HOURS = "TotalPlayTimeHours"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Benchmark:
    benchmark_percentile: int
    universe_kpi_percentile: int | None
    points: tuple[TimeSeriesPoint, ...]

    @property
    def name(self) -> str:
        return f"{BENCHMARK_PREFIX} (P{self.benchmark_percentile})"

    def to_series(self, name: str | None = None) -> Series:
        return Series(self.name if name is None else name, self.points)


def decode_benchmark(payload: Mapping[str, Any] | str | bytes) -> Benchmark:
    """Decode a benchmark aggregation response body."""
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise BenchmarkDecodeError(f"benchmark payload is not JSON: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise BenchmarkDecodeError("benchmark payload must be a JSON object")

    percentile_text = payload.get("benchmarkPercentile")
    if not isinstance(percentile_text, str):
        raise BenchmarkDecodeError("benchmarkPercentile is missing")
    digits = "".join(_DIGITS.findall(percentile_text))
    if not digits:
        raise BenchmarkDecodeError(f"benchmarkPercentile has no digits: {percentile_text!r}")

    universe_percentile = payload.get("universeKpiPercentile")
    if universe_percentile is not None and (isinstance(universe_percentile, bool) or not isinstance(universe_percentile, int)):
        raise BenchmarkDecodeError("universeKpiPercentile must be an integer")

    data = payload.get("data")
    if not isinstance(data, Mapping):
        raise BenchmarkDecodeError("data must be an object of timestamp -> value")

    points = tuple(TimeSeriesPoint(_parse_benchmark_time(k), _decode_value(v)) for k, v in data.items())
    LOGGER.debug("decoded benchmark P%s with %d points", digits, len(points))
    return Benchmark(
        benchmark_percentile=int(digits),
        universe_kpi_percentile=universe_percentile,
        points=points,
    )


def load_benchmark(path: Path) -> Benchmark:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise BenchmarkDecodeError(f"cannot read benchmark file {path}: {exc}") from exc
    return decode_benchmark(text)


def _parse_benchmark_time(text: str) -> datetime:
    for fmt in BENCHMARK_TIME_FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    raise BenchmarkDecodeError(f"invalid benchmark timestamp: {text!r}")


def _decode_value(raw: Any) -> DomainValue:
    try:
        if isinstance(raw, bool):
            raise BenchmarkDecodeError(f"invalid benchmark value: {raw!r}")
        if isinstance(raw, int):
            return DomainValue.parse(str(raw))
        if isinstance(raw, float):
            return DomainValue.from_float(raw)
        if isinstance(raw, str):
            return DomainValue.parse(raw)
    except (CannotParse, ValueOutOfRange) as exc:
        raise BenchmarkDecodeError(f"invalid benchmark value: {raw!r}") from exc
    raise BenchmarkDecodeError(f"invalid benchmark value: {raw!r}")
