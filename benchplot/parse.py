from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
import csv
from dataclasses import dataclass, field
from datetime import datetime
import logging
from pathlib import Path
import re

from benchplot.axis import as_utc
from benchplot.benches import KpiType
from benchplot.errors import AnalyticsParseError
from benchplot.series import (
    BENCHMARK_PREFIX,
    PRIMARY_PREFIX,
    Series,
    TimeSeriesPoint,
    all_points,
    find_benchmark_series,
    find_primary_series,
)
from benchplot.values import DomainValue


LOGGER = logging.getLogger(__name__)

HEADER_LABEL = "Experience ID"

FILE_NAME_PATTERN = re.compile(r"([^ -]+?),")


@dataclass(frozen=True)
class AnalyticsData:
    kpi_type: KpiType
    universe_id: int
    series: Mapping[str, Series] = field(default_factory=dict)

    def with_series(self, series: Series) -> AnalyticsData:
        merged = dict(self.series)
        merged[series.name] = series
        return AnalyticsData(kpi_type=self.kpi_type, universe_id=self.universe_id, series=merged)

    def benchmark_series(self, prefix: str = BENCHMARK_PREFIX) -> Series:
        return find_benchmark_series(self.series, prefix)

    def primary_series(self, primary_prefix: str = PRIMARY_PREFIX, benchmark_prefix: str = BENCHMARK_PREFIX) -> Series:
        return find_primary_series(self.series, primary_prefix=primary_prefix, benchmark_prefix=benchmark_prefix)

    def all_points(self) -> list[TimeSeriesPoint]:
        return all_points(self.series.values())


def kpi_type_from_file_name(file_name: str) -> KpiType:
    match = FILE_NAME_PATTERN.search(file_name)
    if match is None:
        raise AnalyticsParseError("unable to extract KPI type from file name; was the file renamed?")
    try:
        return KpiType(match.group(1))
    except ValueError as exc:
        raise AnalyticsParseError(f'the KPI "{match.group(1)}" is not supported') from exc


def parse_analytics_file(path: Path) -> AnalyticsData:
    path = Path(path)
    kpi_type = kpi_type_from_file_name(path.name)
    try:
        with path.open(newline="", encoding="utf-8-sig") as handle:
            data = parse_analytics_rows(csv.reader(handle), kpi_type=kpi_type)
    except OSError as exc:
        raise AnalyticsParseError(f"the file {path} could not be read as a CSV document") from exc
    except csv.Error as exc:
        raise AnalyticsParseError(f"the file {path} could not be read as a CSV document: {exc}") from exc
    LOGGER.debug("parsed %s: %d series for experience %d", path.name, len(data.series), data.universe_id)
    return data


def parse_analytics_rows(rows: Iterable[list[str]], *, kpi_type: KpiType) -> AnalyticsData:
    """Parse ``Experience ID`` header, a blank line, a column header, then data rows.

    Each data row is ``series name, timestamp, value``. Bad numeric fields
    raise :class:`~benchplot.errors.CannotParse`.
    """
    rows = iter(rows)
    universe_id = _read_universe_id(rows)

    header_seen = False
    grouped: dict[str, list[TimeSeriesPoint]] = {}
    for line_no, row in enumerate(rows, start=2):
        if not any(cell.strip() for cell in row):
            continue
        if not header_seen:
            header_seen = True
            continue
        if len(row) < 3:
            raise AnalyticsParseError(f"malformed row {line_no}: expected name, timestamp and value")
        name, stamp, value = (cell.strip() for cell in row[:3])
        point = TimeSeriesPoint(_parse_timestamp(stamp, line_no), DomainValue.parse(value))
        grouped.setdefault(name, []).append(point)

    series = {name: Series(name, tuple(points)) for name, points in grouped.items()}
    return AnalyticsData(kpi_type=kpi_type, universe_id=universe_id, series=series)


def _read_universe_id(rows: Iterator[list[str]]) -> int:
    first = next(rows, None)
    if first is None:
        raise AnalyticsParseError("the provided file is empty")
    if not first or first[0].strip() != HEADER_LABEL:
        raise AnalyticsParseError("the provided file does not have the Experience ID as its first line")
    if len(first) < 2 or not (first[1].strip().isascii() and first[1].strip().isdigit()):
        raise AnalyticsParseError("the provided file does not have a valid Experience ID line")
    return int(first[1].strip())


def _parse_timestamp(text: str, line_no: int) -> datetime:
    normalized = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        return as_utc(datetime.fromisoformat(normalized))
    except ValueError as exc:
        raise AnalyticsParseError(f"invalid timestamp {text!r} on row {line_no}") from exc
