from benchplot.adapters.normalize import normalize_series
from benchplot.axis import DateAxis, ValueAxis
from benchplot.chart import plot_data
from benchplot.config import ChartConfig
from benchplot.errors import (
    AnalyticsParseError,
    BenchmarkDecodeError,
    BenchplotError,
    CannotParse,
    MismatchedValueKinds,
    PlotDataError,
    ValueOutOfRange,
)
from benchplot.ranges import DataRange, compute_range
from benchplot.scales import TickPlan, generate_tick_plan, map_value
from benchplot.series import Series, TimeSeriesPoint
from benchplot.values import ZERO, DomainValue, parse_value

__all__ = [
    "AnalyticsParseError",
    "BenchmarkDecodeError",
    "BenchplotError",
    "CannotParse",
    "ChartConfig",
    "DataRange",
    "DateAxis",
    "DomainValue",
    "MismatchedValueKinds",
    "PlotDataError",
    "Series",
    "TickPlan",
    "TimeSeriesPoint",
    "ValueAxis",
    "ValueOutOfRange",
    "ZERO",
    "compute_range",
    "generate_tick_plan",
    "map_value",
    "normalize_series",
    "parse_value",
    "plot_data",
]
