from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
import logging
from typing import NamedTuple

from benchplot.axis import DateAxis, ValueAxis
from benchplot.errors import PlotDataError
from benchplot.series import TimeSeriesPoint
from benchplot.values import ZERO, DomainValue


LOGGER = logging.getLogger(__name__)

PAD_DIVISOR = 10


class DataRange(NamedTuple):
    dates: tuple[datetime, datetime]
    values: tuple[DomainValue, DomainValue]

    def date_axis(self) -> DateAxis:
        return DateAxis(*self.dates)

    def value_axis(self) -> ValueAxis:
        return ValueAxis(*self.values)


def compute_range(points: Iterable[TimeSeriesPoint]) -> DataRange:
    """Date span plus a value span padded by a tenth of its length on each side.

    The lower pad never takes a non-negative span below zero.
    """
    pts = list(points)
    if not pts:
        raise PlotDataError("cannot compute the range of an empty series")

    earliest = min(p.timestamp for p in pts)
    latest = max(p.timestamp for p in pts)
    low = min(p.value for p in pts)
    high = max(p.value for p in pts)

    pad = (high - low).div_by(PAD_DIVISOR)
    low_pad = min(pad, low) if low >= ZERO else pad
    padded = (low - low_pad, high + pad)
    LOGGER.debug("value span [%s, %s] padded to [%s, %s]", low, high, padded[0], padded[1])
    return DataRange(dates=(earliest, latest), values=padded)
