from __future__ import annotations

from datetime import datetime
from functools import reduce
import logging
import math
import operator

from benchplot.series import Series, TimeSeriesPoint
from benchplot.values import ZERO, DomainValue


LOGGER = logging.getLogger(__name__)


def normalize_series(primary: Series, reference: Series, *, name: str | None = None) -> Series:
    """Rescale ``primary`` by ``mean(reference) / reference(t)`` at each shared timestamp.

    Output follows the reference series' order. Timestamps absent from
    ``primary`` are dropped, as are timestamps whose reference value is zero.
    """
    out_name = primary.name if name is None else name
    if not reference.points:
        return Series(out_name)

    total = reduce(operator.add, reference.values(), ZERO)
    mean = float(total) / len(reference.points)

    lookup: dict[datetime, DomainValue] = {}
    for point in primary.points:
        lookup.setdefault(point.timestamp, point.value)

    result: list[TimeSeriesPoint] = []
    for timestamp, ref_value in reference.points:
        ref = float(ref_value)
        scalar = mean / ref if ref != 0.0 else math.inf
        value = lookup.get(timestamp)
        if value is None:
            continue
        if not math.isfinite(scalar):
            LOGGER.debug("dropping %s: reference value is zero", timestamp.isoformat())
            continue
        result.append(TimeSeriesPoint(timestamp, DomainValue.from_float(float(value) * scalar)))
    return Series(out_name, tuple(result))
