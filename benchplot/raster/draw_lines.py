from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from benchplot.raster.canvas import RGBA, draw_pixel, fill_rect


def draw_polyline(dst: np.ndarray, points: Sequence[tuple[int, int]], color: RGBA, width: int = 1) -> None:
    if len(points) == 1:
        _stamp(dst, points[0][0], points[0][1], color, width)
        return
    for (x0, y0), (x1, y1) in zip(points[:-1], points[1:]):
        draw_segment(dst, x0, y0, x1, y1, color, width=width)


def draw_segment(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA, *, width: int = 1) -> None:
    """Bresenham segment stamped with a square brush of ``width`` pixels."""
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        _stamp(dst, x0, y0, color, width)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def _stamp(dst: np.ndarray, x: int, y: int, color: RGBA, width: int) -> None:
    if width <= 1:
        draw_pixel(dst, x, y, color)
        return
    radius = width // 2
    fill_rect(dst, x - radius, y - radius, x + radius, y + radius, color)
