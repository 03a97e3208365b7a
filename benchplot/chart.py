from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

from benchplot.adapters.normalize import normalize_series
from benchplot.axis import DateAxis, ValueAxis
from benchplot.backends import DrawingBackend, open_backend
from benchplot.config import ChartConfig
from benchplot.errors import PlotDataError
from benchplot.parse import AnalyticsData
from benchplot.raster.canvas import RGBA
from benchplot.ranges import compute_range
from benchplot.series import Series, all_points


LOGGER = logging.getLogger(__name__)

TICK_LENGTH = 5
TEXT_GAP = 4


@dataclass(frozen=True)
class PlotArea:
    left: int
    top: int
    right: int
    bottom: int

    def __post_init__(self) -> None:
        if self.right <= self.left or self.bottom <= self.top:
            raise PlotDataError("chart is too small for its margins and labels")

    @property
    def x_pixels(self) -> tuple[int, int]:
        return (self.left, self.right)

    @property
    def y_pixels(self) -> tuple[int, int]:
        # Screen y grows downward, so the value axis runs bottom -> top.
        return (self.bottom, self.top)


def plot_title(data: AnalyticsData) -> str:
    return f"{data.kpi_type} for Experience ID {data.universe_id}"


def plot_subtitle(benchmark: Series, *, normalize: bool) -> str:
    if normalize:
        return f'Normalized over series "{benchmark.name}"'
    return f'Plotted with series "{benchmark.name}"'


def select_drawn_series(data: AnalyticsData, *, normalize: bool, config: ChartConfig) -> list[tuple[Series, RGBA]]:
    primary = data.primary_series(config.primary_prefix, config.benchmark_prefix)
    benchmark = data.benchmark_series(config.benchmark_prefix)
    kinds = {p.value.kind for p in all_points((primary, benchmark))} - {"zero"}
    if len(kinds) > 1:
        # Counts and measurements cannot share arithmetic; lift counts to fixed point.
        LOGGER.debug("promoting integer values to fixed point for a shared axis")
        primary, benchmark = primary.to_fixed(), benchmark.to_fixed()
    if normalize:
        return [(normalize_series(primary, benchmark), config.normalized_color)]
    return [(primary, config.analytics_color), (benchmark, config.benchmark_color)]


def plot_data(
    data: AnalyticsData,
    output: Path,
    *,
    normalize: bool = False,
    config: ChartConfig | None = None,
) -> Path:
    """Render the analytics series against its benchmark into ``output``."""
    config = config or ChartConfig()
    benchmark = data.benchmark_series(config.benchmark_prefix)
    drawn = select_drawn_series(data, normalize=normalize, config=config)
    points = all_points(s for s, _ in drawn)
    if not points:
        raise PlotDataError("no data points to plot")
    data_range = compute_range(points)

    backend = open_backend(output, config.width, config.height)
    backend.fill(config.background)
    area = _draw_titles(backend, config, plot_title(data), plot_subtitle(benchmark, normalize=normalize))
    date_axis = data_range.date_axis()
    value_axis = data_range.value_axis()
    _draw_mesh(backend, area, date_axis, value_axis, config)
    for series, color in drawn:
        pixels = [
            (date_axis.map(p.timestamp, area.x_pixels), value_axis.map(p.value, area.y_pixels))
            for p in series.chronological().points
        ]
        backend.polyline(pixels, color, width=config.line_width)
    path = backend.present()
    LOGGER.info("wrote %s (%d series)", path, len(drawn))
    return path


def _draw_titles(backend: DrawingBackend, config: ChartConfig, title: str, subtitle: str) -> PlotArea:
    center = backend.width // 2
    y = config.margin
    backend.text(center, y, title, config.foreground, font_size_px=config.title_font_px, anchor="center")
    y += backend.text_size(title, font_size_px=config.title_font_px)[1] + 2 * TEXT_GAP
    backend.text(center, y, subtitle, config.subtitle_color, font_size_px=config.subtitle_font_px, anchor="center")
    y += backend.text_size(subtitle, font_size_px=config.subtitle_font_px)[1] + 2 * TEXT_GAP
    return PlotArea(
        left=config.margin + config.y_label_area,
        top=y + config.margin,
        right=backend.width - 1 - config.margin,
        bottom=backend.height - 1 - config.margin - config.x_label_area,
    )


def _draw_mesh(
    backend: DrawingBackend,
    area: PlotArea,
    date_axis: DateAxis,
    value_axis: ValueAxis,
    config: ChartConfig,
) -> None:
    size = config.label_font_px
    for tick in value_axis.tick_plan(config.max_value_labels):
        y = value_axis.map(tick, area.y_pixels)
        backend.line(area.left, y, area.right, y, config.mesh_color)
        backend.line(area.left - TICK_LENGTH, y, area.left, y, config.foreground)
        label = value_axis.format(tick)
        _, h = backend.text_size(label, font_size_px=size)
        backend.text(area.left - TICK_LENGTH - TEXT_GAP, y - h // 2, label, config.foreground, font_size_px=size, anchor="right")

    for when in date_axis.key_points(config.max_date_labels):
        x = date_axis.map(when, area.x_pixels)
        backend.line(x, area.top, x, area.bottom, config.mesh_color)
        backend.line(x, area.bottom, x, area.bottom + TICK_LENGTH, config.foreground)
        backend.text(x, area.bottom + TICK_LENGTH + TEXT_GAP, date_axis.format(when), config.foreground, font_size_px=size, anchor="center")

    backend.line(area.left, area.top, area.left, area.bottom, config.foreground)
    backend.line(area.left, area.bottom, area.right, area.bottom, config.foreground)
