from __future__ import annotations

from dataclasses import dataclass, replace

from benchplot.raster.canvas import RGBA
from benchplot.series import BENCHMARK_PREFIX, PRIMARY_PREFIX


WHITE: RGBA = (255, 255, 255, 255)
BLACK: RGBA = (0, 0, 0, 255)
GREY: RGBA = (158, 158, 158, 255)
LIGHT_BLUE: RGBA = (3, 169, 244, 255)
ORANGE: RGBA = (255, 152, 0, 255)
MESH: RGBA = (0, 0, 0, 40)

DEFAULT_WIDTH = 1200
DEFAULT_HEIGHT = 800


@dataclass(frozen=True)
class ChartConfig:
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    margin: int = 5
    y_label_area: int = 40
    x_label_area: int = 40
    max_value_labels: int = 10
    max_date_labels: int = 10
    title_font_px: float = 50.0
    subtitle_font_px: float = 25.0
    label_font_px: float = 12.0
    line_width: int = 1
    benchmark_prefix: str = BENCHMARK_PREFIX
    primary_prefix: str = PRIMARY_PREFIX
    background: RGBA = WHITE
    foreground: RGBA = BLACK
    subtitle_color: RGBA = GREY
    mesh_color: RGBA = MESH
    analytics_color: RGBA = LIGHT_BLUE
    benchmark_color: RGBA = GREY
    normalized_color: RGBA = ORANGE

    def __post_init__(self) -> None:
        if self.width <= 1 or self.height <= 1:
            raise ValueError("chart width/height must be > 1")
        if self.margin < 0 or self.y_label_area < 0 or self.x_label_area < 0:
            raise ValueError("margin and label areas must be >= 0")
        if self.max_value_labels < 0 or self.max_date_labels < 0:
            raise ValueError("label budgets must be >= 0")
        if self.title_font_px <= 0 or self.subtitle_font_px <= 0 or self.label_font_px <= 0:
            raise ValueError("font sizes must be > 0")
        if self.line_width <= 0:
            raise ValueError("line_width must be > 0")

    def with_size(self, width: int | None = None, height: int | None = None) -> ChartConfig:
        return replace(
            self,
            width=self.width if width is None else width,
            height=self.height if height is None else height,
        )
