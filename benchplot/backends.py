from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
import xml.etree.ElementTree as ET

from PIL import Image

from benchplot.errors import PlotDataError
from benchplot.raster import draw_hline, draw_polyline, draw_segment, draw_text, draw_vline, fill_rect, new_canvas, text_size
from benchplot.raster.canvas import RGBA
from benchplot.raster.draw_text import DEFAULT_FONT_FAMILY, Anchor


SVG_SUFFIXES = frozenset({".svg"})


class DrawingBackend(ABC):
    """Drawing surface the chart renderer paints onto."""

    def __init__(self, path: Path, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("backend width/height must be > 0")
        self.path = Path(path)
        self.width = width
        self.height = height

    @abstractmethod
    def fill(self, color: RGBA) -> None:
        raise NotImplementedError

    @abstractmethod
    def line(self, x0: int, y0: int, x1: int, y1: int, color: RGBA, width: int = 1) -> None:
        raise NotImplementedError

    @abstractmethod
    def polyline(self, points: Sequence[tuple[int, int]], color: RGBA, width: int = 1) -> None:
        raise NotImplementedError

    @abstractmethod
    def text(self, x: int, y: int, text: str, color: RGBA, *, font_size_px: float, anchor: Anchor = "left") -> None:
        raise NotImplementedError

    @abstractmethod
    def present(self) -> Path:
        raise NotImplementedError

    def text_size(self, text: str, *, font_size_px: float) -> tuple[int, int]:
        return text_size(text, font_size_px=font_size_px)


class RasterBackend(DrawingBackend):
    def __init__(self, path: Path, width: int, height: int, *, image_format: str | None = None) -> None:
        super().__init__(path, width, height)
        self.image_format = image_format
        self.canvas = new_canvas(width, height)

    def fill(self, color: RGBA) -> None:
        fill_rect(self.canvas, 0, 0, self.width - 1, self.height - 1, color)

    def line(self, x0: int, y0: int, x1: int, y1: int, color: RGBA, width: int = 1) -> None:
        if width == 1 and y0 == y1:
            draw_hline(self.canvas, x0, x1, y0, color)
        elif width == 1 and x0 == x1:
            draw_vline(self.canvas, x0, y0, y1, color)
        else:
            draw_segment(self.canvas, x0, y0, x1, y1, color, width=width)

    def polyline(self, points: Sequence[tuple[int, int]], color: RGBA, width: int = 1) -> None:
        if points:
            draw_polyline(self.canvas, points, color, width=width)

    def text(self, x: int, y: int, text: str, color: RGBA, *, font_size_px: float, anchor: Anchor = "left") -> None:
        draw_text(self.canvas, x, y, text, color, font_size_px=font_size_px, anchor=anchor)

    def present(self) -> Path:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(self.canvas).convert("RGB").save(self.path, format=self.image_format)
        return self.path


class SvgBackend(DrawingBackend):
    def __init__(self, path: Path, width: int, height: int) -> None:
        super().__init__(path, width, height)
        self.root = ET.Element(
            "svg",
            {
                "xmlns": "http://www.w3.org/2000/svg",
                "width": str(width),
                "height": str(height),
                "viewBox": f"0 0 {width} {height}",
            },
        )

    def fill(self, color: RGBA) -> None:
        ET.SubElement(
            self.root,
            "rect",
            {"x": "0", "y": "0", "width": str(self.width), "height": str(self.height), **_paint("fill", color)},
        )

    def line(self, x0: int, y0: int, x1: int, y1: int, color: RGBA, width: int = 1) -> None:
        ET.SubElement(
            self.root,
            "line",
            {
                "x1": str(x0),
                "y1": str(y0),
                "x2": str(x1),
                "y2": str(y1),
                "stroke-width": str(width),
                **_paint("stroke", color),
            },
        )

    def polyline(self, points: Sequence[tuple[int, int]], color: RGBA, width: int = 1) -> None:
        if not points:
            return
        ET.SubElement(
            self.root,
            "polyline",
            {
                "points": " ".join(f"{x},{y}" for x, y in points),
                "fill": "none",
                "stroke-width": str(width),
                **_paint("stroke", color),
            },
        )

    def text(self, x: int, y: int, text: str, color: RGBA, *, font_size_px: float, anchor: Anchor = "left") -> None:
        if not text:
            return
        _, h = self.text_size(text, font_size_px=font_size_px)
        node = ET.SubElement(
            self.root,
            "text",
            {
                "x": str(x),
                "y": str(y + h),
                "font-family": DEFAULT_FONT_FAMILY,
                "font-size": f"{font_size_px:g}",
                "text-anchor": {"left": "start", "center": "middle", "right": "end"}[anchor],
                **_paint("fill", color),
            },
        )
        node.text = text

    def present(self) -> Path:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        ET.ElementTree(self.root).write(self.path, encoding="utf-8", xml_declaration=True)
        return self.path


def open_backend(path: Path, width: int, height: int) -> DrawingBackend:
    """Pick the drawing surface from the output file extension."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in SVG_SUFFIXES:
        return SvgBackend(path, width, height)
    image_format = Image.registered_extensions().get(suffix)
    if image_format is None or image_format not in Image.SAVE:
        raise PlotDataError(f"unsupported output file extension: {path.suffix or '(none)'}")
    return RasterBackend(path, width, height, image_format=image_format)


def _paint(attr: str, color: RGBA) -> dict[str, str]:
    out = {attr: f"rgb({color[0]},{color[1]},{color[2]})"}
    if color[3] != 255:
        out[f"{attr}-opacity"] = f"{color[3] / 255.0:.3f}"
    return out
