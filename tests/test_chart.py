from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
import tempfile
import unittest
import xml.etree.ElementTree as ET

from PIL import Image

from benchplot.backends import RasterBackend, SvgBackend, open_backend
from benchplot.benches import KpiType
from benchplot.chart import PlotArea, plot_data, plot_subtitle, plot_title, select_drawn_series
from benchplot.config import ChartConfig
from benchplot.errors import PlotDataError
from benchplot.parse import AnalyticsData
from benchplot.series import Series
from benchplot.values import DomainValue


SVG = "{http://www.w3.org/2000/svg}"
T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _series(name: str, values: list[DomainValue], *, start: int = 0) -> Series:
    return Series(name, tuple((T0 + timedelta(days=start + i), v) for i, v in enumerate(values)))


def _data(benchmark: Series | None = None) -> AnalyticsData:
    primary = _series("Total Visits", [DomainValue.integer(n) for n in (120, 80, 150, 90, 200)])
    bench = benchmark or _series("Benchmark (P50)", [DomainValue.integer(n) for n in (100, 100, 100, 100, 100)])
    return AnalyticsData(kpi_type=KpiType.VISITS, universe_id=987, series={primary.name: primary, bench.name: bench})


class ChartTextTests(unittest.TestCase):
    def test_title_and_subtitle(self) -> None:
        data = _data()
        self.assertEqual(plot_title(data), "Visits for Experience ID 987")
        bench = data.benchmark_series()
        self.assertEqual(plot_subtitle(bench, normalize=False), 'Plotted with series "Benchmark (P50)"')
        self.assertEqual(plot_subtitle(bench, normalize=True), 'Normalized over series "Benchmark (P50)"')

    def test_plot_area_must_have_room(self) -> None:
        with self.assertRaises(PlotDataError):
            PlotArea(left=10, top=10, right=10, bottom=50)
        area = PlotArea(left=10, top=20, right=110, bottom=220)
        self.assertEqual(area.x_pixels, (10, 110))
        self.assertEqual(area.y_pixels, (220, 20))


class SelectDrawnSeriesTests(unittest.TestCase):
    def test_plain_chart_draws_primary_then_benchmark(self) -> None:
        config = ChartConfig()
        drawn = select_drawn_series(_data(), normalize=False, config=config)
        self.assertEqual([s.name for s, _ in drawn], ["Total Visits", "Benchmark (P50)"])
        self.assertEqual([c for _, c in drawn], [config.analytics_color, config.benchmark_color])

    def test_normalized_chart_draws_one_series(self) -> None:
        config = ChartConfig()
        drawn = select_drawn_series(_data(), normalize=True, config=config)
        self.assertEqual(len(drawn), 1)
        series, color = drawn[0]
        self.assertEqual(color, config.normalized_color)
        self.assertEqual(len(series), 5)

    def test_mixed_kinds_are_promoted_to_fixed(self) -> None:
        bench = _series("Benchmark (P50)", [DomainValue.fixed(99.5)] * 5)
        drawn = select_drawn_series(_data(bench), normalize=False, config=ChartConfig())
        kinds = {p.value.kind for s, _ in drawn for p in s.points}
        self.assertEqual(kinds, {"fixed"})

    def test_mixed_kinds_within_one_series_are_promoted(self) -> None:
        primary = _series("Total Play Time", [DomainValue.integer(12), DomainValue.fixed(12.5), DomainValue.integer(14)])
        bench = _series("Benchmark (P50)", [DomainValue.integer(10), DomainValue.fixed(10.5), DomainValue.integer(11)])
        data = AnalyticsData(
            kpi_type=KpiType.TOTAL_PLAY_TIME_HOURS,
            universe_id=3,
            series={primary.name: primary, bench.name: bench},
        )
        for normalize in (False, True):
            with self.subTest(normalize=normalize):
                drawn = select_drawn_series(data, normalize=normalize, config=ChartConfig())
                kinds = {p.value.kind for s, _ in drawn for p in s.points}
                self.assertEqual(kinds, {"fixed"})


class PlotDataTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.config = ChartConfig(width=480, height=360)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _svg_root(self, path: Path) -> ET.Element:
        return ET.parse(path).getroot()

    def test_svg_has_one_polyline_per_series(self) -> None:
        path = plot_data(_data(), self.tmp / "plot.svg", config=self.config)
        root = self._svg_root(path)
        self.assertEqual(root.get("width"), "480")
        self.assertEqual(len(root.findall(f"{SVG}polyline")), 2)
        texts = [node.text for node in root.iter(f"{SVG}text")]
        self.assertIn("Visits for Experience ID 987", texts)
        self.assertIn('Plotted with series "Benchmark (P50)"', texts)
        self.assertIn("2024-01-02", texts)

    def test_normalized_svg_draws_a_single_line(self) -> None:
        path = plot_data(_data(), self.tmp / "norm.svg", normalize=True, config=self.config)
        root = self._svg_root(path)
        self.assertEqual(len(root.findall(f"{SVG}polyline")), 1)
        texts = [node.text for node in root.iter(f"{SVG}text")]
        self.assertIn('Normalized over series "Benchmark (P50)"', texts)

    def test_polyline_points_stay_inside_the_canvas(self) -> None:
        path = plot_data(_data(), self.tmp / "plot.svg", config=self.config)
        for line in self._svg_root(path).findall(f"{SVG}polyline"):
            for pair in line.get("points").split():
                x, y = (int(v) for v in pair.split(","))
                self.assertTrue(0 <= x < 480)
                self.assertTrue(0 <= y < 360)

    def test_png_output_has_configured_size(self) -> None:
        path = plot_data(_data(), self.tmp / "out" / "plot.png", config=self.config)
        with Image.open(path) as image:
            self.assertEqual(image.format, "PNG")
            self.assertEqual(image.size, (480, 360))

    def test_rejects_unknown_extension(self) -> None:
        with self.assertRaises(PlotDataError):
            plot_data(_data(), self.tmp / "plot.nope", config=self.config)

    def test_normalize_without_overlap_has_nothing_to_draw(self) -> None:
        bench = _series("Benchmark (P50)", [DomainValue.integer(5)] * 3, start=30)
        with self.assertRaises(PlotDataError):
            plot_data(_data(bench), self.tmp / "plot.svg", normalize=True, config=self.config)

    def test_missing_benchmark(self) -> None:
        primary = _series("Total Visits", [DomainValue.integer(1)])
        data = AnalyticsData(kpi_type=KpiType.VISITS, universe_id=1, series={primary.name: primary})
        with self.assertRaises(PlotDataError):
            plot_data(data, self.tmp / "plot.svg", config=self.config)


class BackendTests(unittest.TestCase):
    def test_open_backend_by_extension(self) -> None:
        self.assertIsInstance(open_backend(Path("a.SVG"), 10, 10), SvgBackend)
        raster = open_backend(Path("a.png"), 10, 10)
        self.assertIsInstance(raster, RasterBackend)
        self.assertEqual(raster.image_format, "PNG")
        with self.assertRaises(PlotDataError):
            open_backend(Path("plot"), 10, 10)

    def test_backend_size_must_be_positive(self) -> None:
        with self.assertRaises(ValueError):
            SvgBackend(Path("a.svg"), 0, 10)

    def test_raster_line_and_polyline_paint_pixels(self) -> None:
        backend = RasterBackend(Path("a.png"), 20, 20, image_format="PNG")
        backend.fill((255, 255, 255, 255))
        backend.line(0, 5, 19, 5, (0, 0, 0, 255))
        backend.polyline([(0, 0), (10, 10)], (255, 0, 0, 255), width=1)
        self.assertEqual(tuple(backend.canvas[5, 7]), (0, 0, 0, 255))
        self.assertEqual(tuple(backend.canvas[10, 10]), (255, 0, 0, 255))
        self.assertEqual(tuple(backend.canvas[15, 2]), (255, 255, 255, 255))

    def test_svg_translucent_paint_sets_opacity(self) -> None:
        backend = SvgBackend(Path("a.svg"), 10, 10)
        backend.line(0, 0, 9, 9, (0, 0, 0, 40))
        node = backend.root.find("line")
        self.assertEqual(node.get("stroke"), "rgb(0,0,0)")
        self.assertEqual(node.get("stroke-opacity"), "0.157")


if __name__ == "__main__":
    unittest.main()
