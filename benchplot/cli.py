from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path

from benchplot.benches import load_benchmark
from benchplot.chart import plot_data
from benchplot.config import ChartConfig
from benchplot.errors import BenchplotError
from benchplot.parse import parse_analytics_file


LOGGER = logging.getLogger("benchplot")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="benchplot", description="Plot experience analytics against benchmarks.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render an analytics CSV export as a chart.")
    render.add_argument("csv", type=Path)
    render.add_argument(
        "--benchmark",
        type=Path,
        default=None,
        help="Benchmark JSON response to merge in when the CSV has no Benchmark series.",
    )
    render.add_argument("--normalize", action="store_true", help="Rescale the analytics series by the benchmark.")
    render.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("plot.svg"),
        help="Output file; the extension selects SVG or a raster format. Default: plot.svg",
    )
    render.add_argument("--width", type=int, default=None)
    render.add_argument("--height", type=int, default=None)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "render":
        try:
            config = ChartConfig().with_size(args.width, args.height)
        except ValueError as exc:
            LOGGER.error("%s", exc)
            return 2
        try:
            data = parse_analytics_file(args.csv)
            if args.benchmark is not None:
                data = data.with_series(load_benchmark(args.benchmark).to_series())
            path = plot_data(data, args.output, normalize=args.normalize, config=config)
        except BenchplotError as exc:
            LOGGER.error("%s", exc)
            return 1
        print(f"wrote {path}")
        return 0

    raise RuntimeError(f"unsupported command: {args.command}")
