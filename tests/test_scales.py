from __future__ import annotations

import math
import unittest

import numpy as np

from benchplot.errors import PlotDataError
from benchplot.scales import (
    MAX_REFINE_PASSES,
    TickPlan,
    generate_nice_ticks,
    generate_tick_plan,
    map_fraction,
    map_value,
)
from benchplot.values import ZERO, DomainValue


def I(n: int) -> DomainValue:
    return DomainValue.integer(n)


def F(x: float) -> DomainValue:
    return DomainValue.fixed(x)


class MapValueTests(unittest.TestCase):
    def test_linear_mapping_hits_midpoint_and_edges(self) -> None:
        self.assertEqual(map_value(I(50), ZERO, I(100), (0, 200)), 100)
        self.assertEqual(map_value(ZERO, ZERO, I(100), (0, 200)), 0)
        self.assertEqual(map_value(I(100), ZERO, I(100), (0, 200)), 200)

    def test_span_edges_map_to_pixel_edges(self) -> None:
        spans = [(ZERO, I(7)), (I(3), I(1000)), (F(-2.5), F(0.75)), (F(0.1), F(0.3))]
        pixel_ranges = [(0, 200), (40, 1195), (760, 120), (10, 11)]
        for lo, hi in spans:
            for pixels in pixel_ranges:
                with self.subTest(lo=lo, hi=hi, pixels=pixels):
                    self.assertEqual(map_value(lo, lo, hi, pixels), pixels[0])
                    self.assertEqual(map_value(hi, lo, hi, pixels), pixels[1])

    def test_mapping_is_monotonic(self) -> None:
        mapped = [map_value(I(v), ZERO, I(97), (3, 641)) for v in range(0, 98)]
        self.assertEqual(mapped, sorted(mapped))
        inverted = [map_value(I(v), ZERO, I(97), (641, 3)) for v in range(0, 98)]
        self.assertEqual(inverted, sorted(inverted, reverse=True))

    def test_degenerate_span_maps_to_pixel_midpoint(self) -> None:
        for value in (ZERO, I(5), I(500)):
            with self.subTest(value=value):
                self.assertEqual(map_value(value, I(5), I(5), (10, 30)), 20)
                self.assertEqual(map_value(value, I(5), I(5), (30, 10)), 20)

    def test_zero_length_pixel_interval_returns_end(self) -> None:
        self.assertEqual(map_value(I(3), ZERO, I(10), (7, 7)), 7)

    def test_infinite_fraction_clamps_to_an_edge(self) -> None:
        self.assertEqual(map_fraction(math.inf, (0, 100)), 100)
        self.assertEqual(map_fraction(-math.inf, (0, 100)), 0)

    def test_boundary_rounding_is_biased_outward(self) -> None:
        self.assertEqual(map_fraction(0.3, (0, 10)), 3)
        self.assertEqual(map_fraction(0.3, (10, 0)), 7)


class TickPlanTests(unittest.TestCase):
    def test_unit_span_with_ten_labels(self) -> None:
        plan = generate_tick_plan(ZERO, F(1.0), 10)
        expected = [DomainValue.from_float(x) for x in (0.0, 0.2, 0.4, 0.6, 0.8, 1.0)]
        self.assertIsInstance(plan, TickPlan)
        self.assertEqual(list(plan), expected)
        self.assertEqual(plan[0].kind, "zero")
        self.assertTrue(all(t.kind == "fixed" for t in plan[1:]))
        self.assertAlmostEqual(plan.step, 0.2)
        self.assertAlmostEqual(plan.granularity, 0.1)
        self.assertEqual(plan.labels(), ["0", "0.2", "0.4", "0.6", "0.8", "1.0"])

    def test_degenerate_span_yields_single_tick(self) -> None:
        for max_points in (1, 3, 10):
            with self.subTest(max_points=max_points):
                self.assertEqual(list(generate_tick_plan(I(5), I(5), max_points)), [I(5)])

    def test_min_step_stops_refinement(self) -> None:
        np.testing.assert_allclose(generate_nice_ticks(1.0, 2.0, 10, min_step=1.0), [1.0, 2.0])
        self.assertEqual(len(generate_nice_ticks(1.0, 2.0, 10)), 6)

    def test_zero_budget_yields_nothing(self) -> None:
        self.assertEqual(len(generate_tick_plan(ZERO, I(100), 0)), 0)
        self.assertEqual(generate_nice_ticks(0.0, 1.0, 0).size, 0)

    def test_round_steps_for_counts(self) -> None:
        plan = generate_tick_plan(ZERO, I(100), 10)
        self.assertEqual(list(plan), [I(v) for v in (0, 20, 40, 60, 80, 100)])

    def test_negative_start_aligns_to_step_multiples(self) -> None:
        ticks = generate_nice_ticks(-3.7, 12.2, 10)
        np.testing.assert_allclose(ticks, [-2.0, 0.0, 2.0, 4.0, 6.0, 8.0, 10.0, 12.0])

    def test_reversed_bounds_are_sorted(self) -> None:
        self.assertEqual(list(generate_tick_plan(I(100), ZERO, 10)), list(generate_tick_plan(ZERO, I(100), 10)))

    def test_ticks_are_free_of_float_noise(self) -> None:
        ticks = generate_nice_ticks(0.0, 1.0, 10)
        self.assertIn(0.6, ticks.tolist())
        self.assertNotIn(0.6000000000000001, ticks.tolist())

    def test_never_exceeds_budget_and_stays_in_span(self) -> None:
        spans = [
            (0.0, 1.0),
            (0.0, 100.0),
            (-3.7, 12.2),
            (1e-6, 3e-6),
            (123456.0, 123457.0),
            (0.0, 1e9),
            (19723.0, 19754.0),
            (-1e-300, 1e-300),
            (0.1, 0.30000000000000004),
        ]
        for lo, hi in spans:
            for max_points in range(1, 16):
                with self.subTest(lo=lo, hi=hi, max_points=max_points):
                    ticks = generate_nice_ticks(lo, hi, max_points)
                    self.assertLessEqual(ticks.size, max_points)
                    tol = (hi - lo) * 1e-9
                    self.assertTrue(np.all(ticks >= lo - tol))
                    self.assertTrue(np.all(ticks <= hi + tol))
                    self.assertTrue(np.all(np.diff(ticks) > 0))

    def test_refinement_is_bounded(self) -> None:
        self.assertGreater(MAX_REFINE_PASSES, 0)
        ticks = generate_nice_ticks(0.0, 1.0, 200)
        self.assertLessEqual(ticks.size, 200)
        self.assertGreater(ticks.size, 10)

    def test_rejects_non_finite_bounds(self) -> None:
        with self.assertRaises(PlotDataError):
            generate_nice_ticks(float("nan"), 1.0, 5)
        with self.assertRaises(PlotDataError):
            generate_nice_ticks(0.0, float("inf"), 5)


if __name__ == "__main__":
    unittest.main()
