from __future__ import annotations

import unittest

import numpy as np

from eventline import InvalidInputError
from eventline.adapters import normalize_series
from eventline.scales import (
    LinearScale,
    compute_scales,
    format_time_tick,
    format_time_ticks,
    time_domain,
    time_ticks,
    value_domain,
)


DAY = 86400.0


def _series(*pairs: tuple[float, float | None]):
    return normalize_series(list(pairs))


class ScaleBuilderTests(unittest.TestCase):
    def test_time_scale_spans_union_of_all_series(self) -> None:
        a = _series((5.0, 1.0), (10.0, 2.0))
        b = _series((0.0, 7.0), (20.0, 3.0))
        scales = compute_scales([a, b], panel_width=300, plot_height=80)
        self.assertEqual((scales.x.domain_min, scales.x.domain_max), (0.0, 20.0))
        self.assertEqual((scales.x.range_min, scales.x.range_max), (0.0, 300.0))
        self.assertEqual(scales.x(0.0), 0.0)
        self.assertEqual(scales.x(20.0), 300.0)

    def test_value_scales_are_independent_per_series(self) -> None:
        a = _series((0.0, 10.0), (10.0, 20.0))
        b = _series((0.0, 1000.0), (10.0, 3000.0))
        scales = compute_scales([a, b], panel_width=300, plot_height=80)
        self.assertEqual(len(scales.y), 2)
        self.assertEqual(scales.value_scale(0)(20.0), 80.0)
        self.assertEqual(scales.value_scale(1)(3000.0), 80.0)
        self.assertEqual(scales.value_scale(1)(1000.0), 20.0)

    def test_value_range_bounds_match_margins_for_any_domain(self) -> None:
        shapes = [
            _series((0.0, 10.0), (10.0, 20.0), (20.0, 15.0)),
            _series((3.0, 5.0)),
            _series((0.0, 4.0), (1.0, 4.0)),
            _series((0.0, None), (1.0, None)),
        ]
        for data in shapes:
            scales = compute_scales([data], panel_width=120, plot_height=95, marker_margin=20)
            y = scales.value_scale(0)
            self.assertEqual((y.range_min, y.range_max), (20.0, 95.0))
            self.assertEqual((scales.x.range_min, scales.x.range_max), (0.0, 120.0))

    def test_single_sample_maps_to_range_midpoint(self) -> None:
        scales = compute_scales([_series((3.0, 5.0))], panel_width=100, plot_height=80)
        self.assertEqual(value_domain(_series((3.0, 5.0))), (4.0, 6.0))
        self.assertEqual(scales.value_scale(0)(5.0), 50.0)
        self.assertEqual(scales.x(3.0), 50.0)

    def test_constant_large_values_widen_proportionally(self) -> None:
        self.assertEqual(value_domain(_series((0.0, 200.0), (1.0, 200.0))), (190.0, 210.0))

    def test_time_domain_of_single_timestamp_is_widened(self) -> None:
        self.assertEqual(time_domain([_series((7.0, 1.0))]), (6.0, 8.0))

    def test_invert_round_trips_pixels(self) -> None:
        scale = LinearScale(domain_min=0.0, domain_max=20.0, range_min=0.0, range_max=300.0)
        self.assertAlmostEqual(scale.invert(scale(7.0)), 7.0)
        self.assertEqual(scale.invert(150.0), 10.0)
        np.testing.assert_allclose(scale.map_array(np.asarray([0.0, 10.0])), [0.0, 150.0])

    def test_degenerate_linear_scale_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            LinearScale(domain_min=1.0, domain_max=1.0, range_min=0.0, range_max=10.0)

    def test_empty_series_list_raises(self) -> None:
        with self.assertRaises(InvalidInputError):
            compute_scales([], panel_width=100, plot_height=80)

    def test_series_length_must_match_snapshots(self) -> None:
        data = _series((0.0, 1.0), (1.0, 2.0))
        with self.assertRaises(InvalidInputError):
            compute_scales([data], panel_width=100, plot_height=80, snapshot_count=3)

    def test_time_ticks_for_seconds(self) -> None:
        scale = LinearScale(domain_min=0.0, domain_max=20.0, range_min=0.0, range_max=300.0)
        ticks = time_ticks(scale, 6)
        np.testing.assert_allclose(ticks, [0.0, 5.0, 10.0, 15.0, 20.0])
        self.assertEqual(format_time_ticks(ticks, 20.0, 6)[:2], ["00:00:00", "00:00:05"])

    def test_time_ticks_for_days_use_date_labels(self) -> None:
        scale = LinearScale(domain_min=0.0, domain_max=10 * DAY, range_min=0.0, range_max=300.0)
        ticks = time_ticks(scale, 6)
        self.assertEqual(ticks.size, 6)
        labels = format_time_ticks(ticks, 10 * DAY, 6)
        self.assertEqual(labels[:2], ["Jan 01", "Jan 03"])

    def test_time_ticks_stay_inside_domain(self) -> None:
        scale = LinearScale(domain_min=13.0, domain_max=47.0, range_min=0.0, range_max=100.0)
        ticks = time_ticks(scale, 6)
        self.assertTrue(np.all((ticks >= 13.0) & (ticks <= 47.0)))

    def test_tick_beyond_datetime_range_gets_numeric_label(self) -> None:
        self.assertEqual(format_time_tick(1.3e12, 365 * DAY), "1.3e+12")
        self.assertEqual(format_time_tick(-1e18, 365 * DAY), "-1e+18")

    def test_short_plot_height_still_builds_value_scales(self) -> None:
        data = _series((0.0, 1.0), (10.0, 2.0))
        for height in (20, 10):
            scales = compute_scales([data], panel_width=100, plot_height=height, marker_margin=20)
            y = scales.value_scale(0)
            self.assertEqual((y.range_min, y.range_max), (20.0, float(height)))
            self.assertEqual(y(2.0), float(height))

    def test_non_positive_plot_height_rejected(self) -> None:
        with self.assertRaises(InvalidInputError):
            compute_scales([_series((0.0, 1.0))], panel_width=100, plot_height=0)


if __name__ == "__main__":
    unittest.main()
