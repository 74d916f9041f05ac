from __future__ import annotations

import unittest

import numpy as np

from eventline import InvalidInputError, LinearScale, SampleIndex
from eventline.adapters import normalize_series


def _index(*timestamps: float) -> SampleIndex:
    return SampleIndex.from_series(normalize_series([(t, 1.0) for t in timestamps]))


class SampleIndexTests(unittest.TestCase):
    def test_exact_timestamps_resolve_to_their_position(self) -> None:
        index = _index(0.0, 10.0, 20.0, 35.0)
        for i, t in enumerate([0.0, 10.0, 20.0, 35.0]):
            self.assertEqual(index.nearest(t), i)

    def test_between_samples_resolves_to_nearest_below(self) -> None:
        index = _index(0.0, 10.0, 20.0)
        self.assertEqual(index.nearest(9.999), 0)
        self.assertEqual(index.nearest(15.0), 1)
        self.assertEqual(index.nearest(19.9), 1)

    def test_out_of_domain_queries_clamp(self) -> None:
        index = _index(0.0, 10.0, 20.0)
        self.assertEqual(index.nearest(-5.0), 0)
        self.assertEqual(index.nearest(1e9), 2)
        self.assertEqual(index.nearest(float("nan")), 0)

    def test_lookup_is_monotonic(self) -> None:
        index = _index(1.0, 2.5, 4.0, 9.0, 9.5, 30.0)
        queries = np.linspace(-5.0, 40.0, 301)
        results = [index.nearest(q) for q in queries]
        self.assertEqual(results, sorted(results))
        self.assertEqual(results[0], 0)
        self.assertEqual(results[-1], index.last)

    def test_nearest_pixel_inverts_through_time_scale(self) -> None:
        index = _index(0.0, 10.0, 20.0)
        scale = LinearScale(domain_min=0.0, domain_max=20.0, range_min=0.0, range_max=300.0)
        self.assertEqual(index.nearest_pixel(150.0, scale), 1)
        self.assertEqual(index.nearest_pixel(149.0, scale), 0)
        self.assertEqual(index.nearest_pixel(300.0, scale), 2)

    def test_clamp(self) -> None:
        index = _index(0.0, 10.0, 20.0)
        self.assertEqual(index.clamp(-4), 0)
        self.assertEqual(index.clamp(7), 2)
        self.assertEqual(index.clamp(1), 1)

    def test_keys_are_read_only(self) -> None:
        index = _index(0.0, 10.0)
        with self.assertRaises(ValueError):
            index.timestamps[0] = 3.0

    def test_empty_index_is_rejected(self) -> None:
        with self.assertRaises(InvalidInputError):
            SampleIndex(timestamps=np.empty(0, dtype=np.float64))


if __name__ == "__main__":
    unittest.main()
