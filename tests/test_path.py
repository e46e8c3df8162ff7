from __future__ import annotations

import unittest

from animated_linechart import HighlightPoint, Path, PathCache, Point
from animated_linechart.path import PathCommand, area_path, polyline_path


def _hp(x: float, y: float) -> HighlightPoint:
    return HighlightPoint(point=Point(x, y), y_value=y)


class PathTests(unittest.TestCase):
    def test_polyline_repeats_first_point(self) -> None:
        path = polyline_path([_hp(0, 0), _hp(3, 4), _hp(3, 10)])
        self.assertEqual(
            path.commands,
            (
                PathCommand("M", 0, 0),
                PathCommand("L", 0, 0),
                PathCommand("L", 3, 4),
                PathCommand("L", 3, 10),
            ),
        )
        self.assertEqual(path.length, 11.0)
        self.assertEqual(path.bounds, (0, 0, 3, 10))

    def test_empty_points_give_empty_path(self) -> None:
        path = polyline_path([])
        self.assertTrue(path.is_empty)
        self.assertEqual(path.length, 0.0)
        self.assertIsNone(path.bounds)
        self.assertTrue(path.partial(0.5).is_empty)
        self.assertTrue(area_path([], 100.0).is_empty)

    def test_partial_truncates_by_arc_length(self) -> None:
        path = polyline_path([_hp(0, 0), _hp(3, 4), _hp(3, 10)])
        half = path.partial(0.5)
        self.assertAlmostEqual(half.length, 5.5)
        last = half.commands[-1]
        self.assertEqual(last.op, "L")
        self.assertAlmostEqual(last.x, 3.0)
        self.assertAlmostEqual(last.y, 4.5)

    def test_partial_clamps_progress(self) -> None:
        path = polyline_path([_hp(0, 0), _hp(10, 0)])
        self.assertIs(path.partial(1.5), path)
        self.assertEqual(path.partial(-1.0).length, 0.0)
        self.assertEqual(path.partial(0.0).points[0], (0, 0))

    def test_dashes_follow_the_pattern(self) -> None:
        path = polyline_path([_hp(0, 0), _hp(40, 0)])
        dashed = path.dashed((15.0, 5.0))
        self.assertEqual(dashed.to_svg_d(), "M0,0 L15,0 M20,0 L35,0")

    def test_dashes_continue_around_corners(self) -> None:
        path = polyline_path([_hp(0, 0), _hp(10, 0), _hp(10, 10)])
        dashed = path.dashed((15.0, 5.0))
        self.assertEqual(dashed.to_svg_d(), "M0,0 L10,0 L10,5")

    def test_dash_intervals_must_be_positive(self) -> None:
        path = polyline_path([_hp(0, 0), _hp(10, 0)])
        with self.assertRaises(ValueError):
            path.dashed(())
        with self.assertRaises(ValueError):
            path.dashed((5.0, -1.0))

    def test_area_path_closes_on_baseline(self) -> None:
        path = area_path([_hp(0, 10), _hp(10, 5)], 20.0)
        self.assertEqual(path.to_svg_d(), "M0,10 L0,10 L10,5 L10,20 L0,20 Z")
        self.assertEqual(path.commands[-1].op, "Z")
        self.assertAlmostEqual(path.length, (125 ** 0.5) + 15.0 + 10.0 + 10.0)

    def test_svg_formatting_trims_zeros(self) -> None:
        path = Path((PathCommand("M", 1.5, -0.0001), PathCommand("L", 2.0, 3.25)))
        self.assertEqual(path.to_svg_d(), "M1.5,0 L2,3.25")

    def test_closed_is_noop_on_empty(self) -> None:
        self.assertTrue(Path().closed().is_empty)


class PathCacheTests(unittest.TestCase):
    def setUp(self) -> None:
        self.cache = PathCache(
            projected=((_hp(0, 0), _hp(10, 10)), ()),
            baseline_y=50.0,
            generation=4,
        )

    def test_paths_are_memoized(self) -> None:
        first = self.cache.path_for(0)
        self.assertIs(self.cache.path_for(0), first)
        self.assertEqual(self.cache.cached_indices(), (0,))
        self.assertIs(self.cache.area_path_for(0), self.cache.area_path_for(0))
        self.assertEqual(self.cache.generation, 4)

    def test_empty_series_gives_empty_path(self) -> None:
        self.assertTrue(self.cache.path_for(1).is_empty)
        self.assertTrue(self.cache.area_path_for(1).is_empty)

    def test_out_of_range_index(self) -> None:
        with self.assertRaises(IndexError):
            self.cache.path_for(2)
        with self.assertRaises(IndexError):
            self.cache.path_for(-1)


if __name__ == "__main__":
    unittest.main()
