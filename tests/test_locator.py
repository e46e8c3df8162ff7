from __future__ import annotations

import unittest

from animated_linechart import HighlightPoint, Point
from animated_linechart.locator import closest_highlight_points, find_closest


def _series(xs: list[float], line_index: int = 0) -> tuple[HighlightPoint, ...]:
    return tuple(HighlightPoint(point=Point(x, 0.0), y_value=x * 2, line_index=line_index) for x in xs)


class LocatorTests(unittest.TestCase):
    def test_closest_point_by_pixel_x(self) -> None:
        series = _series([0.0, 10.0, 20.0])
        self.assertEqual(find_closest(series, 12.0), series[1])
        self.assertEqual(find_closest(series, 100.0), series[2])
        self.assertEqual(find_closest(series, -5.0), series[0])

    def test_ties_keep_the_earlier_point(self) -> None:
        series = _series([0.0, 10.0, 20.0])
        self.assertIs(find_closest(series, 5.0), series[0])
        self.assertIs(find_closest(series, 15.0), series[1])

    def test_duplicate_x_keeps_first(self) -> None:
        series = _series([0.0, 10.0, 10.0, 20.0])
        self.assertIs(find_closest(series, 10.0), series[1])

    def test_scan_stops_once_distance_grows(self) -> None:
        # Unsorted input is outside the contract; the early exit shows in the result.
        series = _series([10.0, 20.0, 0.0])
        self.assertIs(find_closest(series, 0.0), series[0])

    def test_empty_series(self) -> None:
        self.assertIsNone(find_closest((), 10.0))

    def test_results_align_with_line_indices(self) -> None:
        projected = (_series([0.0, 10.0], 0), (), _series([4.0], 2))
        result = closest_highlight_points(projected, 9.0)
        self.assertEqual(len(result), 3)
        assert result[0] is not None and result[2] is not None
        self.assertEqual(result[0].x, 10.0)
        self.assertEqual(result[0].y_value, 20.0)
        self.assertIsNone(result[1])
        self.assertEqual(result[2].line_index, 2)

    def test_no_lines(self) -> None:
        self.assertEqual(closest_highlight_points((), 0.0), [])


if __name__ == "__main__":
    unittest.main()
