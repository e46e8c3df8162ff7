from __future__ import annotations

from datetime import datetime, timedelta, timezone
import unittest

from animated_linechart import HighlightPoint, Line, Point, PreconditionViolation
from animated_linechart.shading import (
    ShadedBand,
    marker_line_ys,
    resolve_shaded_bands,
    resolve_vertical_markers,
)


RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _dated_line(hours: list[int], *, marker: bool = False) -> Line:
    points = tuple(
        Point((BASE + timedelta(hours=h)).timestamp(), float(h), BASE + timedelta(hours=h)) for h in hours
    )
    return Line(points=points, unit="kW", is_marker_line=marker)


def _project(lines: list[Line]) -> tuple[tuple[HighlightPoint, ...], ...]:
    return tuple(
        tuple(
            HighlightPoint(point=p.moved_to(10.0 * j + 100.0 * i, 50.0), y_value=p.y, line_index=i)
            for j, p in enumerate(line.points)
        )
        for i, line in enumerate(lines)
    )


class ShadedBandTests(unittest.TestCase):
    def test_max_reaches_top_and_min_reaches_bottom(self) -> None:
        bands = resolve_shaded_bands(["MAX", "MIN"], [20.0, 80.0], [RED, BLUE], left=30.0, right=300.0, top=0.0, bottom=150.0)
        self.assertEqual(
            bands,
            (
                ShadedBand(role="MAX", color=RED, left=30.0, top=0.0, right=300.0, bottom=20.0),
                ShadedBand(role="MIN", color=BLUE, left=30.0, top=80.0, right=300.0, bottom=150.0),
            ),
        )
        self.assertEqual(bands[1].height, 70.0)

    def test_bands_are_ordered_by_pixel_y(self) -> None:
        bands = resolve_shaded_bands(["MIN", "MAX"], [80.0, 20.0], [BLUE, RED], left=0.0, right=100.0, top=0.0, bottom=150.0)
        self.assertEqual([b.role for b in bands], ["MAX", "MIN"])
        self.assertEqual((bands[0].top, bands[0].bottom), (0.0, 20.0))

    def test_inner_bands_stop_at_neighbours(self) -> None:
        bands = resolve_shaded_bands(["MIN", "MAX"], [20.0, 80.0], [BLUE, RED], left=0.0, right=100.0, top=0.0, bottom=150.0)
        self.assertEqual([(b.top, b.bottom) for b in bands], [(20.0, 80.0), (20.0, 80.0)])

    def test_equal_y_keeps_marker_order(self) -> None:
        bands = resolve_shaded_bands(["MAX", "MAX"], [40.0, 40.0], [RED, BLUE], left=0.0, right=1.0, top=0.0, bottom=99.0)
        self.assertEqual([b.color for b in bands], [RED, BLUE])
        self.assertEqual(bands[1].height, 0.0)

    def test_missing_marker_y_is_skipped(self) -> None:
        bands = resolve_shaded_bands(["MAX", "MIN"], [None, 60.0], [RED, BLUE], left=0.0, right=1.0, top=0.0, bottom=99.0)
        self.assertEqual(len(bands), 1)
        self.assertEqual((bands[0].top, bands[0].bottom), (60.0, 99.0))

    def test_length_mismatch_and_unknown_role(self) -> None:
        with self.assertRaises(PreconditionViolation):
            resolve_shaded_bands(["MAX"], [1.0, 2.0], [RED, BLUE], left=0.0, right=1.0, top=0.0, bottom=1.0)
        with self.assertRaises(PreconditionViolation):
            resolve_shaded_bands(["MAX", "MIN"], [1.0, 2.0], [RED], left=0.0, right=1.0, top=0.0, bottom=1.0)
        with self.assertRaises(PreconditionViolation):
            resolve_shaded_bands(["TOP"], [1.0], [RED], left=0.0, right=1.0, top=0.0, bottom=1.0)  # type: ignore[list-item]

    def test_no_markers(self) -> None:
        self.assertEqual(resolve_shaded_bands([], [], [], left=0.0, right=1.0, top=0.0, bottom=1.0), ())

    def test_marker_line_ys_use_first_point(self) -> None:
        lines = [
            Line.from_pairs([(0, 1), (1, 2)]),
            Line.from_pairs([(0, 8), (1, 8)], color=RED, is_marker_line=True),
            Line(points=(), color=BLUE, is_marker_line=True),
        ]
        projected = (
            (HighlightPoint(Point(0, 70), 1.0), HighlightPoint(Point(10, 60), 2.0)),
            (HighlightPoint(Point(0, 12), 8.0), HighlightPoint(Point(10, 12), 8.0)),
            (),
        )
        ys, colors = marker_line_ys(lines, projected)
        self.assertEqual(ys, [12, None])
        self.assertEqual(colors, [RED, BLUE])


class VerticalMarkerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.lines = [_dated_line([0, 1, 2])]
        self.projected = _project(self.lines)

    def test_marker_sits_on_last_point_before_cutoff(self) -> None:
        layout = resolve_vertical_markers(self.lines, self.projected, [BASE + timedelta(hours=1)], top=0.0, bottom=150.0)
        self.assertEqual(len(layout.markers), 1)
        self.assertEqual(layout.markers[0].x, 10.0)
        self.assertIsNone(layout.band)

    def test_one_minute_tolerance(self) -> None:
        just_before = BASE + timedelta(hours=2) - timedelta(seconds=59)
        layout = resolve_vertical_markers(self.lines, self.projected, [just_before], top=0.0, bottom=150.0)
        self.assertEqual(layout.markers[0].x, 20.0)

        too_early = BASE + timedelta(hours=2) - timedelta(seconds=60)
        layout = resolve_vertical_markers(self.lines, self.projected, [too_early], top=0.0, bottom=150.0)
        self.assertEqual(layout.markers[0].x, 10.0)

    def test_two_markers_span_a_band(self) -> None:
        markers = [BASE + timedelta(hours=1), BASE + timedelta(hours=2)]
        layout = resolve_vertical_markers(self.lines, self.projected, markers, top=0.0, bottom=150.0)
        self.assertEqual([m.x for m in layout.markers], [10.0, 20.0])
        self.assertEqual(layout.band, (10.0, 0.0, 20.0, 150.0))

    def test_marker_before_data_resolves_nothing(self) -> None:
        markers = [BASE - timedelta(hours=1), BASE + timedelta(hours=2)]
        layout = resolve_vertical_markers(self.lines, self.projected, markers, top=0.0, bottom=150.0)
        self.assertEqual(layout.markers, ())
        self.assertIsNone(layout.band)

    def test_marker_lines_are_ignored(self) -> None:
        lines = [_dated_line([0, 1, 2]), _dated_line([0, 1, 2, 3], marker=True)]
        projected = _project(lines)
        layout = resolve_vertical_markers(lines, projected, [BASE + timedelta(hours=5)], top=0.0, bottom=150.0)
        self.assertEqual(layout.markers[0].x, 20.0)

    def test_later_lines_win(self) -> None:
        lines = [_dated_line([0, 1]), _dated_line([0, 1])]
        projected = _project(lines)
        layout = resolve_vertical_markers(lines, projected, [BASE + timedelta(hours=1)], top=0.0, bottom=150.0)
        self.assertEqual(layout.markers[0].x, 110.0)

    def test_at_most_two_markers(self) -> None:
        markers = [BASE, BASE, BASE]
        with self.assertRaises(PreconditionViolation):
            resolve_vertical_markers(self.lines, self.projected, markers, top=0.0, bottom=150.0)

    def test_no_markers(self) -> None:
        layout = resolve_vertical_markers(self.lines, self.projected, [], top=0.0, bottom=150.0)
        self.assertEqual(layout.markers, ())


if __name__ == "__main__":
    unittest.main()
