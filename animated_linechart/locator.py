from __future__ import annotations

from collections.abc import Sequence

from animated_linechart.series import HighlightPoint


def find_closest(series: Sequence[HighlightPoint], pixel_x: float) -> HighlightPoint | None:
    """Closest point by pixel x; `series` must be sorted by x.

    The scan stops at the first point farther away than the current best, which
    is only correct because distance to `pixel_x` falls then rises along a sorted
    series. Ties keep the earlier point.
    """
    if not series:
        return None
    candidate = series[0]
    candidate_dist = abs(candidate.x - pixel_x)
    for alternative in series:
        dist = abs(alternative.x - pixel_x)
        if dist < candidate_dist:
            candidate = alternative
            candidate_dist = dist
        if dist > candidate_dist:
            break
    return candidate


def closest_highlight_points(
    projected: Sequence[Sequence[HighlightPoint]],
    pixel_x: float,
) -> list[HighlightPoint | None]:
    """One entry per line index; None where the line has no points."""
    return [find_closest(series, pixel_x) for series in projected]
