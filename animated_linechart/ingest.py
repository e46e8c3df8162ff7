from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

import numpy as np

from animated_linechart.adapters import normalize_series
from animated_linechart.errors import ChartDataError, require_same_length
from animated_linechart.series import FromTo, Line, Point, coerce_color


LOGGER = logging.getLogger(__name__)

ColorLike = tuple[int, int, int] | tuple[int, int, int, int]


def lines_from_series(
    series: Sequence[Any],
    colors: Sequence[ColorLike],
    units: Sequence[str],
    *,
    marker_flags: Sequence[bool] | None = None,
) -> tuple[list[Line], FromTo]:
    """Build one x-sorted Line per raw series plus the global x domain."""
    require_same_length("colors", len(series), len(colors))
    require_same_length("units", len(series), len(units))
    if marker_flags is not None:
        require_same_length("marker_flags", len(series), len(marker_flags))

    lines: list[Line] = []
    for i, raw in enumerate(series):
        is_marker = bool(marker_flags[i]) if marker_flags is not None else False
        lines.append(_build_line(raw, colors[i], units[i], is_marker, label=f"series[{i}]"))
    return lines, find_domain(lines)


def lines_from_int_maps(
    series: Sequence[Mapping[int, float]],
    colors: Sequence[ColorLike],
    units: Sequence[str],
    *,
    marker_flags: Sequence[bool] | None = None,
) -> tuple[list[Line], FromTo]:
    for i, raw in enumerate(series):
        if not isinstance(raw, Mapping):
            raise ChartDataError(f"series[{i}] must be a mapping of int keys")
    return lines_from_series(series, colors, units, marker_flags=marker_flags)


def lines_from_datetime_maps(
    series: Sequence[Mapping[datetime, float]],
    colors: Sequence[ColorLike],
    units: Sequence[str],
    *,
    marker_flags: Sequence[bool] | None = None,
) -> tuple[list[Line], FromTo]:
    for i, raw in enumerate(series):
        if not isinstance(raw, Mapping):
            raise ChartDataError(f"series[{i}] must be a mapping of datetime keys")
        if any(not isinstance(k, datetime) for k in raw):
            raise ChartDataError(f"series[{i}] keys must all be datetimes")
    return lines_from_series(series, colors, units, marker_flags=marker_flags)


def find_domain(lines: Sequence[Line]) -> FromTo:
    lo: float | None = None
    hi: float | None = None
    for line in lines:
        for p in line.points:
            if lo is None or p.x < lo:
                lo = p.x
            if hi is None or p.x > hi:
                hi = p.x
    return FromTo(min=lo, max=hi)


def _build_line(raw: Any, color: ColorLike, unit: str, is_marker: bool, *, label: str) -> Line:
    data = normalize_series(raw, label=label)
    if data.dropped:
        LOGGER.debug("%s: dropped %d non-finite entries", label, data.dropped)
    keep = np.flatnonzero(data.mask)
    # Map iteration order is not domain order.
    order = keep[np.argsort(data.x[keep], kind="stable")]
    points = tuple(
        Point(
            x=float(data.x[i]),
            y=float(data.y[i]),
            timestamp=data.timestamps[int(i)] if data.timestamps is not None else None,
        )
        for i in order
    )
    return Line(points=points, color=coerce_color(color), unit=str(unit), is_marker_line=is_marker)
