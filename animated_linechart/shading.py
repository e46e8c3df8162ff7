from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from animated_linechart.adapters import to_posix_seconds
from animated_linechart.errors import PreconditionViolation, require_same_length
from animated_linechart.series import RGBA, HighlightPoint, Line, MarkerRole


MARKER_ROLES = ("MAX", "MIN")
MAX_VERTICAL_MARKERS = 2
VERTICAL_MARKER_TOLERANCE_S = 60.0


@dataclass(frozen=True)
class ShadedBand:
    role: MarkerRole
    color: RGBA
    left: float
    top: float
    right: float
    bottom: float

    @property
    def height(self) -> float:
        return self.bottom - self.top


@dataclass(frozen=True)
class VerticalMarker:
    timestamp: datetime
    x: float
    y: float


@dataclass(frozen=True)
class VerticalMarkerLayout:
    markers: tuple[VerticalMarker, ...] = ()
    # Span between two resolved markers as (left, top, right, bottom).
    band: tuple[float, float, float, float] | None = None


def resolve_shaded_bands(
    roles: Sequence[MarkerRole],
    marker_ys: Sequence[float | None],
    marker_colors: Sequence[RGBA],
    *,
    left: float,
    right: float,
    top: float,
    bottom: float,
) -> tuple[ShadedBand, ...]:
    """Horizontal bands between marker lines.

    Entries are ordered by pixel y (stable, so ties keep marker order). A MAX
    band reaches up to the previous boundary or `top`; a MIN band reaches down
    to the next boundary or `bottom`. Marker lines without points are skipped.
    """
    require_same_length("marker roles", len(marker_ys), len(roles))
    require_same_length("marker colors", len(marker_ys), len(marker_colors))
    for role in roles:
        if role not in MARKER_ROLES:
            raise PreconditionViolation(f"unknown marker role: {role!r}")

    entries = sorted(
        ((role, y, color) for role, y, color in zip(roles, marker_ys, marker_colors, strict=True) if y is not None),
        key=lambda e: e[1],
    )
    bands: list[ShadedBand] = []
    for i, (role, y, color) in enumerate(entries):
        if role == "MAX":
            edge = entries[i - 1][1] if i >= 1 else top
        else:
            edge = entries[i + 1][1] if i + 1 < len(entries) else bottom
        bands.append(
            ShadedBand(
                role=role,
                color=color,
                left=left,
                top=min(y, edge),
                right=right,
                bottom=max(y, edge),
            )
        )
    return tuple(bands)


def marker_line_ys(
    lines: Sequence[Line],
    projected: Sequence[Sequence[HighlightPoint]],
) -> tuple[list[float | None], list[RGBA]]:
    """Pixel y and colour of every marker line, in line order."""
    ys: list[float | None] = []
    colors: list[RGBA] = []
    for line, series in zip(lines, projected, strict=True):
        if not line.is_marker_line:
            continue
        ys.append(series[0].y if series else None)
        colors.append(line.color)
    return ys, colors


def resolve_vertical_markers(
    lines: Sequence[Line],
    projected: Sequence[Sequence[HighlightPoint]],
    markers: Sequence[datetime],
    *,
    top: float,
    bottom: float,
) -> VerticalMarkerLayout:
    """Anchor up to two date markers on the data lines.

    A marker sits on the last data point (any non-marker line, later lines
    winning) whose timestamp is before `marker + 1 minute`. The second marker is
    only reported once the first one resolved.
    """
    if len(markers) > MAX_VERTICAL_MARKERS:
        raise PreconditionViolation(f"at most {MAX_VERTICAL_MARKERS} vertical markers are supported, got {len(markers)}")
    if not markers:
        return VerticalMarkerLayout()

    limits = [to_posix_seconds(m) + VERTICAL_MARKER_TOLERANCE_S for m in markers]
    found: list[VerticalMarker | None] = [None] * len(markers)
    for line, series in zip(lines, projected, strict=True):
        if line.is_marker_line:
            continue
        for hp in series:
            ts = hp.point.timestamp
            if ts is None:
                continue
            seconds = to_posix_seconds(ts)
            for i, limit in enumerate(limits):
                if seconds < limit:
                    found[i] = VerticalMarker(timestamp=markers[i], x=hp.x, y=hp.y)

    first = found[0]
    if first is None:
        return VerticalMarkerLayout()
    if len(found) == 1 or found[1] is None:
        return VerticalMarkerLayout(markers=(first,))
    last = found[1]
    band = (min(first.x, last.x), top, max(first.x, last.x), bottom)
    return VerticalMarkerLayout(markers=(first, last), band=band)
