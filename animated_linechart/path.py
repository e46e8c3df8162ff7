from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Literal

from animated_linechart.series import HighlightPoint


PathOp = Literal["M", "L", "Z"]

DASH_EPS = 1e-9


@dataclass(frozen=True)
class PathCommand:
    op: PathOp
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Path:
    """Immutable pixel-space path made of move-to/line-to/close commands."""

    commands: tuple[PathCommand, ...] = ()

    def __len__(self) -> int:
        return len(self.commands)

    @property
    def is_empty(self) -> bool:
        return not self.commands

    @property
    def points(self) -> tuple[tuple[float, float], ...]:
        return tuple((c.x, c.y) for c in self.commands if c.op != "Z")

    @property
    def length(self) -> float:
        return sum(math.hypot(x1 - x0, y1 - y0) for (x0, y0), (x1, y1) in self._segments())

    @property
    def bounds(self) -> tuple[float, float, float, float] | None:
        pts = self.points
        if not pts:
            return None
        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        return (min(xs), min(ys), max(xs), max(ys))

    def closed(self) -> "Path":
        if self.is_empty:
            return self
        return Path(self.commands + (PathCommand("Z"),))

    def partial(self, progress: float) -> "Path":
        """Leading fraction of the path by arc length, for progressive reveal."""
        if self.is_empty:
            return self
        fraction = min(1.0, max(0.0, float(progress)))
        if fraction >= 1.0:
            return self
        remaining = self.length * fraction
        out: list[PathCommand] = []
        start: tuple[float, float] | None = None
        cursor: tuple[float, float] | None = None
        for cmd in self.commands:
            if cmd.op == "M":
                start = cursor = (cmd.x, cmd.y)
                out.append(cmd)
                continue
            if cursor is None:
                continue
            target = (cmd.x, cmd.y) if cmd.op == "L" else start
            assert target is not None
            seg = math.hypot(target[0] - cursor[0], target[1] - cursor[1])
            if seg <= remaining:
                out.append(cmd)
                remaining -= seg
                cursor = target
                continue
            t = remaining / seg
            out.append(
                PathCommand(
                    "L",
                    cursor[0] + (target[0] - cursor[0]) * t,
                    cursor[1] + (target[1] - cursor[1]) * t,
                )
            )
            break
        return Path(tuple(out))

    def dashed(self, intervals: Sequence[float]) -> "Path":
        """Split into on/off dashes; even-indexed intervals are drawn."""
        if not intervals or any(v <= 0 for v in intervals):
            raise ValueError("dash intervals must be non-empty and > 0")
        out: list[PathCommand] = []
        idx = 0
        left_in_dash = float(intervals[0])
        pen: tuple[float, float] | None = None
        for a, b in self._segments():
            seg = math.hypot(b[0] - a[0], b[1] - a[1])
            pos = 0.0
            while pos < seg:
                end_pos = min(seg, pos + left_in_dash)
                if idx % 2 == 0:
                    start = _lerp(a, b, pos, seg)
                    end = _lerp(a, b, end_pos, seg)
                    if pen != start:
                        out.append(PathCommand("M", *start))
                    out.append(PathCommand("L", *end))
                    pen = end
                left_in_dash -= end_pos - pos
                pos = end_pos
                if left_in_dash <= DASH_EPS:
                    idx = (idx + 1) % len(intervals)
                    left_in_dash = float(intervals[idx])
                    pen = None
        return Path(tuple(out))

    def to_svg_d(self) -> str:
        parts: list[str] = []
        for cmd in self.commands:
            if cmd.op == "Z":
                parts.append("Z")
            else:
                parts.append(f"{cmd.op}{_fmt(cmd.x)},{_fmt(cmd.y)}")
        return " ".join(parts)

    def _segments(self) -> Iterator[tuple[tuple[float, float], tuple[float, float]]]:
        start: tuple[float, float] | None = None
        cursor: tuple[float, float] | None = None
        for cmd in self.commands:
            if cmd.op == "M":
                start = cursor = (cmd.x, cmd.y)
            elif cursor is None:
                continue
            elif cmd.op == "L":
                yield cursor, (cmd.x, cmd.y)
                cursor = (cmd.x, cmd.y)
            else:
                assert start is not None
                yield cursor, start
                cursor = start


def polyline_path(points: Sequence[HighlightPoint]) -> Path:
    if not points:
        return Path()
    first = points[0]
    # Every point gets a line-to, the first one included.
    commands = [PathCommand("M", first.x, first.y)]
    commands.extend(PathCommand("L", p.x, p.y) for p in points)
    return Path(tuple(commands))


def area_path(points: Sequence[HighlightPoint], baseline_y: float) -> Path:
    line = polyline_path(points)
    if line.is_empty:
        return line
    tail = (
        PathCommand("L", points[-1].x, baseline_y),
        PathCommand("L", points[0].x, baseline_y),
    )
    return Path(line.commands + tail).closed()


@dataclass
class PathCache:
    """Lazily built paths for one layout generation, keyed by line index.

    A new layout gets a new cache; entries are never invalidated one by one.
    Building is pure, so a racing duplicate build only overwrites an equal path.
    """

    projected: tuple[tuple[HighlightPoint, ...], ...]
    baseline_y: float
    generation: int = 0
    _paths: dict[int, Path] = field(default_factory=dict)
    _areas: dict[int, Path] = field(default_factory=dict)

    def path_for(self, index: int) -> Path:
        path = self._paths.get(index)
        if path is None:
            path = polyline_path(self._series(index))
            self._paths[index] = path
        return path

    def area_path_for(self, index: int) -> Path:
        path = self._areas.get(index)
        if path is None:
            path = area_path(self._series(index), self.baseline_y)
            self._areas[index] = path
        return path

    def cached_indices(self) -> tuple[int, ...]:
        return tuple(sorted(self._paths))

    def _series(self, index: int) -> tuple[HighlightPoint, ...]:
        if index < 0 or index >= len(self.projected):
            raise IndexError(f"line index out of range: {index}")
        return self.projected[index]


def _lerp(a: tuple[float, float], b: tuple[float, float], dist: float, seg: float) -> tuple[float, float]:
    if dist <= 0.0:
        return a
    if dist >= seg:
        return b
    t = dist / seg
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def _fmt(value: float) -> str:
    out = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if out in {"", "-0"} else out
