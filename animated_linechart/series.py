from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from functools import cached_property
from typing import Iterable, Literal

import numpy as np


RGBA = tuple[int, int, int, int]
MarkerRole = Literal["MAX", "MIN"]

DEFAULT_LINE_COLOR: RGBA = (62, 149, 255, 255)


def coerce_color(color: tuple[int, int, int] | tuple[int, int, int, int]) -> RGBA:
    if len(color) == 3:
        r, g, b = color
        return (int(r), int(g), int(b), 255)
    if len(color) == 4:
        r, g, b, a = color
        return (int(r), int(g), int(b), int(a))
    raise ValueError(f"color must be an RGB or RGBA tuple, got {color!r}")


@dataclass(frozen=True)
class Point:
    x: float
    y: float
    # Origin date of a date-keyed point; `x` then holds its POSIX seconds.
    timestamp: datetime | None = None

    @property
    def has_timestamp(self) -> bool:
        return self.timestamp is not None

    def moved_to(self, x: float, y: float) -> "Point":
        return Point(x=x, y=y, timestamp=self.timestamp)


@dataclass(frozen=True)
class Line:
    points: tuple[Point, ...]
    color: RGBA = DEFAULT_LINE_COLOR
    unit: str = ""
    is_marker_line: bool = False

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[tuple[float, float]],
        *,
        color: tuple[int, int, int] | tuple[int, int, int, int] = DEFAULT_LINE_COLOR,
        unit: str = "",
        is_marker_line: bool = False,
    ) -> "Line":
        points = tuple(Point(float(x), float(y)) for x, y in pairs)
        line = cls(points=points, color=coerce_color(color), unit=unit, is_marker_line=is_marker_line)
        return line.sorted_by_x()

    @cached_property
    def xs(self) -> np.ndarray:
        return np.fromiter((p.x for p in self.points), dtype=np.float64, count=len(self.points))

    @cached_property
    def ys(self) -> np.ndarray:
        return np.fromiter((p.y for p in self.points), dtype=np.float64, count=len(self.points))

    @property
    def is_empty(self) -> bool:
        return not self.points

    @property
    def min_x(self) -> float | None:
        return float(np.min(self.xs)) if self.points else None

    @property
    def max_x(self) -> float | None:
        return float(np.max(self.xs)) if self.points else None

    @property
    def min_y(self) -> float | None:
        return float(np.min(self.ys)) if self.points else None

    @property
    def max_y(self) -> float | None:
        return float(np.max(self.ys)) if self.points else None

    @property
    def is_sorted(self) -> bool:
        if len(self.points) < 2:
            return True
        return bool(np.all(np.diff(self.xs) >= 0))

    def sorted_by_x(self) -> "Line":
        if self.is_sorted:
            return self
        order = np.argsort(self.xs, kind="stable")
        points = tuple(self.points[int(i)] for i in order)
        return Line(points=points, color=self.color, unit=self.unit, is_marker_line=self.is_marker_line)


@dataclass(frozen=True)
class FromTo:
    min: float | None = None
    max: float | None = None

    @property
    def is_empty(self) -> bool:
        return self.min is None or self.max is None

    @property
    def span(self) -> float:
        if self.min is None or self.max is None:
            return 0.0
        return self.max - self.min


@dataclass(frozen=True)
class HighlightPoint:
    """Pixel-space point plus the data value it was projected from."""

    point: Point
    y_value: float
    line_index: int = field(default=0, compare=False)

    @property
    def x(self) -> float:
        return self.point.x

    @property
    def y(self) -> float:
        return self.point.y
