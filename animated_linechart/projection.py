from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import tzinfo

import numpy as np

from animated_linechart.config import ChartConfig
from animated_linechart.measure import TextMeasurer, TextStyle, max_text_width
from animated_linechart.scales import (
    ScaleSet,
    UnitScale,
    format_date_tick,
    format_x_tick,
    format_y_ticks,
    x_tick_values,
)
from animated_linechart.series import FromTo, HighlightPoint, Line


ProjectedSeries = tuple[HighlightPoint, ...]

MIN_RIGHT_GUTTER = 1.0


@dataclass(frozen=True)
class Gutters:
    left: float
    right: float


@dataclass(frozen=True)
class AxisLabels:
    x: tuple[str, ...]
    # One label tuple per y-axis; index 0 is the left axis, index 1 the right one.
    y: tuple[tuple[str, ...], ...]


@dataclass(frozen=True)
class XScale:
    scale: float
    offset: float
    left: float

    def to_pixel(self, x: float) -> float:
        with np.errstate(invalid="ignore", over="ignore"):
            px = float(np.float64(x) * np.float64(self.scale) - np.float64(self.offset) + np.float64(self.left))
        return px if np.isfinite(px) else 0.0


def build_axis_labels(
    scale_set: ScaleSet,
    domain: FromTo,
    config: ChartConfig,
    *,
    dated: bool = False,
    tz: tzinfo | None = None,
) -> AxisLabels:
    y_labels = tuple(tuple(format_y_ticks(scale_set[unit], config)) for unit in scale_set.axis_units)
    ticks = x_tick_values(domain, config)
    if dated:
        x_labels = tuple(format_date_tick(v, domain, config, tz=tz) for v in ticks)
    else:
        x_labels = tuple(format_x_tick(v) for v in ticks)
    return AxisLabels(x=x_labels, y=y_labels)


def measure_gutters(
    labels: AxisLabels,
    style: TextStyle,
    measure: TextMeasurer,
    config: ChartConfig,
) -> Gutters:
    left = 0.0
    right = MIN_RIGHT_GUTTER
    if len(labels.y) > 0 and labels.y[0]:
        left = float(max_text_width(labels.y[0], style, measure)) + config.axis_margin
    if len(labels.y) > 1 and labels.y[1]:
        right = max(right, float(max_text_width(labels.y[1], style, measure)) + config.axis_margin)
    return Gutters(left=left, right=right)


def compute_x_scale(domain: FromTo, width_px: float, gutters: Gutters) -> XScale:
    if domain.min is None or domain.max is None:
        return XScale(scale=float("nan"), offset=0.0, left=gutters.left)
    usable = np.float64(width_px) - np.float64(gutters.left) - np.float64(gutters.right)
    with np.errstate(divide="ignore", invalid="ignore"):
        scale = usable / (np.float64(domain.max) - np.float64(domain.min))
        offset = np.float64(domain.min) * scale
    if np.isnan(offset):
        offset = np.float64(0.0)
    return XScale(scale=float(scale), offset=float(offset), left=gutters.left)


def project_line(
    line: Line,
    unit_scale: UnitScale | None,
    x_scale: XScale,
    height_px: float,
    config: ChartConfig,
    *,
    line_index: int = 0,
) -> ProjectedSeries:
    if line.is_empty or unit_scale is None:
        return ()
    baseline = np.float64(height_px) - np.float64(config.axis_offset_px)
    with np.errstate(invalid="ignore", over="ignore"):
        px = line.xs * np.float64(x_scale.scale) - np.float64(x_scale.offset) + np.float64(x_scale.left)
        py = baseline - (line.ys - np.float64(unit_scale.min_y)) * np.float64(unit_scale.y_scale)
    px = np.where(np.isfinite(px), px, 0.0)
    py = np.where(np.isfinite(py), py, 0.0)
    return tuple(
        HighlightPoint(point=p.moved_to(float(x), float(y)), y_value=p.y, line_index=line_index)
        for p, x, y in zip(line.points, px.tolist(), py.tolist(), strict=True)
    )


def project_lines(
    lines: Sequence[Line],
    scale_set: ScaleSet,
    x_scale: XScale,
    height_px: float,
    config: ChartConfig,
) -> tuple[ProjectedSeries, ...]:
    return tuple(
        project_line(
            line,
            scale_set.get(line.unit),
            x_scale,
            height_px,
            config,
            line_index=i,
        )
        for i, line in enumerate(lines)
    )
