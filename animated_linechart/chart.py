from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Any

from animated_linechart.config import ChartConfig
from animated_linechart.ingest import (
    ColorLike,
    find_domain,
    lines_from_datetime_maps,
    lines_from_int_maps,
    lines_from_series,
)
from animated_linechart.locator import closest_highlight_points, find_closest
from animated_linechart.measure import TextMeasurer, TextStyle, pil_text_measurer
from animated_linechart.path import Path, PathCache
from animated_linechart.projection import (
    AxisLabels,
    Gutters,
    ProjectedSeries,
    XScale,
    build_axis_labels,
    compute_x_scale,
    measure_gutters,
    project_lines,
)
from animated_linechart.scales import ScaleSet, compute_scale_set, x_tick_values, y_tick_values
from animated_linechart.series import FromTo, HighlightPoint, Line, MarkerRole
from animated_linechart.shading import (
    ShadedBand,
    VerticalMarkerLayout,
    marker_line_ys,
    resolve_shaded_bands,
    resolve_vertical_markers,
)
from animated_linechart.tooltip import TapText, TooltipLayout, build_tooltip


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AxisTick:
    value: float
    label: str
    # Pixel x for x-axis ticks, pixel y for y-axis ticks.
    pixel: float


@dataclass(frozen=True)
class GridLines:
    frame: tuple[float, float, float, float]
    horizontal: tuple[float, ...]
    vertical: tuple[float, ...]


@dataclass(frozen=True)
class ChartLayout:
    """Everything derived from one (lines, width, height, style) combination.

    Built in one go by `LineChart.initialize` and never mutated afterwards, apart
    from the lazily filled path cache.
    """

    generation: int
    width: float
    height: float
    style: TextStyle
    config: ChartConfig
    lines: tuple[Line, ...]
    domain: FromTo
    scale_set: ScaleSet
    labels: AxisLabels
    gutters: Gutters
    x_scale: XScale
    projected: tuple[ProjectedSeries, ...]
    x_ticks: tuple[AxisTick, ...]
    y_ticks: tuple[tuple[AxisTick, ...], ...]
    axis_titles: tuple[str, ...]
    measure: TextMeasurer = field(repr=False, compare=False)
    path_cache: PathCache = field(repr=False, compare=False)

    @property
    def x_labels(self) -> tuple[str, ...]:
        return self.labels.x

    @property
    def y_labels(self) -> tuple[tuple[str, ...], ...]:
        return self.labels.y

    @property
    def plot_bottom(self) -> float:
        return self.height - self.config.axis_offset_px

    @property
    def plot_width(self) -> float:
        return self.width - self.gutters.left - self.gutters.right

    @property
    def width_step(self) -> float:
        return self.plot_width / self.config.x_steps

    @property
    def height_step(self) -> float:
        return self.plot_bottom / (self.config.y_tick_intervals + 1)

    @property
    def axis_offset_with_padding(self) -> float:
        return self.gutters.left - self.config.axis_margin

    @property
    def y_axis_count(self) -> int:
        return len(self.y_ticks)

    def closest_highlight_points(self, pixel_x: float) -> list[HighlightPoint | None]:
        return closest_highlight_points(self.projected, pixel_x)

    def closest_highlight_point(self, line_index: int, pixel_x: float) -> HighlightPoint | None:
        return find_closest(self.projected[line_index], pixel_x)

    def path_for(self, line_index: int) -> Path:
        return self.path_cache.path_for(line_index)

    def animated_path_for(self, line_index: int, progress: float) -> Path:
        return self.path_cache.path_for(line_index).partial(progress)

    def area_path_for(self, line_index: int) -> Path:
        return self.path_cache.area_path_for(line_index)

    def dashed_path_for(self, line_index: int, progress: float = 1.0) -> Path:
        return self.animated_path_for(line_index, progress).dashed(self.config.marker_dash)

    def point_circles(self, line_index: int, progress: float = 1.0) -> ProjectedSeries:
        """Points that get a dot: data lines only, once fully revealed, and not too dense."""
        series = self.projected[line_index]
        if progress < 1.0 or self.lines[line_index].is_marker_line:
            return ()
        if len(series) >= self.config.max_point_circles:
            return ()
        return series

    def shaded_bands(self, roles: Sequence[MarkerRole]) -> tuple[ShadedBand, ...]:
        ys, colors = marker_line_ys(self.lines, self.projected)
        return resolve_shaded_bands(
            roles,
            ys,
            colors,
            left=self.gutters.left,
            right=self.width,
            top=0.0,
            bottom=self.plot_bottom,
        )

    def vertical_markers(self, markers: Sequence[datetime]) -> VerticalMarkerLayout:
        return resolve_vertical_markers(self.lines, self.projected, markers, top=0.0, bottom=self.plot_bottom)

    def tooltip(
        self,
        drag_x: float,
        *,
        tap_text: TapText | None = None,
        use_line_colors: bool = False,
    ) -> TooltipLayout:
        return build_tooltip(
            self.lines,
            self.closest_highlight_points(drag_x),
            drag_x,
            width=self.width,
            height=self.height,
            axis_offset_with_padding=self.axis_offset_with_padding,
            config=self.config,
            style=self.style,
            measure=self.measure,
            tap_text=tap_text,
            use_line_colors=use_line_colors,
        )

    def grid_lines(self) -> GridLines:
        left = self.gutters.left
        right = self.width - self.gutters.right
        horizontal = tuple(self.plot_bottom - c * self.height_step for c in range(1, self.config.y_tick_intervals + 1))
        vertical = tuple(left + c * self.width_step for c in range(1, self.config.x_steps))
        return GridLines(frame=(left, 0.0, right, self.plot_bottom), horizontal=horizontal, vertical=vertical)


class LineChart:
    """Layout engine for a multi-line chart with per-unit y-axes and a shared x-axis."""

    def __init__(
        self,
        lines: Sequence[Line],
        domain: FromTo | None = None,
        *,
        config: ChartConfig | None = None,
        measure: TextMeasurer = pil_text_measurer,
        y_axis_name: str | None = None,
    ) -> None:
        self.config = config or ChartConfig()
        self.measure = measure
        self.y_axis_name = y_axis_name
        self._lines: tuple[Line, ...] = ()
        self._domain = FromTo()
        self._layout: ChartLayout | None = None
        self._layout_key: tuple[Any, ...] | None = None
        self._generation = 0
        self._assign_lines(lines, domain)

    @classmethod
    def from_int_maps(
        cls,
        series: Sequence[dict[int, float]],
        colors: Sequence[ColorLike],
        units: Sequence[str],
        *,
        marker_flags: Sequence[bool] | None = None,
        **kwargs: Any,
    ) -> "LineChart":
        lines, domain = lines_from_int_maps(series, colors, units, marker_flags=marker_flags)
        return cls(lines, domain, **kwargs)

    @classmethod
    def from_datetime_maps(
        cls,
        series: Sequence[dict[datetime, float]],
        colors: Sequence[ColorLike],
        units: Sequence[str],
        *,
        marker_flags: Sequence[bool] | None = None,
        **kwargs: Any,
    ) -> "LineChart":
        lines, domain = lines_from_datetime_maps(series, colors, units, marker_flags=marker_flags)
        return cls(lines, domain, **kwargs)

    @classmethod
    def from_series(
        cls,
        series: Sequence[Any],
        colors: Sequence[ColorLike],
        units: Sequence[str],
        *,
        marker_flags: Sequence[bool] | None = None,
        **kwargs: Any,
    ) -> "LineChart":
        lines, domain = lines_from_series(series, colors, units, marker_flags=marker_flags)
        return cls(lines, domain, **kwargs)

    @property
    def lines(self) -> tuple[Line, ...]:
        return self._lines

    @property
    def domain(self) -> FromTo:
        return self._domain

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_initialized(self) -> bool:
        return self._layout is not None

    @property
    def layout(self) -> ChartLayout:
        if self._layout is None:
            raise RuntimeError("chart layout is not initialized; call initialize(width, height) first")
        return self._layout

    def set_lines(self, lines: Sequence[Line], domain: FromTo | None = None) -> None:
        """Replace the data; an existing layout is rebuilt at its current size."""
        self._assign_lines(lines, domain)
        previous = self._layout
        self._layout_key = None
        if previous is not None:
            self.initialize(previous.width, previous.height, previous.style)

    def initialize(self, width_px: float, height_px: float, style: TextStyle | None = None) -> ChartLayout:
        if width_px <= 0 or height_px <= 0:
            raise ValueError("width and height must be > 0")
        text_style = style or TextStyle()
        key = (float(width_px), float(height_px), text_style)
        if self._layout is not None and self._layout_key == key:
            return self._layout

        layout = self._build_layout(float(width_px), float(height_px), text_style, self._generation + 1)
        self._generation = layout.generation
        self._layout_key = key
        self._layout = layout
        LOGGER.debug(
            "layout generation %d: %sx%s px, %d lines, units=%s",
            layout.generation,
            width_px,
            height_px,
            len(self._lines),
            list(layout.scale_set.units),
        )
        return layout

    def closest_highlight_points(self, pixel_x: float) -> list[HighlightPoint | None]:
        return self.layout.closest_highlight_points(pixel_x)

    def path_for(self, line_index: int) -> Path:
        return self.layout.path_for(line_index)

    def _assign_lines(self, lines: Sequence[Line], domain: FromTo | None) -> None:
        self._lines = tuple(line.sorted_by_x() for line in lines)
        self._domain = domain if domain is not None else find_domain(self._lines)

    def _build_layout(self, width: float, height: float, style: TextStyle, generation: int) -> ChartLayout:
        config = self.config
        lines = self._lines
        scale_set = compute_scale_set(lines, height, config)
        dated, tz = self._date_axis()
        labels = build_axis_labels(scale_set, self._domain, config, dated=dated, tz=tz)
        gutters = measure_gutters(labels, style, self.measure, config)
        x_scale = compute_x_scale(self._domain, width, gutters)
        projected = project_lines(lines, scale_set, x_scale, height, config)
        baseline = height - config.axis_offset_px

        x_ticks = tuple(
            AxisTick(value=v, label=label, pixel=x_scale.to_pixel(v))
            for v, label in zip(x_tick_values(self._domain, config), labels.x, strict=True)
        )
        y_ticks: list[tuple[AxisTick, ...]] = []
        for unit, axis_labels in zip(scale_set.axis_units, labels.y, strict=True):
            unit_scale = scale_set[unit]
            step_px = baseline / (config.y_tick_intervals + 1)
            y_ticks.append(
                tuple(
                    AxisTick(value=v, label=label, pixel=baseline - c * step_px)
                    for c, (v, label) in enumerate(zip(y_tick_values(unit_scale, config), axis_labels, strict=True))
                )
            )

        titles = list(scale_set.axis_units)
        if titles and self.y_axis_name is not None:
            titles[0] = self.y_axis_name

        return ChartLayout(
            generation=generation,
            width=width,
            height=height,
            style=style,
            config=config,
            lines=lines,
            domain=self._domain,
            scale_set=scale_set,
            labels=labels,
            gutters=gutters,
            x_scale=x_scale,
            projected=projected,
            x_ticks=x_ticks,
            y_ticks=tuple(y_ticks),
            axis_titles=tuple(titles),
            measure=self.measure,
            path_cache=PathCache(projected=projected, baseline_y=baseline, generation=generation),
        )

    def _date_axis(self) -> tuple[bool, tzinfo | None]:
        stamps = [p.timestamp for line in self._lines for p in line.points]
        if not stamps or any(ts is None for ts in stamps):
            return (False, None)
        first = stamps[0]
        assert first is not None
        return (True, first.tzinfo)
