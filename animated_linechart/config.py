from __future__ import annotations

from dataclasses import dataclass
import math


DEFAULT_AXIS_MARGIN = 5.0
DEFAULT_AXIS_OFFSET_PX = 50.0
DEFAULT_X_STEPS = 11
DEFAULT_Y_TICK_INTERVALS = 5
DEFAULT_EFFECTIVE_HEIGHT_RATIO = 5.0 / 6.0
DEFAULT_MARKER_DASH = (15.0, 5.0)
DEFAULT_MAX_POINT_CIRCLES = 100


@dataclass(frozen=True)
class ChartConfig:
    """Layout constants for one chart instance.

    Date patterns are `strftime` strings. `x_steps` is the number of intervals on
    the x-axis, so the axis carries `x_steps + 1` labels.
    """

    axis_margin: float = DEFAULT_AXIS_MARGIN
    axis_offset_px: float = DEFAULT_AXIS_OFFSET_PX
    x_steps: int = DEFAULT_X_STEPS
    y_tick_intervals: int = DEFAULT_Y_TICK_INTERVALS
    effective_height_ratio: float = DEFAULT_EFFECTIVE_HEIGHT_RATIO
    format_hours_minutes: str = "%H:%M"
    format_day_month: str = "%d/%m"
    format_months: str = "%B"
    show_months_name: bool = False
    tooltip_date_format: str = "%d/%m %H:%M"
    tooltip_day_format: str = "%m/%d/%Y"
    show_minutes_in_tooltip: bool = True
    marker_dash: tuple[float, ...] = DEFAULT_MARKER_DASH
    max_point_circles: int = DEFAULT_MAX_POINT_CIRCLES

    def __post_init__(self) -> None:
        if self.axis_margin < 0:
            raise ValueError("axis_margin must be >= 0")
        if self.axis_offset_px < 0:
            raise ValueError("axis_offset_px must be >= 0")
        if self.x_steps <= 0:
            raise ValueError("x_steps must be > 0")
        if self.y_tick_intervals <= 0:
            raise ValueError("y_tick_intervals must be > 0")
        if not math.isfinite(self.effective_height_ratio) or not 0 < self.effective_height_ratio <= 1:
            raise ValueError("effective_height_ratio must be in (0, 1]")
        if not self.marker_dash or any(v <= 0 for v in self.marker_dash):
            raise ValueError("marker_dash intervals must be > 0")
        if self.max_point_circles < 0:
            raise ValueError("max_point_circles must be >= 0")
