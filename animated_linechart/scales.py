from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

import numpy as np

from animated_linechart.config import ChartConfig
from animated_linechart.series import FromTo, Line


LOGGER = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60
MAX_AXES = 2


@dataclass(frozen=True)
class UnitScale:
    unit: str
    min_y: float
    max_y: float
    y_scale: float
    y_tick: float

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def is_degenerate(self) -> bool:
        return not math.isfinite(self.y_scale)


class ScaleSet(Mapping[str, UnitScale]):
    """Per-unit y scales, in the order units first appear across the lines."""

    def __init__(self, scales: Sequence[UnitScale] = ()) -> None:
        self._scales: dict[str, UnitScale] = {s.unit: s for s in scales}

    def __getitem__(self, unit: str) -> UnitScale:
        return self._scales[unit]

    def __iter__(self) -> Iterator[str]:
        return iter(self._scales)

    def __len__(self) -> int:
        return len(self._scales)

    def __repr__(self) -> str:
        return f"ScaleSet({list(self._scales.values())!r})"

    @property
    def units(self) -> tuple[str, ...]:
        return tuple(self._scales)

    @property
    def axis_units(self) -> tuple[str, ...]:
        return self.units[:MAX_AXES]

    def unit_for_axis(self, axis_index: int) -> str | None:
        axis_units = self.axis_units
        if 0 <= axis_index < len(axis_units):
            return axis_units[axis_index]
        return None


def compute_scale_set(lines: Sequence[Line], height_px: float, config: ChartConfig) -> ScaleSet:
    ranges: dict[str, tuple[float, float]] = {}
    for line in lines:
        if line.is_empty:
            continue
        lo = float(np.min(line.ys))
        hi = float(np.max(line.ys))
        prev = ranges.get(line.unit)
        ranges[line.unit] = (lo, hi) if prev is None else (min(prev[0], lo), max(prev[1], hi))

    if len(ranges) > MAX_AXES:
        LOGGER.warning(
            "%d units present; only %s get a y-axis, %s share no axis labels",
            len(ranges),
            list(ranges)[:MAX_AXES],
            list(ranges)[MAX_AXES:],
        )

    drawable = np.float64(height_px) - np.float64(config.axis_offset_px)
    scales: list[UnitScale] = []
    for unit, (lo, hi) in ranges.items():
        span = np.float64(hi) - np.float64(lo)
        # A flat unit divides by zero; keep the non-finite scale and let projection clamp it.
        with np.errstate(divide="ignore", invalid="ignore"):
            y_scale = float((drawable / span) * np.float64(config.effective_height_ratio))
        if not math.isfinite(y_scale):
            LOGGER.debug("unit %r has a degenerate y range [%s, %s]", unit, lo, hi)
        scales.append(
            UnitScale(
                unit=unit,
                min_y=lo,
                max_y=hi,
                y_scale=y_scale,
                y_tick=float(span) / config.y_tick_intervals,
            )
        )
    return ScaleSet(scales)


def y_tick_values(scale: UnitScale, config: ChartConfig) -> list[float]:
    # One tick past max_y: with the 5/6 height ratio it lands on the top edge.
    return [scale.min_y + scale.y_tick * c for c in range(config.y_tick_intervals + 2)]


def format_y_tick(value: float, tick: float) -> str:
    if not math.isfinite(value):
        return str(value)
    if tick < 1:
        out = f"{value:.2f}"
        if out.endswith("0"):
            out = out[:-1]
    elif tick <= 10:
        out = f"{value:.1f}"
    else:
        try:
            out = str(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        except InvalidOperation:
            out = f"{value:.0f}"
    return _strip_negative_zero(out)


def format_y_ticks(scale: UnitScale, config: ChartConfig) -> list[str]:
    return [format_y_tick(v, scale.y_tick) for v in y_tick_values(scale, config)]


def x_tick_values(domain: FromTo, config: ChartConfig) -> list[float]:
    if domain.min is None or domain.max is None:
        return []
    step = (domain.max - domain.min) / config.x_steps
    return [domain.min + step * c for c in range(config.x_steps + 1)]


def format_x_tick(value: float) -> str:
    if not math.isfinite(value):
        return str(value)
    return str(int(value))


def format_date_tick(value: float, domain: FromTo, config: ChartConfig, *, tz: tzinfo | None = None) -> str:
    moment = datetime.fromtimestamp(value, tz=timezone.utc)
    if tz is not None:
        moment = moment.astimezone(tz)
    if config.show_months_name:
        pattern = config.format_months
    elif domain.span <= SECONDS_PER_DAY:
        pattern = config.format_hours_minutes
    else:
        pattern = config.format_day_month
    return moment.strftime(pattern)


def _strip_negative_zero(text: str) -> str:
    if text.startswith("-") and float(text) == 0.0:
        return text[1:]
    return text
