from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable

from animated_linechart.config import ChartConfig
from animated_linechart.measure import TextMeasurer, TextStyle
from animated_linechart.series import RGBA, HighlightPoint, Line, Point


TapText = Callable[[str, float, str], str]

POINT_CLEARANCE_PX = 12.0
BOX_PADDING_PX = 5.0
BOX_EXTRA_HEIGHT_PX = 16.0
BOX_EXTRA_WIDTH_PX = 20.0
OVERFLOW_MARGIN_PX = 16.0
OVERFLOW_SHIFT_PX = 34.0
LINE_SPACING_PX = 17.0


def default_tap_text(prefix: str, y: float, unit: str) -> str:
    return f"{prefix}: {y:.1f} {unit}"


def tooltip_prefix(point: Point, config: ChartConfig) -> str:
    if point.timestamp is None:
        return ""
    pattern = config.tooltip_date_format if config.show_minutes_in_tooltip else config.tooltip_day_format
    return point.timestamp.strftime(pattern)


@dataclass(frozen=True)
class TooltipEntry:
    text: str
    line_index: int
    # None means "use the tooltip text colour".
    color: RGBA | None
    origin: tuple[float, float]


@dataclass(frozen=True)
class TooltipLayout:
    highlights: tuple[HighlightPoint, ...]
    circles: tuple[HighlightPoint, ...]
    entries: tuple[TooltipEntry, ...]
    box: tuple[float, float, float, float] | None
    cursor: tuple[float, float, float] | None = None


def build_tooltip(
    lines: Sequence[Line],
    highlights: Sequence[HighlightPoint | None],
    drag_x: float,
    *,
    width: float,
    height: float,
    axis_offset_with_padding: float,
    config: ChartConfig,
    style: TextStyle,
    measure: TextMeasurer,
    tap_text: TapText | None = None,
    use_line_colors: bool = False,
) -> TooltipLayout:
    """Place the highlight circles, cursor line and tooltip box for a drag position.

    `box` is (left, top, width, height); `cursor` is (x, top, bottom). Marker
    lines get no circle and no text, though their text still widens the box.
    """
    render_text = tap_text or default_tap_text
    cursor = None
    if config.axis_offset_px < drag_x < width:
        cursor = (drag_x, 0.0, height - config.axis_offset_px)

    present = [hp for hp in highlights if hp is not None]
    if not present:
        return TooltipLayout(highlights=(), circles=(), entries=(), box=None, cursor=cursor)

    min_x = min(hp.x for hp in present)
    min_y = min(hp.y for hp in present)
    max_width = 0.0
    text_height = 0.0
    texts: list[tuple[str, int, RGBA | None]] = []
    circles: list[HighlightPoint] = []
    for hp in present:
        line = lines[hp.line_index]
        text = render_text(tooltip_prefix(hp.point, config), hp.y_value, line.unit)
        w, h = measure(text, style)
        max_width = max(max_width, float(w))
        if line.is_marker_line:
            continue
        circles.append(hp)
        if not texts:
            text_height = float(h)
        texts.append((text, hp.line_index, line.color if use_line_colors else None))

    if not texts:
        return TooltipLayout(highlights=tuple(present), circles=(), entries=(), box=None, cursor=cursor)

    min_x += POINT_CLEARANCE_PX
    box_height = text_height * len(texts) + BOX_EXTRA_HEIGHT_PX
    if min_x + max_width + OVERFLOW_MARGIN_PX > width:
        min_x -= max_width + OVERFLOW_SHIFT_PX
    floor = height - axis_offset_with_padding
    if min_y + box_height > floor:
        min_y = floor - box_height

    box = (min_x - BOX_PADDING_PX, min_y - BOX_PADDING_PX, max_width + BOX_EXTRA_WIDTH_PX, box_height)
    entries = tuple(
        TooltipEntry(text=text, line_index=idx, color=color, origin=(min_x + BOX_PADDING_PX, min_y + LINE_SPACING_PX * i))
        for i, (text, idx, color) in enumerate(texts)
    )
    return TooltipLayout(
        highlights=tuple(present),
        circles=tuple(circles),
        entries=entries,
        box=box,
        cursor=cursor,
    )
