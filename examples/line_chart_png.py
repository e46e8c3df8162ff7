from __future__ import annotations

import argparse
from datetime import datetime, timedelta, timezone
import logging
import math
from pathlib import Path as FilePath

from PIL import Image, ImageDraw, ImageFont

from animated_linechart import ChartLayout, LineChart, Path, TextStyle


BACKGROUND = (18, 20, 26, 255)
GRID = (60, 64, 76, 255)
TEXT = (220, 224, 232, 255)
TOOLTIP_FILL = (40, 44, 56, 230)


def build_chart() -> LineChart:
    start = datetime(2024, 5, 1, tzinfo=timezone.utc)
    hours = range(48)
    temperature = {start + timedelta(hours=h): 18.0 + 6.0 * math.sin(h / 7.0) for h in hours}
    power = {start + timedelta(hours=h): 400.0 + 250.0 * math.cos(h / 5.0) for h in hours}
    upper = {start: 23.0, start + timedelta(hours=47): 23.0}
    lower = {start: 14.0, start + timedelta(hours=47): 14.0}
    return LineChart.from_datetime_maps(
        [temperature, power, upper, lower],
        [(255, 170, 70), (96, 182, 255), (255, 90, 90, 160), (90, 160, 255, 160)],
        ["C", "W", "C", "C"],
        marker_flags=[False, False, True, True],
    )


def render(layout: ChartLayout, *, progress: float = 1.0, drag_x: float | None = None) -> Image.Image:
    image = Image.new("RGBA", (int(layout.width), int(layout.height)), BACKGROUND)
    overlay = Image.new("RGBA", image.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    font = ImageFont.load_default()

    for band in layout.shaded_bands(["MAX", "MIN"]):
        r, g, b, _ = band.color
        draw.rectangle((band.left, band.top, band.right, band.bottom), fill=(r, g, b, 40))

    grid = layout.grid_lines()
    draw.rectangle(grid.frame, outline=GRID)
    for y in grid.horizontal:
        draw.line((grid.frame[0], y, grid.frame[2], y), fill=GRID)
    for x in grid.vertical:
        draw.line((x, grid.frame[1], x, grid.frame[3]), fill=GRID)

    for tick in layout.x_ticks:
        draw.text((tick.pixel, layout.plot_bottom + 6), tick.label, fill=TEXT, font=font)
    for axis_index, ticks in enumerate(layout.y_ticks):
        for tick in ticks:
            if axis_index == 0:
                x = 0.0
            else:
                x = layout.width - layout.gutters.right + layout.config.axis_margin
            draw.text((x, tick.pixel - 6), tick.label, fill=TEXT, font=font)

    for index, line in enumerate(layout.lines):
        if line.is_marker_line:
            _stroke(draw, layout.dashed_path_for(index, progress), line.color, 1)
            continue
        _stroke(draw, layout.animated_path_for(index, progress), line.color, 2)
        for hp in layout.point_circles(index, progress):
            draw.ellipse((hp.x - 2, hp.y - 2, hp.x + 2, hp.y + 2), fill=line.color)

    if drag_x is not None:
        tooltip = layout.tooltip(drag_x, use_line_colors=True)
        if tooltip.cursor is not None:
            x, top, bottom = tooltip.cursor
            draw.line((x, top, x, bottom), fill=TEXT)
        for hp in tooltip.circles:
            draw.ellipse((hp.x - 4, hp.y - 4, hp.x + 4, hp.y + 4), outline=TEXT)
        if tooltip.box is not None:
            left, top, w, h = tooltip.box
            draw.rounded_rectangle((left, top, left + w, top + h), radius=4, fill=TOOLTIP_FILL)
        for entry in tooltip.entries:
            draw.text(entry.origin, entry.text, fill=entry.color or TEXT, font=font)

    return Image.alpha_composite(image, overlay)


def _stroke(draw: ImageDraw.ImageDraw, path: Path, color: tuple[int, int, int, int], width: int) -> None:
    run: list[tuple[float, float]] = []
    for cmd in path.commands:
        if cmd.op == "M":
            if len(run) > 1:
                draw.line(run, fill=color, width=width)
            run = [(cmd.x, cmd.y)]
        elif cmd.op == "L":
            run.append((cmd.x, cmd.y))
    if len(run) > 1:
        draw.line(run, fill=color, width=width)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Render a sample animated line chart frame to PNG.")
    parser.add_argument("out", type=FilePath, help="output PNG path")
    parser.add_argument("--width", type=int, default=960)
    parser.add_argument("--height", type=int, default=480)
    parser.add_argument("--progress", type=float, default=1.0)
    parser.add_argument("--drag-x", type=float, default=None)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    chart = build_chart()
    layout = chart.initialize(args.width, args.height, TextStyle(font_size_px=11.0))
    render(layout, progress=args.progress, drag_x=args.drag_x).save(args.out)
    logging.getLogger(__name__).info("wrote %s (generation %d)", args.out, layout.generation)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
