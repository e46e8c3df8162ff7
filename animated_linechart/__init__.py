from animated_linechart.chart import AxisTick, ChartLayout, GridLines, LineChart
from animated_linechart.config import ChartConfig
from animated_linechart.errors import ChartDataError, PreconditionViolation
from animated_linechart.ingest import find_domain, lines_from_datetime_maps, lines_from_int_maps, lines_from_series
from animated_linechart.measure import TextStyle, pil_text_measurer
from animated_linechart.path import Path, PathCache
from animated_linechart.scales import ScaleSet, UnitScale
from animated_linechart.series import FromTo, HighlightPoint, Line, Point
from animated_linechart.shading import ShadedBand, VerticalMarker, VerticalMarkerLayout
from animated_linechart.tooltip import TooltipEntry, TooltipLayout, default_tap_text

__all__ = [
    "AxisTick",
    "ChartConfig",
    "ChartDataError",
    "ChartLayout",
    "FromTo",
    "GridLines",
    "HighlightPoint",
    "Line",
    "LineChart",
    "Path",
    "PathCache",
    "Point",
    "PreconditionViolation",
    "ScaleSet",
    "ShadedBand",
    "TextStyle",
    "TooltipEntry",
    "TooltipLayout",
    "UnitScale",
    "VerticalMarker",
    "VerticalMarkerLayout",
    "default_tap_text",
    "find_domain",
    "lines_from_datetime_maps",
    "lines_from_int_maps",
    "lines_from_series",
    "pil_text_measurer",
]
