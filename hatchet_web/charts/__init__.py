"""Chart catalog, time windows and chart dispatch."""

from .catalog import CHARTS, ChartDescriptor, get_chart
from .dispatcher import ChartAttribute, ChartFamily, RenderPlan, SeriesKind, dispatch, render_chart
from .window import TimeWindow, resolve_time_window, snap_to_series

__all__ = [
    "CHARTS",
    "ChartAttribute",
    "ChartDescriptor",
    "ChartFamily",
    "RenderPlan",
    "SeriesKind",
    "TimeWindow",
    "dispatch",
    "get_chart",
    "render_chart",
    "resolve_time_window",
    "snap_to_series",
]
