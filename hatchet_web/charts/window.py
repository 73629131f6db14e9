"""Time-window resolution for chart requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

WINDOW_PRECISION = 16  # YYYY-MM-DDTHH:MM


@dataclass(frozen=True)
class TimeWindow:
    start: str
    end: str


def _truncate(token: str) -> str:
    if len(token) >= WINDOW_PRECISION:
        return token[:WINDOW_PRECISION]
    return ""


def parse_duration(raw_duration: str) -> TimeWindow:
    """Split ``"<start>,<end>"`` into minute-precision bounds.

    Anything that is not exactly two tokens yields an empty window, and a
    token shorter than 16 characters yields an empty bound. Callers treat
    empty bounds as "unbounded".
    """

    tokens = raw_duration.split(",")
    if len(tokens) != 2:
        return TimeWindow("", "")
    return TimeWindow(_truncate(tokens[0]), _truncate(tokens[1]))


def resolve_time_window(dataset_start: str, dataset_end: str, raw_duration: str) -> TimeWindow:
    """Window requested by *raw_duration*, or the dataset's span when it is empty."""

    if not raw_duration:
        return TimeWindow(dataset_start, dataset_end)
    return parse_duration(raw_duration)


def snap_to_series(window: TimeWindow, rows: Sequence[Any]) -> TimeWindow:
    """Replace *window* with the bounds of a non-empty, time-ordered series."""

    if not rows:
        return window
    return TimeWindow(rows[0].date, rows[-1].date)
