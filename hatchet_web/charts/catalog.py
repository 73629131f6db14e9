"""Static registry of the charts the dashboard knows how to draw."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping


@dataclass(frozen=True)
class ChartDescriptor:
    """Display metadata attached to a rendered chart."""

    index: int
    title: str
    description: str
    route: str


CHARTS: Mapping[str, ChartDescriptor] = MappingProxyType(
    {
        "instruction": ChartDescriptor(0, "select a chart", "", ""),
        "ops": ChartDescriptor(
            1,
            "Average Operation Time",
            "A chart displaying average operations time over a period of time",
            "/ops?type=stats",
        ),
        "slowops": ChartDescriptor(
            2,
            "Slow Operation Counts",
            "A chart displaying total counts and duration of operations",
            "/slowops?type=stats",
        ),
        "slowops-counts": ChartDescriptor(
            3,
            "Operation Counts",
            "A chart displaying total counts of operations",
            "/slowops?type=counts",
        ),
        "connections-accepted": ChartDescriptor(
            4,
            "Accepted Connections",
            "A chart displaying accepted connections from clients",
            "/connections?type=accepted",
        ),
        "connections-time": ChartDescriptor(
            5,
            "Accepted & Ended Connections",
            "A chart displaying accepted vs ended connections over a period of time",
            "/connections?type=time",
        ),
        "connections-total": ChartDescriptor(
            6,
            "Accepted & Ended from IPs",
            "A chart displaying accepted vs ended connections by client IPs",
            "/connections?type=total",
        ),
        "reslen": ChartDescriptor(
            7,
            "Response Length in MB",
            "A chart displaying total response length from client IPs",
            "/reslen?type=ips",
        ),
    }
)


def get_chart(chart_key: str) -> ChartDescriptor:
    """Return the descriptor for *chart_key*.

    A miss means the dispatch table and the registry disagree, which
    :func:`validate_catalog` rules out at import time.
    """

    return CHARTS[chart_key]


def charts_in_order() -> list[tuple[str, ChartDescriptor]]:
    """Registry entries sorted by their display index (chart picker order)."""

    return sorted(CHARTS.items(), key=lambda item: item[1].index)


def validate_catalog(chart_keys: Iterable[str]) -> None:
    """Raise if any reachable chart key has no registered descriptor."""

    missing = sorted(set(chart_keys) - set(CHARTS))
    if missing:
        raise RuntimeError(f"charts missing from catalog: {', '.join(missing)}")
