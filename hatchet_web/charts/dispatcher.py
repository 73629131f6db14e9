"""Map an ``(attribute, type)`` chart request onto a query and a template family."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from jinja2 import TemplateError

from ..errors import TemplateResolutionError, UnknownChartError
from ..templating import resolve_template
from ..utils.logging_utils import get_logger
from .catalog import ChartDescriptor, charts_in_order, get_chart, validate_catalog
from .window import TimeWindow, parse_duration, resolve_time_window, snap_to_series

LOGGER = get_logger("charts.dispatcher")


class ChartAttribute(str, Enum):
    OPS = "ops"
    SLOWOPS = "slowops"
    CONNECTIONS = "connections"
    RESLEN = "reslen"


class ChartFamily(str, Enum):
    BAR = "bar"
    BUBBLE = "bubble"
    PIE = "pie"


class SeriesKind(Enum):
    """Shape of the rows a chart query returns."""

    OP_TIME = "op_time"
    SLOWOP_COUNTS = "slowop_counts"
    NAME_VALUES = "name_values"
    REMOTE = "remote"

    @property
    def context_key(self) -> str:
        if self in (SeriesKind.OP_TIME, SeriesKind.SLOWOP_COUNTS):
            return "op_counts"
        return self.value

    @property
    def timestamped(self) -> bool:
        return self in (SeriesKind.OP_TIME, SeriesKind.SLOWOP_COUNTS)


@dataclass(frozen=True)
class _Route:
    chart_key: str
    family: ChartFamily
    series_kind: SeriesKind
    query: str
    v_axis_label: Optional[str] = None
    query_kind: Optional[str] = None


# Subtype key for attributes that ignore the ``type`` parameter.
ANY_SUBTYPE = "*"

_SLOWOPS_STATS = _Route(
    "slowops", ChartFamily.BUBBLE, SeriesKind.SLOWOP_COUNTS, "get_slow_ops_counts", "count"
)
_CONNECTIONS_ACCEPTED = _Route(
    "connections-accepted", ChartFamily.PIE, SeriesKind.NAME_VALUES, "get_accepted_conns_counts"
)

_ROUTES: Mapping[ChartAttribute, Mapping[str, _Route]] = {
    ChartAttribute.OPS: {
        ANY_SUBTYPE: _Route(
            "ops", ChartFamily.BUBBLE, SeriesKind.OP_TIME, "get_average_op_time", "seconds"
        ),
    },
    ChartAttribute.SLOWOPS: {
        "": _SLOWOPS_STATS,
        "stats": _SLOWOPS_STATS,
        "counts": _Route(
            "slowops-counts", ChartFamily.PIE, SeriesKind.NAME_VALUES, "get_ops_counts"
        ),
    },
    ChartAttribute.CONNECTIONS: {
        "": _CONNECTIONS_ACCEPTED,
        "accepted": _CONNECTIONS_ACCEPTED,
        "time": _Route(
            "connections-time",
            ChartFamily.BAR,
            SeriesKind.REMOTE,
            "get_connection_stats",
            query_kind="time",
        ),
        "total": _Route(
            "connections-total",
            ChartFamily.BAR,
            SeriesKind.REMOTE,
            "get_connection_stats",
            query_kind="total",
        ),
    },
    ChartAttribute.RESLEN: {
        ANY_SUBTYPE: _Route("reslen", ChartFamily.PIE, SeriesKind.NAME_VALUES, "get_reslen_by_clients"),
    },
}

validate_catalog(route.chart_key for routes in _ROUTES.values() for route in routes.values())


@dataclass(frozen=True)
class RenderPlan:
    """Everything needed to fetch and draw one chart."""

    attribute: ChartAttribute
    chart_key: str
    family: ChartFamily
    series_kind: SeriesKind
    descriptor: ChartDescriptor
    query: str
    query_args: Tuple[str, ...]
    v_axis_label: Optional[str] = None

    def fetch(self, database: Any) -> List[Any]:
        """Run the plan's aggregate query against *database*."""

        return getattr(database, self.query)(*self.query_args)


def dispatch(attribute: str, subtype: str, duration: str = "") -> RenderPlan:
    """Resolve a chart request into a :class:`RenderPlan`.

    Raises :class:`UnknownChartError` for attributes or subtypes that do
    not name a chart.
    """

    try:
        attr = ChartAttribute(attribute)
    except ValueError:
        raise UnknownChartError(f"unknown chart attribute '{attribute}'") from None

    routes = _ROUTES[attr]
    route = routes.get(ANY_SUBTYPE) or routes.get(subtype or "")
    if route is None:
        raise UnknownChartError(f"unknown chart type '{subtype}' for {attr.value}")

    if route.query_kind is not None:
        query_args: Tuple[str, ...] = (route.query_kind, duration)
    else:
        query_args = (duration,)

    return RenderPlan(
        attribute=attr,
        chart_key=route.chart_key,
        family=route.family,
        series_kind=route.series_kind,
        descriptor=get_chart(route.chart_key),
        query=route.query,
        query_args=query_args,
        v_axis_label=route.v_axis_label,
    )


def default_window(info: Any, duration: str) -> TimeWindow:
    """Requested window, falling back to the dataset's minute-precision span."""

    span = parse_duration(f"{info.start},{info.end}")
    return resolve_time_window(span.start, span.end, duration)


def build_context(
    plan: RenderPlan,
    *,
    hatchet: str,
    rows: List[Any],
    summary: str,
    window: TimeWindow,
) -> Dict[str, Any]:
    context: Dict[str, Any] = {
        "hatchet": hatchet,
        plan.series_kind.context_key: rows,
        "chart": plan.descriptor,
        "charts": charts_in_order(),
        "type": plan.chart_key,
        "summary": summary,
        "start": window.start,
        "end": window.end,
    }
    if plan.v_axis_label is not None:
        context["v_axis_label"] = plan.v_axis_label
    return context


def render_chart(
    database: Any,
    hatchet: str,
    attribute: str,
    subtype: str = "",
    duration: str = "",
) -> str:
    """Fetch and render the chart page for one request.

    Query failures propagate from *database*; template failures surface as
    :class:`TemplateResolutionError`. Nothing is rendered partially.
    """

    plan = dispatch(attribute, subtype, duration)
    info = database.info()
    window = default_window(info, duration)

    rows = plan.fetch(database)
    if plan.series_kind.timestamped:
        window = snap_to_series(window, rows)
    LOGGER.debug(
        "Chart %s for %s: %d rows, window %s..%s",
        plan.chart_key,
        hatchet,
        len(rows),
        window.start,
        window.end,
    )

    template = resolve_template(plan.family.value)
    context = build_context(plan, hatchet=hatchet, rows=rows, summary=info.summary(), window=window)
    try:
        return template.render(**context)
    except TemplateError as exc:
        raise TemplateResolutionError(f"failed to render {plan.family.value} chart: {exc}") from exc
