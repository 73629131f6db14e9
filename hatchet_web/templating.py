"""Jinja2 environment and template lookup for chart and log pages."""

from __future__ import annotations

from functools import lru_cache

from jinja2 import Environment, PackageLoader, Template, TemplateNotFound, select_autoescape

from .errors import TemplateResolutionError
from .logs.highlight import highlight_log_html
from .logs.options import component_options, severity_options
from .utils.logging_utils import get_logger

LOGGER = get_logger("templating")

TEMPLATE_NAMES = {
    "bar": "charts/bar_chart.html",
    "bubble": "charts/bubble_chart.html",
    "pie": "charts/pie_chart.html",
    "slowops": "logs/slowops_table.html",
    "legacy": "logs/legacy_table.html",
}


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("hatchet_web", "templates"),
        autoescape=select_autoescape(["html"]),
    )
    env.globals["component_options"] = component_options
    env.globals["severity_options"] = severity_options
    env.filters["highlight_log"] = highlight_log_html
    return env


def resolve_template(family: str) -> Template:
    """Return the template registered for a chart family or table layout."""

    name = TEMPLATE_NAMES.get(family)
    if name is None:
        raise TemplateResolutionError(f"no template for '{family}'")
    try:
        return get_environment().get_template(name)
    except TemplateNotFound as exc:
        LOGGER.warning("Template %s missing for %s", name, family)
        raise TemplateResolutionError(f"template {name} not found") from exc
