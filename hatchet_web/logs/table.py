"""Log table layouts: slowest operations and the filterable legacy view."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Sequence

from jinja2 import Template, TemplateError

from ..errors import TemplateResolutionError
from ..templating import resolve_template


class TableMode(str, Enum):
    SLOWOPS = "slowops"
    LEGACY = "legacy"

    @classmethod
    def from_attr(cls, attr: "TableMode | str | None") -> "TableMode":
        return cls.SLOWOPS if attr == cls.SLOWOPS.value else cls.LEGACY


def select_table(mode: TableMode | str) -> Template:
    """Template for *mode*; anything other than ``slowops`` is the legacy table."""

    return resolve_template(TableMode.from_attr(mode).value)


def render_log_table(
    mode: TableMode | str,
    *,
    hatchet: str,
    logs: Sequence[Any],
    summary: str = "",
    component: str = "",
    severity: str = "",
    context: str = "",
    seq: int = 1,
    has_more: bool = False,
    url: str = "",
) -> str:
    """Render a log table page.

    In legacy mode rows are numbered from *seq* and *context* is also
    highlighted in every message; slowops rows are numbered from 1.
    """

    template = select_table(mode)
    values: Dict[str, Any] = {
        "hatchet": hatchet,
        "logs": logs,
        "summary": summary,
        "component": component,
        "severity": severity,
        "context": context,
        "seq": seq,
        "has_more": has_more,
        "url": url,
    }
    try:
        return template.render(**values)
    except TemplateError as exc:
        raise TemplateResolutionError(f"failed to render log table: {exc}") from exc
