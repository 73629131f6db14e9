"""Fixed component and severity lists for the log table filters."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

from markupsafe import Markup, escape

COMPONENTS: Tuple[str, ...] = (
    "ACCESS",
    "ASIO",
    "COMMAND",
    "CONNPOOL",
    "CONTROL",
    "ELECTION",
    "FTDC",
    "INDEX",
    "INITSYNC",
    "NETWORK",
    "QUERY",
    "RECOVERY",
    "REPL",
    "SHARDING",
    "STORAGE",
    "WRITE",
)

SEVERITIES: Tuple[str, ...] = ("F", "E", "W", "I", "D", "D2")

SEVERITY_LABELS: Mapping[str, str] = MappingProxyType(
    {
        "F": "FATAL",
        "E": "ERROR",
        "W": "WARN",
        "I": "INFO",
        "D": "DEBUG",
        "D2": "DEBUG2",
    }
)


def _options(pairs: Iterable[Tuple[str, str]], selected: str | None) -> Markup:
    lines = []
    for value, label in pairs:
        marker = "SELECTED" if value == selected else ""
        lines.append(f"<option value='{escape(value)}' {marker}>{escape(label)}</option>")
    return Markup("\n".join(lines))


def component_options(selected: str | None = None) -> Markup:
    return _options(((name, name) for name in COMPONENTS), selected)


def severity_options(selected: str | None = None) -> Markup:
    """Severity ``<option>`` list in F, E, W, I, D, D2 order with long labels."""

    return _options(((code, SEVERITY_LABELS[code]) for code in SEVERITIES), selected)
