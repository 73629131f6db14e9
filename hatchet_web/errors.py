"""Exceptions surfaced to callers as ``{"ok": 0, "error": ...}`` payloads."""

from __future__ import annotations


class HatchetError(Exception):
    """Base class for request-terminating failures."""

    status_code = 500


class DatasetNotFoundError(HatchetError):
    """The requested hatchet does not exist or cannot be opened."""

    status_code = 404


class QueryError(HatchetError):
    """An aggregate or log query failed inside the query service."""


class TemplateResolutionError(HatchetError):
    """No template is registered for the requested chart family or table."""


class UnknownChartError(HatchetError):
    """The attribute/type pair does not name a chart."""

    status_code = 400
