"""Flask blueprint exposing hatchet charts and log tables."""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

from flask import Blueprint, current_app, jsonify, request, url_for

from ..analytics import HatchetDatabase
from ..charts import render_chart
from ..config import settings
from ..errors import HatchetError
from ..logs.table import TableMode, render_log_table
from ..storage.hatchet_info import list_hatchets
from ..utils.logging_utils import get_logger

LOGGER = get_logger("web.routes")

bp = Blueprint("hatchet", __name__)


def _data_root() -> Path:
    return Path(current_app.config.get("HATCHET_DATA_ROOT", settings.data_root))


def _verbose() -> bool:
    return bool(current_app.config.get("HATCHET_VERBOSE", settings.verbose))


def _open_database(hatchet: str) -> HatchetDatabase:
    return HatchetDatabase.open(hatchet, data_root=_data_root(), verbose=_verbose())


@bp.errorhandler(HatchetError)
def hatchet_error(exc: HatchetError) -> Any:
    LOGGER.warning("%s %s failed: %s", request.method, request.path, exc)
    return jsonify({"ok": 0, "error": str(exc)}), exc.status_code


@bp.route("/hatchets")
def hatchets() -> Any:
    return jsonify({"ok": 1, "hatchets": [asdict(info) for info in list_hatchets(_data_root())]})


@bp.route("/hatchets/<hatchet>/charts/<attr>")
def charts(hatchet: str, attr: str) -> Any:
    chart_type = request.args.get("type", "")
    duration = request.args.get("duration", "")
    if _verbose():
        LOGGER.info("charts %s %s type=%s duration=%s", hatchet, attr, chart_type, duration)
    with _open_database(hatchet) as database:
        return render_chart(database, hatchet, attr, chart_type, duration)


@bp.route("/hatchets/<hatchet>/logs", defaults={"attr": ""})
@bp.route("/hatchets/<hatchet>/logs/<attr>")
def logs(hatchet: str, attr: str) -> Any:
    mode = TableMode.from_attr(attr)
    with _open_database(hatchet) as database:
        summary = database.info().summary()
        if mode is TableMode.SLOWOPS:
            top_n = _safe_int(request.args.get("topN")) or current_app.config.get("HATCHET_TOP_N", settings.top_n)
            records = database.get_slowest_logs(top_n)
            return render_log_table(mode, hatchet=hatchet, logs=records, summary=summary)

        component = request.args.get("component", "")
        severity = request.args.get("severity", "")
        context = request.args.get("context", "")
        offset = max(_safe_int(request.args.get("offset")) or 0, 0)
        limit = current_app.config.get("HATCHET_LOG_PAGE_SIZE", settings.log_page_size)
        if _verbose():
            LOGGER.info(
                "logs %s component=%s severity=%s context=%s offset=%d",
                hatchet,
                component,
                severity,
                context,
                offset,
            )
        records, has_more = database.get_logs(
            component=component,
            severity=severity,
            context=context,
            offset=offset,
            limit=limit,
        )
        next_url = url_for(
            ".logs",
            hatchet=hatchet,
            component=component,
            severity=severity,
            context=context,
            offset=offset + limit,
        )
        return render_log_table(
            mode,
            hatchet=hatchet,
            logs=records,
            summary=summary,
            component=component,
            severity=severity,
            context=context,
            seq=offset + 1,
            has_more=has_more,
            url=next_url,
        )


def _safe_int(raw: Any) -> Optional[int]:
    try:
        return int(raw) if raw is not None else None
    except (TypeError, ValueError):
        return None
