from __future__ import annotations

import json
import re
from pathlib import Path

from app import create_app
from hatchet_web import templating
from hatchet_web.analytics import HatchetDatabase
from hatchet_web.errors import QueryError
from hatchet_web.ingest.pipeline import ingest_log_file


def test_index_redirects_to_hatchet_list(client) -> None:
    response = client.get("/")
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/hatchets")


def test_list_hatchets(client) -> None:
    payload = client.get("/hatchets").get_json()
    assert payload["ok"] == 1
    assert [item["name"] for item in payload["hatchets"]] == ["sample"]


def test_ops_chart_snaps_to_returned_rows(client) -> None:
    response = client.get("/hatchets/sample/charts/ops?type=stats")
    assert response.status_code == 200
    html = response.get_data(as_text=True)
    assert "BubbleChart" in html
    assert 'id="start" type="datetime-local" value="2023-01-01T00:02"' in html
    assert 'id="end" type="datetime-local" value="2023-01-01T00:05"' in html
    assert "seconds" in html


def test_slowops_counts_keeps_requested_window(client) -> None:
    response = client.get(
        "/hatchets/sample/charts/slowops?type=counts&duration=2023-01-01T00:00,2023-01-02T00:00"
    )
    html = response.get_data(as_text=True)
    assert "PieChart" in html
    assert "Operation Counts" in html
    assert 'value="2023-01-01T00:00"' in html
    assert 'value="2023-01-02T00:00"' in html


def test_connections_total_bar_chart(client) -> None:
    html = client.get("/hatchets/sample/charts/connections?type=total").get_data(as_text=True)
    assert "ColumnChart" in html
    assert '["10.0.0.1", 1, 1]' in html


def test_unknown_chart_is_json_error(client) -> None:
    response = client.get("/hatchets/sample/charts/connections?type=bogus")
    assert response.status_code == 400
    assert response.get_json() == {"ok": 0, "error": "unknown chart type 'bogus' for connections"}


def test_unknown_hatchet_is_json_error(client) -> None:
    response = client.get("/hatchets/nothing/charts/ops")
    assert response.status_code == 404
    payload = response.get_json()
    assert payload["ok"] == 0
    assert "nothing" in payload["error"]


def test_legacy_logs_paginate(client) -> None:
    first = client.get("/hatchets/sample/logs").get_data(as_text=True)
    assert re.findall(r'<td align="right">(\d+)</td>', first) == ["1", "2", "3"]
    assert "offset=3" in first
    second = client.get("/hatchets/sample/logs?offset=3").get_data(as_text=True)
    assert re.findall(r'<td align="right">(\d+)</td>', second) == ["4", "5", "6"]
    last = client.get("/hatchets/sample/logs?offset=6").get_data(as_text=True)
    assert re.findall(r'<td align="right">(\d+)</td>', last) == ["7", "8", "9"]
    assert 'class="next-page"' not in last


def test_legacy_logs_filter_and_highlight(client) -> None:
    html = client.get("/hatchets/sample/logs?component=COMMAND&context=orders").get_data(as_text=True)
    assert re.findall(r'<td align="right">(\d+)</td>', html) == ["1"]
    assert "<mark>orders</mark>" in html
    assert "<mark>1200ms</mark>" in html
    assert "<option value='COMMAND' SELECTED>COMMAND</option>" in html


def test_slowops_logs(client) -> None:
    html = client.get("/hatchets/sample/logs/slowops?topN=2").get_data(as_text=True)
    assert re.findall(r'<td align="right">(\d+)</td>', html) == ["1", "2"]
    assert "<mark>1200ms</mark>" in html
    assert 'id="component"' not in html


def _quoted_app(tmp_path: Path):
    log = tmp_path / "quotes.log"
    lines = [
        json.dumps(
            {
                "t": {"$date": f"2023-01-01T00:0{i}:00.000+00:00"},
                "s": "E",
                "c": "STORAGE",
                "ctx": "conn1",
                "msg": "can't open file",
                "attr": {"path": f"/data/file{i}.wt"},
            }
        )
        for i in range(6)
    ]
    log.write_text("\n".join(lines) + "\n", encoding="utf-8")
    root = tmp_path / "quoted-data"
    ingest_log_file(log, data_root=root, name="quotes")
    app = create_app({"TESTING": True, "HATCHET_DATA_ROOT": str(root), "HATCHET_LOG_PAGE_SIZE": 2})
    return app.test_client()


def test_next_page_survives_apostrophe_in_search(tmp_path: Path) -> None:
    client = _quoted_app(tmp_path)
    html = client.get("/hatchets/quotes/logs?context=can't").get_data(as_text=True)
    assert re.findall(r'<td align="right">(\d+)</td>', html) == ["1", "2"]
    handlers = re.findall(r"onclick='([^']*)'", html)
    assert len(handlers) == 2
    for handler in handlers:
        assert handler.startswith('location.href="/hatchets/quotes/logs?')
        assert handler.endswith('offset=2"; return false;')
        assert "can" in handler
    assert "can't" not in "".join(handlers)


def test_unreadable_dataset_is_json_error(client, data_root: Path) -> None:
    (data_root / "sample" / "logs" / "broken.parquet").write_bytes(b"not parquet")
    response = client.get("/hatchets/sample/charts/ops")
    assert response.status_code == 404
    payload = response.get_json()
    assert payload["ok"] == 0
    assert "sample" in payload["error"]


def test_query_failure_is_json_error(client, monkeypatch) -> None:
    def fail(self, duration: str = "") -> list:
        raise QueryError("Binder Error: column milli not found")

    monkeypatch.setattr(HatchetDatabase, "get_average_op_time", fail)
    response = client.get("/hatchets/sample/charts/ops")
    assert response.status_code == 500
    assert response.get_json() == {"ok": 0, "error": "Binder Error: column milli not found"}


def test_template_failure_is_json_error(client, monkeypatch) -> None:
    monkeypatch.setitem(templating.TEMPLATE_NAMES, "pie", "charts/missing_chart.html")
    response = client.get("/hatchets/sample/charts/reslen")
    assert response.status_code == 500
    payload = response.get_json()
    assert payload["ok"] == 0
    assert "charts/missing_chart.html" in payload["error"]


def test_chart_controls_embed_values_as_json(client) -> None:
    html = client.get("/hatchets/sample/charts/reslen").get_data(as_text=True)
    assert 'var route = "/reslen?type=ips";' in html
    assert "location.href = '/hatchets/' + \"sample\" + '/charts' + route" in html
