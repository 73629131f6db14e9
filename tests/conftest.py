from __future__ import annotations

import json
from pathlib import Path

import pytest

from app import create_app
from hatchet_web.ingest.pipeline import ingest_log_file


def _line(ts: str, severity: str, component: str, ctx: str, msg: str, attr: dict | None = None) -> str:
    entry = {"t": {"$date": ts}, "s": severity, "c": component, "id": 1, "ctx": ctx, "msg": msg}
    if attr is not None:
        entry["attr"] = attr
    return json.dumps(entry)


SAMPLE_LINES = [
    _line(
        "2023-01-01T00:00:01.000+00:00", "I", "CONTROL", "initandlisten", "Build Info",
        {"buildInfo": {"version": "6.0.5", "modules": ["enterprise"], "environment": {"distarch": "x86_64"}}},
    ),
    _line(
        "2023-01-01T00:00:02.000+00:00", "I", "CONTROL", "initandlisten", "Operating System",
        {"os": {"name": "Ubuntu", "version": "22.04"}},
    ),
    _line(
        "2023-01-01T00:01:10.000+00:00", "I", "NETWORK", "listener", "Connection accepted",
        {"remote": "10.0.0.1:5000", "connectionId": 1, "connectionCount": 1},
    ),
    _line(
        "2023-01-01T00:02:00.000+00:00", "I", "NETWORK", "listener", "Connection accepted",
        {"remote": "10.0.0.2:5001", "connectionId": 2, "connectionCount": 2},
    ),
    _line(
        "2023-01-01T00:02:30.000+00:00", "I", "COMMAND", "conn1", "Slow query",
        {
            "type": "command",
            "ns": "test.users",
            "command": {"find": "users", "filter": {"age": {"$gt": 21}}},
            "planSummary": "COLLSCAN",
            "keysExamined": 0,
            "docsExamined": 1000,
            "nreturned": 10,
            "reslen": 2097152,
            "remote": "10.0.0.1:5000",
            "durationMillis": 523,
        },
    ),
    _line(
        "2023-01-01T00:03:15.000+00:00", "I", "WRITE", "conn2", "Slow query",
        {
            "type": "update",
            "ns": "test.users",
            "command": {"q": {"_id": 1}, "u": {"$set": {"a": 1}}},
            "planSummary": "IDHACK",
            "keysExamined": 1,
            "nMatched": 1,
            "nModified": 1,
            "remote": "10.0.0.2:5001",
            "durationMillis": 150,
        },
    ),
    _line(
        "2023-01-01T00:05:00.000+00:00", "I", "COMMAND", "conn1", "Slow query",
        {
            "type": "command",
            "ns": "test.orders",
            "command": {"aggregate": "orders", "pipeline": [{"$match": {"status": "A"}}]},
            "planSummary": "IXSCAN { status: 1 }",
            "keysExamined": 50,
            "docsExamined": 50,
            "nreturned": 50,
            "reslen": 1048576,
            "remote": "10.0.0.1:5000",
            "durationMillis": 1200,
        },
    ),
    _line(
        "2023-01-01T00:06:00.000+00:00", "I", "NETWORK", "conn1", "Connection ended",
        {"remote": "10.0.0.1:5000", "connectionId": 1, "connectionCount": 1},
    ),
    _line(
        "2023-01-01T00:07:00.000+00:00", "W", "STORAGE", "Checkpointer", "Checkpoint took too long",
    ),
    "this line is not json",
]


@pytest.fixture
def sample_log(tmp_path: Path) -> Path:
    path = tmp_path / "mongod-sample.log"
    path.write_text("\n".join(SAMPLE_LINES) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def data_root(tmp_path: Path, sample_log: Path) -> Path:
    root = tmp_path / "data"
    ingest_log_file(sample_log, data_root=root, name="sample")
    return root


@pytest.fixture
def client(data_root: Path):
    app = create_app({"TESTING": True, "HATCHET_DATA_ROOT": str(data_root), "HATCHET_LOG_PAGE_SIZE": 3})
    return app.test_client()
