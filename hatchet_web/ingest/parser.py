"""Parse MongoDB 4.4+ JSON log files into log, slow-op and client records."""

from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from ..utils.logging_utils import get_logger

LOGGER = get_logger("ingest.parser")


# ---------------------------------------------------------------------------
# Dataclasses representing normalized events


@dataclass
class LogRecord:
    """One log line as shown in the log tables."""

    id: int
    timestamp: str
    severity: str
    component: str
    context: str
    message: str

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class OpRecord:
    """A slow operation, keyed by the line it was logged on."""

    id: int
    timestamp: str
    op: str
    namespace: str
    pattern: str
    milli: int
    reslen: int
    plan_summary: str
    remote: str

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ClientRecord:
    """A connection accepted or ended event."""

    id: int
    timestamp: str
    ip: str
    accepted: bool
    context: str

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ParsedBatch:
    """Container for a chunk of parsed events."""

    logs: List[LogRecord] = field(default_factory=list)
    ops: List[OpRecord] = field(default_factory=list)
    clients: List[ClientRecord] = field(default_factory=list)
    build: Dict[str, str] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not (self.logs or self.ops or self.clients)


# ---------------------------------------------------------------------------
# Field helpers


def _compact(value: Any) -> str:
    return json.dumps(value, default=str, separators=(",", ":"))


def format_message(msg: str, attr: Dict[str, Any], duration_ms: Optional[int] = None) -> str:
    """``msg`` followed by the compact ``attr`` document and, for slow ops, ``<n>ms``."""

    parts = [msg]
    if attr:
        parts.append(_compact(attr))
    if duration_ms is not None:
        parts.append(f"{duration_ms}ms")
    return " ".join(parts)


def _shape(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _shape(item) for key, item in value.items()}
    if isinstance(value, list) and any(isinstance(item, (dict, list)) for item in value):
        return [_shape(item) for item in value]
    return 1


def query_pattern(command: Any) -> str:
    """Filter shape of a command with every value replaced by ``1``."""

    if not isinstance(command, dict):
        return "{}"
    candidate: Any = command.get("filter") or command.get("query") or command.get("q")
    if candidate is None:
        for key in ("updates", "deletes"):
            statements = command.get(key)
            if isinstance(statements, list) and statements and isinstance(statements[0], dict):
                candidate = statements[0].get("q")
                break
    if candidate is None and isinstance(command.get("pipeline"), list):
        for stage in command["pipeline"]:
            if isinstance(stage, dict) and "$match" in stage:
                candidate = stage["$match"]
                break
    if not isinstance(candidate, dict):
        return "{}"
    return _compact(_shape(candidate))


def _infer_operation(attr: Dict[str, Any], command: Any) -> str:
    op_type = attr.get("type")
    if op_type and op_type != "command":
        return str(op_type)
    if isinstance(command, dict) and command:
        first = next(iter(command))
        if isinstance(first, str) and not first.startswith("$"):
            return first
    return str(op_type or "unknown")


def remote_ip(remote: Any) -> str:
    """Strip the port from ``host:port`` and ``[v6]:port`` remotes."""

    if not remote:
        return ""
    value = str(remote)
    if value.startswith("["):
        return value[1:].split("]", 1)[0]
    if value.count(":") == 1:
        return value.split(":", 1)[0]
    return value


def _build_details(message: str, attr: Dict[str, Any]) -> Dict[str, str]:
    details: Dict[str, str] = {}
    if message == "Build Info":
        build = attr.get("buildInfo") or {}
        if build.get("version"):
            details["version"] = str(build["version"])
        modules = build.get("modules") or []
        details["module"] = "enterprise" if "enterprise" in modules else "community"
        arch = (build.get("environment") or {}).get("distarch")
        if arch:
            details["arch"] = str(arch)
    elif message == "Operating System":
        os_info = attr.get("os") or {}
        name = os_info.get("name")
        if name:
            details["os"] = str(name)
    return details


# ---------------------------------------------------------------------------
# Public parsing API


def parse_line(line: str, line_number: int, batch: ParsedBatch) -> bool:
    """Parse one JSON log line into *batch*; return ``False`` if skipped."""

    stripped = line.strip()
    if not stripped.startswith("{"):
        return False
    try:
        entry = json.loads(stripped)
    except json.JSONDecodeError:
        return False

    timestamp_raw = (entry.get("t") or {}).get("$date")
    if not timestamp_raw:
        LOGGER.debug("Missing timestamp on line %d", line_number)
        return False
    timestamp = str(timestamp_raw)
    attr = entry.get("attr") or {}
    message = str(entry.get("msg", ""))
    context = str(entry.get("ctx", ""))

    duration_ms: Optional[int] = None
    if message == "Slow query":
        command = attr.get("command") or {}
        duration_ms = int(attr.get("durationMillis", 0) or 0)
        batch.ops.append(
            OpRecord(
                id=line_number,
                timestamp=timestamp,
                op=_infer_operation(attr, command),
                namespace=str(attr.get("ns", "")),
                pattern=query_pattern(command),
                milli=duration_ms,
                reslen=int(attr.get("reslen", 0) or 0),
                plan_summary=str(attr.get("planSummary", "")),
                remote=remote_ip(attr.get("remote")),
            )
        )
    elif message in ("Connection accepted", "Connection ended"):
        batch.clients.append(
            ClientRecord(
                id=line_number,
                timestamp=timestamp,
                ip=remote_ip(attr.get("remote")),
                accepted=message == "Connection accepted",
                context=context,
            )
        )
    elif message in ("Build Info", "Operating System"):
        batch.build.update(_build_details(message, attr))

    batch.logs.append(
        LogRecord(
            id=line_number,
            timestamp=timestamp,
            severity=str(entry.get("s", "")).strip(),
            component=str(entry.get("c", "")).strip(),
            context=context,
            message=format_message(message, attr, duration_ms),
        )
    )
    return True


def parse_log_file(filepath: Path, *, batch_size: int = 5000) -> Iterator[ParsedBatch]:
    """Parse *filepath* yielding batches of normalized events."""

    path = Path(filepath)
    batch = ParsedBatch()
    totals = {"lines": 0, "logs": 0, "ops": 0, "clients": 0, "skipped": 0}
    start_time = time.perf_counter()

    with path.open("r", encoding="utf-8", errors="ignore") as handle:
        for line_number, line in enumerate(handle, start=1):
            totals["lines"] = line_number
            if not parse_line(line, line_number, batch):
                totals["skipped"] += 1
                continue
            if len(batch.logs) >= batch_size:
                totals["logs"] += len(batch.logs)
                totals["ops"] += len(batch.ops)
                totals["clients"] += len(batch.clients)
                yield batch
                batch = ParsedBatch()

    if not batch.is_empty() or batch.build:
        totals["logs"] += len(batch.logs)
        totals["ops"] += len(batch.ops)
        totals["clients"] += len(batch.clients)
        yield batch

    LOGGER.info(
        "Parsed %s: lines=%d logs=%d ops=%d clients=%d skipped=%d in %.2fs",
        path,
        totals["lines"],
        totals["logs"],
        totals["ops"],
        totals["clients"],
        totals["skipped"],
        time.perf_counter() - start_time,
    )
