"""DuckDB-backed aggregate and log queries for a single hatchet."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..charts.window import parse_duration
from ..config import settings
from ..errors import DatasetNotFoundError, QueryError
from ..ingest.parser import LogRecord
from ..storage.hatchet_info import HatchetInfo, is_valid_name, load_hatchet_info
from ..utils.logging_utils import get_logger
from .series import NameValue, OpStat, RemoteStat

try:
    import duckdb  # type: ignore
except ImportError as exc:  # pragma: no cover - hard dependency
    raise RuntimeError("DuckDB is required for analytics (pip install duckdb).") from exc

LOGGER = get_logger("analytics.hatchet_db")

_TABLES = ("logs", "ops", "clients")
_MINUTE = "substr(timestamp, 1, 16)"


def window_clause(duration: str, *, column: str = _MINUTE) -> Tuple[List[str], List[Any]]:
    """SQL conditions bounding *column* by the minute-precision *duration*.

    Empty bounds leave that side of the window open.
    """

    conditions: List[str] = []
    params: List[Any] = []
    if not duration:
        return conditions, params
    window = parse_duration(duration)
    if window.start:
        conditions.append(f"{column} >= ?")
        params.append(window.start)
    if window.end:
        conditions.append(f"{column} <= ?")
        params.append(window.end)
    return conditions, params


def _where(conditions: Sequence[str]) -> str:
    return f"WHERE {' AND '.join(conditions)}" if conditions else ""


class HatchetDatabase:
    """Per-request view over one hatchet's Parquet tables.

    Open with :meth:`open` and close when the request is done; the
    in-memory DuckDB connection is not shared between requests.
    """

    def __init__(self, dataset_dir: Path, info: HatchetInfo, *, verbose: bool = False) -> None:
        self.dataset_dir = Path(dataset_dir)
        self._info = info
        self.verbose = verbose
        self._conn = duckdb.connect(database=":memory:")
        self._available_views: Dict[str, bool] = {}
        try:
            self.refresh()
        except duckdb.Error as exc:
            self._conn.close()
            LOGGER.warning("Could not open hatchet %s: %s", info.name, exc)
            raise DatasetNotFoundError(f"hatchet '{info.name}' could not be opened: {exc}") from exc

    @classmethod
    def open(
        cls,
        name: str,
        *,
        data_root: Path | None = None,
        verbose: Optional[bool] = None,
    ) -> "HatchetDatabase":
        if not is_valid_name(name):
            raise DatasetNotFoundError(f"invalid hatchet name '{name}'")
        dataset_dir = (Path(data_root) if data_root is not None else settings.data_root) / name
        info = load_hatchet_info(dataset_dir)
        if info is None:
            raise DatasetNotFoundError(f"hatchet '{name}' not found")
        return cls(dataset_dir, info, verbose=settings.verbose if verbose is None else verbose)

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "HatchetDatabase":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def info(self) -> HatchetInfo:
        return self._info

    # ------------------------------------------------------------------
    # Dataset registration

    def refresh(self) -> None:
        """Register one view per table over the dataset's Parquet files."""

        for table in _TABLES:
            files = sorted(str(path.resolve()) for path in (self.dataset_dir / table).glob("*.parquet"))
            if files:
                file_array = ", ".join("'" + f.replace("'", "''") + "'" for f in files)
                self._conn.execute(
                    f"CREATE OR REPLACE VIEW {table} AS SELECT * FROM read_parquet([{file_array}])"
                )
                self._available_views[table] = True
            else:
                self._conn.execute(f"DROP VIEW IF EXISTS {table}")
                self._available_views[table] = False
            LOGGER.debug("View %s registered with %d files", table, len(files))

    def _fetch(self, query: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        if self.verbose:
            LOGGER.info("%s %s", " ".join(query.split()), list(params))
        try:
            cursor = self._conn.execute(query, list(params))
            columns = [desc[0] for desc in cursor.description]
            return [dict(zip(columns, row)) for row in cursor.fetchall()]
        except duckdb.Error as exc:
            raise QueryError(str(exc)) from exc

    # ------------------------------------------------------------------
    # Chart aggregates

    def get_average_op_time(self, duration: str = "") -> List[OpStat]:
        """Average duration per operation shape and minute, in time order."""

        if not self._available_views.get("ops"):
            return []
        conditions, params = window_clause(duration)
        rows = self._fetch(
            f"""
            SELECT {_MINUTE} AS "date", op, namespace, pattern,
                   COUNT(*) AS "count", AVG(milli) AS milli
            FROM ops
            {_where(conditions)}
            GROUP BY 1, 2, 3, 4
            ORDER BY "date", op, namespace, pattern
            """,
            params,
        )
        return [OpStat(**row) for row in rows]

    def get_slow_ops_counts(self, duration: str = "") -> List[OpStat]:
        """Slow operation counts and total duration per op/namespace and minute."""

        if not self._available_views.get("ops"):
            return []
        conditions, params = window_clause(duration)
        rows = self._fetch(
            f"""
            SELECT {_MINUTE} AS "date", op, namespace, '' AS pattern,
                   COUNT(*) AS "count", CAST(SUM(milli) AS DOUBLE) AS milli
            FROM ops
            {_where(conditions)}
            GROUP BY 1, 2, 3
            ORDER BY "date", op, namespace
            """,
            params,
        )
        return [OpStat(**row) for row in rows]

    def get_ops_counts(self, duration: str = "") -> List[NameValue]:
        if not self._available_views.get("ops"):
            return []
        conditions, params = window_clause(duration)
        rows = self._fetch(
            f"""
            SELECT op AS name, COUNT(*) AS "value"
            FROM ops
            {_where(conditions)}
            GROUP BY op
            ORDER BY "value" DESC, name
            """,
            params,
        )
        return [NameValue(**row) for row in rows]

    def get_accepted_conns_counts(self, duration: str = "") -> List[NameValue]:
        if not self._available_views.get("clients"):
            return []
        conditions, params = window_clause(duration)
        rows = self._fetch(
            f"""
            SELECT ip AS name, COUNT(*) AS "value"
            FROM clients
            {_where(["accepted", *conditions])}
            GROUP BY ip
            ORDER BY "value" DESC, name
            """,
            params,
        )
        return [NameValue(**row) for row in rows]

    def get_connection_stats(self, kind: str, duration: str = "") -> List[RemoteStat]:
        """Accepted vs ended connections per minute (``time``) or per IP (``total``)."""

        if kind == "time":
            key, order = _MINUTE, "1"
        elif kind == "total":
            key, order = "ip", "2 DESC, 1"
        else:
            raise QueryError(f"unsupported connection stats '{kind}'")
        if not self._available_views.get("clients"):
            return []
        conditions, params = window_clause(duration)
        rows = self._fetch(
            f"""
            SELECT {key} AS "value",
                   CAST(SUM(CASE WHEN accepted THEN 1 ELSE 0 END) AS BIGINT) AS accepted,
                   CAST(SUM(CASE WHEN accepted THEN 0 ELSE 1 END) AS BIGINT) AS ended
            FROM clients
            {_where(conditions)}
            GROUP BY 1
            ORDER BY {order}
            """,
            params,
        )
        return [RemoteStat(**row) for row in rows]

    def get_reslen_by_clients(self, duration: str = "") -> List[NameValue]:
        """Total response length in MB per client IP."""

        if not self._available_views.get("ops"):
            return []
        conditions, params = window_clause(duration)
        rows = self._fetch(
            f"""
            SELECT remote AS name,
                   round(CAST(SUM(reslen) AS DOUBLE) / 1048576, 2) AS "value"
            FROM ops
            {_where(["remote <> ''", *conditions])}
            GROUP BY remote
            ORDER BY "value" DESC, name
            """,
            params,
        )
        return [NameValue(**row) for row in rows]

    # ------------------------------------------------------------------
    # Log tables

    def get_logs(
        self,
        *,
        component: str = "",
        severity: str = "",
        context: str = "",
        offset: int = 0,
        limit: int = 100,
    ) -> Tuple[List[LogRecord], bool]:
        """A page of log lines in file order, plus whether more follow."""

        if not self._available_views.get("logs"):
            return [], False
        conditions: List[str] = []
        params: List[Any] = []
        if component:
            conditions.append("component = ?")
            params.append(component)
        if severity:
            conditions.append("severity = ?")
            params.append(severity)
        if context:
            conditions.append("(contains(lower(context), ?) OR contains(lower(message), ?))")
            params.extend([context.lower(), context.lower()])
        rows = self._fetch(
            f"""
            SELECT id, timestamp, severity, component, context, message
            FROM logs
            {_where(conditions)}
            ORDER BY id
            LIMIT {int(limit) + 1} OFFSET {max(int(offset), 0)}
            """,
            params,
        )
        has_more = len(rows) > limit
        return [LogRecord(**row) for row in rows[:limit]], has_more

    def get_slowest_logs(self, top_n: int = 23) -> List[LogRecord]:
        """Log lines of the *top_n* slowest operations, slowest first."""

        if not (self._available_views.get("logs") and self._available_views.get("ops")):
            return []
        rows = self._fetch(
            f"""
            SELECT l.id, l.timestamp, l.severity, l.component, l.context, l.message
            FROM logs l JOIN ops o ON l.id = o.id
            ORDER BY o.milli DESC, l.id
            LIMIT {int(top_n)}
            """,
            [],
        )
        return [LogRecord(**row) for row in rows]
