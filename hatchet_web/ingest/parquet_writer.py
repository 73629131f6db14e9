"""Parquet serialization for parsed log, slow-op and client records."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import pyarrow as pa
import pyarrow.parquet as pq

from ..utils.logging_utils import get_logger

LOGGER = get_logger("ingest.parquet_writer")

LOG_SCHEMA = pa.schema(
    [
        ("id", pa.int64()),
        ("timestamp", pa.string()),
        ("severity", pa.string()),
        ("component", pa.string()),
        ("context", pa.string()),
        ("message", pa.string()),
    ]
)

OP_SCHEMA = pa.schema(
    [
        ("id", pa.int64()),
        ("timestamp", pa.string()),
        ("op", pa.string()),
        ("namespace", pa.string()),
        ("pattern", pa.string()),
        ("milli", pa.int64()),
        ("reslen", pa.int64()),
        ("plan_summary", pa.string()),
        ("remote", pa.string()),
    ]
)

CLIENT_SCHEMA = pa.schema(
    [
        ("id", pa.int64()),
        ("timestamp", pa.string()),
        ("ip", pa.string()),
        ("accepted", pa.bool_()),
        ("context", pa.string()),
    ]
)

TABLE_SCHEMAS = {"logs": LOG_SCHEMA, "ops": OP_SCHEMA, "clients": CLIENT_SCHEMA}


class ParquetBatchWriter:
    """Minimal batching wrapper around :class:`pyarrow.parquet.ParquetWriter`."""

    def __init__(self, destination: Path, schema: pa.Schema, *, compression: str) -> None:
        self.destination = Path(destination)
        self.schema = schema
        self.compression = compression
        self._writer: Optional[pq.ParquetWriter] = None
        self._rows_written = 0

    def write_records(self, records: Sequence[Any]) -> None:
        if not records:
            return
        table = pa.Table.from_pylist([record.as_dict() for record in records], schema=self.schema)
        if self._writer is None:
            self.destination.parent.mkdir(parents=True, exist_ok=True)
            self._writer = pq.ParquetWriter(self.destination, self.schema, compression=self.compression)
        self._writer.write_table(table)
        self._rows_written += int(table.num_rows)
        LOGGER.debug(
            "Appended %d rows to %s (total=%d)",
            table.num_rows,
            self.destination,
            self._rows_written,
        )

    def finalize(self) -> Dict[str, Any]:
        if self._writer is not None:
            self._writer.close()
            self._writer = None
        return {"rows_written": self._rows_written, "path": str(self.destination)}
