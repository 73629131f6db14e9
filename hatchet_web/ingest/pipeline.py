"""High-level ingest orchestration: one log file becomes one hatchet."""

from __future__ import annotations

import shutil
import time
from pathlib import Path
from typing import Any, Dict, Optional

from ..config import settings
from ..storage.hatchet_info import HatchetInfo, hatchet_name_for, is_valid_name, write_hatchet_info
from ..utils.logging_utils import get_logger
from .parquet_writer import TABLE_SCHEMAS, ParquetBatchWriter
from .parser import parse_log_file

LOGGER = get_logger("ingest.pipeline")


def ingest_log_file(
    input_path: Path,
    *,
    data_root: Path | None = None,
    name: Optional[str] = None,
    compression: Optional[str] = None,
    batch_size: Optional[int] = None,
) -> Dict[str, Any]:
    """Parse a MongoDB log file and persist it as the hatchet *name*.

    An existing hatchet with the same name is replaced.
    """

    path = Path(input_path)
    if not path.exists():
        raise FileNotFoundError(path)

    hatchet = name or hatchet_name_for(path)
    if not is_valid_name(hatchet):
        raise ValueError(f"invalid hatchet name '{hatchet}'")

    root = Path(data_root) if data_root is not None else settings.data_root
    codec = compression or settings.parquet_compression
    dataset_dir = root / hatchet
    if dataset_dir.exists():
        LOGGER.info("Replacing existing hatchet %s", hatchet)
        shutil.rmtree(dataset_dir)

    LOGGER.info("Starting ingest for %s as %s (codec=%s)", path, hatchet, codec)
    overall_start = time.perf_counter()

    writers = {
        table: ParquetBatchWriter(dataset_dir / table / f"{hatchet}.parquet", schema, compression=codec)
        for table, schema in TABLE_SCHEMAS.items()
    }
    info = HatchetInfo(name=hatchet)
    batches = 0

    try:
        for batch in parse_log_file(path, batch_size=batch_size or settings.batch_rows):
            batches += 1
            if batch.logs:
                if not info.start:
                    info.start = batch.logs[0].timestamp
                info.end = batch.logs[-1].timestamp
            for key, value in batch.build.items():
                setattr(info, key, value)
            writers["logs"].write_records(batch.logs)
            writers["ops"].write_records(batch.ops)
            writers["clients"].write_records(batch.clients)

        results = {table: writer.finalize() for table, writer in writers.items()}
        info.lines = results["logs"]["rows_written"]
        if info.lines == 0:
            raise ValueError(f"no MongoDB JSON log lines found in {path}")
        info_result = write_hatchet_info(dataset_dir, info)
    except Exception:
        for writer in writers.values():
            writer.finalize()
        shutil.rmtree(dataset_dir, ignore_errors=True)
        LOGGER.exception("Ingest failed for %s", path)
        raise

    duration = time.perf_counter() - overall_start
    LOGGER.info(
        "Ingest complete for %s: logs=%d ops=%d clients=%d batches=%d in %.2fs",
        hatchet,
        results["logs"]["rows_written"],
        results["ops"]["rows_written"],
        results["clients"]["rows_written"],
        batches,
        duration,
    )
    return {
        "input_path": str(path),
        "hatchet": hatchet,
        "info": info_result,
        "duration_seconds": duration,
        **results,
    }
