"""Configuration primitives for the hatchet dashboard."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os


def _env_flag(name: str, *, default: bool) -> bool:
    """Interpret common truthy/falsey environment values."""

    value = os.environ.get(name)
    if value is None:
        return default

    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


@dataclass(frozen=True)
class Settings:
    """Runtime configuration defaults for ingest and the web layer."""

    data_root: Path = Path(os.environ.get("HATCHET_DATA_ROOT", "data"))
    verbose: bool = _env_flag("HATCHET_VERBOSE", default=False)
    parquet_compression: str = os.environ.get("HATCHET_PARQUET_COMPRESSION", "snappy")
    batch_rows: int = int(os.environ.get("HATCHET_BATCH_ROWS", "5000"))
    log_page_size: int = int(os.environ.get("HATCHET_LOG_PAGE_SIZE", "100"))
    top_n: int = int(os.environ.get("HATCHET_TOP_N", "23"))


settings = Settings()
