"""DuckDB query service over hatchet Parquet datasets."""

from .hatchet_db import HatchetDatabase
from .series import NameValue, OpStat, RemoteStat

__all__ = ["HatchetDatabase", "NameValue", "OpStat", "RemoteStat"]
