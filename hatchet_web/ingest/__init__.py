"""Ingest MongoDB log files into per-hatchet Parquet datasets."""
