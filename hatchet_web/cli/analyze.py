"""Command-line helpers for ingesting and managing hatchets."""

from __future__ import annotations

import argparse
import shutil
from pathlib import Path
from typing import Any, Dict

from ..config import settings
from ..ingest.pipeline import ingest_log_file
from ..storage.hatchet_info import is_valid_name, list_hatchets
from ..utils.logging_utils import set_verbose


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="MongoDB log hatchet CLI")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    sub = parser.add_subparsers(dest="command", required=True)

    ingest_parser = sub.add_parser("ingest-log", help="Parse a log file into a hatchet")
    ingest_parser.add_argument("log_file", type=Path, help="Path to MongoDB JSON log file")
    ingest_parser.add_argument(
        "--out", type=Path, default=None, help="Data root directory (defaults to config)"
    )
    ingest_parser.add_argument(
        "--name", type=str, default=None, help="Hatchet name (defaults to the file name)"
    )
    ingest_parser.add_argument(
        "--compression",
        type=str,
        default=None,
        help="Parquet compression codec (default: config value)",
    )

    list_parser = sub.add_parser("list", help="List ingested hatchets")
    list_parser.add_argument("--out", type=Path, default=None, help="Data root directory")

    clean_parser = sub.add_parser("clean", help="Remove a hatchet")
    clean_parser.add_argument("name", type=str, help="Hatchet name")
    clean_parser.add_argument("--out", type=Path, default=None, help="Data root directory")
    clean_parser.add_argument(
        "--force", action="store_true", help="Skip confirmation prompt and delete immediately"
    )

    return parser


def _print_summary(telemetry: Dict[str, Any]) -> None:
    print(f"Input file: {telemetry['input_path']}")
    print(f"  hatchet: {telemetry['hatchet']}")
    for key in ("logs", "ops", "clients"):
        info = telemetry.get(key, {})
        print(f"  {key}: {info.get('rows_written', 0)} rows -> {info.get('path', '<n/a>')}")
    print(f"  duration: {telemetry.get('duration_seconds', 0.0):.2f}s")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        set_verbose(True)
    out_root = Path(args.out) if args.out is not None else Path(settings.data_root)

    if args.command == "ingest-log":
        telemetry = ingest_log_file(
            args.log_file,
            data_root=out_root,
            name=args.name,
            compression=args.compression,
        )
        _print_summary(telemetry)
        return 0

    if args.command == "list":
        hatchets = list_hatchets(out_root)
        if not hatchets:
            print(f"No hatchets found under {out_root}")
            return 1
        for info in hatchets:
            print(info.summary())
        return 0

    if args.command == "clean":
        if not is_valid_name(args.name):
            print(f"Invalid hatchet name {args.name}")
            return 1
        target = out_root / args.name
        if not target.exists():
            print(f"Nothing to clean under {target}")
            return 0
        if not args.force:
            response = input(f"Delete hatchet at {target}? [y/N] ").strip().lower()
            if response not in {"y", "yes"}:
                print("Aborted")
                return 1
        shutil.rmtree(target)
        print(f"Removed hatchet directory {target}")
        return 0

    parser.error("Unknown command")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
