"""Per-dataset ``hatchet.json`` metadata."""

from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..utils.logging_utils import get_logger

LOGGER = get_logger("storage.hatchet_info")

INFO_FILENAME = "hatchet.json"
_NAME_RE = re.compile(r"^[A-Za-z0-9_]+$")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def hatchet_name_for(path: Path) -> str:
    """Dataset name derived from a log file name (``mongod-1.log`` -> ``mongod_1``)."""

    return re.sub(r"[^A-Za-z0-9_]", "_", Path(path).name.split(".")[0]) or "hatchet"


def is_valid_name(name: str) -> bool:
    return bool(_NAME_RE.match(name or ""))


@dataclass
class HatchetInfo:
    name: str
    start: str = ""
    end: str = ""
    version: str = ""
    module: str = ""
    os: str = ""
    arch: str = ""
    lines: int = 0
    created_at: str = ""

    def summary(self) -> str:
        build = " ".join(part for part in (self.module, self.version) if part) or "unknown build"
        platform = "/".join(part for part in (self.os, self.arch) if part)
        if platform:
            build += f" ({platform})"
        return f"{self.name}: {build}, {self.lines} lines, {self.start} to {self.end}"


def load_hatchet_info(dataset_dir: Path) -> Optional[HatchetInfo]:
    path = Path(dataset_dir) / INFO_FILENAME
    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as handle:
            raw: Dict[str, Any] = json.load(handle)
    except json.JSONDecodeError:
        LOGGER.warning("Hatchet info at %s is corrupt; ignoring dataset", path)
        return None
    known = HatchetInfo.__dataclass_fields__
    return HatchetInfo(**{key: value for key, value in raw.items() if key in known})


def write_hatchet_info(dataset_dir: Path, info: HatchetInfo) -> Dict[str, str]:
    if not info.created_at:
        info.created_at = _now()
    path = Path(dataset_dir) / INFO_FILENAME
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(asdict(info), handle, indent=2)
    LOGGER.info("Wrote hatchet info for %s to %s", info.name, path)
    return {"path": str(path), "name": info.name}


def list_hatchets(data_root: Path) -> List[HatchetInfo]:
    """Info for every dataset under *data_root*, ordered by name."""

    root = Path(data_root)
    if not root.exists():
        return []
    hatchets: List[HatchetInfo] = []
    for child in sorted(root.iterdir()):
        if not child.is_dir() or not is_valid_name(child.name):
            continue
        info = load_hatchet_info(child)
        if info is not None:
            hatchets.append(info)
    return hatchets
