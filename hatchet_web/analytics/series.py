"""Row types returned by the aggregate queries."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OpStat:
    """Operations of one shape within a minute bucket."""

    date: str
    op: str
    namespace: str
    pattern: str
    count: int
    milli: float


@dataclass(frozen=True)
class NameValue:
    name: str
    value: float


@dataclass(frozen=True)
class RemoteStat:
    """Accepted/ended connection counts keyed by minute bucket or client IP."""

    value: str
    accepted: int
    ended: int
