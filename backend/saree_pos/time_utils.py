from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes datetime to ISO-8601 with trailing 'Z'.
    If dt is naive, it is treated as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt_utc = dt.astimezone(timezone.utc).replace(microsecond=0)
    return dt_utc.isoformat().replace("+00:00", "Z")


def local_timestamp(dt: Optional[datetime] = None) -> str:
    """
    Human-readable local timestamp stamped on sales, e.g. "19/10/2026, 14:05:09".
    """
    dt = dt or datetime.now()
    return dt.strftime("%d/%m/%Y, %H:%M:%S")


def export_date_stamp(dt: Optional[datetime] = None) -> str:
    """Local date with slashes replaced by dashes, safe for filenames."""
    dt = dt or datetime.now()
    return dt.strftime("%d/%m/%Y").replace("/", "-")
