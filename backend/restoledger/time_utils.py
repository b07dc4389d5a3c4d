# Overview: Timestamp helpers; everything stored is naive UTC, everything sent out ends in "Z".

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Default for sale_date / loss_date / created_at columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_utc_naive(dt: datetime) -> datetime:
    # Naive values are already UTC
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Read a date filter or a sale/loss date from a request.

    Accepts "2024-05-01", "2024-05-01T18:30", "2024-05-01T18:30:00Z" and
    explicit offsets. A bare date is midnight of that day. Blank -> None.
    Raises ValueError for anything else.
    """
    if value is None or not value.strip():
        return None
    text = value.strip()
    if text[-1] in "zZ":
        text = text[:-1] + "+00:00"
    return as_utc_naive(datetime.fromisoformat(text))


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """2024-05-01T18:30:00Z; seconds precision."""
    if dt is None:
        return None
    stamp = as_utc_naive(dt).replace(microsecond=0)
    return stamp.isoformat() + "Z"
