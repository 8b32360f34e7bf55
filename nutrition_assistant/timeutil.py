# -*- coding: utf-8 -*-
"""Small date/time helpers shared by the storage modules."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    return utc_now().isoformat().replace("+00:00", "Z")


def parse_iso(iso8601: Optional[str]) -> Optional[datetime]:
    if not iso8601:
        return None
    # Handle trailing Z.
    value = iso8601.strip().replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def parse_day(value: Optional[str]) -> Optional[date]:
    """Parse YYYY-MM-DD; returns None for anything else."""
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None
