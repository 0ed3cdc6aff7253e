"""Civil calendar helpers.

All day boundaries use a single fixed offset (UTC+05:30).
"""

from __future__ import annotations

import time
from datetime import date, datetime, timedelta, timezone
from typing import Optional

CIVIL_TZ = timezone(timedelta(hours=5, minutes=30), name="IST")


def today(now: Optional[datetime] = None) -> str:
    """Return today's ISO date in the civil calendar."""
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return current.astimezone(CIVIL_TZ).date().isoformat()


def now_ms() -> int:
    return int(time.time() * 1000)


def next_date(iso_date: str) -> str:
    """Return the calendar day after ``iso_date``."""
    return (date.fromisoformat(iso_date) + timedelta(days=1)).isoformat()


def format_long_date(iso_date: str) -> str:
    """Human readable form, e.g. ``Sunday, October 18, 2026``."""
    try:
        value = date.fromisoformat(iso_date)
    except ValueError:
        return iso_date
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"
