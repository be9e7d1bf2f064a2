from __future__ import annotations

import math
from datetime import date, datetime


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_iso(now: datetime | None = None) -> str:
    return (now or now_local()).strftime("%Y-%m-%d")


def format_day(day: date) -> str:
    """Short M/D/YYYY label used on the dashboards."""
    return f"{day.month}/{day.day}/{day.year}"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
