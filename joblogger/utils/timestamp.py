"""Timestamp formatting utilities."""

from datetime import date, datetime, timezone
from typing import Optional


def now() -> str:
    """Local time as ``YYYY-MM-DD HH:MM:SS`` (log lines, snapshot footers)."""
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def today(on_date: Optional[date] = None) -> str:
    """
    Date as ``YYYY-MM-DD``.

    Args:
        on_date: Date to format (default: today, local time)
    """
    return (on_date or date.today()).strftime("%Y-%m-%d")


def utc_iso() -> str:
    """Current UTC time in the ``2025-01-31T12:00:00.000Z`` form browsers produce."""
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")
