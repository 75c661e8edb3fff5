"""
date_time_helper.py

Provides helper functions for conversion and formatting of date and time values,
with special focus on UTC storage and local (Asia/Jakarta) display.

All features and modules should use ONLY these helpers for date/time logic.
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

try:
    from zoneinfo import ZoneInfo  # Python 3.9+
except ImportError:
    raise ImportError("Python 3.9+ with zoneinfo is required for timezone support.")

from core.config.config_service import config_service

# Local timezone for display
LOCAL_TZ = ZoneInfo(config_service.general.timezone or "Asia/Jakarta")


def utc_now() -> datetime:
    """Current time as an aware UTC datetime (microseconds dropped)."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def utc_now_iso() -> str:
    """
    Returns the current UTC time as an ISO8601 string (YYYY-MM-DDTHH:MM:SS+00:00).
    Used for logging and DB storage.
    """
    return utc_now().isoformat()


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_utc_iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return ensure_utc(value).isoformat()


def parse_utc_iso(text: Optional[str]) -> Optional[datetime]:
    """Parse a stored ISO timestamp back to an aware UTC datetime."""
    if not text:
        return None
    return ensure_utc(datetime.fromisoformat(text))


def parse_date(text: str) -> date:
    """
    Parse 'YYYY-MM-DD' or a full ISO datetime string to a date.

    :raises ValueError: if the text is neither
    """
    raw = text.strip()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()


def utc_to_local_str(utc_iso: str) -> str:
    """
    Formats a UTC ISO8601 timestamp as a localized, human-readable string for display.

    :param utc_iso: UTC time as ISO string (from DB/logs)
    :return: String in format "DD-MM-YYYY HH:mm" (local time)
    """
    dt_utc = ensure_utc(datetime.fromisoformat(utc_iso))
    return dt_utc.astimezone(LOCAL_TZ).strftime("%d-%m-%Y %H:%M")


def format_date(value: Optional[date]) -> str:
    """Display format for plain dates; '-' when empty."""
    if value is None:
        return "-"
    return value.strftime("%d-%m-%Y")
