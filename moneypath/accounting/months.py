"""
Month and date helpers.

Month keys are ``YYYY-MM`` strings taken from the UTC clock, the same key
the ledger has always been stored under. Display dates use local time.
"""

import calendar
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def month_key(moment: Optional[datetime] = None) -> str:
    """Return the ``YYYY-MM`` key for ``moment`` (default: now) in UTC."""
    moment = moment or utc_now()
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m")


def display_date(moment: Optional[datetime] = None) -> str:
    """Format a creation date as ``M/D/YYYY`` in local time."""
    moment = moment or utc_now()
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return f"{moment.month}/{moment.day}/{moment.year}"


def format_month(key: Optional[str]) -> str:
    """
    Turn ``"2024-01"`` into ``"January 2024"``.

    Returns an empty string for an empty key and the key itself when it
    isn't a valid month.
    """
    if not key:
        return ""
    try:
        year, month = (int(part) for part in key.split("-", 1))
    except ValueError:
        return key
    if not 1 <= month <= 12:
        return key
    return f"{calendar.month_name[month]} {year}"
