"""Helpers for the ``YYYY-MM-DD`` rate dates used as part of the storage key."""

from __future__ import annotations

from datetime import date, datetime

RATE_DATE_FORMAT = "%Y-%m-%d"


def parse_date(value: str | date) -> date:
    """Parse a date string in ISO format to :class:`date`."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value.strip(), RATE_DATE_FORMAT).date()
    except (AttributeError, ValueError) as exc:
        raise ValueError(f"Invalid rate date {value!r}; expected YYYY-MM-DD") from exc


def format_rate_date(value: str | date) -> str:
    """Return ``value`` as a zero-padded ``YYYY-MM-DD`` string.

    Stored dates are compared as strings, so every date entering the system is
    rendered through here to keep lexicographic and calendar order identical.
    """

    return parse_date(value).isoformat()


__all__ = ["RATE_DATE_FORMAT", "format_rate_date", "parse_date"]
