"""
Utility functions for invoice data manipulation and formatting.

Provides helpers for:
- Lenient numeric parsing of form input (invalid input becomes 0)
- Date parsing and due date arithmetic
- Timestamp generation and display formatting
- Currency formatting
- Search query matching against invoice fields
"""

import math
import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import TYPE_CHECKING, Any

from invoice_gen import config

if TYPE_CHECKING:
    from invoice_gen.models.invoice import InvoiceRecord

_NUMERIC_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_lenient(value: Any) -> float:
    """
    Parse a numeric form value, falling back to 0.

    Mirrors how the form inputs have always been read: the leading numeric
    part of a string is used ("12abc" -> 12.0), and anything without one
    (empty, None, "abc", booleans, containers, non-finite values) is 0.

    Args:
        value: Raw value from a form field or JSON payload.

    Returns:
        A finite float.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value)
        if not match:
            return 0.0
        number = float(match.group(1))
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_date(date_str: str | None) -> date | None:
    """
    Parse a calendar date string.

    Args:
        date_str: ISO date ("2024-12-25"), ISO timestamp, or m/d/Y.

    Returns:
        date object if parsing succeeds, None otherwise
    """
    if date_str:
        date_str = date_str.strip()
    if not date_str:
        return None

    try:
        return date.fromisoformat(date_str[:10])
    except ValueError:
        pass

    try:
        return datetime.strptime(date_str, "%m/%d/%Y").date()
    except ValueError:
        pass

    return None


def today_iso(today: date | None = None) -> str:
    """Return today's date (or the given one) as YYYY-MM-DD."""
    return (today or date.today()).isoformat()


def calculate_due_date(invoice_date: str, days: int = config.DEFAULT_DUE_DAYS) -> str:
    """
    Return the due date a number of days after the issue date.

    An unparsable issue date yields an empty string so the form field is
    simply left blank.
    """
    parsed = parse_date(invoice_date)
    if parsed is None:
        return ""
    return (parsed + timedelta(days=days)).isoformat()


def utc_now_iso(now: datetime | None = None) -> str:
    """
    Return an ISO-8601 UTC timestamp with millisecond precision.

    Format matches what the records have always carried, e.g.
    "2026-01-02T03:04:05.678Z".
    """
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO timestamp (with or without a trailing Z)."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_datetime(value: str | None, tz: tzinfo | None = None) -> str:
    """
    Format a stored timestamp as "YYYY-MM-DD HH:MM", or "" when missing.

    Stored timestamps are UTC; they are shown in tz, or local time when tz
    is None. Naive values are read as UTC.
    """
    moment = parse_timestamp(value)
    if moment is None:
        return ""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz).strftime("%Y-%m-%d %H:%M")


def date_stamp(today: date | None = None) -> str:
    """Return the YYYYMMDD stamp used in export file names."""
    return (today or date.today()).strftime("%Y%m%d")


def format_amount(value: float) -> str:
    """
    Format a number with thousands separators.

    Whole numbers drop the decimal part; others keep up to two decimals.
    """
    if not math.isfinite(value):
        return str(value)
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


def format_currency(value: float, symbol: str = config.CURRENCY_SYMBOL) -> str:
    """
    Format a currency amount with the currency symbol prefix.

    Args:
        value: Numeric amount to format.
        symbol: Currency symbol (e.g., '¥', '$').

    Returns:
        Formatted string like '¥1,234'.
    """
    return f"{symbol}{format_amount(value)}"


def matches_query(invoice: "InvoiceRecord", query: str | None) -> bool:
    """
    Check if an invoice matches the search query.

    Performs case-insensitive substring matching against the invoice
    number and customer name.

    Args:
        invoice: Invoice to check.
        query: Search query string.

    Returns:
        True if query matches any searchable term, or if query is empty.
    """
    normalized = (query or "").strip().lower()
    if not normalized:
        return True
    return any(normalized in value for value in invoice.searchable_terms())
