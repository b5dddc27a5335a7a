"""
Expiration code helpers.

Expirations are encoded as 8-digit ``YYYYMMDD`` strings and treated as plain
calendar dates with no timezone.
"""

from datetime import date, datetime
from typing import Optional

from spread_recommender.exceptions import InvalidExpirationError


def parse_expiration(code: str) -> date:
    """
    Parse an expiration code into a calendar date.

    Args:
        code: Expiration code, e.g. "20250916"

    Returns:
        The expiration date

    Raises:
        InvalidExpirationError: If the code is not 8 digits or not a real date
    """
    if not isinstance(code, str) or len(code) != 8 or not code.isdigit():
        raise InvalidExpirationError(code, "expected 8 digits (YYYYMMDD)")

    try:
        return datetime.strptime(code, "%Y%m%d").date()
    except ValueError as e:
        raise InvalidExpirationError(code, str(e)) from e


def days_to_expiration(code: str, as_of: Optional[date] = None) -> int:
    """
    Whole calendar days from ``as_of`` (default: today) until expiration.

    Past and same-day expirations yield zero or negative values.
    """
    if as_of is None:
        as_of = date.today()
    return (parse_expiration(code) - as_of).days


def format_expiration(code: str) -> str:
    """Format "20250916" as "2025-09-16"."""
    return parse_expiration(code).isoformat()
