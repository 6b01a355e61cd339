"""
Validation and parsing of user input.

Purpose:
    The command line (like any front end) receives values as strings. This module
    turns them into the Python types the managers expect (date, datetime,
    timedelta, Category) and checks simple ranges, so no invalid data reaches
    the manager layer.

Notes:
    The business rules themselves (age range, unique titles) are checked by the
    managers in `managers.py`.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional

from activity_planner.models import Category


class ValidationError(ValueError):
    """
    Error for invalid user input.

    Purpose:
        Caught by the front end to show an understandable message instead of a
        traceback.
    """


def require_text(text: Optional[str], *, field: str) -> str:
    """
    Returns the stripped text or raises if it is blank.

    Raises:
        ValidationError: If `text` is empty or whitespace.
    """

    t = (text or "").strip()
    if not t:
        raise ValidationError(f"{field} must not be empty")
    return t


def parse_date(text: str) -> date:
    """
    Parses a date from common input formats.

    Parameters:
        text (str): Input text.

    Returns:
        date: Parsed date.

    Raises:
        ValidationError: If the text is empty or no supported format matches.

    Notes:
        Supported formats:
        - YYYY-MM-DD (ISO)
        - DD.MM.YYYY / DD.MM.YY
        - MM/DD/YYYY
    """

    t = (text or "").strip()
    if not t:
        raise ValidationError("Date must not be empty")
    for fmt in ("%Y-%m-%d", "%d.%m.%Y", "%d.%m.%y", "%m/%d/%Y"):
        try:
            return datetime.strptime(t, fmt).date()
        except ValueError:
            continue
    raise ValidationError("Date must be YYYY-MM-DD, DD.MM.YYYY or MM/DD/YYYY")


def parse_time(text: str) -> time:
    """
    Parses a 24h time of day (`HH:MM`).

    Raises:
        ValidationError: On empty or invalid input.
    """

    t = (text or "").strip()
    try:
        return datetime.strptime(t, "%H:%M").time()
    except ValueError as exc:
        raise ValidationError("Time must be HH:MM (24h)") from exc


def parse_scheduled(date_text: str, time_text: str) -> datetime:
    """Combines a date and a time input into the scheduled timestamp."""
    return datetime.combine(parse_date(date_text), parse_time(time_text))


def parse_minutes(text: str, *, field: str = "Duration") -> timedelta:
    """
    Parses a duration given in whole minutes.

    Parameters:
        text (str): Input text, e.g. "45".
        field (str): Field name for error messages.

    Returns:
        timedelta: Duration.

    Raises:
        ValidationError: If the text is not a positive whole number.
    """

    try:
        minutes = int(str(text).strip())
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be a whole number of minutes") from exc
    if minutes <= 0:
        raise ValidationError(f"{field} must be > 0")
    return timedelta(minutes=minutes)


def parse_category(text: str) -> Category:
    """
    Parses a category name (case-insensitive).

    Raises:
        ValidationError: If no category matches.
    """

    t = (text or "").strip().casefold()
    for category in Category:
        if category.value.casefold() == t:
            return category
    choices = ", ".join(c.value for c in Category)
    raise ValidationError(f"Category must be one of: {choices}")
