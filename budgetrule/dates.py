"""Date utilities for budgetrule.

Pure functions for month arithmetic and formatting. Only the "current"
helpers read the clock.
"""

from datetime import date, datetime

from budgetrule.domain.models import DayKey, Month


def current_month_key(today: date | None = None) -> Month:
    """Get the month key for the local calendar date.

    Args:
        today: Date to use instead of the local date.

    Returns:
        Month in YYYY-MM format.
    """
    today = today or date.today()
    return Month(f"{today.year:04d}-{today.month:02d}")


def today_key(today: date | None = None) -> DayKey:
    """Get today's day key (YYYY-MM-DD)."""
    today = today or date.today()
    return DayKey(today.strftime("%Y-%m-%d"))


def parse_month(text: str) -> Month:
    """Validate a month key.

    Raises:
        ValueError: If text is not a valid YYYY-MM month.
    """
    datetime.strptime(text, "%Y-%m")
    if len(text) != 7:
        raise ValueError(f"Month must be in YYYY-MM format: {text!r}")
    return Month(text)


def parse_day(text: str) -> DayKey:
    """Validate a day key.

    Raises:
        ValueError: If text is not a valid YYYY-MM-DD date.
    """
    datetime.strptime(text, "%Y-%m-%d")
    if len(text) != 10:
        raise ValueError(f"Date must be in YYYY-MM-DD format: {text!r}")
    return DayKey(text)


def _shift_month(month: Month, delta: int) -> Month:
    year, month_num = (int(part) for part in month.split("-"))
    index = year * 12 + (month_num - 1) + delta
    return Month(f"{index // 12:04d}-{index % 12 + 1:02d}")


def previous_month_key(month: Month) -> Month:
    """Get the month before ``month``, rolling back over January."""
    return _shift_month(month, -1)


def next_month_key(month: Month) -> Month:
    """Get the month after ``month``, rolling forward over December."""
    return _shift_month(month, 1)


def format_month(month: Month) -> str:
    """Format a month key for display (e.g., "January 2025")."""
    return datetime.strptime(month, "%Y-%m").strftime("%B %Y")


def format_date(day: DayKey) -> str:
    """Format a day key for display (e.g., "Jan 5, 2025")."""
    dt = datetime.strptime(day, "%Y-%m-%d")
    return f"{dt.strftime('%b')} {dt.day}, {dt.year}"
