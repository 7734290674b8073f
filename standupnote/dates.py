"""Date helpers for picking the working day to summarize."""

from datetime import date, datetime, time, timedelta
from typing import Optional


def get_previous_working_day(today: Optional[date] = None) -> date:
    """Get the previous working day.

    Monday, Sunday and Saturday go back to Friday; other days go back
    to yesterday.

    Args:
        today: Reference day. Defaults to the local current date.
    """
    today = today or date.today()
    weekday = today.weekday()  # Monday == 0

    if weekday == 0:
        days_back = 3
    elif weekday == 6:
        days_back = 2
    else:
        days_back = 1

    return today - timedelta(days=days_back)


def get_commit_date_range(target: Optional[date] = None) -> tuple[str, str]:
    """Get the ISO-8601 (since, until) range covering a whole local day.

    Args:
        target: Day to cover. Defaults to the previous working day.
    """
    target = target or get_previous_working_day()
    start = datetime.combine(target, time.min).astimezone()
    end = datetime.combine(target, time.max).astimezone()
    return start.isoformat(), end.isoformat()


def parse_day(value: str) -> date:
    """Parse a YYYY-MM-DD string.

    Raises:
        ValueError: If the string is not a valid date.
    """
    return datetime.strptime(value, "%Y-%m-%d").date()
