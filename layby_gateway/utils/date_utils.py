"""Date manipulation utilities"""

from datetime import date, datetime, timedelta


def to_calendar_date(value: date | datetime) -> date:
    """Drop the time of day; plan arithmetic works on calendar dates only"""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(start: date, end: date) -> int:
    """Whole calendar days from start to end (negative when end is earlier)"""
    return (to_calendar_date(end) - to_calendar_date(start)).days


def add_weeks(from_date: date, weeks: int) -> date:
    return from_date + timedelta(weeks=weeks)


def format_long_date(value: date) -> str:
    """Format as e.g. 'April 17, 2027'"""
    return f"{value:%B} {value.day}, {value.year}"
