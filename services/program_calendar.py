"""
Program calendar arithmetic.

Program days are counted from an enrollment's start date: the start date
is day 1. All calculations are done on UTC calendar dates so that the
time of day a program was started, or the job was run, never shifts the
result by one.

Template elements are addressed by (week, day) with 7-day weeks:
week 1 day 1 = program day 1, week 1 day 7 = day 7, week 2 day 1 = day 8.
"""

from datetime import date, datetime, timezone
from typing import Tuple, Union

from core.constants import DAYS_PER_WEEK

DateLike = Union[date, datetime, str]


def truncate_to_day(value: DateLike) -> date:
    """
    Reduce a date, datetime or ISO string to its UTC calendar date.

    Naive datetimes are treated as UTC; aware datetimes are converted.

    Args:
        value: Date-like value

    Returns:
        The UTC calendar date
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def calculate_program_day(start_date: DateLike, target_date: DateLike) -> int:
    """
    Calculate the 1-based program day of target_date.

    Args:
        start_date: Enrollment start date
        target_date: The date to evaluate (usually today)

    Returns:
        Program day (1 on the start date; <= 0 before it)
    """
    elapsed = truncate_to_day(target_date) - truncate_to_day(start_date)
    return elapsed.days + 1


def program_day_to_week_day(program_day: int) -> Tuple[int, int]:
    """Map a program day to its (week, day) template slot."""
    if program_day < 1:
        raise ValueError(f"Program day must be >= 1, got {program_day}")
    week = (program_day - 1) // DAYS_PER_WEEK + 1
    day = (program_day - 1) % DAYS_PER_WEEK + 1
    return week, day


def week_day_to_program_day(week: int, day: int) -> int:
    """Map a (week, day) template slot to its program day."""
    return (week - 1) * DAYS_PER_WEEK + day


def total_program_days(duration_weeks: int) -> int:
    """Number of program days in a template lasting duration_weeks."""
    return duration_weeks * DAYS_PER_WEEK
