# goalquest/utils/recurrence.py
import calendar
from datetime import datetime, timedelta
from typing import List

from goalquest.utils.progress import enum_value

# Fixed-length steps; "monthly" is handled by add_months
REPEAT_STEPS = {
    "daily": timedelta(days=1),
    "every_other_day": timedelta(days=2),
    "weekly": timedelta(days=7),
}


def add_months(moment: datetime, months: int) -> datetime:
    """Same day-of-month ``months`` later, clamped to the target month's length."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def next_occurrence(moment: datetime, repeat_type) -> datetime:
    repeat_type = enum_value(repeat_type)
    if repeat_type == "monthly":
        return add_months(moment, 1)
    if repeat_type in REPEAT_STEPS:
        return moment + REPEAT_STEPS[repeat_type]
    raise ValueError(f"Unsupported repeat type: {repeat_type}")


def occurrence_dates(start: datetime, repeat_type, repeat_until: datetime) -> List[datetime]:
    """
    Dates of the instances spawned by a repeating task scheduled at ``start``.
    The parent itself occupies ``start`` and is not included.
    """
    if enum_value(repeat_type) in (None, "none"):
        return []

    dates = []
    current = next_occurrence(start, repeat_type)
    while current <= repeat_until:
        dates.append(current)
        current = next_occurrence(current, repeat_type)
    return dates
