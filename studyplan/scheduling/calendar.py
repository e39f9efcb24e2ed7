"""Calendar stepping for simulated days."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from studyplan.scheduling.constants import WEEKDAY_BY_INDEX, Weekday


@dataclass(frozen=True)
class DayInfo:
    name: Weekday
    date_string: str
    raw_date: date


def format_display_date(value: date) -> str:
    """Short display date, e.g. "Mon, Dec 8"."""
    return f"{value:%a}, {value:%b} {value.day}"


def day_info(offset: int, start_day: str, start_date: date | datetime) -> DayInfo:
    """Describe the day `offset` days after `start_date`.

    The weekday comes from the resulting date. `start_day` is accepted for
    interface parity with callers that pass a nominal first weekday and has
    no effect.

    Args:
        offset: Zero-based day offset
        start_day: Nominal starting weekday key (ignored)
        start_date: First day of the schedule; datetimes are reduced to their date

    Returns:
        DayInfo with weekday key, display date and calendar date
    """
    if isinstance(start_date, datetime):
        start_date = start_date.date()

    current = start_date + timedelta(days=offset)
    return DayInfo(
        name=WEEKDAY_BY_INDEX[current.weekday()],
        date_string=format_display_date(current),
        raw_date=current,
    )
