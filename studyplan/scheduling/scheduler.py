"""Top-level schedule calculation.

Drives the day-filling engine across consecutive calendar days until every
course is placed or the day ceiling is reached.
"""

from collections.abc import Mapping, Sequence
from datetime import date, datetime

from loguru import logger

from studyplan.scheduling.calendar import day_info
from studyplan.scheduling.constants import MAX_SCHEDULE_DAYS
from studyplan.scheduling.engine import RunState, fill_day
from studyplan.scheduling.models import Course, DayRecord, ScheduleResult


def build_schedule(
    courses: Sequence[Course],
    day_limits: Mapping[str, int],
    margin_of_error: int = 0,
    start_day: str = "mon",
    start_date: date | datetime | None = None,
    max_days: int = MAX_SCHEDULE_DAYS,
) -> ScheduleResult:
    """Schedule courses day by day and report whether the run finished.

    A day is recorded while work remains, and the closing day is recorded
    when it still received sections. The run stops at `max_days` simulated
    days whatever its state; `is_complete` is False in that case.

    Args:
        courses: Courses to place, in priority order for ties
        day_limits: Minutes per weekday key; missing keys count as 0
        margin_of_error: Minutes a day may overflow its limit
        start_day: Nominal starting weekday (ignored, the weekday comes from the date)
        start_date: First day of the schedule (defaults to today)
        max_days: Ceiling on simulated days

    Returns:
        ScheduleResult with ordered day records
    """
    if start_date is None:
        start_date = date.today()

    state = RunState.start(courses, day_limits, margin_of_error)
    schedule: list[DayRecord] = []
    offset = 0

    while not state.all_done and offset < max_days:
        info = day_info(offset, start_day, start_date)
        day_limit = day_limits.get(info.name, 0) or 0
        filled = fill_day(state, day_limit)

        if not state.all_done or filled.sections:
            schedule.append(
                DayRecord(
                    day_index=offset + 1,
                    date=info.date_string,
                    raw_date=info.raw_date,
                    day_name=info.name,
                    sections=filled.sections,
                    total_duration=day_limit - filled.remaining_time,
                )
            )

        if not state.all_done:
            offset += 1

    if not state.all_done:
        logger.warning(
            "Schedule truncated at day ceiling; completion not verified",
            max_days=max_days,
            courses=len(courses),
        )

    result = ScheduleResult(days=schedule, is_complete=state.all_done)
    logger.info(
        "Schedule calculated",
        courses=len(courses),
        total_days=result.total_days,
        total_minutes=result.total_minutes,
        is_complete=result.is_complete,
    )
    return result


def calculate_schedule(
    courses: Sequence[Course],
    day_limits: Mapping[str, int],
    margin_of_error: int = 0,
    start_day: str = "mon",
    start_date: date | datetime | None = None,
) -> list[DayRecord]:
    """Schedule courses and return the ordered day records.

    A result of exactly MAX_SCHEDULE_DAYS days may be incomplete; use
    build_schedule() to get an explicit completion flag.
    """
    return build_schedule(courses, day_limits, margin_of_error, start_day, start_date).days
