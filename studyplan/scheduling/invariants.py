"""Schedule invariant checks.

Verifies a produced schedule against the properties every run must hold:
- Capacity: no day uses more than its limit plus the margin
- Conservation: each course's scheduled minutes equal its remaining sections
- Order: each course's sections appear in order, split pieces numbered 1, 2, 3, ...

Used by the CLI `check` command and by the test suite.
"""

import re
from collections import defaultdict
from collections.abc import Mapping, Sequence

from loguru import logger

from studyplan.scheduling.errors import ScheduleInvariantError
from studyplan.scheduling.labels import base_label
from studyplan.scheduling.models import Course, DayRecord, ScheduledSection

_PART_NUMBER = re.compile(r"\(Part (\d+)\)$")


def _part_number(label: str) -> int | None:
    match = _PART_NUMBER.search(label)
    return int(match.group(1)) if match else None


def check_capacity(
    schedule: Sequence[DayRecord],
    day_limits: Mapping[str, int],
    margin_of_error: int,
) -> list[str]:
    violations = []
    for day in schedule:
        used = sum(s.duration for s in day.sections)
        limit = day_limits.get(day.day_name, 0) or 0
        if used > limit + margin_of_error:
            violations.append(f"CAPACITY_EXCEEDED: day {day.day_index} ({day.day_name}) used {used} > {limit}+{margin_of_error}")
    return violations


def check_conservation(
    schedule: Sequence[DayRecord],
    courses: Sequence[Course],
    is_complete: bool = True,
) -> list[str]:
    """Scheduled minutes per course must equal (or, when truncated, not exceed) its remaining minutes."""
    scheduled: dict[int, int] = defaultdict(int)
    for day in schedule:
        for section in day.sections:
            scheduled[section.course_index] += section.duration

    violations = []
    for i, course in enumerate(courses):
        expected = course.remaining_minutes
        actual = scheduled.get(i, 0)
        if actual > expected or (is_complete and actual != expected):
            violations.append(f"DURATION_NOT_CONSERVED: course '{course.name}' scheduled {actual} of {expected} minutes")
    return violations


def check_section_order(schedule: Sequence[DayRecord], courses: Sequence[Course]) -> list[str]:
    per_course: dict[int, list[ScheduledSection]] = defaultdict(list)
    for day in schedule:
        for section in day.sections:
            per_course[section.course_index].append(section)

    violations = []
    for i, course in enumerate(courses):
        expected_next = min(course.start_offset, len(course.sections)) + 1
        last_base: int | None = None
        last_part = 0

        for section in per_course.get(i, []):
            label = section.section_label
            part = _part_number(label)
            try:
                base = int(base_label(label))
            except ValueError:
                violations.append(f"SECTION_ORDER_VIOLATED: course '{course.name}' has unparsable label '{label}'")
                break

            if base == last_base and part is not None and part == last_part + 1:
                last_part = part
            elif base == expected_next and part in (None, 1):
                last_base = base
                last_part = part or 0
                expected_next += 1
            else:
                violations.append(
                    f"SECTION_ORDER_VIOLATED: course '{course.name}' emitted '{label}' out of order"
                )
                break
    return violations


def validate_schedule(
    schedule: Sequence[DayRecord],
    courses: Sequence[Course],
    day_limits: Mapping[str, int],
    margin_of_error: int = 0,
    is_complete: bool = True,
) -> None:
    """Validate a schedule against all invariants.

    Args:
        schedule: Day records produced for `courses`
        courses: Input courses
        day_limits: Minutes per weekday key
        margin_of_error: Allowed overflow per day
        is_complete: Whether the run finished (a truncated run only needs partial conservation)

    Raises:
        ScheduleInvariantError: If any invariant is violated
    """
    details = [
        *check_capacity(schedule, day_limits, margin_of_error),
        *check_conservation(schedule, courses, is_complete),
        *check_section_order(schedule, courses),
    ]
    if details:
        err = ScheduleInvariantError("INVALID_SCHEDULE", details)
        logger.error(
            "SCHEDULE_INVARIANT_FAILED",
            code=err.code,
            details=err.details,
            total_days=len(schedule),
        )
        raise err
