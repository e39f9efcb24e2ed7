"""Tests for scheduling data models."""

from datetime import date

import pytest

from studyplan.scheduling.errors import InvalidCourseError
from studyplan.scheduling.models import Course, DayRecord, ScheduledSection, ScheduleResult, parse_course


def test_parse_course_accepts_camel_case():
    course = parse_course({"id": 1712, "name": "Algebra", "sections": [30, 45], "startOffset": 1})
    assert course.name == "Algebra"
    assert course.sections == [30, 45]
    assert course.start_offset == 1


def test_parse_course_accepts_snake_case():
    assert parse_course({"name": "Algebra", "sections": [30], "start_offset": 0}).start_offset == 0


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "Algebra", "sections": [30, -5]},
        {"name": "Algebra", "sections": [30], "startOffset": -1},
        {"name": "   ", "sections": [30]},
        {"sections": [30]},
    ],
)
def test_parse_course_rejects_invalid_payloads(payload):
    with pytest.raises(InvalidCourseError):
        parse_course(payload)


def test_course_allows_offset_past_end():
    """Offsets beyond the section count are tolerated by the model."""
    course = Course(name="Done", sections=[30], start_offset=4)
    assert course.remaining_minutes == 0


def test_remaining_minutes_skips_completed_sections():
    assert Course(name="A", sections=[10, 20, 30], start_offset=1).remaining_minutes == 50


def test_color_index_wraps_at_ten():
    section = ScheduledSection(course_name="A", section_label="1", duration=10, course_index=13)
    assert section.color_index == 3


def test_schedule_result_summary():
    days = [
        DayRecord(day_index=1, date="Mon, Dec 8", raw_date=date(2025, 12, 8), day_name="mon", total_duration=90),
        DayRecord(day_index=2, date="Tue, Dec 9", raw_date=date(2025, 12, 9), day_name="tue", total_duration=40),
    ]
    result = ScheduleResult(days=days, is_complete=True)
    assert result.total_days == 2
    assert result.total_minutes == 130
    assert result.end_date == date(2025, 12, 9)


def test_empty_schedule_result_has_no_end_date():
    assert ScheduleResult(days=[], is_complete=True).end_date is None
