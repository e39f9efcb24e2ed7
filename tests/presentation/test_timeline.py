"""Tests for timeline frames."""

from studyplan.presentation.timeline import (
    COURSE_PALETTE,
    TIMELINE_COLUMNS,
    course_color,
    daily_summary,
    schedule_to_frame,
    section_badge_html,
)
from studyplan.scheduling.models import Course, ScheduledSection
from studyplan.scheduling.scheduler import calculate_schedule


def test_course_color_wraps_palette():
    assert course_color(0) == COURSE_PALETTE[0]
    assert course_color(len(COURSE_PALETTE) + 1) == COURSE_PALETTE[1]


def test_schedule_to_frame_rows(small_and_giant, uniform_limits, start_date):
    schedule = calculate_schedule(small_and_giant, uniform_limits, 0, "mon", start_date)
    frame = schedule_to_frame(schedule)

    assert list(frame.columns) == TIMELINE_COLUMNS
    assert len(frame) == sum(len(day.sections) for day in schedule)
    assert frame["duration"].sum() == 550
    assert frame.iloc[0]["day_name"] == "MON"
    assert set(frame.loc[frame["course_name"] == "Giant", "color"]) == {COURSE_PALETTE[1]}


def test_schedule_to_frame_empty():
    frame = schedule_to_frame([])
    assert frame.empty
    assert list(frame.columns) == TIMELINE_COLUMNS


def test_daily_summary_includes_free_days(start_date):
    limits = {"mon": 60, "tue": 0, "wed": 60}
    schedule = calculate_schedule([Course(name="A", sections=[60, 60])], limits, 0, "mon", start_date)
    summary = daily_summary(schedule, limits)

    assert list(summary["day_name"]) == ["MON", "TUE", "WED"]
    assert list(summary["used"]) == [60, 0, 60]
    assert list(summary["sections"]) == [1, 0, 1]
    assert list(summary["limit"]) == [60, 0, 60]


def test_section_badge_escapes_course_name():
    section = ScheduledSection(course_name="<b>Algebra</b> & Co", section_label="2 (Part 1)", duration=45, course_index=1)
    badge = section_badge_html(section)

    assert "&lt;b&gt;Algebra&lt;/b&gt; &amp; Co · 2 (Part 1) · 45m" in badge
    assert "<b>" not in badge
    assert COURSE_PALETTE[1] in badge
