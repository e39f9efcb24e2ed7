"""Tests for top-level schedule calculation.

Scenario tests use a fixed start date (Monday 2025-12-08). Property tests
check conservation, capacity, leftover continuity, giant starts and
termination on a handful of mixed configurations.
"""

from collections import defaultdict
from datetime import date

import pytest

from studyplan.scheduling.constants import DAYS_OF_WEEK, MAX_SCHEDULE_DAYS
from studyplan.scheduling.invariants import validate_schedule
from studyplan.scheduling.labels import base_label
from studyplan.scheduling.models import Course
from studyplan.scheduling.scheduler import build_schedule, calculate_schedule


def _pieces(schedule):
    return [(day.day_name, s.course_name, s.section_label, s.duration) for day in schedule for s in day.sections]


def test_giant_splits_across_small_days_instead_of_waiting(saturday_heavy_limits, start_date):
    """A 300m section splits Mon/Tue/Wed rather than waiting for Saturday."""
    schedule = calculate_schedule([Course(name="Giant", sections=[300])], saturday_heavy_limits, 0, "mon", start_date)

    assert len(schedule) == 3
    assert _pieces(schedule) == [
        ("mon", "Giant", "1 (Part 1)", 100),
        ("tue", "Giant", "1 (Part 2)", 100),
        ("wed", "Giant", "1 (Part 3)", 100),
    ]


def test_true_giant_ends_on_partial_saturday(saturday_heavy_limits, start_date):
    schedule = calculate_schedule([Course(name="MegaGiant", sections=[700])], saturday_heavy_limits, 0, "mon", start_date)

    assert len(schedule) == 6
    assert [day.total_duration for day in schedule] == [100, 100, 100, 100, 100, 200]
    assert schedule[-1].day_name == "sat"
    assert schedule[-1].sections[0].section_label == "1 (Part 6)"


def test_start_offset_skips_completed_sections(uniform_limits, start_date):
    schedule = calculate_schedule(
        [Course(name="OffsetCourse", sections=[60, 60], start_offset=1)], uniform_limits, 0, "mon", start_date
    )

    assert len(schedule) == 1
    assert _pieces(schedule) == [("mon", "OffsetCourse", "2", 60)]


def test_giant_not_started_on_used_day(small_and_giant, start_date):
    limits = {"mon": 200, "tue": 200, "wed": 100, "thu": 100, "fri": 100, "sat": 100, "sun": 100}
    schedule = calculate_schedule(small_and_giant, limits, 0, "mon", start_date)

    assert len(schedule) == 5
    assert _pieces(schedule) == [
        ("mon", "Small", "1", 50),
        ("tue", "Giant", "1 (Part 1)", 200),
        ("wed", "Giant", "1 (Part 2)", 100),
        ("thu", "Giant", "1 (Part 3)", 100),
        ("fri", "Giant", "1 (Part 4)", 100),
    ]


def test_leftover_priority_scenario(start_date):
    courses = [Course(name="Giant", sections=[500]), Course(name="Small", sections=[50])]
    limits = {"mon": 200, "tue": 50, "wed": 300, "thu": 100, "fri": 100, "sat": 100, "sun": 100}
    schedule = calculate_schedule(courses, limits, 0, "mon", start_date)

    assert len(schedule) == 5
    assert [s.course_name for s in schedule[0].sections] == ["Small"]
    assert all(s.course_name == "Giant" for day in schedule[1:] for s in day.sections)
    assert [day.total_duration for day in schedule] == [50, 50, 300, 100, 50]


def test_giant_starts_on_first_free_day(saturday_heavy_limits, start_date):
    """A giant starts on the first empty day rather than the largest one."""
    schedule = calculate_schedule([Course(name="GlobalGiant", sections=[600])], saturday_heavy_limits, 0, "mon", start_date)

    assert len(schedule) == 6
    assert schedule[0].sections[0].section_label == "1 (Part 1)"


def test_label_sequence_integrity(uniform_limits, start_date):
    schedule = calculate_schedule([Course(name="LabelGiant", sections=[300])], uniform_limits, 0, "mon", start_date)

    assert [s.section_label for day in schedule for s in day.sections] == ["1 (Part 1)", "1 (Part 2)", "1 (Part 3)"]


def test_giant_waits_for_fresh_day(uniform_limits, start_date):
    courses = [Course(name="SmallGap", sections=[10]), Course(name="GiantGap", sections=[190])]
    schedule = calculate_schedule(courses, uniform_limits, 0, "mon", start_date)

    assert len(schedule) == 3
    assert _pieces(schedule) == [
        ("mon", "SmallGap", "1", 10),
        ("tue", "GiantGap", "1 (Part 1)", 100),
        ("wed", "GiantGap", "1 (Part 2)", 90),
    ]


def test_empty_courses_yield_empty_schedule(uniform_limits, start_date):
    result = build_schedule([], uniform_limits, 0, "mon", start_date)
    assert result.days == []
    assert result.is_complete


def test_fully_completed_courses_yield_empty_schedule(uniform_limits, start_date):
    courses = [Course(name="Done", sections=[30, 40], start_offset=2), Course(name="Past", sections=[30], start_offset=7)]
    assert calculate_schedule(courses, uniform_limits, 0, "mon", start_date) == []


def test_all_zero_limits_hit_day_ceiling(start_date):
    result = build_schedule([Course(name="A", sections=[60])], dict.fromkeys(DAYS_OF_WEEK, 0), 0, "mon", start_date)

    assert result.total_days == MAX_SCHEDULE_DAYS
    assert not result.is_complete
    assert _pieces(result.days) == [("mon", "A", "1 (Part 1)", 0)]
    assert result.total_minutes == 0
    assert result.days[-1].day_index == MAX_SCHEDULE_DAYS


def test_empty_limits_table_hits_day_ceiling(start_date):
    schedule = calculate_schedule([Course(name="A", sections=[60])], {}, 0, "mon", start_date)
    assert len(schedule) == MAX_SCHEDULE_DAYS


def test_max_days_override(start_date):
    result = build_schedule([Course(name="A", sections=[60])], {}, 0, "mon", start_date, max_days=10)
    assert result.total_days == 10
    assert not result.is_complete


def test_missing_weekday_keys_count_as_zero(start_date):
    schedule = calculate_schedule([Course(name="A", sections=[60, 60])], {"mon": 100}, 0, "mon", start_date)

    assert len(schedule) == 8
    assert [day.day_name for day in schedule if day.sections] == ["mon", "mon"]
    assert schedule[-1].raw_date == date(2025, 12, 15)
    assert all(day.total_duration == 0 for day in schedule[1:7])


def test_giant_starts_on_zero_capacity_day():
    # Tuesday start: six zero-capacity days before the first Monday
    schedule = calculate_schedule([Course(name="G", sections=[250])], {"mon": 100}, 0, "mon", date(2025, 12, 9))

    assert len(schedule) == 21
    assert _pieces(schedule) == [
        ("tue", "G", "1 (Part 1)", 0),
        ("mon", "G", "1 (Part 2)", 100),
        ("mon", "G", "1 (Part 3)", 100),
        ("mon", "G", "1 (Part 4)", 50),
    ]


def test_empty_first_part_blocks_fresh_sections():
    """A giant started on a day off holds its leftover ahead of every fresh section."""
    courses = [
        Course(name="C0", sections=[38, 0, 78, 33, 94]),
        Course(name="C1", sections=[12]),
        Course(name="C2", sections=[167, 272, 0, 0], start_offset=1),
    ]
    limits = {"mon": 0, "tue": 120, "wed": 0, "thu": 0, "fri": 120, "sat": 120, "sun": 200}
    schedule = calculate_schedule(courses, limits, 5, "mon", date(2025, 12, 8))

    assert len(schedule) == 7
    assert _pieces(schedule)[0] == ("mon", "C2", "2 (Part 1)", 0)
    assert [s.course_name for s in schedule[1].sections] == ["C2"]
    validate_schedule(schedule, courses, limits, 5)


def test_margin_allows_overflow_within_bound(uniform_limits, start_date):
    schedule = calculate_schedule([Course(name="A", sections=[110, 90])], uniform_limits, 15, "mon", start_date)

    assert [day.total_duration for day in schedule] == [110, 90]


def test_day_indices_are_consecutive(uniform_limits, start_date):
    schedule = calculate_schedule([Course(name="A", sections=[80, 80, 80])], uniform_limits, 0, "mon", start_date)
    assert [day.day_index for day in schedule] == [1, 2, 3]
    assert [day.date for day in schedule] == ["Mon, Dec 8", "Tue, Dec 9", "Wed, Dec 10"]


def test_default_start_date_is_today(uniform_limits):
    schedule = calculate_schedule([Course(name="A", sections=[30])], uniform_limits)
    assert schedule[0].raw_date == date.today()


def test_repeated_runs_are_independent(small_and_giant, uniform_limits, start_date):
    first = calculate_schedule(small_and_giant, uniform_limits, 0, "mon", start_date)
    second = calculate_schedule(small_and_giant, uniform_limits, 0, "mon", start_date)
    assert first == second


MIXED_CONFIGS = [
    (
        [
            Course(name="Python", sections=[45, 120, 30, 260, 15], start_offset=1),
            Course(name="Stats", sections=[90, 90, 400]),
            Course(name="Design", sections=[10, 10, 200, 35]),
        ],
        {"mon": 120, "tue": 120, "wed": 60, "thu": 120, "fri": 0, "sat": 240, "sun": 240},
        15,
    ),
    (
        [Course(name=f"C{i}", sections=[25 * (i + 1), 70, 333]) for i in range(12)],
        {"mon": 90, "tue": 90, "wed": 90, "thu": 90, "fri": 90, "sat": 300, "sun": 30},
        0,
    ),
    (
        [Course(name="Marathon", sections=[1000, 5, 1000]), Course(name="Sprint", sections=[5, 5, 5])],
        {"mon": 45, "tue": 0, "wed": 45, "thu": 0, "fri": 45, "sat": 180, "sun": 0},
        5,
    ),
]


@pytest.mark.parametrize(("courses", "limits", "margin"), MIXED_CONFIGS)
def test_schedule_properties(courses, limits, margin, start_date):
    result = build_schedule(courses, limits, margin, "mon", start_date)

    assert result.is_complete
    assert result.total_days < MAX_SCHEDULE_DAYS
    # Capacity, conservation and in-order emission
    validate_schedule(result.days, courses, limits, margin)

    for day in result.days:
        assert day.total_duration == sum(s.duration for s in day.sections)
        for position, section in enumerate(day.sections):
            # A Part 1 is always a giant start: alone on an otherwise empty day
            if section.section_label.endswith("(Part 1)"):
                assert position == 0
                assert len(day.sections) == 1
                assert day.total_duration <= limits[day.day_name]


@pytest.mark.parametrize(("courses", "limits", "margin"), MIXED_CONFIGS)
def test_split_pieces_reconstruct_sections(courses, limits, margin, start_date):
    schedule = calculate_schedule(courses, limits, margin, "mon", start_date)

    pieces: dict[tuple[int, str], int] = defaultdict(int)
    for day in schedule:
        for section in day.sections:
            pieces[(section.course_index, base_label(section.section_label))] += section.duration

    for i, course in enumerate(courses):
        for s_idx in range(course.start_offset, len(course.sections)):
            assert pieces[(i, str(s_idx + 1))] == course.sections[s_idx]


@pytest.mark.parametrize(("courses", "limits", "margin"), MIXED_CONFIGS)
def test_no_fresh_section_while_a_split_is_pending(courses, limits, margin, start_date):
    """While any split remainder is pending, no course starts a new whole section."""
    schedule = calculate_schedule(courses, limits, margin, "mon", start_date)

    owed: dict[int, int] = {}
    for day in schedule:
        for section in day.sections:
            i = section.course_index
            label = section.section_label
            if "(Part" not in label:
                assert not owed, f"{section.course_name} started {label} on day {day.day_index} with {owed} pending"
                continue

            if label.endswith("(Part 1)"):
                owed[i] = courses[i].sections[int(base_label(label)) - 1]
            owed[i] -= section.duration
            if owed[i] == 0:
                del owed[i]

    assert owed == {}
