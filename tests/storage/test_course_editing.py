"""Tests for course list editing helpers."""

from studyplan.scheduling.models import Course
from studyplan.storage.course_editing import (
    add_course,
    add_section,
    parse_section_list,
    remove_course,
    remove_section,
    set_start_offset,
)


def _courses() -> list[Course]:
    return [Course(name="Algebra", sections=[30, 45, 60], start_offset=3), Course(name="Physics", sections=[90])]


def test_add_course_appends_empty_course():
    courses = add_course(_courses(), "  Chemistry ")
    assert courses[-1] == Course(name="Chemistry", sections=[], start_offset=0)


def test_add_course_ignores_blank_name():
    assert len(add_course(_courses(), "   ")) == 2


def test_add_section_appends_minutes():
    courses = add_section(_courses(), 1, "25")
    assert courses[1].sections == [90, 25]


def test_add_section_ignores_invalid_input():
    original = _courses()
    assert add_section(original, 1, "abc") == original
    assert add_section(original, 1, -5) == original
    assert add_section(original, 7, 30) == original


def test_remove_section_clamps_offset():
    courses = remove_section(_courses(), 0, 1)
    assert courses[0].sections == [30, 60]
    assert courses[0].start_offset == 2


def test_remove_course():
    assert [c.name for c in remove_course(_courses(), 0)] == ["Physics"]


def test_set_start_offset_clamps_to_bounds():
    assert set_start_offset(_courses(), 1, 5)[1].start_offset == 1
    assert set_start_offset(_courses(), 0, -2)[0].start_offset == 0
    assert set_start_offset(_courses(), 0, "2")[0].start_offset == 2


def test_editing_does_not_mutate_input():
    courses = _courses()
    add_section(courses, 0, 10)
    set_start_offset(courses, 0, 0)
    assert courses == _courses()


def test_parse_section_list():
    assert parse_section_list("120, 45,90; x, -3, 15") == [120, 45, 90, 15]
