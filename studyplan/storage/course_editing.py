"""Course list editing.

Pure helpers behind the course editors. Each returns a new list and leaves
its input untouched; invalid input is ignored rather than raised, matching
what an interactive form does with a stray keystroke.
"""

from typing import Any

from studyplan.scheduling.models import Course


def _parse_minutes(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        minutes = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return minutes if minutes >= 0 else None


def add_course(courses: list[Course], name: str) -> list[Course]:
    """Append an empty course; blank names are ignored."""
    if not name or not name.strip():
        return list(courses)
    return [*courses, Course(name=name.strip(), sections=[], start_offset=0)]


def remove_course(courses: list[Course], index: int) -> list[Course]:
    return [c for i, c in enumerate(courses) if i != index]


def add_section(courses: list[Course], index: int, duration: Any) -> list[Course]:
    """Append a section of `duration` minutes to course `index`.

    Non-numeric and negative durations are ignored.
    """
    minutes = _parse_minutes(duration)
    if minutes is None or not 0 <= index < len(courses):
        return list(courses)

    updated = list(courses)
    course = updated[index]
    updated[index] = course.model_copy(update={"sections": [*course.sections, minutes]})
    return updated


def remove_section(courses: list[Course], index: int, section_index: int) -> list[Course]:
    """Remove one section, pulling the start offset back inside the new bounds."""
    if not 0 <= index < len(courses):
        return list(courses)

    updated = list(courses)
    course = updated[index]
    sections = [d for i, d in enumerate(course.sections) if i != section_index]
    updated[index] = course.model_copy(
        update={"sections": sections, "start_offset": min(course.start_offset, len(sections))}
    )
    return updated


def set_start_offset(courses: list[Course], index: int, offset: Any) -> list[Course]:
    """Set how many sections are already done, clamped to [0, len(sections)]."""
    value = _parse_minutes(offset)
    if not 0 <= index < len(courses):
        return list(courses)

    updated = list(courses)
    course = updated[index]
    safe = 0 if value is None else min(value, len(course.sections))
    updated[index] = course.model_copy(update={"start_offset": safe})
    return updated


def parse_section_list(text: str) -> list[int]:
    """Parse "120, 45, 90" into [120, 45, 90], skipping entries that are not minutes."""
    minutes = (_parse_minutes(part) for part in text.replace(";", ",").split(","))
    return [m for m in minutes if m is not None]
