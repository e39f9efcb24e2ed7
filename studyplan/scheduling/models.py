"""Data models for schedule calculation.

This module defines:
- Course: the validated input contract (a named sequence of section durations)
- ScheduledSection: one committed piece of work on a day
- DayRecord: one simulated day of the output schedule
- ScheduleResult: the full schedule plus completion metadata

Courses are pydantic models because they cross the storage and editor
boundaries. Output records are frozen dataclasses and are never mutated
after a day closes.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from studyplan.scheduling.constants import COLOR_COUNT
from studyplan.scheduling.errors import InvalidCourseError

SectionMinutes = Annotated[int, Field(ge=0)]


class Course(BaseModel):
    """A study course: ordered section durations in minutes.

    Attributes:
        name: Display name of the course
        sections: Duration of each section in minutes; section i is labelled str(i + 1)
        start_offset: Number of leading sections already completed
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    name: str
    sections: list[SectionMinutes] = Field(default_factory=list)
    start_offset: int = Field(0, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Course name must not be blank")
        return value

    @property
    def remaining_minutes(self) -> int:
        """Minutes left to schedule, skipping completed sections."""
        return sum(self.sections[self.start_offset :])


def parse_course(payload: dict[str, Any]) -> Course:
    """Validate a raw course payload.

    Args:
        payload: Mapping with name, sections and startOffset/start_offset

    Returns:
        Validated Course

    Raises:
        InvalidCourseError: If the payload fails validation
    """
    try:
        return Course.model_validate(payload)
    except ValidationError as e:
        raise InvalidCourseError(f"Invalid course payload: {e}") from e


@dataclass(frozen=True)
class ScheduledSection:
    """A piece of a course committed to a day.

    Attributes:
        course_name: Name of the owning course
        section_label: "N" for a whole section, "N (Part K)" for a split piece
        duration: Minutes committed
        course_index: Position of the course in the input list
    """

    course_name: str
    section_label: str
    duration: int
    course_index: int

    @property
    def color_index(self) -> int:
        return self.course_index % COLOR_COUNT


@dataclass(frozen=True)
class DayRecord:
    """One simulated day of the schedule.

    Attributes:
        day_index: 1-based ordinal of the day
        date: Display date (e.g. "Mon, Dec 8")
        raw_date: Calendar date of the day
        day_name: Weekday key ("mon".."sun")
        sections: Sections committed that day, in commit order
        total_duration: Minutes used (may exceed the limit by the margin)
    """

    day_index: int
    date: str
    raw_date: date
    day_name: str
    sections: list[ScheduledSection] = field(default_factory=list)
    total_duration: int = 0


@dataclass(frozen=True)
class ScheduleResult:
    """Schedule plus completion metadata.

    Attributes:
        days: Ordered day records
        is_complete: False when the day ceiling stopped the run before all work was placed
    """

    days: list[DayRecord]
    is_complete: bool

    @property
    def total_days(self) -> int:
        return len(self.days)

    @property
    def end_date(self) -> date | None:
        if not self.days:
            return None
        return self.days[-1].raw_date

    @property
    def total_minutes(self) -> int:
        return sum(day.total_duration for day in self.days)
