"""Day-filling engine.

Fills one simulated day with work drawn from every course. The run-level
state (per-course cursors and leftover queues) lives in RunState and is
carried from one day to the next by the scheduler.

Selection order, re-evaluated after every commit:
1. One candidate per course: the head of its leftover queue, else its next whole section
2. Leftovers shadow fresh sections (a split section is finished before anything new starts)
3. Largest candidate that fits within remaining time plus margin
4. Oversized ("giant") fresh section, started only on an untouched day
5. Forced split of a leftover to use the rest of the day
6. Otherwise the day closes
"""

from collections import deque
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Literal

from loguru import logger

from studyplan.scheduling.labels import split_labels
from studyplan.scheduling.models import Course, ScheduledSection

CloseReason = Literal[
    "no_candidates",
    "margin_spent",
    "giant_started",
    "leftover_split",
    "insignificant_slot",
    "no_fit",
]


@dataclass
class LeftoverPiece:
    """Pending remainder of a split section."""

    duration: int
    label: str


@dataclass(frozen=True)
class Candidate:
    """Next schedulable unit of work offered by one course."""

    course_index: int
    course_name: str
    duration: int
    label: str
    is_leftover: bool

    def to_section(self, label: str | None = None, duration: int | None = None) -> ScheduledSection:
        return ScheduledSection(
            course_name=self.course_name,
            section_label=self.label if label is None else label,
            duration=self.duration if duration is None else duration,
            course_index=self.course_index,
        )


@dataclass
class RunState:
    """Mutable state of one scheduling run.

    Attributes:
        courses: Input courses (never mutated)
        margin_of_error: Minutes a commit may overflow the remaining budget
        min_global_limit: Smallest positive day limit (0 if none)
        max_global_limit: Largest positive day limit (0 if none)
        cursors: Per course, index of the next whole section
        leftovers: Per course, queue of pending split remainders
        all_done: Set once every cursor is exhausted and every queue is empty
    """

    courses: Sequence[Course]
    margin_of_error: int
    min_global_limit: int
    max_global_limit: int
    cursors: list[int]
    leftovers: list[deque[LeftoverPiece]]
    all_done: bool = False

    @classmethod
    def start(cls, courses: Sequence[Course], day_limits: Mapping[str, int], margin_of_error: int) -> "RunState":
        positive = [v for v in day_limits.values() if v > 0]
        return cls(
            courses=courses,
            margin_of_error=margin_of_error,
            min_global_limit=min(positive) if positive else 0,
            max_global_limit=max(positive) if positive else 0,
            cursors=[course.start_offset for course in courses],
            leftovers=[deque() for _ in courses],
        )

    def candidates(self) -> list[Candidate]:
        found: list[Candidate] = []
        for i, course in enumerate(self.courses):
            queue = self.leftovers[i]
            if queue:
                head = queue[0]
                found.append(Candidate(i, course.name, head.duration, head.label, is_leftover=True))
                continue

            cursor = self.cursors[i]
            if cursor < len(course.sections):
                found.append(Candidate(i, course.name, course.sections[cursor], str(cursor + 1), is_leftover=False))
        return found

    def is_exhausted(self) -> bool:
        return all(
            self.cursors[i] >= len(course.sections) and not self.leftovers[i]
            for i, course in enumerate(self.courses)
        )

    def consume(self, candidate: Candidate) -> None:
        """Mark a whole candidate as scheduled."""
        if candidate.is_leftover:
            self.leftovers[candidate.course_index].popleft()
        else:
            self.cursors[candidate.course_index] += 1


@dataclass(frozen=True)
class DayFill:
    sections: list[ScheduledSection] = field(default_factory=list)
    remaining_time: int = 0
    close_reason: CloseReason = "no_candidates"


def fill_day(state: RunState, day_limit: int) -> DayFill:
    """Fill one day and advance the run state.

    Args:
        state: Run state, mutated in place
        day_limit: Minutes available on this day

    Returns:
        DayFill with committed sections, remaining time (negative when the
        margin was used) and the reason the day closed
    """
    margin = state.margin_of_error
    remaining_time = day_limit
    day_sections: list[ScheduledSection] = []
    reason: CloseReason

    while True:
        candidates = state.candidates()
        if not candidates:
            if state.is_exhausted():
                state.all_done = True
            reason = "no_candidates"
            break

        active = [c for c in candidates if c.is_leftover] or candidates

        fitting = [c for c in active if c.duration <= remaining_time + margin]
        if fitting:
            # max() keeps the earliest course on ties
            best = max(fitting, key=lambda c: c.duration)
            day_sections.append(best.to_section())
            remaining_time -= best.duration
            state.consume(best)
            if remaining_time < 0:
                reason = "margin_spent"
                break
            continue

        fresh = [c for c in active if not c.is_leftover]
        if fresh:
            giant = next((c for c in fresh if c.duration > state.min_global_limit + margin), None)
            untouched = remaining_time >= day_limit
            if giant is None or not untouched:
                reason = "no_fit"
                break

            take = min(remaining_time, giant.duration)
            labels = split_labels(giant.label)
            day_sections.append(giant.to_section(labels.current, take))
            remaining_time -= take
            state.leftovers[giant.course_index].appendleft(LeftoverPiece(giant.duration - take, labels.next))
            state.cursors[giant.course_index] += 1
            reason = "giant_started"
            break

        # Only leftovers remain and none fits whole
        if remaining_time <= margin:
            reason = "insignificant_slot"
            break

        leftover = active[0]
        take = remaining_time
        labels = split_labels(leftover.label)
        day_sections.append(leftover.to_section(labels.current, take))
        remaining_time = 0
        state.leftovers[leftover.course_index][0] = LeftoverPiece(leftover.duration - take, labels.next)
        reason = "leftover_split"
        break

    logger.debug(
        "Day filled",
        day_limit=day_limit,
        used=day_limit - remaining_time,
        sections=len(day_sections),
        close_reason=reason,
    )
    return DayFill(sections=day_sections, remaining_time=remaining_time, close_reason=reason)
