"""Domain-specific errors for schedule calculation.

The engine itself never raises on well-typed input. These errors are
raised at the edges: when parsing course payloads and when checking a
produced schedule against its invariants.

Standard invariant codes:
- CAPACITY_EXCEEDED: A day uses more than its limit plus the margin
- DURATION_NOT_CONSERVED: Scheduled minutes of a course differ from its remaining sections
- SECTION_ORDER_VIOLATED: A course's sections were emitted out of order
"""


class SchedulingError(Exception):
    """Base exception for all scheduling errors."""

    pass


class InvalidCourseError(SchedulingError):
    """Raised when a course payload fails validation (e.g., negative duration)."""

    pass


class ScheduleInvariantError(SchedulingError):
    """Raised when a produced schedule violates an invariant.

    Attributes:
        code: Error code (e.g., "INVALID_SCHEDULE")
        details: List of violated invariant codes with context
    """

    def __init__(self, code: str, details: list[str]):
        self.code = code
        self.details = details
        super().__init__(f"{code}: {details}")
