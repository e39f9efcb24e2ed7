"""Persisted planner configuration.

Stores the four values the scheduler needs between sessions (courses, day
limits, margin of error and start date) as one JSON document, and reads and
writes the bulk import/export document.

The on-disk and export formats are the same camelCase document:

    {
      "courses": [{"name": "...", "sections": [45, 60], "startOffset": 0}],
      "dayLimits": {"mon": 120, ...},
      "marginOfError": 15,
      "startDate": "2025-12-08T00:00:00"
    }
"""

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from studyplan.config.settings import settings
from studyplan.scheduling.constants import DAYS_OF_WEEK
from studyplan.scheduling.errors import InvalidCourseError
from studyplan.scheduling.models import Course, parse_course
from studyplan.storage.errors import ConfigImportError


def normalize_day_limits(value: Any) -> dict[str, int]:
    """Map every weekday key to a non-negative minute count; missing keys become 0."""
    if not isinstance(value, dict):
        raise TypeError(f"Day limits must be an object, got {type(value).__name__}")
    return {day: max(0, int(value.get(day, 0) or 0)) for day in DAYS_OF_WEEK}


def parse_start_date(value: Any) -> date | None:
    """Parse a stored start date.

    Accepts date objects, ISO dates ("2025-12-08") and ISO datetimes with an
    optional trailing "Z" ("2025-12-08T00:00:00.000Z").

    Returns:
        The calendar date, or None when the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


class PlannerConfig(BaseModel):
    """Everything the scheduler needs, as persisted between sessions.

    Attributes:
        courses: Courses in priority order
        day_limits: Minutes per weekday key
        margin_of_error: Allowed daily overflow in minutes
        start_date: First day of the schedule
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    courses: list[Course] = Field(default_factory=list)
    day_limits: dict[str, int] = Field(default_factory=dict)
    margin_of_error: int = Field(0, ge=0)
    start_date: date = Field(default_factory=date.today)

    @field_validator("day_limits")
    @classmethod
    def validate_day_limits(cls, value: dict[str, int]) -> dict[str, int]:
        return normalize_day_limits(value)

    @field_validator("start_date", mode="before")
    @classmethod
    def coerce_start_date(cls, value: Any) -> date:
        parsed = parse_start_date(value)
        if parsed is None:
            raise ValueError(f"Invalid start date: {value!r}")
        return parsed

    @classmethod
    def default(cls) -> "PlannerConfig":
        return cls(
            courses=[],
            day_limits=dict(settings.default_day_limits),
            margin_of_error=settings.default_margin_of_error,
            start_date=date.today(),
        )

    def to_document(self) -> dict[str, Any]:
        """Serialize to the camelCase export document."""
        return {
            "courses": [course.model_dump(by_alias=True) for course in self.courses],
            "dayLimits": dict(self.day_limits),
            "marginOfError": self.margin_of_error,
            "startDate": datetime.combine(self.start_date, datetime.min.time()).isoformat(),
        }


def load_config(path: Path | None = None) -> PlannerConfig:
    """Load planner state, falling back to defaults.

    A missing file yields the default config. An unreadable or invalid file
    is logged and also yields the default config so a corrupt state file
    never blocks the planner.

    Args:
        path: State file (defaults to settings.data_file)

    Returns:
        Loaded or default PlannerConfig
    """
    path = path or settings.data_file
    if not path.exists():
        logger.debug("No planner state file, using defaults", path=str(path))
        return PlannerConfig.default()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        config = PlannerConfig.model_validate(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Could not load planner state from {path}, using defaults: {e}")
        return PlannerConfig.default()

    logger.debug("Planner state loaded", path=str(path), courses=len(config.courses))
    return config


def save_config(config: PlannerConfig, path: Path | None = None) -> Path:
    """Write planner state as JSON, creating parent directories.

    Returns:
        Path written
    """
    path = path or settings.data_file
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.to_document(), indent=2, ensure_ascii=False), encoding="utf-8")
    logger.debug("Planner state saved", path=str(path), courses=len(config.courses))
    return path


def export_config(config: PlannerConfig) -> str:
    """Render the bulk export document."""
    return json.dumps(config.to_document(), indent=2, ensure_ascii=False)


def import_config(text: str, current: PlannerConfig) -> PlannerConfig:
    """Merge an export document into the current configuration.

    Each key present in the document replaces the current value, so an empty
    courses list or dayLimits object clears it. A missing or zero marginOfError and an unparsable startDate keep the current
    values.

    Args:
        text: JSON export document
        current: Configuration to merge into

    Returns:
        New PlannerConfig

    Raises:
        ConfigImportError: If the document is not valid JSON, not an object,
            or holds invalid courses or day limits
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigImportError(f"Failed to parse JSON file: {e}") from e

    if not isinstance(data, dict):
        raise ConfigImportError("Import document must be a JSON object")

    merged = current.model_copy()
    try:
        if data.get("courses") is not None:
            courses = data["courses"]
            if not isinstance(courses, list):
                raise TypeError(f"courses must be a list, got {type(courses).__name__}")
            merged = merged.model_copy(update={"courses": [parse_course(c) for c in courses]})
        if data.get("dayLimits") is not None:
            merged = merged.model_copy(update={"day_limits": normalize_day_limits(data["dayLimits"])})
    except (InvalidCourseError, TypeError, ValueError) as e:
        raise ConfigImportError(f"Invalid data in import document: {e}") from e

    margin = data.get("marginOfError")
    if isinstance(margin, int) and not isinstance(margin, bool) and margin > 0:
        merged = merged.model_copy(update={"margin_of_error": margin})

    if data.get("startDate"):
        parsed = parse_start_date(data["startDate"])
        if parsed is not None:
            merged = merged.model_copy(update={"start_date": parsed})
        else:
            logger.warning(f"Ignoring invalid startDate in import: {data['startDate']!r}")

    logger.info(
        "Planner data imported",
        courses=len(merged.courses),
        margin_of_error=merged.margin_of_error,
        start_date=merged.start_date.isoformat(),
    )
    return merged


def default_export_filename(today: date | None = None) -> str:
    today = today or date.today()
    return f"course_optimizer_data_{today.isoformat()}.json"
