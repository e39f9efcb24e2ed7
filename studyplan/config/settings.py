from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from studyplan.scheduling.constants import DAYS_OF_WEEK, MAX_SCHEDULE_DAYS


def get_default_data_file() -> Path:
    """Get the default planner state file in the user's home directory."""
    return Path.home() / ".studyplan" / "planner.json"


def get_default_day_limits() -> dict[str, int]:
    """Weekday study budgets used for a fresh planner (minutes)."""
    return {"mon": 120, "tue": 120, "wed": 120, "thu": 120, "fri": 120, "sat": 240, "sun": 240}


class Settings(BaseSettings):
    data_file: Path = Field(
        default_factory=get_default_data_file,
        validation_alias="STUDYPLAN_DATA_FILE",
        description="JSON file holding courses, day limits, margin and start date",
    )
    default_margin_of_error: int = Field(default=15, ge=0, validation_alias="STUDYPLAN_DEFAULT_MARGIN")
    default_day_limits: dict[str, int] = Field(
        default_factory=get_default_day_limits,
        validation_alias="STUDYPLAN_DEFAULT_DAY_LIMITS",
        description="JSON object mapping mon..sun to minutes",
    )
    max_schedule_days: int = Field(default=MAX_SCHEDULE_DAYS, gt=0, validation_alias="STUDYPLAN_MAX_SCHEDULE_DAYS")
    log_level: str = Field(default="INFO", validation_alias="STUDYPLAN_LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="STUDYPLAN_LOG_FILE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="STUDYPLAN_",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid STUDYPLAN_LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("default_day_limits")
    @classmethod
    def validate_day_limits(cls, value: dict[str, int]) -> dict[str, int]:
        """Keep known weekday keys; unknown keys are dropped, missing ones become 0."""
        unknown = set(value) - set(DAYS_OF_WEEK)
        if unknown:
            logger.warning(f"Ignoring unknown weekday keys in STUDYPLAN_DEFAULT_DAY_LIMITS: {sorted(unknown)}")
        return {day: max(0, int(value.get(day, 0))) for day in DAYS_OF_WEEK}


settings = Settings()
