"""Scheduling constants shared by the engine, the exporter and the front ends."""

from typing import Literal

Weekday = Literal["mon", "tue", "wed", "thu", "fri", "sat", "sun"]

# Display order, Monday first
DAYS_OF_WEEK: list[Weekday] = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]

# Indexed by date.weekday() (0 = Monday)
WEEKDAY_BY_INDEX: tuple[Weekday, ...] = tuple(DAYS_OF_WEEK)

# Hard ceiling on simulated days (two years)
MAX_SCHEDULE_DAYS = 365 * 2

# Number of distinct course colours in the presentation layer
COLOR_COUNT = 10
