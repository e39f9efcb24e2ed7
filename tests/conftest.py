"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

from datetime import date

import pytest
from loguru import logger

from studyplan.scheduling.constants import DAYS_OF_WEEK
from studyplan.scheduling.models import Course

# Monday
START_DATE = date(2025, 12, 8)


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep scheduler debug output out of test runs."""
    logger.remove()
    logger.add(lambda _: None, level="WARNING")
    yield
    logger.remove()


@pytest.fixture
def start_date() -> date:
    return START_DATE


@pytest.fixture
def uniform_limits() -> dict[str, int]:
    """100 minutes every day."""
    return dict.fromkeys(DAYS_OF_WEEK, 100)


@pytest.fixture
def saturday_heavy_limits() -> dict[str, int]:
    """100 minutes on weekdays and Sunday, 500 on Saturday."""
    return {"mon": 100, "tue": 100, "wed": 100, "thu": 100, "fri": 100, "sat": 500, "sun": 100}


@pytest.fixture
def small_and_giant() -> list[Course]:
    return [
        Course(name="Small", sections=[50]),
        Course(name="Giant", sections=[500]),
    ]
