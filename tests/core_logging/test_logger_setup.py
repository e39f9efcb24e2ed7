"""Tests for loguru logger setup."""

from loguru import logger

from studyplan.core.logger import setup_logger


def test_setup_logger_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "studyplan.log"

    setup_logger(level="INFO", log_file=str(log_file))
    logger.info("Planner ready", courses=2)
    logger.debug("Hidden at INFO")
    logger.complete()

    text = log_file.read_text(encoding="utf-8")
    assert "Planner ready" in text
    assert "'courses': 2" in text
    assert "Hidden at INFO" not in text
