"""Tests for the quick start help."""

from studyplan.presentation.guide import QUICK_START_STEPS, quick_start_markdown


def test_quick_start_lists_every_step_in_order():
    lines = quick_start_markdown().splitlines()

    assert len(lines) == len(QUICK_START_STEPS) == 4
    assert lines[0].startswith("1. **Add Your Courses**")
    assert lines[-1].startswith("4. **Track Progress**")
