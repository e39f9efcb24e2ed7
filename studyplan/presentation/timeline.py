"""Timeline frames for the front ends.

Flattens day records into pandas frames the Streamlit page charts and
tables are built from. Read-only over the schedule.
"""

import html
from collections.abc import Sequence

import pandas as pd

from studyplan.scheduling.models import DayRecord, ScheduledSection

# Timeline block colours, indexed by colour index modulo the palette size
COURSE_PALETTE = [
    "#EE5D5D",
    "#45B7D1",
    "#34D399",
    "#FF8C61",
    "#9B59B6",
    "#F1C40F",
    "#3498DB",
    "#B5838D",
]

TIMELINE_COLUMNS = ["day_index", "date", "raw_date", "day_name", "course_name", "section_label", "duration", "color"]


def course_color(color_index: int) -> str:
    return COURSE_PALETTE[color_index % len(COURSE_PALETTE)]


def section_badge_html(section: ScheduledSection) -> str:
    """Coloured inline block for one scheduled section; names are HTML-escaped."""
    text = html.escape(f"{section.course_name} · {section.section_label} · {section.duration}m")
    return (
        f"<span style='background:{course_color(section.color_index)};color:#fff;border-radius:6px;"
        f"padding:2px 8px;margin-right:4px'>{text}</span>"
    )


def schedule_to_frame(schedule: Sequence[DayRecord]) -> pd.DataFrame:
    """One row per scheduled section; free days are omitted."""
    rows = [
        {
            "day_index": day.day_index,
            "date": day.date,
            "raw_date": pd.Timestamp(day.raw_date),
            "day_name": day.day_name.upper(),
            "course_name": section.course_name,
            "section_label": section.section_label,
            "duration": section.duration,
            "color": course_color(section.color_index),
        }
        for day in schedule
        for section in day.sections
    ]
    return pd.DataFrame(rows, columns=TIMELINE_COLUMNS)


def daily_summary(schedule: Sequence[DayRecord], day_limits: dict[str, int]) -> pd.DataFrame:
    """Per-day minutes used against the day's limit."""
    return pd.DataFrame(
        [
            {
                "day_index": day.day_index,
                "date": day.date,
                "day_name": day.day_name.upper(),
                "sections": len(day.sections),
                "used": day.total_duration,
                "limit": day_limits.get(day.day_name, 0),
            }
            for day in schedule
        ],
        columns=["day_index", "date", "day_name", "sections", "used", "limit"],
    )
