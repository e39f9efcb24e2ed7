from __future__ import annotations

import io
import sys
from datetime import date
from pathlib import Path

import altair as alt
import streamlit as st

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from studyplan.config.settings import settings
from studyplan.core.logger import setup_logger
from studyplan.export.gantt_workbook import build_gantt_workbook, default_workbook_filename
from studyplan.presentation.guide import quick_start_markdown
from studyplan.presentation.timeline import daily_summary, schedule_to_frame, section_badge_html
from studyplan.scheduling.constants import DAYS_OF_WEEK
from studyplan.scheduling.scheduler import build_schedule
from studyplan.storage.config_store import (
    PlannerConfig,
    default_export_filename,
    export_config,
    import_config,
    load_config,
    save_config,
)
from studyplan.storage.course_editing import (
    add_course,
    add_section,
    parse_section_list,
    remove_course,
    remove_section,
    set_start_offset,
)
from studyplan.storage.errors import ConfigImportError

# -------------------------------------------------
# Session State
# -------------------------------------------------
if "logger_ready" not in st.session_state:
    setup_logger(settings.log_level, settings.log_file)
    st.session_state.logger_ready = True
if "config" not in st.session_state:
    st.session_state.config = load_config()
if "new_course_name" not in st.session_state:
    st.session_state.new_course_name = ""


# -------------------------------------------------
# Helpers
# -------------------------------------------------
def update_config(**changes) -> None:
    config: PlannerConfig = st.session_state.config.model_copy(update=changes)
    st.session_state.config = config
    save_config(config)


def submit_new_course() -> None:
    name = st.session_state.new_course_name
    update_config(courses=add_course(st.session_state.config.courses, name))
    # SAFE reset
    st.session_state.new_course_name = ""


def submit_sections(course_index: int) -> None:
    key = f"sections_input_{course_index}"
    courses = st.session_state.config.courses
    for minutes in parse_section_list(st.session_state.get(key, "")):
        courses = add_section(courses, course_index, minutes)
    update_config(courses=courses)
    st.session_state[key] = ""


# -------------------------------------------------
# Page config
# -------------------------------------------------
st.set_page_config(
    page_title="Study Planner",
    layout="wide",
    initial_sidebar_state="expanded",
)

config: PlannerConfig = st.session_state.config

# -------------------------------------------------
# Sidebar: courses and schedule settings
# -------------------------------------------------
with st.sidebar:
    st.markdown("### Courses")
    st.text_input("New course name", key="new_course_name", on_change=submit_new_course)

    if not config.courses:
        st.caption("No courses added yet.")

    for i, course in enumerate(config.courses):
        with st.expander(f"{course.name} ({len(course.sections)} sections)", expanded=False):
            offset = st.number_input(
                "Already done",
                min_value=0,
                max_value=len(course.sections),
                value=min(course.start_offset, len(course.sections)),
                key=f"offset_{i}",
            )
            if offset != course.start_offset:
                update_config(courses=set_start_offset(config.courses, i, offset))

            for s_idx, minutes in enumerate(course.sections):
                done = "~~" if s_idx < course.start_offset else ""
                cols = st.columns([4, 1])
                cols[0].markdown(f"{done}Section {s_idx + 1}: {minutes}m{done}")
                if cols[1].button("✕", key=f"remove_section_{i}_{s_idx}"):
                    update_config(courses=remove_section(config.courses, i, s_idx))
                    st.rerun()

            st.text_input(
                "Add sections (minutes, comma separated)",
                key=f"sections_input_{i}",
                on_change=submit_sections,
                args=(i,),
            )
            if st.button("Remove course", key=f"remove_course_{i}"):
                update_config(courses=remove_course(config.courses, i))
                st.rerun()

    st.divider()
    st.markdown("### Schedule Settings")

    start_date = st.date_input("Start date", value=config.start_date)
    if start_date != config.start_date:
        update_config(start_date=start_date)

    margin = st.number_input(
        "Margin of error (minutes)",
        min_value=0,
        value=config.margin_of_error,
        help="Allow sections to overflow the daily limit by this amount if needed.",
    )
    if margin != config.margin_of_error:
        update_config(margin_of_error=int(margin))

    st.markdown("**Daily study limits (minutes)**")
    limit_cols = st.columns(len(DAYS_OF_WEEK))
    limits = dict(config.day_limits)
    for col, day in zip(limit_cols, DAYS_OF_WEEK, strict=True):
        limits[day] = int(col.number_input(day.upper(), min_value=0, value=limits.get(day, 0), key=f"limit_{day}"))
    if limits != config.day_limits:
        update_config(day_limits=limits)

    st.divider()
    st.markdown("### Data Management")
    st.download_button(
        "⬇ Export Data",
        data=export_config(st.session_state.config),
        file_name=default_export_filename(date.today()),
        mime="application/json",
    )
    uploaded = st.file_uploader("⬆ Import Data", type=["json"])
    if uploaded is not None:
        st.warning("Importing data will overwrite your current schedule.")
        if st.button("Confirm import"):
            try:
                merged = import_config(uploaded.getvalue().decode("utf-8"), st.session_state.config)
            except (UnicodeDecodeError, ConfigImportError) as e:
                st.error("Failed to parse JSON file or invalid data.")
                st.caption(str(e))
            else:
                st.session_state.config = merged
                save_config(merged)
                st.rerun()

# -------------------------------------------------
# Schedule
# -------------------------------------------------
config = st.session_state.config
result = build_schedule(
    config.courses,
    config.day_limits,
    config.margin_of_error,
    start_date=config.start_date,
    max_days=settings.max_schedule_days,
)

st.markdown("## Study Plan")

with st.expander("Need Help?", expanded=False):
    st.markdown("#### Quick Start Guide")
    st.markdown(quick_start_markdown())

if not result.days:
    st.info("Add courses to see your optimized schedule.")
    st.stop()

if not result.is_complete:
    st.error(
        f"The schedule stopped at the {settings.max_schedule_days}-day limit. "
        "Check that your daily limits leave room for every section."
    )

k1, k2, k3 = st.columns(3)
k1.metric("End Date", result.days[-1].date)
k2.metric("Total Days", result.total_days)
k3.metric("Study Minutes", result.total_minutes)

buffer = io.BytesIO()
build_gantt_workbook(result.days, config.courses).save(buffer)
st.download_button(
    "📊 Export Excel Gantt",
    data=buffer.getvalue(),
    file_name=default_workbook_filename(date.today()),
    mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
)

# -------------------------------------------------
# Timeline
# -------------------------------------------------
frame = schedule_to_frame(result.days)
if not frame.empty:
    names = list(dict.fromkeys(frame["course_name"]))
    colors = [frame.loc[frame["course_name"] == name, "color"].iloc[0] for name in names]
    chart = (
        alt.Chart(frame)
        .mark_bar()
        .encode(
            x=alt.X("day_index:O", title="Day"),
            y=alt.Y("sum(duration):Q", title="Minutes"),
            color=alt.Color("course_name:N", scale=alt.Scale(domain=names, range=colors), title="Course"),
            tooltip=["date", "course_name", "section_label", "duration"],
        )
        .properties(height=320)
    )
    st.altair_chart(chart, use_container_width=True)

for day in result.days:
    with st.container(border=True):
        left, right = st.columns([1, 5])
        left.markdown(f"**{day.day_name.upper()}**  \n{day.date}")
        if not day.sections:
            right.caption("Free Day")
            continue
        blocks = " ".join(section_badge_html(s) for s in day.sections)
        right.markdown(blocks, unsafe_allow_html=True)

with st.expander("Daily usage"):
    st.dataframe(daily_summary(result.days, config.day_limits), hide_index=True)
