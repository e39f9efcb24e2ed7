"""Gantt-style progress workbook export.

Builds an .xlsx sheet with one column per scheduled day and one row per
course and section. Cells on the days a section is scheduled are coloured
and accept a "✓" from a drop-down; the % Complete column counts the ticks.

Split pieces ("3 (Part 2)") are grouped back under their section ("3").
"""

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from loguru import logger
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.datavalidation import DataValidation
from openpyxl.worksheet.worksheet import Worksheet

from studyplan.scheduling.labels import base_label
from studyplan.scheduling.models import Course, DayRecord

SHEET_TITLE = "Study Schedule"
CHECK_MARK = "✓"

# Solid equivalents of the timeline gradients
COURSE_COLORS = ["EE5D5D", "45B7D1", "34D399", "FF8C61", "9B59B6", "F1C40F", "3498DB", "B5838D"]
WEEK_COLORS = ["1F4E79", "27603B", "7030A0", "800000", "7F6000", "385723"]
HEADER_COLOR = "2C3E50"
PARENT_ROW_COLOR = "E0E0E0"
INACTIVE_COURSE_COLOR = "CCCCCC"

FIXED_COLUMNS = [
    ("WBS", 8),
    ("Task / Item", 40),
    ("Start Date", 15),
    ("End Date", 15),
    ("Duration", 10),
    ("% Complete", 12),
]
FIRST_DAY_COLUMN = len(FIXED_COLUMNS) + 1
PCT_COLUMN = 6
DAY_COLUMN_WIDTH = 15

_THIN = Side(style="thin")
_CELL_BORDER = Border(top=_THIN, left=_THIN, right=_THIN, bottom=_THIN)
_DAY_HEADER_BORDER = Border(top=_THIN, left=_THIN, right=_THIN, bottom=Side(style="medium"))
_WHITE_BOLD = Font(bold=True, color="FFFFFF")


def _solid(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


@dataclass
class DateSpan:
    start: date | None = None
    end: date | None = None

    def extend(self, value: date) -> None:
        if self.start is None:
            self.start = value
        self.end = value


@dataclass
class CourseActivity:
    """Where one course appears in a schedule.

    Attributes:
        color_index: Colour index of the course
        span: First and last scheduled date
        active_days: Day indices with any work for the course
        section_days: Base section label -> day indices
        section_spans: Base section label -> first and last date
    """

    color_index: int
    span: DateSpan = field(default_factory=DateSpan)
    active_days: set[int] = field(default_factory=set)
    section_days: dict[str, set[int]] = field(default_factory=lambda: defaultdict(set))
    section_spans: dict[str, DateSpan] = field(default_factory=lambda: defaultdict(DateSpan))


def collect_course_activity(schedule: Sequence[DayRecord]) -> dict[int, CourseActivity]:
    """Group scheduled sections per course index and per base section label."""
    activity: dict[int, CourseActivity] = {}
    for day in schedule:
        for section in day.sections:
            data = activity.setdefault(section.course_index, CourseActivity(color_index=section.color_index))
            data.active_days.add(day.day_index)
            data.span.extend(day.raw_date)

            label = base_label(section.section_label)
            data.section_days[label].add(day.day_index)
            data.section_spans[label].extend(day.raw_date)
    return activity


def _write_headers(ws: Worksheet, schedule: Sequence[DayRecord]) -> dict[int, int]:
    """Write the two header rows; returns day_index -> column."""
    for col, (title, width) in enumerate(FIXED_COLUMNS, start=1):
        ws.cell(row=1, column=col, value=title)
        ws.merge_cells(start_row=1, start_column=col, end_row=2, end_column=col)
        ws.column_dimensions[get_column_letter(col)].width = width

        cell = ws.cell(row=1, column=col)
        cell.fill = _solid(HEADER_COLOR)
        cell.font = Font(bold=True, color="FFFFFF", size=12)
        cell.alignment = Alignment(horizontal="center", vertical="center")

    day_columns: dict[int, int] = {}
    week_start_col = FIRST_DAY_COLUMN
    current_week = -1
    week_color = WEEK_COLORS[0]

    for idx, day in enumerate(schedule):
        col = FIRST_DAY_COLUMN + idx
        day_columns[day.day_index] = col
        ws.column_dimensions[get_column_letter(col)].width = DAY_COLUMN_WIDTH

        week_num = idx // 7 + 1
        if week_num != current_week:
            if current_week != -1 and col - 1 > week_start_col:
                ws.merge_cells(start_row=1, start_column=week_start_col, end_row=1, end_column=col - 1)
            current_week = week_num
            week_start_col = col
            week_color = WEEK_COLORS[(week_num - 1) % len(WEEK_COLORS)]

            week_cell = ws.cell(row=1, column=col, value=f"WEEK {week_num}")
            week_cell.alignment = Alignment(horizontal="center", vertical="center")
            week_cell.font = Font(bold=True, color="FFFFFF", size=12)
            week_cell.fill = _solid(week_color)

        day_cell = ws.cell(row=2, column=col, value=f"{day.day_name.upper()}\n{day.date}")
        day_cell.alignment = Alignment(wrap_text=True, horizontal="center", vertical="center")
        day_cell.fill = _solid(week_color)
        day_cell.font = _WHITE_BOLD
        day_cell.border = _DAY_HEADER_BORDER

    if schedule:
        last_col = FIRST_DAY_COLUMN + len(schedule) - 1
        if last_col > week_start_col:
            ws.merge_cells(start_row=1, start_column=week_start_col, end_row=1, end_column=last_col)

    return day_columns


def _mark_active(ws: Worksheet, row: int, columns: list[int], color: str) -> None:
    for col in columns:
        cell = ws.cell(row=row, column=col)
        cell.fill = _solid(color)
        cell.border = _CELL_BORDER


def build_gantt_workbook(schedule: Sequence[DayRecord], courses: Sequence[Course]) -> Workbook:
    """Build the progress-tracking workbook.

    Args:
        schedule: Day records, in order
        courses: Courses the schedule was calculated for

    Returns:
        openpyxl Workbook with a single "Study Schedule" sheet
    """
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    day_columns = _write_headers(ws, schedule)
    activity = collect_course_activity(schedule)

    check_validation = DataValidation(type="list", formula1=f'"{CHECK_MARK}"', allow_blank=True)
    checkable_cells = 0

    if schedule:
        first_letter = get_column_letter(FIRST_DAY_COLUMN)
        last_letter = get_column_letter(FIRST_DAY_COLUMN + len(schedule) - 1)

    for c_idx, course in enumerate(courses):
        data = activity.get(c_idx)
        color = COURSE_COLORS[data.color_index % len(COURSE_COLORS)] if data else INACTIVE_COURSE_COLOR

        ws.append([
            c_idx + 1,
            course.name,
            data.span.start if data else None,
            data.span.end if data else None,
            "",
            0,
        ])
        parent_row = ws.max_row
        for col in range(1, len(FIXED_COLUMNS) + 1):
            cell = ws.cell(row=parent_row, column=col)
            cell.font = Font(bold=True, size=12)
            cell.fill = _solid(PARENT_ROW_COLOR)
            if col in (3, 4):
                cell.number_format = "yyyy-mm-dd"
        if data:
            _mark_active(ws, parent_row, [day_columns[d] for d in sorted(data.active_days)], color)

        course_cells = 0
        for s_idx, minutes in enumerate(course.sections):
            label = str(s_idx + 1)
            span = data.section_spans.get(label) if data else None

            ws.append([
                f"{c_idx + 1}.{s_idx + 1}",
                f"   Section {label}",
                span.start if span else None,
                span.end if span else None,
                f"{minutes}m",
                0,
            ])
            row = ws.max_row
            ws.row_dimensions[row].outline_level = 1
            for col in (3, 4):
                ws.cell(row=row, column=col).number_format = "yyyy-mm-dd"

            days = sorted(data.section_days.get(label, ())) if data else []
            if not days:
                continue

            columns = [day_columns[d] for d in days]
            _mark_active(ws, row, columns, color)
            for col in columns:
                cell = ws.cell(row=row, column=col)
                cell.alignment = Alignment(horizontal="center", vertical="center")
                check_validation.add(cell)
                checkable_cells += 1

            course_cells += len(days)
            pct = ws.cell(row=row, column=PCT_COLUMN)
            pct.value = f'=COUNTIF({first_letter}{row}:{last_letter}{row},"{CHECK_MARK}")/{len(days)}'
            pct.number_format = "0%"

        if course_cells > 0:
            first_section_row = parent_row + 1
            last_section_row = parent_row + len(course.sections)
            block = f"{first_letter}{first_section_row}:{last_letter}{last_section_row}"
            pct = ws.cell(row=parent_row, column=PCT_COLUMN)
            pct.value = f'=COUNTIF({block},"{CHECK_MARK}")/{course_cells}'
            pct.number_format = "0%"

    if checkable_cells:
        ws.add_data_validation(check_validation)

    ws.freeze_panes = ws.cell(row=3, column=FIRST_DAY_COLUMN)
    return wb


def default_workbook_filename(today: date | None = None) -> str:
    today = today or date.today()
    return f"CourseOptimizer_Schedule_{today.isoformat()}.xlsx"


def save_gantt_workbook(schedule: Sequence[DayRecord], courses: Sequence[Course], path: Path) -> Path:
    """Build the workbook and write it to `path`."""
    wb = build_gantt_workbook(schedule, courses)
    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    logger.info("Gantt workbook exported", path=str(path), days=len(schedule), courses=len(courses))
    return path
