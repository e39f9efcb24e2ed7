"""Quick start help shown in the front end."""

QUICK_START_STEPS = [
    (
        "Add Your Courses",
        'Enter the course name and the duration of each video or section in minutes (e.g. "120, 45, 90").',
    ),
    (
        "Configure Limits",
        "Set how many minutes you can study each day (e.g. Mon: 120m) under Schedule Settings.",
    ),
    (
        "Export to Excel",
        'Once the timeline looks right, click **"Export Excel Gantt"** to download a tracking spreadsheet.',
    ),
    (
        "Track Progress",
        'Open the workbook and select **"✓"** in the coloured timeline cells as you finish sections. '
        "The **% Complete** column updates automatically.",
    ),
]


def quick_start_markdown() -> str:
    return "\n".join(
        f"{number}. **{title}**: {body}" for number, (title, body) in enumerate(QUICK_START_STEPS, start=1)
    )
