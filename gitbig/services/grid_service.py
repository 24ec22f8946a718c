import math
from collections.abc import Mapping
from collections.abc import Sequence
from datetime import date
from datetime import datetime

from gitbig.dates import add_days
from gitbig.dates import end_of_week_saturday
from gitbig.dates import format_date
from gitbig.dates import list_date_range
from gitbig.dates import parse_iso_date
from gitbig.dates import start_of_utc_day
from gitbig.dates import start_of_week_sunday
from gitbig.dates import sunday_weekday
from gitbig.dates import today_utc
from gitbig.models import ContributionCell
from gitbig.models import MonthLabel


CELL_SIZE = 10
CELL_GAP = 3
CELL_PITCH = CELL_SIZE + CELL_GAP
DAYS_PER_WEEK = 7
MIN_MONTH_LABEL_SPACING = 28

MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def clamp_level(value: object) -> int:
    """Clamp any stored level value into range 0..4, defaulting to 0."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and math.isnan(value):
        return 0
    if value < 0:
        return 0
    if value > 4:
        return 4
    return math.floor(value)


def grid_start_date(end_date: date | datetime) -> date:
    """Sunday on or before the first day of the trailing 365-day window."""

    return start_of_week_sunday(add_days(end_date, -364))


def grid_end_date(end_date: date | datetime) -> date:
    return end_of_week_saturday(end_date)


def build_contribution_grid(
    levels_by_date: Mapping[str, object],
    end_date: date | datetime | None = None,
) -> list[ContributionCell]:
    """Lay out every day from the grid start through the closing Saturday."""

    normalized_end = today_utc() if end_date is None else start_of_utc_day(end_date)
    dates = list_date_range(
        grid_start_date(normalized_end), grid_end_date(normalized_end)
    )

    cells: list[ContributionCell] = []
    for index, day in enumerate(dates):
        week = index // DAYS_PER_WEEK
        weekday = sunday_weekday(day)
        date_key = format_date(day)
        cells.append(
            ContributionCell(
                date=date_key,
                week=week,
                day=weekday,
                level=clamp_level(levels_by_date.get(date_key)),
                x=week * CELL_PITCH,
                y=weekday * CELL_PITCH,
            )
        )

    return cells


def build_month_labels(cells: Sequence[ContributionCell]) -> list[MonthLabel]:
    """Place a label above each month start, skipping ones that would overlap."""

    if not cells:
        return []

    cells_by_week: dict[int, list[ContributionCell]] = {}
    for cell in cells:
        cells_by_week.setdefault(cell.week, []).append(cell)

    labels: list[MonthLabel] = []
    for week in range(max(cells_by_week) + 1):
        week_cells = sorted(cells_by_week.get(week, []), key=lambda cell: cell.day)
        month_start = next(
            (cell for cell in week_cells if parse_iso_date(cell.date).day == 1), None
        )
        if month_start is None:
            continue

        candidate = MonthLabel(
            date=month_start.date,
            text=MONTH_NAMES[parse_iso_date(month_start.date).month - 1],
            week=week,
            x=week * CELL_PITCH,
        )
        if labels and candidate.x - labels[-1].x < MIN_MONTH_LABEL_SPACING:
            continue

        labels.append(candidate)

    return labels
