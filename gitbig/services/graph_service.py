import json
import logging
from collections.abc import Iterable
from collections.abc import Mapping
from datetime import date

from gitbig.dates import add_days
from gitbig.dates import parse_iso_date
from gitbig.dates import today_utc
from gitbig.models import ActivityRecord
from gitbig.models import GraphArtifacts
from gitbig.services.grid_service import grid_end_date
from gitbig.services.grid_service import grid_start_date
from gitbig.services.intensity_service import aggregate_minutes_by_date
from gitbig.services.intensity_service import derive_intensity_boundaries
from gitbig.services.intensity_service import fill_date_range
from gitbig.services.intensity_service import normalize_minutes_by_date
from gitbig.services.intensity_service import sort_by_date
from gitbig.services.render_service import render_contribution_graph


logger = logging.getLogger(__name__)

NOT_CONNECTED_TITLE = "git big not connected"


class InvalidEndDateError(ValueError):
    """Raised when a caller supplies a reference date that is not a calendar date."""


def parse_end_date(raw_value: str | None, today: date | None = None) -> date:
    """Resolve the reference end date, defaulting to today in UTC."""

    if not raw_value:
        return today or today_utc()

    try:
        return parse_iso_date(raw_value.strip())
    except ValueError as exc:
        raise InvalidEndDateError(f"Invalid end_date value: {raw_value}") from exc


def build_graph_artifacts(
    activities: Iterable[ActivityRecord],
    end_date: date,
    title: str | None = None,
) -> GraphArtifacts:
    """Run the full pipeline for one reference date.

    Levels are derived over the trailing 365 days only, so zero days inside
    the year take part in the boundaries. The rendered grid then extends
    that window to whole weeks.
    """

    records = list(activities)
    minutes_by_date = aggregate_minutes_by_date(records)

    year_start = add_days(end_date, -364)
    year_minutes = fill_date_range(minutes_by_date, year_start, end_date)
    year_levels = normalize_minutes_by_date(year_minutes)

    render_start = grid_start_date(end_date)
    render_end = grid_end_date(end_date)
    render_minutes = fill_date_range(minutes_by_date, render_start, render_end)
    render_levels = fill_date_range(year_levels, render_start, render_end)

    dark_svg, light_svg = (
        render_contribution_graph(
            levels_by_date=render_levels,
            minutes_by_date=render_minutes,
            session_count=len(records),
            end_date=end_date,
            theme=theme,
            title=title,
        )
        for theme in ("dark", "light")
    )

    logger.info(
        "Rendered graph for %s from %d activities over %d active days",
        end_date.isoformat(),
        len(records),
        sum(1 for minutes in year_minutes.values() if minutes > 0),
    )

    return GraphArtifacts(
        end_date=end_date,
        session_count=len(records),
        boundaries=derive_intensity_boundaries(year_minutes.values()),
        minutes_by_date=year_minutes,
        levels_by_date=year_levels,
        dark_svg=dark_svg,
        light_svg=light_svg,
    )


def levels_document(levels_by_date: Mapping[str, int]) -> str:
    """Serialize levels as the persisted JSON artifact, keys ascending."""

    return f"{json.dumps(sort_by_date(levels_by_date), indent=2)}\n"


def render_placeholder_graph(theme: str, end_date: date | None = None) -> str:
    """Empty graph shown when no activity source is connected."""

    return render_contribution_graph(
        levels_by_date={},
        end_date=end_date or today_utc(),
        theme=theme,
        title=NOT_CONNECTED_TITLE,
    )
