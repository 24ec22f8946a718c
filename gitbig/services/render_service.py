import math
from collections.abc import Mapping
from collections.abc import Sequence
from datetime import date
from datetime import datetime
from typing import Literal

from gitbig.dates import start_of_utc_day
from gitbig.dates import today_utc
from gitbig.services.grid_service import CELL_GAP
from gitbig.services.grid_service import CELL_PITCH
from gitbig.services.grid_service import CELL_SIZE
from gitbig.services.grid_service import DAYS_PER_WEEK
from gitbig.services.grid_service import build_contribution_grid
from gitbig.services.grid_service import build_month_labels
from gitbig.services.grid_service import clamp_level
from gitbig.services.intensity_service import sanitize_minutes


GraphTheme = Literal["dark", "light"]

RED_PALETTE = ("#161b22", "#3d0f0f", "#6b1a1a", "#a12c2c", "#d64545")
LIGHT_RED_PALETTE = ("#ebedf0", "#ffebe9", "#ffcecb", "#ffaba8", "#cf222e")

DEFAULT_TITLE = "Fitness contributions"
DESCRIPTION = "Daily workout intensity rendered like a GitHub contribution graph."
HELP_LINK_TEXT = "Learn how we count contributions"

CELL_RADIUS = 2
LABEL_GUTTER_WIDTH = 28
HEADER_HEIGHT = 32
CARD_HEADER_HEIGHT = 18
CARD_PADDING_X = 12
CARD_PADDING_TOP = 12
CARD_PADDING_BOTTOM = 12
FOOTER_HEIGHT = 18
FOOTER_TOP_GAP = 24
OUTER_MARGIN_X = 10
OUTER_MARGIN_Y = 10
LEGEND_CELL_GAP = 5
LABEL_FONT = "-apple-system,BlinkMacSystemFont,Segoe UI,Helvetica,Arial,sans-serif"

WEEKDAY_LABELS = (("Mon", 1), ("Wed", 3), ("Fri", 5))

THEME_STYLES = {
    "dark": {
        "summary_color": "#c9d1d9",
        "axis_color": "#7d8590",
        "muted_color": "#7d8590",
        "card_border": "#30363d",
        "palette": RED_PALETTE,
    },
    "light": {
        "summary_color": "#24292f",
        "axis_color": "#24292f",
        "muted_color": "#57606a",
        "card_border": "#d0d7de",
        "palette": LIGHT_RED_PALETTE,
    },
}


def resolve_theme(value: str | None) -> GraphTheme:
    """Return ``light`` only when explicitly requested."""

    return "light" if value == "light" else "dark"


def escape_xml(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def tooltip_label(date_key: str, minutes_by_date: Mapping[str, object] | None) -> str:
    minutes = sanitize_minutes((minutes_by_date or {}).get(date_key, 0))
    if minutes <= 0:
        return f"No activity on {date_key}"
    if minutes == 1:
        return f"1 minute of activity on {date_key}"
    return f"{minutes} minutes of activity on {date_key}"


def yearly_summary_text(
    minutes_by_date: Mapping[str, object] | None,
    session_count: float | None,
) -> str:
    """Headline above the grid: workouts when known, otherwise active minutes."""

    if (
        isinstance(session_count, (int, float))
        and not (isinstance(session_count, float) and not math.isfinite(session_count))
        and session_count >= 0
    ):
        sessions = math.floor(session_count)
        noun = "workout" if sessions == 1 else "workouts"
        return f"{sessions:,} {noun} in the last year"

    total_minutes = sum(
        sanitize_minutes(value) for value in (minutes_by_date or {}).values()
    )
    noun = "minute" if total_minutes == 1 else "minutes"
    return f"{total_minutes:,} active {noun} in the last year"


def render_contribution_graph(
    levels_by_date: Mapping[str, object],
    minutes_by_date: Mapping[str, object] | None = None,
    session_count: float | None = None,
    end_date: date | datetime | None = None,
    theme: str = "dark",
    palette: Sequence[str] | None = None,
    title: str | None = None,
) -> str:
    """Render the calendar as a standalone SVG document.

    Missing dates render as level 0 and out-of-range levels are clamped, so
    partial or empty maps are always accepted.

    Raises:
        ValueError: If a custom palette does not have exactly five colors.
    """

    style = THEME_STYLES[resolve_theme(theme)]
    colors = tuple(palette) if palette is not None else style["palette"]
    if len(colors) != 5:
        raise ValueError("palette must contain exactly 5 colors")
    colors = tuple(escape_xml(color) for color in colors)

    summary_color = style["summary_color"]
    axis_color = style["axis_color"]
    muted_color = style["muted_color"]
    normalized_end = today_utc() if end_date is None else start_of_utc_day(end_date)

    cells = build_contribution_grid(levels_by_date, normalized_end)
    month_labels = build_month_labels(cells)

    weeks = max((cell.week for cell in cells), default=0) + 1
    grid_width = weeks * CELL_PITCH - CELL_GAP
    grid_height = DAYS_PER_WEEK * CELL_PITCH - CELL_GAP

    card_x = OUTER_MARGIN_X
    card_y = OUTER_MARGIN_Y + HEADER_HEIGHT
    grid_x = card_x + CARD_PADDING_X + LABEL_GUTTER_WIDTH + CELL_GAP
    grid_y = card_y + CARD_PADDING_TOP + CARD_HEADER_HEIGHT
    month_text_y = card_y + CARD_PADDING_TOP + 12
    footer_y = grid_y + grid_height + FOOTER_TOP_GAP
    card_width = CARD_PADDING_X + LABEL_GUTTER_WIDTH + CELL_GAP + grid_width + CARD_PADDING_X
    card_height = (
        CARD_PADDING_TOP
        + CARD_HEADER_HEIGHT
        + grid_height
        + FOOTER_TOP_GAP
        + FOOTER_HEIGHT
        + CARD_PADDING_BOTTOM
    )
    width = OUTER_MARGIN_X * 2 + card_width
    height = card_y + card_height + OUTER_MARGIN_Y

    font = f'font-family="{LABEL_FONT}"'
    parts: list[str] = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}" role="img" aria-labelledby="git-big-title">',
        f'<title id="git-big-title">{escape_xml(title or DEFAULT_TITLE)}</title>',
        f"<desc>{escape_xml(DESCRIPTION)}</desc>",
    ]

    summary = escape_xml(yearly_summary_text(minutes_by_date, session_count))
    parts.append(
        f'<text class="summary" x="{OUTER_MARGIN_X}" y="{OUTER_MARGIN_Y + 20}" '
        f'fill="{summary_color}" font-size="18" {font}>{summary}</text>'
    )

    settings_x = card_x + card_width - 24
    settings_y = OUTER_MARGIN_Y + 21
    parts.append(
        f'<text class="settings" x="{settings_x}" y="{settings_y}" text-anchor="end" '
        f'fill="{muted_color}" font-size="10" {font}>Contribution settings</text>'
        f'<path class="settings-caret" d="M0 0h7l-3.5 4z" fill="{muted_color}" '
        f'transform="translate({settings_x + 8},{settings_y - 7})"/>'
    )
    parts.append(
        f'<rect class="card" x="{card_x + 0.5}" y="{card_y + 0.5}" '
        f'width="{card_width - 1}" height="{card_height - 1}" rx="6" ry="6" '
        f'fill="none" stroke="{style["card_border"]}"/>'
    )

    for label in month_labels:
        parts.append(
            f'<text class="month" x="{grid_x + label.x}" y="{month_text_y}" '
            f'fill="{axis_color}" font-size="12" {font}>{label.text}</text>'
        )

    for text, day in WEEKDAY_LABELS:
        parts.append(
            f'<text class="wday" x="{card_x + CARD_PADDING_X}" '
            f'y="{grid_y + day * CELL_PITCH + 8}" '
            f'fill="{axis_color}" font-size="12" {font}>{text}</text>'
        )

    parts.append("<g>")
    for cell in cells:
        tooltip = escape_xml(tooltip_label(cell.date, minutes_by_date))
        parts.append(
            f'<rect class="day" width="{CELL_SIZE}" height="{CELL_SIZE}" '
            f'x="{grid_x + cell.x}" y="{grid_y + cell.y}" '
            f'rx="{CELL_RADIUS}" ry="{CELL_RADIUS}" '
            f'data-date="{cell.date}" data-level="{cell.level}" '
            f'fill="{colors[clamp_level(cell.level)]}"><title>{tooltip}</title></rect>'
        )
    parts.append("</g>")

    legend_width = 5 * CELL_SIZE + 4 * LEGEND_CELL_GAP
    more_x = card_x + card_width - CARD_PADDING_X
    legend_x = more_x - 30 - legend_width
    legend_y = footer_y - 8
    parts.append(
        f'<text class="help-link" x="{grid_x}" y="{footer_y}" '
        f'fill="{muted_color}" font-size="11" {font}>{HELP_LINK_TEXT}</text>'
    )
    parts.append(
        f'<text class="legend-less" x="{legend_x - 8}" y="{footer_y}" text-anchor="end" '
        f'fill="{muted_color}" font-size="11" {font}>Less</text>'
    )
    for index, color in enumerate(colors):
        parts.append(
            f'<rect class="legend-swatch" x="{legend_x + index * (CELL_SIZE + LEGEND_CELL_GAP)}" '
            f'y="{legend_y}" width="{CELL_SIZE}" height="{CELL_SIZE}" '
            f'rx="{CELL_RADIUS}" ry="{CELL_RADIUS}" fill="{color}"/>'
        )
    parts.append(
        f'<text class="legend-more" x="{more_x}" y="{footer_y}" text-anchor="end" '
        f'fill="{muted_color}" font-size="11" {font}>More</text>'
    )
    parts.append("</svg>\n")

    return "".join(parts)
