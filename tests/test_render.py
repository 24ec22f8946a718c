import re
from datetime import date
from xml.etree import ElementTree

import pytest

from gitbig.services.render_service import LIGHT_RED_PALETTE
from gitbig.services.render_service import RED_PALETTE
from gitbig.services.render_service import escape_xml
from gitbig.services.render_service import render_contribution_graph
from gitbig.services.render_service import resolve_theme
from gitbig.services.render_service import tooltip_label
from gitbig.services.render_service import yearly_summary_text


END_DATE = date(2026, 2, 19)
SVG_NS = "{http://www.w3.org/2000/svg}"


def _fill_for(svg: str, date_key: str) -> str | None:
    match = re.search(rf'<rect[^>]*data-date="{date_key}"[^>]*fill="([^"]+)"', svg)
    return match.group(1) if match else None


def test_render_produces_sized_svg_document() -> None:
    svg = render_contribution_graph({}, end_date=END_DATE)

    assert svg.startswith("<svg")
    assert svg.endswith("</svg>\n")
    assert 'width="761" height="224" viewBox="0 0 761 224"' in svg
    assert '<title id="git-big-title">Fitness contributions</title>' in svg
    assert "<desc>" in svg


def test_render_empty_levels_is_well_formed_with_zero_levels() -> None:
    svg = render_contribution_graph({}, end_date=END_DATE)

    root = ElementTree.fromstring(svg)
    days = root.findall(f".//{SVG_NS}rect[@class='day']")
    swatches = root.findall(f"{SVG_NS}rect[@class='legend-swatch']")

    assert len(days) == 371
    assert {day.get("data-level") for day in days} == {"0"}
    assert days[0].get("data-date") == "2025-02-16"
    assert days[-1].get("data-date") == "2026-02-21"
    assert len(swatches) == 5
    assert [swatch.get("fill") for swatch in swatches] == list(RED_PALETTE)


def test_render_uses_level_based_fill_colors() -> None:
    svg = render_contribution_graph(
        {"2026-02-18": 4, "2026-02-17": 2}, end_date=END_DATE, palette=RED_PALETTE
    )

    assert 'data-date="2026-02-18" data-level="4"' in svg
    assert _fill_for(svg, "2026-02-18") == "#d64545"
    assert _fill_for(svg, "2026-02-17") == "#6b1a1a"
    assert _fill_for(svg, "2026-02-16") == "#161b22"


def test_render_clamps_malformed_levels() -> None:
    svg = render_contribution_graph(
        {"2026-02-18": 12, "2026-02-17": -3, "2026-02-16": float("nan")},
        end_date=END_DATE,
    )

    assert 'data-date="2026-02-18" data-level="4"' in svg
    assert 'data-date="2026-02-17" data-level="0"' in svg
    assert 'data-date="2026-02-16" data-level="0"' in svg


def test_render_light_theme_palette_and_label_colors() -> None:
    svg = render_contribution_graph(
        {"2026-02-18": 4}, end_date=END_DATE, theme="light", palette=LIGHT_RED_PALETTE
    )

    assert 'fill="#57606a"' in svg
    assert 'stroke="#d0d7de"' in svg
    assert _fill_for(svg, "2026-02-18") == "#cf222e"


def test_render_without_background_fill_for_both_themes() -> None:
    for theme in ("dark", "light"):
        svg = render_contribution_graph({}, end_date=END_DATE, theme=theme)

        assert '<rect width="100%" height="100%"' not in svg
        assert "http://" not in svg.replace('xmlns="http://www.w3.org/2000/svg"', "")


def test_render_custom_palette_overrides_theme() -> None:
    palette = ("#000000", "#111111", "#222222", "#333333", "#444444")

    svg = render_contribution_graph({"2026-02-18": 3}, end_date=END_DATE, palette=palette)

    assert _fill_for(svg, "2026-02-18") == "#333333"


def test_render_rejects_palette_with_wrong_size() -> None:
    with pytest.raises(ValueError, match="exactly 5 colors"):
        render_contribution_graph({}, end_date=END_DATE, palette=("#000", "#fff"))


def test_render_weekday_and_month_labels() -> None:
    svg = render_contribution_graph({}, end_date=END_DATE)

    weekday_labels = re.findall(r'<text class="wday" x="(\d+)"[^>]*>(\w+)</text>', svg)
    month_labels = re.findall(r'<text class="month"[^>]*>(\w+)</text>', svg)

    assert [text for _, text in weekday_labels] == ["Mon", "Wed", "Fri"]
    assert all(int(x) >= 0 for x, _ in weekday_labels)
    assert month_labels[0] == "Mar"
    assert month_labels[-1] == "Feb"


def test_render_card_chrome_and_footer_legend() -> None:
    svg = render_contribution_graph({}, end_date=END_DATE)

    assert 'class="card"' in svg
    assert "Contribution settings" in svg
    assert 'class="help-link"' in svg
    assert "Learn how we count contributions" in svg
    assert 'class="legend-less"' in svg
    assert 'class="legend-more"' in svg
    assert len(re.findall(r'class="legend-swatch"', svg)) == 5


def test_render_summary_counts_active_minutes() -> None:
    svg = render_contribution_graph(
        {},
        minutes_by_date={"2026-02-18": 120, "2026-02-17": 30, "2026-02-16": -20},
        end_date=END_DATE,
    )

    assert 'class="summary"' in svg
    assert "150 active minutes in the last year" in svg


def test_render_summary_prefers_workout_count() -> None:
    svg = render_contribution_graph(
        {}, minutes_by_date={"2026-02-18": 1250}, session_count=34, end_date=END_DATE
    )

    assert "34 workouts in the last year" in svg
    assert "active minutes in the last year" not in svg


@pytest.mark.parametrize(
    ("minutes_by_date", "session_count", "expected"),
    [
        ({"2026-02-18": 75}, 1, "1 workout in the last year"),
        ({}, 0, "0 workouts in the last year"),
        ({}, 2500, "2,500 workouts in the last year"),
        ({"2026-02-18": 1250}, None, "1,250 active minutes in the last year"),
        ({"2026-02-18": 1.8}, None, "1 active minute in the last year"),
        ({"2026-02-18": 15}, -1, "15 active minutes in the last year"),
        ({"2026-02-18": 15}, float("nan"), "15 active minutes in the last year"),
        (None, None, "0 active minutes in the last year"),
    ],
)
def test_yearly_summary_text(
    minutes_by_date: dict[str, float] | None,
    session_count: float | None,
    expected: str,
) -> None:
    assert yearly_summary_text(minutes_by_date, session_count) == expected


def test_tooltip_label_wording() -> None:
    minutes = {"2026-02-18": 1, "2026-02-17": 45, "2026-02-16": 0}

    assert tooltip_label("2026-02-18", minutes) == "1 minute of activity on 2026-02-18"
    assert tooltip_label("2026-02-17", minutes) == "45 minutes of activity on 2026-02-17"
    assert tooltip_label("2026-02-16", minutes) == "No activity on 2026-02-16"
    assert tooltip_label("2026-02-15", minutes) == "No activity on 2026-02-15"
    assert tooltip_label("2026-02-15", None) == "No activity on 2026-02-15"


def test_render_cell_tooltips() -> None:
    svg = render_contribution_graph(
        {"2026-02-18": 4}, minutes_by_date={"2026-02-18": 45}, end_date=END_DATE
    )

    assert "<title>45 minutes of activity on 2026-02-18</title>" in svg
    assert "<title>No activity on 2026-02-17</title>" in svg


def test_render_escapes_title_text() -> None:
    svg = render_contribution_graph({}, end_date=END_DATE, title="Run & <Ride> \"Q'1\"")

    assert "Run &amp; &lt;Ride&gt; &quot;Q&apos;1&quot;" in svg
    ElementTree.fromstring(svg)


def test_escape_xml_reserved_characters() -> None:
    assert escape_xml("&<>\"'") == "&amp;&lt;&gt;&quot;&apos;"


def test_resolve_theme_defaults_to_dark() -> None:
    assert resolve_theme("light") == "light"
    assert resolve_theme("dark") == "dark"
    assert resolve_theme("sepia") == "dark"
    assert resolve_theme(None) == "dark"


def test_render_is_idempotent() -> None:
    kwargs = {
        "levels_by_date": {"2026-02-18": 3, "2025-06-01": 1},
        "minutes_by_date": {"2026-02-18": 42, "2025-06-01": 5},
        "session_count": 2,
        "end_date": END_DATE,
        "theme": "light",
    }

    assert render_contribution_graph(**kwargs) == render_contribution_graph(**kwargs)
