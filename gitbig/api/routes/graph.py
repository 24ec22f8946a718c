from datetime import date

from fastapi import APIRouter
from fastapi import HTTPException
from fastapi import Query
from fastapi.responses import Response

from gitbig.api.schemas.graph import GraphRequest
from gitbig.api.schemas.graph import LevelsResponse
from gitbig.services.graph_service import InvalidEndDateError
from gitbig.services.graph_service import build_graph_artifacts
from gitbig.services.graph_service import parse_end_date
from gitbig.services.graph_service import render_placeholder_graph
from gitbig.services.render_service import resolve_theme
from gitbig.settings import Settings


router = APIRouter()
settings = Settings()

SVG_MEDIA_TYPE = "image/svg+xml; charset=utf-8"


def _resolve_end_date(raw_end_date: str | None) -> date:
    try:
        return parse_end_date(raw_end_date or settings.end_date)
    except InvalidEndDateError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/")
async def root() -> dict[str, str]:
    """Return a basic service greeting."""

    return {"message": "git big graph service"}


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Report that the service is alive."""

    return {"status": "ok"}


@router.post("/graph.svg")
def render_graph(
    payload: GraphRequest,
    theme: str | None = Query(default=None),
    end_date: str | None = Query(default=None),
    title: str | None = Query(default=None, max_length=200),
) -> Response:
    """Render the supplied activities as a contribution graph SVG."""

    resolved_end = _resolve_end_date(end_date)
    artifacts = build_graph_artifacts(
        payload.activities,
        end_date=resolved_end,
        title=title or settings.graph_title,
    )
    svg = artifacts.light_svg if resolve_theme(theme) == "light" else artifacts.dark_svg

    return Response(
        content=svg,
        media_type=SVG_MEDIA_TYPE,
        headers={"Cache-Control": "public, max-age=300"},
    )


@router.post("/graph/levels")
def graph_levels(
    payload: GraphRequest,
    end_date: str | None = Query(default=None),
) -> LevelsResponse:
    """Return trailing-year minutes and levels for the supplied activities."""

    resolved_end = _resolve_end_date(end_date)
    artifacts = build_graph_artifacts(payload.activities, end_date=resolved_end)

    return LevelsResponse(
        end_date=artifacts.end_date,
        boundaries=artifacts.boundaries,
        minutes=artifacts.minutes_by_date,
        levels=artifacts.levels_by_date,
    )


@router.get("/graph/placeholder.svg")
def placeholder_graph(theme: str | None = Query(default=None)) -> Response:
    """Return an empty graph for callers without connected activity data."""

    return Response(
        content=render_placeholder_graph(resolve_theme(theme)),
        media_type=SVG_MEDIA_TYPE,
        headers={"Cache-Control": "public, max-age=60"},
    )
