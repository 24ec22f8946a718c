from datetime import date

from pydantic import BaseModel
from pydantic import Field

from gitbig.models import ActivityRecord


class GraphRequest(BaseModel):
    """Activities to render; records with missing fields are skipped."""

    activities: list[ActivityRecord] = Field(default_factory=list)


class LevelsResponse(BaseModel):
    """Trailing-year minutes and intensity levels keyed by ISO date."""

    end_date: date
    boundaries: tuple[int, int, int, int, int]
    minutes: dict[str, int]
    levels: dict[str, int]
