from datetime import date

from pydantic import AliasChoices
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class ActivityRecord(BaseModel):
    """Single timed activity, e.g. one workout exported from a tracker.

    Both fields are optional so malformed records can be skipped during
    aggregation instead of failing the whole batch.
    """

    model_config = ConfigDict(populate_by_name=True)

    duration_seconds: float | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "duration_seconds", "durationSeconds", "moving_time"
        ),
    )
    local_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices("local_date", "localDate", "start_date_local"),
    )


class ContributionCell(BaseModel):
    """One day square positioned on the week/day grid."""

    model_config = ConfigDict(frozen=True)

    date: str
    week: int
    day: int
    level: int
    x: int
    y: int


class MonthLabel(BaseModel):
    """Month name placed above the first week column containing its 1st day."""

    model_config = ConfigDict(frozen=True)

    date: str
    text: str
    week: int
    x: int


class GraphArtifacts(BaseModel):
    """Everything produced for one reference date."""

    model_config = ConfigDict(frozen=True)

    end_date: date
    session_count: int
    boundaries: tuple[int, int, int, int, int]
    minutes_by_date: dict[str, int]
    levels_by_date: dict[str, int]
    dark_svg: str
    light_svg: str
