import logging
import math
from collections.abc import Iterable
from collections.abc import Mapping
from datetime import date
from datetime import datetime

from gitbig.dates import format_date
from gitbig.dates import list_date_range
from gitbig.models import ActivityRecord


logger = logging.getLogger(__name__)

# Outlier z-score used by GitHub's contribution calendar (githubchart).
OUTLIER_Z_SCORE = 3.77972616981

MAX_LEVEL = 4

Boundaries = tuple[int, int, int, int, int]

ZERO_BOUNDARIES: Boundaries = (0, 0, 0, 0, 0)


def sanitize_minutes(value: object) -> int:
    """Coerce a minute value to a non-negative whole number."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    if value <= 0:
        return 0
    return math.floor(value)


def sort_by_date(values: Mapping[str, int]) -> dict[str, int]:
    return {key: values[key] for key in sorted(values)}


def _mean(values: list[int]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def _sample_standard_deviation(values: list[int], mean: float) -> float:
    if len(values) < 2:
        return 0.0
    squared_delta_sum = sum((value - mean) ** 2 for value in values)
    return math.sqrt(squared_delta_sum / (len(values) - 1))


def find_outliers(values: list[int]) -> list[int]:
    """Return the distinct values treated as outliers, capped as GitHub does."""

    distinct = list(dict.fromkeys(values))
    if len(distinct) < 5:
        return []

    try:
        mean = _mean(values)
        deviation = _sample_standard_deviation(values, mean)
        if not math.isfinite(deviation) or deviation == 0:
            return []

        outliers = [
            value
            for value in distinct
            if abs((mean - value) / deviation) > OUTLIER_Z_SCORE
        ]
        max_value = max(values, default=0)
        max_outliers = 1 if max_value - mean < 6 or max_value < 15 else 3
    except OverflowError:
        # Minute values beyond float range.
        return []

    return outliers[:max_outliers]


def _quartile_midpoint(range_top: int, quartile: int) -> int:
    if range_top <= 0:
        return 0

    index = quartile * range_top // 4 - 1
    if index < 0 or index >= range_top:
        return range_top
    return index + 1


def derive_intensity_boundaries(minute_values: Iterable[object]) -> Boundaries:
    """Derive five bucket boundaries from observed daily minutes.

    Quartiles are laid over ``[1, max]`` after discarding a few extreme
    outliers, so a single very long day does not flatten every other day
    into the lowest levels. The true maximum always stays the top boundary.
    """

    sanitized = [sanitize_minutes(value) for value in minute_values]
    max_value = max(sanitized, default=0)
    if max_value <= 0:
        return ZERO_BOUNDARIES

    outliers = set(find_outliers(sanitized))
    non_outlier_top = max(
        (value for value in sanitized if value not in outliers), default=0
    )

    candidates = {
        _quartile_midpoint(non_outlier_top, quartile) for quartile in (1, 2, 3)
    }
    candidates.add(max_value)
    bounds = sorted(candidates)
    while len(bounds) < 5:
        bounds.insert(0, 0)

    return bounds[0], bounds[1], bounds[2], bounds[3], bounds[4]


def bucket_minutes(minutes: object, boundaries: Boundaries) -> int:
    """Map a minute count to an intensity level in range 0..4."""

    normalized = sanitize_minutes(minutes)
    if normalized <= 0:
        return 0

    level = sum(1 for boundary in boundaries if normalized > boundary)
    return max(0, min(MAX_LEVEL, level))


def aggregate_minutes_by_date(activities: Iterable[ActivityRecord]) -> dict[str, int]:
    """Sum activity durations per calendar day and convert them to minutes."""

    seconds_by_date: dict[str, float] = {}
    skipped = 0

    for activity in activities:
        raw_date = activity.local_date
        duration = activity.duration_seconds
        if not raw_date or len(raw_date) < 10:
            skipped += 1
            continue
        if duration is None or not math.isfinite(duration) or duration < 0:
            skipped += 1
            continue

        date_key = raw_date[:10]
        seconds_by_date[date_key] = seconds_by_date.get(date_key, 0) + duration

    if skipped:
        logger.debug("Skipped %d malformed activity records", skipped)

    minutes_by_date = {
        date_key: sanitize_minutes(total_seconds / 60)
        for date_key, total_seconds in seconds_by_date.items()
    }
    return sort_by_date(minutes_by_date)


def normalize_minutes_by_date(minutes_by_date: Mapping[str, object]) -> dict[str, int]:
    """Convert a date to minutes mapping into a date to level mapping."""

    sanitized = {
        date_key: sanitize_minutes(minutes)
        for date_key, minutes in minutes_by_date.items()
    }
    boundaries = derive_intensity_boundaries(sanitized.values())
    logger.debug("Derived intensity boundaries %s", boundaries)

    levels = {
        date_key: bucket_minutes(minutes, boundaries)
        for date_key, minutes in sanitized.items()
    }
    return sort_by_date(levels)


def fill_date_range(
    values_by_date: Mapping[str, int],
    start: date | datetime,
    end: date | datetime,
) -> dict[str, int]:
    """Return one entry per day in the inclusive range, defaulting to 0."""

    return {
        format_date(day): values_by_date.get(format_date(day), 0)
        for day in list_date_range(start, end)
    }
