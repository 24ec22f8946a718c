import re
from datetime import UTC
from datetime import date
from datetime import datetime
from datetime import timedelta


ISO_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def start_of_utc_day(value: date | datetime) -> date:
    """Truncate a date or datetime to its UTC calendar day.

    Naive datetimes are treated as already being in UTC.
    """

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.date()
    return value


def today_utc() -> date:
    return datetime.now(UTC).date()


def add_days(value: date | datetime, days: int) -> date:
    return start_of_utc_day(value) + timedelta(days=days)


def sunday_weekday(value: date) -> int:
    """Return the weekday index with Sunday as 0 and Saturday as 6."""

    return (value.weekday() + 1) % 7


def start_of_week_sunday(value: date | datetime) -> date:
    normalized = start_of_utc_day(value)
    return add_days(normalized, -sunday_weekday(normalized))


def end_of_week_saturday(value: date | datetime) -> date:
    normalized = start_of_utc_day(value)
    return add_days(normalized, 6 - sunday_weekday(normalized))


def format_date(value: date | datetime) -> str:
    return start_of_utc_day(value).isoformat()


def parse_iso_date(raw_value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string.

    Raises:
        ValueError: If the value is not a valid calendar date.
    """

    if not ISO_DATE_PATTERN.fullmatch(raw_value):
        raise ValueError(f"Invalid ISO date: {raw_value!r}")
    return date.fromisoformat(raw_value)


def list_date_range(start: date | datetime, end: date | datetime) -> list[date]:
    """Return every calendar day from start to end, both inclusive."""

    current = start_of_utc_day(start)
    last = start_of_utc_day(end)

    days: list[date] = []
    while current <= last:
        days.append(current)
        current += timedelta(days=1)

    return days
