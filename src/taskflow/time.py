# SPDX-License-Identifier: MIT

from typing import Optional, cast

import pendulum


def now_utc() -> pendulum.DateTime:
    return pendulum.now("UTC")


def today(tz: str = "local") -> pendulum.Date:
    return pendulum.today(tz).date()


def datetime_to_iso_str(datetime: pendulum.DateTime) -> str:
    return datetime.isoformat()


def datetime_from_str(datetime: str) -> pendulum.DateTime:
    return cast(pendulum.DateTime, pendulum.parse(datetime))


def datetime_from_str_optional(datetime: Optional[str]) -> Optional[pendulum.DateTime]:
    if datetime is None:
        return None
    return datetime_from_str(datetime)


def datetime_to_local_date(
    datetime: pendulum.DateTime, tz: str = "local"
) -> pendulum.Date:
    """Truncate a timestamp to the calendar day it falls on in ``tz``."""
    return datetime.in_tz(tz).date()


def convert_date_to_iso(date: Optional[pendulum.Date], tz: str = "local") -> Optional[str]:
    """
    Convert a calendar date to the ISO timestamp of its start of day.

    The start of day is taken in ``tz`` and expressed in UTC, which is how due
    dates are stored by the backend. ``date_from_iso`` reverses it.
    """
    if date is None:
        return None
    start_of_day = pendulum.datetime(date.year, date.month, date.day, tz=tz)
    return start_of_day.in_tz("UTC").isoformat()


def date_from_iso(value: Optional[str], tz: str = "local") -> Optional[pendulum.Date]:
    """Parse a stored due date back to the calendar day it was created from."""
    if value is None:
        return None
    parsed = pendulum.parse(value, exact=True)
    if isinstance(parsed, pendulum.DateTime):
        return parsed.in_tz(tz).date()
    if isinstance(parsed, pendulum.Date):
        return parsed
    raise ValueError(f"Not a date: {value}")


def date_from_str(date_str: str) -> pendulum.Date:
    """Parse a 'YYYY-MM-DD' string to a calendar date."""
    return pendulum.Date.fromisoformat(date_str)


def month_from_str(month_str: str) -> pendulum.Date:
    """Parse a 'YYYY-MM' string to the first day of that month."""
    year, month = map(int, month_str.split("-"))
    return pendulum.date(year, month, 1)


def date_to_display_str(date: pendulum.Date) -> str:
    return date.format("MMM D, YYYY")


def datetime_to_display_local_date_str(datetime: pendulum.DateTime) -> str:
    return datetime.in_tz("local").format("MMM D, YYYY")
