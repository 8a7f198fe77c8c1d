"""
Money and date helpers shared by the services.

Amounts travel through the API as integer milliunits (1/1000 of the
display unit) so that they can be stored and summed without floating
point error.  The conversions here are the only place where floats and
milliunits meet.
"""

import math
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Union

Number = Union[int, float]

DATE_FORMAT = "%Y-%m-%d"

# Largest magnitude an SQLite INTEGER column can hold.
MAX_AMOUNT = 2**63 - 1


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going towards positive infinity.

    Python's ``round`` uses banker's rounding, which would turn 2.5 into
    2.  Amount conversion and percentage changes need ``2.5 -> 3`` and
    ``-2.5 -> -2``.
    """
    return int(math.floor(value + 0.5))


def convert_amount_to_milliunits(amount: Number) -> int:
    """Convert a display amount (e.g. ``12.34``) into milliunits (``12340``)."""
    return round_half_up(amount * 1000)


def convert_amount_from_milliunits(amount: Number) -> float:
    """Convert milliunits (e.g. ``1500``) into a display amount (``1.5``)."""
    return amount / 1000


def calculate_percentage_change(current: Number, previous: Number) -> int:
    """Percentage change between a metric in two periods.

    A zero previous value yields ``0`` when the current value is zero
    too and ``100`` otherwise.  The change is relative to the magnitude
    of ``previous``, so a shrinking expense (e.g. -200 to -100) reads as
    a positive change.
    """
    if previous == 0:
        return 0 if current == 0 else 100
    return round_half_up((current - previous) / abs(previous) * 100)


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string, raising ``ValueError`` on bad input."""
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD") from exc


def resolve_date_range(
    date_from: Optional[str],
    date_to: Optional[str],
    default_days: int,
    today: Optional[date] = None,
) -> tuple[date, date]:
    """Turn optional ``from``/``to`` query strings into a concrete range.

    ``to`` defaults to today and ``from`` to ``default_days`` before
    ``to``.  A range whose start lies after its end is rejected.
    """
    today = today or date.today()
    end = parse_date(date_to) if date_to else today
    start = parse_date(date_from) if date_from else end - timedelta(days=default_days)
    if start > end:
        raise ValueError("'from' must not be after 'to'")
    return start, end


def iter_days(start: date, end: date) -> Iterable[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def fill_missing_days(active_days: List[Dict], start: date, end: date) -> List[Dict]:
    """Return one entry per calendar day in ``[start, end]``.

    ``active_days`` holds ``{"date", "income", "expenses"}`` rows for the
    days that had transactions; ``date`` may be a ``date`` or an ISO
    string.  Days without a row get zero income and expenses.  Output
    dates are ISO strings, in ascending order.
    """
    by_day = {}
    for row in active_days:
        key = row["date"]
        if isinstance(key, date):
            key = key.isoformat()
        by_day[key] = row

    days = []
    for day in iter_days(start, end):
        key = day.isoformat()
        found = by_day.get(key)
        if found is not None:
            days.append({"date": key, "income": found["income"], "expenses": found["expenses"]})
        else:
            days.append({"date": key, "income": 0, "expenses": 0})
    return days
