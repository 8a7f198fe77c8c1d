"""
Service layer for the financial summary.

For a date range the summary reports income, expenses and the
remaining balance, each compared with the immediately preceding range
of the same length, plus a spending breakdown by category and a
day-by-day income/expense series.

The aggregation itself happens in SQL; the functions in this module
only reshape the rows (top categories with an "Other" bucket, gap
filling of the daily series).  They are kept separate from
``SummaryService`` so they can be tested without a database.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from ..core.config import settings
from ..core.db import get_connection
from ..core.utils import calculate_percentage_change, fill_missing_days, resolve_date_range
from ..schemas.summary import CategorySpend, DaySummary, Summary


logger = logging.getLogger(__name__)

TOP_CATEGORIES = 3
OTHER_CATEGORY = "Other"


def previous_period(start: date, end: date) -> Tuple[date, date]:
    """Return the range of equal length that ends the day before ``start``."""
    length = (end - start).days + 1
    return start - timedelta(days=length), end - timedelta(days=length)


def collapse_categories(rows: List[Dict[str, Any]], top: int = TOP_CATEGORIES) -> List[Dict[str, Any]]:
    """Keep the ``top`` biggest categories and fold the rest into "Other".

    ``rows`` must already be sorted by ``value`` descending.  The
    "Other" entry is only added when at least one category was folded.
    """
    result = [{"name": row["name"], "value": row["value"]} for row in rows[:top]]
    rest = rows[top:]
    if rest:
        result.append({"name": OTHER_CATEGORY, "value": sum(row["value"] for row in rest)})
    return result


def _owner_filter(user_id: int, start: date, end: date, account_id: Optional[str]) -> Tuple[str, list]:
    clause = "a.user_id = ? AND t.date >= ? AND t.date <= ?"
    params: list = [user_id, start.isoformat(), end.isoformat()]
    if account_id:
        clause += " AND t.account_id = ?"
        params.append(account_id)
    return clause, params


def _fetch_totals(
    conn: sqlite3.Connection, user_id: int, start: date, end: date, account_id: Optional[str]
) -> Dict[str, int]:
    clause, params = _owner_filter(user_id, start, end, account_id)
    row = conn.execute(
        "SELECT "
        "COALESCE(SUM(CASE WHEN t.amount >= 0 THEN t.amount ELSE 0 END), 0) AS income, "
        "COALESCE(SUM(CASE WHEN t.amount < 0 THEN t.amount ELSE 0 END), 0) AS expenses, "
        "COALESCE(SUM(t.amount), 0) AS remaining "
        "FROM transactions t JOIN accounts a ON t.account_id = a.id "
        f"WHERE {clause}",
        tuple(params),
    ).fetchone()
    return {"income": row["income"], "expenses": row["expenses"], "remaining": row["remaining"]}


def _fetch_category_spend(
    conn: sqlite3.Connection, user_id: int, start: date, end: date, account_id: Optional[str]
) -> List[Dict[str, Any]]:
    clause, params = _owner_filter(user_id, start, end, account_id)
    rows = conn.execute(
        "SELECT c.name AS name, SUM(ABS(t.amount)) AS value "
        "FROM transactions t "
        "JOIN accounts a ON t.account_id = a.id "
        "JOIN categories c ON t.category_id = c.id "
        f"WHERE {clause} AND t.amount < 0 "
        "GROUP BY c.name "
        "ORDER BY value DESC, c.name",
        tuple(params),
    ).fetchall()
    return [{"name": row["name"], "value": row["value"]} for row in rows]


def _fetch_active_days(
    conn: sqlite3.Connection, user_id: int, start: date, end: date, account_id: Optional[str]
) -> List[Dict[str, Any]]:
    clause, params = _owner_filter(user_id, start, end, account_id)
    rows = conn.execute(
        "SELECT t.date AS date, "
        "SUM(CASE WHEN t.amount >= 0 THEN t.amount ELSE 0 END) AS income, "
        "SUM(CASE WHEN t.amount < 0 THEN ABS(t.amount) ELSE 0 END) AS expenses "
        "FROM transactions t JOIN accounts a ON t.account_id = a.id "
        f"WHERE {clause} "
        "GROUP BY t.date "
        "ORDER BY t.date",
        tuple(params),
    ).fetchall()
    return [{"date": row["date"], "income": row["income"], "expenses": row["expenses"]} for row in rows]


class SummaryService:
    """Service computing the dashboard summary for one user."""

    @classmethod
    async def get_summary(
        cls,
        user_id: int,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        account_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Summary:
        """Compute the summary for ``[date_from, date_to]``.

        Parameters:
          - date_from, date_to: ``YYYY-MM-DD`` strings.  ``date_to``
            defaults to today and ``date_from`` to
            ``settings.summary_default_days`` days earlier.
          - account_id: restrict every figure to one account.
          - today: override for the current date, used by tests.

        Raises ``ValueError`` for malformed dates or an inverted range.
        """
        start, end = resolve_date_range(date_from, date_to, settings.summary_default_days, today=today)
        last_start, last_end = previous_period(start, end)
        logger.debug("Summary for user %s: %s..%s (previous %s..%s)", user_id, start, end, last_start, last_end)

        conn = get_connection()
        try:
            current = _fetch_totals(conn, user_id, start, end, account_id)
            last = _fetch_totals(conn, user_id, last_start, last_end, account_id)
            categories = collapse_categories(_fetch_category_spend(conn, user_id, start, end, account_id))
            days = fill_missing_days(_fetch_active_days(conn, user_id, start, end, account_id), start, end)
        finally:
            conn.close()

        return Summary(
            remaining_amount=current["remaining"],
            remaining_change=calculate_percentage_change(current["remaining"], last["remaining"]),
            income_amount=current["income"],
            income_change=calculate_percentage_change(current["income"], last["income"]),
            expenses_amount=current["expenses"],
            expenses_change=calculate_percentage_change(current["expenses"], last["expenses"]),
            categories=[CategorySpend(**category) for category in categories],
            days=[DaySummary(**day) for day in days],
        )
