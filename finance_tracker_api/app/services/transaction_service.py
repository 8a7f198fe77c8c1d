"""
Business logic for transactions.

Transactions have no owner column of their own; ownership comes from
the account they belong to, so every query joins ``accounts`` and
filters on ``accounts.user_id``.  Writes additionally check that the
referenced account and category belong to the caller.

Errors follow the usual convention: ``NotFoundError`` when the
transaction itself is missing or foreign, plain ``ValueError`` when the
payload references an account or category the caller does not own.
"""

import logging
import sqlite3
from datetime import date
from typing import Iterable, List, Optional

from ..core.config import settings
from ..core.db import generate_id, get_connection
from ..core.exceptions import NotFoundError
from ..core.utils import resolve_date_range
from ..schemas.transaction import (
    TransactionCreate,
    TransactionListItem,
    TransactionRead,
    TransactionUpdate,
)


logger = logging.getLogger(__name__)

_SELECT_OWNED = (
    "SELECT t.id, t.amount, t.payee, t.notes, t.date, t.account_id, t.category_id "
    "FROM transactions t JOIN accounts a ON t.account_id = a.id "
)


def _row_to_transaction(row) -> TransactionRead:
    return TransactionRead(
        id=row["id"],
        amount=row["amount"],
        payee=row["payee"],
        notes=row["notes"],
        date=row["date"],
        account_id=row["account_id"],
        category_id=row["category_id"],
    )


def _check_references(conn: sqlite3.Connection, user_id: int, items: Iterable[TransactionCreate]) -> None:
    """Raise ``ValueError`` unless every account and category referenced is the user's."""
    items = list(items)
    account_ids = {item.account_id for item in items}
    category_ids = {item.category_id for item in items if item.category_id}

    if account_ids:
        rows = conn.execute(
            f"SELECT id FROM accounts WHERE user_id = ? AND id IN ({', '.join('?' for _ in account_ids)})",
            (user_id, *account_ids),
        ).fetchall()
        missing = account_ids - {row["id"] for row in rows}
        if missing:
            raise ValueError(f"Account {sorted(missing)[0]} not found")

    if category_ids:
        rows = conn.execute(
            f"SELECT id FROM categories WHERE user_id = ? AND id IN ({', '.join('?' for _ in category_ids)})",
            (user_id, *category_ids),
        ).fetchall()
        missing = category_ids - {row["id"] for row in rows}
        if missing:
            raise ValueError(f"Category {sorted(missing)[0]} not found")


def _owned_ids(conn: sqlite3.Connection, user_id: int, ids: List[str]) -> List[str]:
    rows = conn.execute(
        "SELECT t.id FROM transactions t JOIN accounts a ON t.account_id = a.id "
        f"WHERE a.user_id = ? AND t.id IN ({', '.join('?' for _ in ids)})",
        (user_id, *ids),
    ).fetchall()
    owned = {row["id"] for row in rows}
    return [transaction_id for transaction_id in dict.fromkeys(ids) if transaction_id in owned]


class TransactionService:
    """Service for recording, listing and deleting transactions."""

    @classmethod
    async def list_transactions(
        cls,
        user_id: int,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        account_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> List[TransactionListItem]:
        """Return the user's transactions in ``[date_from, date_to]``, newest first.

        Missing bounds default to the last ``settings.summary_default_days``
        days.  Each item carries the account name and, if set, the
        category name.  Raises ``ValueError`` for malformed dates.
        """
        start, end = resolve_date_range(date_from, date_to, settings.summary_default_days, today=today)
        query = (
            "SELECT t.id, t.amount, t.payee, t.notes, t.date, t.account_id, t.category_id, "
            "a.name AS account, c.name AS category "
            "FROM transactions t "
            "JOIN accounts a ON t.account_id = a.id "
            "LEFT JOIN categories c ON t.category_id = c.id "
            "WHERE a.user_id = ? AND t.date >= ? AND t.date <= ?"
        )
        params: list = [user_id, start.isoformat(), end.isoformat()]
        if account_id:
            query += " AND t.account_id = ?"
            params.append(account_id)
        query += " ORDER BY t.date DESC, t.payee, t.id"

        conn = get_connection()
        try:
            rows = conn.execute(query, tuple(params)).fetchall()
        finally:
            conn.close()
        return [
            TransactionListItem(
                id=row["id"],
                amount=row["amount"],
                payee=row["payee"],
                notes=row["notes"],
                date=row["date"],
                account_id=row["account_id"],
                category_id=row["category_id"],
                account=row["account"],
                category=row["category"],
            )
            for row in rows
        ]

    @classmethod
    async def get_transaction(cls, user_id: int, transaction_id: str) -> TransactionRead:
        conn = get_connection()
        try:
            row = conn.execute(
                _SELECT_OWNED + "WHERE t.id = ? AND a.user_id = ?",
                (transaction_id, user_id),
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError(f"Transaction {transaction_id} not found")
        return _row_to_transaction(row)

    @classmethod
    async def create_transaction(cls, user_id: int, data: TransactionCreate) -> TransactionRead:
        created = await cls.bulk_create_transactions(user_id, [data])
        return created[0]

    @classmethod
    async def bulk_create_transactions(cls, user_id: int, items: List[TransactionCreate]) -> List[TransactionRead]:
        """Insert all ``items`` in one database transaction.

        If any item references a foreign account or category nothing is
        inserted and ``ValueError`` is raised.
        """
        if not items:
            return []
        created: List[TransactionRead] = []
        conn = get_connection()
        try:
            _check_references(conn, user_id, items)
            for item in items:
                transaction = TransactionRead(id=generate_id(), **item.model_dump())
                conn.execute(
                    "INSERT INTO transactions (id, amount, payee, notes, date, account_id, category_id) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?)",
                    (
                        transaction.id,
                        transaction.amount,
                        transaction.payee,
                        transaction.notes,
                        transaction.date.isoformat(),
                        transaction.account_id,
                        transaction.category_id,
                    ),
                )
                created.append(transaction)
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
        logger.info("User %s created %d transaction(s)", user_id, len(created))
        return created

    @classmethod
    async def update_transaction(cls, user_id: int, transaction_id: str, data: TransactionUpdate) -> TransactionRead:
        conn = get_connection()
        try:
            exists = conn.execute(
                _SELECT_OWNED + "WHERE t.id = ? AND a.user_id = ?",
                (transaction_id, user_id),
            ).fetchone()
            if not exists:
                raise NotFoundError(f"Transaction {transaction_id} not found")
            _check_references(conn, user_id, [data])
            conn.execute(
                "UPDATE transactions SET amount = ?, payee = ?, notes = ?, date = ?, account_id = ?, category_id = ? "
                "WHERE id = ?",
                (
                    data.amount,
                    data.payee,
                    data.notes,
                    data.date.isoformat(),
                    data.account_id,
                    data.category_id,
                    transaction_id,
                ),
            )
            conn.commit()
        finally:
            conn.close()
        return TransactionRead(id=transaction_id, **data.model_dump())

    @classmethod
    async def delete_transaction(cls, user_id: int, transaction_id: str) -> str:
        conn = get_connection()
        try:
            if not _owned_ids(conn, user_id, [transaction_id]):
                raise NotFoundError(f"Transaction {transaction_id} not found")
            conn.execute("DELETE FROM transactions WHERE id = ?", (transaction_id,))
            conn.commit()
        finally:
            conn.close()
        return transaction_id

    @classmethod
    async def bulk_delete_transactions(cls, user_id: int, ids: List[str]) -> List[str]:
        """Delete the listed transactions whose account the user owns; return their ids."""
        if not ids:
            return []
        conn = get_connection()
        try:
            deleted = _owned_ids(conn, user_id, ids)
            if deleted:
                conn.execute(
                    f"DELETE FROM transactions WHERE id IN ({', '.join('?' for _ in deleted)})",
                    tuple(deleted),
                )
                conn.commit()
        finally:
            conn.close()
        logger.info("User %s bulk-deleted %d transaction(s)", user_id, len(deleted))
        return deleted
