"""
Business logic for accounts.

All methods take the owner's ``user_id`` and never touch rows that
belong to someone else: an account owned by another user is reported
as not found.  Deleting an account cascades to its transactions through
the foreign key declared in ``core.db``.
"""

import logging
from typing import List

from ..core.db import generate_id, get_connection
from ..core.exceptions import NotFoundError
from ..schemas.account import AccountCreate, AccountRead, AccountUpdate


logger = logging.getLogger(__name__)


def _row_to_account(row) -> AccountRead:
    return AccountRead(id=row["id"], name=row["name"], plaid_id=row["plaid_id"])


class AccountService:
    """Service for managing a user's accounts."""

    @classmethod
    async def list_accounts(cls, user_id: int) -> List[AccountRead]:
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT id, name, plaid_id FROM accounts WHERE user_id = ? ORDER BY name, id",
                (user_id,),
            ).fetchall()
            return [_row_to_account(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_account(cls, user_id: int, account_id: str) -> AccountRead:
        """Return one account.  Raises ``NotFoundError`` if it is missing or foreign."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, name, plaid_id FROM accounts WHERE id = ? AND user_id = ?",
                (account_id, user_id),
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError(f"Account {account_id} not found")
        return _row_to_account(row)

    @classmethod
    async def create_account(cls, user_id: int, data: AccountCreate) -> AccountRead:
        account_id = generate_id()
        logger.info("User %s is creating account '%s'", user_id, data.name)
        conn = get_connection()
        try:
            conn.execute(
                "INSERT INTO accounts (id, name, user_id) VALUES (?, ?, ?)",
                (account_id, data.name, user_id),
            )
            conn.commit()
        finally:
            conn.close()
        return AccountRead(id=account_id, name=data.name, plaid_id=None)

    @classmethod
    async def update_account(cls, user_id: int, account_id: str, data: AccountUpdate) -> AccountRead:
        conn = get_connection()
        try:
            cursor = conn.execute(
                "UPDATE accounts SET name = ? WHERE id = ? AND user_id = ?",
                (data.name, account_id, user_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"Account {account_id} not found")
            conn.commit()
            row = conn.execute(
                "SELECT id, name, plaid_id FROM accounts WHERE id = ?", (account_id,)
            ).fetchone()
            return _row_to_account(row)
        finally:
            conn.close()

    @classmethod
    async def delete_account(cls, user_id: int, account_id: str) -> str:
        """Delete an account together with its transactions and return its id."""
        conn = get_connection()
        try:
            cursor = conn.execute(
                "DELETE FROM accounts WHERE id = ? AND user_id = ?", (account_id, user_id)
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"Account {account_id} not found")
            conn.commit()
        finally:
            conn.close()
        logger.info("User %s deleted account %s", user_id, account_id)
        return account_id

    @classmethod
    async def bulk_delete_accounts(cls, user_id: int, ids: List[str]) -> List[str]:
        """Delete every listed account the user owns.

        Unknown or foreign ids are ignored.  Returns the ids that were
        actually deleted, in the order they were given.
        """
        if not ids:
            return []
        placeholders = ", ".join("?" for _ in ids)
        conn = get_connection()
        try:
            rows = conn.execute(
                f"SELECT id FROM accounts WHERE user_id = ? AND id IN ({placeholders})",
                (user_id, *ids),
            ).fetchall()
            owned = {row["id"] for row in rows}
            deleted = [account_id for account_id in dict.fromkeys(ids) if account_id in owned]
            if deleted:
                conn.execute(
                    f"DELETE FROM accounts WHERE user_id = ? AND id IN ({', '.join('?' for _ in deleted)})",
                    (user_id, *deleted),
                )
                conn.commit()
        finally:
            conn.close()
        logger.info("User %s bulk-deleted %d account(s)", user_id, len(deleted))
        return deleted
