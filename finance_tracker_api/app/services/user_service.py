"""
Business logic for users.

``UserService`` registers users with hashed passwords and checks
credentials at login.  Tokens themselves are minted in the endpoint
layer via ``core.security``.
"""

import logging
import sqlite3
from typing import Optional

from ..core.db import get_connection
from ..core.exceptions import NotFoundError
from ..core.security import hash_password, verify_password
from ..schemas.user import UserCreate, UserRead


logger = logging.getLogger(__name__)


def _row_to_user(row) -> UserRead:
    return UserRead(
        id=row["id"],
        email=row["email"],
        full_name=row["full_name"],
        disabled=bool(row["disabled"]),
    )


class UserService:
    """Service for registering and authenticating users."""

    @classmethod
    async def create_user(cls, data: UserCreate) -> UserRead:
        """Create a new user and return it.

        Emails are compared case-insensitively and stored lower-cased.
        Raises ``ValueError`` if the email is already registered.
        """
        email = data.email.strip().lower()
        logger.info("Registering user %s", email)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    "INSERT INTO users (email, full_name, password) VALUES (?, ?, ?)",
                    (email, data.full_name, hash_password(data.password)),
                )
            except sqlite3.IntegrityError as exc:
                conn.rollback()
                raise ValueError(f"User {email} already exists") from exc
            user_id = cursor.lastrowid
            conn.commit()
            return UserRead(id=user_id, email=email, full_name=data.full_name, disabled=False)
        finally:
            conn.close()

    @classmethod
    async def authenticate(cls, email: str, password: str) -> Optional[UserRead]:
        """Return the user if the credentials match an enabled account, else ``None``."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, email, full_name, password, disabled FROM users WHERE email = ?",
                (email.strip().lower(),),
            ).fetchone()
        finally:
            conn.close()
        if not row or row["disabled"]:
            return None
        if not verify_password(password, row["password"]):
            logger.warning("Failed login for %s", email)
            return None
        return _row_to_user(row)

    @classmethod
    async def get_user(cls, user_id: int) -> UserRead:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, email, full_name, disabled FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError(f"User {user_id} not found")
        return _row_to_user(row)
