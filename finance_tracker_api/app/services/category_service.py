"""
Business logic for spending categories.

Categories are scoped to their owner like accounts.  Deleting a
category keeps its transactions; their ``category_id`` is cleared by
the ``ON DELETE SET NULL`` foreign key.
"""

import logging
from typing import List

from ..core.db import generate_id, get_connection
from ..core.exceptions import NotFoundError
from ..schemas.category import CategoryCreate, CategoryRead, CategoryUpdate


logger = logging.getLogger(__name__)


def _row_to_category(row) -> CategoryRead:
    return CategoryRead(id=row["id"], name=row["name"], plaid_id=row["plaid_id"])


class CategoryService:
    """Service for managing a user's categories."""

    @classmethod
    async def list_categories(cls, user_id: int) -> List[CategoryRead]:
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT id, name, plaid_id FROM categories WHERE user_id = ? ORDER BY name, id",
                (user_id,),
            ).fetchall()
            return [_row_to_category(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_category(cls, user_id: int, category_id: str) -> CategoryRead:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, name, plaid_id FROM categories WHERE id = ? AND user_id = ?",
                (category_id, user_id),
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFoundError(f"Category {category_id} not found")
        return _row_to_category(row)

    @classmethod
    async def create_category(cls, user_id: int, data: CategoryCreate) -> CategoryRead:
        category_id = generate_id()
        logger.info("User %s is creating category '%s'", user_id, data.name)
        conn = get_connection()
        try:
            conn.execute(
                "INSERT INTO categories (id, name, user_id) VALUES (?, ?, ?)",
                (category_id, data.name, user_id),
            )
            conn.commit()
        finally:
            conn.close()
        return CategoryRead(id=category_id, name=data.name, plaid_id=None)

    @classmethod
    async def update_category(cls, user_id: int, category_id: str, data: CategoryUpdate) -> CategoryRead:
        conn = get_connection()
        try:
            cursor = conn.execute(
                "UPDATE categories SET name = ? WHERE id = ? AND user_id = ?",
                (data.name, category_id, user_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"Category {category_id} not found")
            conn.commit()
            row = conn.execute(
                "SELECT id, name, plaid_id FROM categories WHERE id = ?", (category_id,)
            ).fetchone()
            return _row_to_category(row)
        finally:
            conn.close()

    @classmethod
    async def delete_category(cls, user_id: int, category_id: str) -> str:
        conn = get_connection()
        try:
            cursor = conn.execute(
                "DELETE FROM categories WHERE id = ? AND user_id = ?", (category_id, user_id)
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"Category {category_id} not found")
            conn.commit()
        finally:
            conn.close()
        logger.info("User %s deleted category %s", user_id, category_id)
        return category_id

    @classmethod
    async def bulk_delete_categories(cls, user_id: int, ids: List[str]) -> List[str]:
        """Delete the listed categories the user owns and return their ids."""
        if not ids:
            return []
        conn = get_connection()
        try:
            rows = conn.execute(
                f"SELECT id FROM categories WHERE user_id = ? AND id IN ({', '.join('?' for _ in ids)})",
                (user_id, *ids),
            ).fetchall()
            owned = {row["id"] for row in rows}
            deleted = [category_id for category_id in dict.fromkeys(ids) if category_id in owned]
            if deleted:
                conn.execute(
                    f"DELETE FROM categories WHERE user_id = ? AND id IN ({', '.join('?' for _ in deleted)})",
                    (user_id, *deleted),
                )
                conn.commit()
        finally:
            conn.close()
        logger.info("User %s bulk-deleted %d categor(ies)", user_id, len(deleted))
        return deleted
