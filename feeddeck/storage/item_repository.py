"""
Item Repository
===============

Batch upsert of normalized items keyed by their content-addressed id.
Re-ingesting an unchanged entry rewrites the same row with the same values.
"""

import sqlite3
from typing import List, Set

from ..database.connection import DatabaseConnection
from ..database.models import Item
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import DatabaseError, PersistenceError, ErrorCode


class ItemRepository:
    """Repository for managing items in the database."""

    def __init__(self, db_connection: DatabaseConnection):
        self.db = db_connection
        self.logger = get_logger_for_component("item_repository")

    def upsert_items(self, items: List[Item]) -> int:
        """Upsert a batch of items in one transaction.

        Args:
            items: Items to store

        Returns:
            Number of items written

        Raises:
            PersistenceError: If the database rejects the batch
        """
        if not items:
            return 0

        try:
            with self.db.transaction() as conn:
                conn.executemany(
                    """
                    INSERT INTO items (
                        id, user_id, column_id, source_id, title, link,
                        media, description, author, published_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        title = excluded.title,
                        link = excluded.link,
                        media = excluded.media,
                        description = excluded.description,
                        author = excluded.author,
                        published_at = excluded.published_at
                """,
                    [
                        (
                            item.id,
                            item.user_id,
                            item.column_id,
                            item.source_id,
                            item.title,
                            item.link,
                            item.media,
                            item.description,
                            item.author,
                            item.published_at,
                        )
                        for item in items
                    ],
                )

            self.logger.debug(
                f"Upserted {len(items)} items",
                extra={"source_id": items[0].source_id, "items_count": len(items)},
            )
            return len(items)

        except sqlite3.Error as e:
            raise PersistenceError(
                f"Failed to upsert items: {e}", record_id=items[0].source_id
            ) from e

    def get_item_ids_for_source(self, source_id: str) -> Set[str]:
        try:
            with self.db.get_connection() as conn:
                rows = conn.execute(
                    "SELECT id FROM items WHERE source_id = ?", (source_id,)
                ).fetchall()
                return {row["id"] for row in rows}

        except sqlite3.Error as e:
            raise DatabaseError(
                f"Failed to get items for source {source_id}: {e}",
                error_code=ErrorCode.DATABASE_ERROR,
            ) from e

    def count_items(self, source_id: str) -> int:
        """Count stored items of a source."""
        try:
            with self.db.get_connection() as conn:
                row = conn.execute(
                    "SELECT COUNT(*) FROM items WHERE source_id = ?", (source_id,)
                ).fetchone()
                return row[0]

        except sqlite3.Error as e:
            raise DatabaseError(
                f"Failed to count items for source {source_id}: {e}",
                error_code=ErrorCode.DATABASE_ERROR,
            ) from e
