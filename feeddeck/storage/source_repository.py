"""
Source Repository
=================

Repository pattern implementation for source persistence. Sources are
upserted by their content-addressed id so repeated refreshes of the same
source converge on a single row.
"""

import sqlite3
from typing import List, Optional, Iterable

from ..database.connection import DatabaseConnection
from ..database.models import Source
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import DatabaseError, PersistenceError, ErrorCode


class SourceRepository:
    """Repository for managing sources in the database."""

    UPSERT_SQL = """
        INSERT INTO sources (
            id, user_id, column_id, type, title, link, icon, options,
            created_at, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            title = excluded.title,
            link = excluded.link,
            icon = excluded.icon,
            options = excluded.options,
            updated_at = excluded.updated_at
    """

    def __init__(self, db_connection: DatabaseConnection):
        """Initialize source repository.

        Args:
            db_connection: Database connection manager
        """
        self.db = db_connection
        self.logger = get_logger_for_component("source_repository")

    def upsert_source(self, source: Source) -> None:
        """Insert a source or update its mutable fields.

        ``user_id``, ``column_id``, ``type`` and ``created_at`` are fixed once
        the row exists.

        Raises:
            PersistenceError: If the database rejects the write
        """
        if not source.id:
            raise PersistenceError(
                "Cannot persist a source without an id",
                error_code=ErrorCode.DATABASE_CONSTRAINT,
            )

        try:
            with self.db.transaction() as conn:
                conn.execute(
                    self.UPSERT_SQL,
                    (
                        source.id,
                        source.user_id,
                        source.column_id,
                        source.type.value,
                        source.title,
                        source.link,
                        source.icon,
                        source.options_json(),
                        source.created_at,
                        source.updated_at,
                    ),
                )

            self.logger.debug(
                f"Upserted source {source.id}",
                extra={"source_id": source.id, "owner_id": source.user_id},
            )

        except sqlite3.Error as e:
            raise PersistenceError(
                f"Failed to upsert source {source.id}: {e}", record_id=source.id
            ) from e

    def get_source(self, source_id: str) -> Optional[Source]:
        try:
            with self.db.get_connection() as conn:
                row = conn.execute(
                    "SELECT * FROM sources WHERE id = ?", (source_id,)
                ).fetchone()
                return Source.from_db_row(row) if row else None

        except sqlite3.Error as e:
            raise DatabaseError(
                f"Failed to get source {source_id}: {e}",
                error_code=ErrorCode.DATABASE_ERROR,
            ) from e

    def get_sources_for_column(self, column_id: str, user_id: str) -> List[Source]:
        """Get every source in a column owned by ``user_id``.

        Args:
            column_id: Column ID
            user_id: Owner ID

        Returns:
            Sources in creation order
        """
        try:
            with self.db.get_connection() as conn:
                rows = conn.execute(
                    """
                    SELECT * FROM sources
                    WHERE column_id = ? AND user_id = ?
                    ORDER BY created_at, id
                """,
                    (column_id, user_id),
                ).fetchall()

                return [Source.from_db_row(row) for row in rows]

        except sqlite3.Error as e:
            raise DatabaseError(
                f"Failed to get sources for column {column_id}: {e}",
                error_code=ErrorCode.DATABASE_ERROR,
            ) from e

    def get_stale_sources(
        self,
        user_id: str,
        updated_before: int,
        limit: int,
        exclude_types: Iterable[str] = (),
    ) -> List[Source]:
        """Get sources of a profile not refreshed since ``updated_before``.

        Args:
            user_id: Owner ID
            updated_before: Unix timestamp; only sources with an older
                ``updated_at`` are returned
            limit: Maximum number of sources
            exclude_types: Source types never returned

        Returns:
            Stalest sources first
        """
        exclude_types = list(exclude_types)
        query = "SELECT * FROM sources WHERE user_id = ? AND updated_at < ?"
        params: list = [user_id, updated_before]

        if exclude_types:
            placeholders = ", ".join("?" for _ in exclude_types)
            query += f" AND type NOT IN ({placeholders})"
            params.extend(exclude_types)

        query += " ORDER BY updated_at, id LIMIT ?"
        params.append(limit)

        try:
            with self.db.get_connection() as conn:
                rows = conn.execute(query, tuple(params)).fetchall()
                return [Source.from_db_row(row) for row in rows]

        except sqlite3.Error as e:
            raise DatabaseError(
                f"Failed to get stale sources for {user_id}: {e}",
                query=query,
                error_code=ErrorCode.DATABASE_ERROR,
            ) from e
