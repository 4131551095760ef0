"""
Profile and Column Repositories
===============================

Read access to the accounts and column groupings that drive refresh
eligibility and the manual refresh ownership check.
"""

import sqlite3
from typing import List, Optional

from ..database.connection import DatabaseConnection
from ..database.models import Profile, Column, ProfileTier
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import DatabaseError, PersistenceError, ErrorCode


class ProfileRepository:
    """Repository for managing profiles in the database."""

    def __init__(self, db_connection: DatabaseConnection):
        self.db = db_connection
        self.logger = get_logger_for_component("profile_repository")

    def upsert_profile(self, profile: Profile) -> None:
        try:
            with self.db.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO profiles (id, tier, created_at, updated_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        tier = excluded.tier,
                        updated_at = excluded.updated_at
                """,
                    (
                        profile.id,
                        profile.tier.value,
                        profile.created_at,
                        profile.updated_at,
                    ),
                )

        except sqlite3.Error as e:
            raise PersistenceError(
                f"Failed to upsert profile {profile.id}: {e}", record_id=profile.id
            ) from e

    def get_profile(self, profile_id: str) -> Optional[Profile]:
        """Get a profile by id.

        Raises:
            DatabaseError: If the lookup itself fails
        """
        try:
            with self.db.get_connection() as conn:
                row = conn.execute(
                    "SELECT * FROM profiles WHERE id = ?", (profile_id,)
                ).fetchone()
                return Profile(**dict(row)) if row else None

        except sqlite3.Error as e:
            raise DatabaseError(
                f"Failed to get profile {profile_id}: {e}",
                error_code=ErrorCode.DATABASE_ERROR,
            ) from e

    def get_eligible_profiles(self, created_after: int, limit: int) -> List[Profile]:
        """Get profiles the scheduler refreshes.

        Premium profiles are always eligible; free profiles only when they
        were created after ``created_after``.

        Args:
            created_after: Unix timestamp marking the start of the trial window
            limit: Maximum number of profiles

        Returns:
            Eligible profiles, oldest first
        """
        try:
            with self.db.get_connection() as conn:
                rows = conn.execute(
                    """
                    SELECT * FROM profiles
                    WHERE tier = ? OR created_at > ?
                    ORDER BY created_at, id
                    LIMIT ?
                """,
                    (ProfileTier.PREMIUM.value, created_after, limit),
                ).fetchall()
                return [Profile(**dict(row)) for row in rows]

        except sqlite3.Error as e:
            raise DatabaseError(
                f"Failed to get eligible profiles: {e}",
                error_code=ErrorCode.DATABASE_ERROR,
            ) from e


class ColumnRepository:
    """Repository for managing columns in the database."""

    def __init__(self, db_connection: DatabaseConnection):
        self.db = db_connection
        self.logger = get_logger_for_component("column_repository")

    def upsert_column(self, column: Column) -> None:
        try:
            with self.db.transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO columns (id, user_id, name, position)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        name = excluded.name,
                        position = excluded.position
                """,
                    (column.id, column.user_id, column.name, column.position),
                )

        except sqlite3.Error as e:
            raise PersistenceError(
                f"Failed to upsert column {column.id}: {e}", record_id=column.id
            ) from e

    def get_column(self, column_id: str) -> Optional[Column]:
        try:
            with self.db.get_connection() as conn:
                row = conn.execute(
                    "SELECT * FROM columns WHERE id = ?", (column_id,)
                ).fetchone()
                return Column(**dict(row)) if row else None

        except sqlite3.Error as e:
            raise DatabaseError(
                f"Failed to get column {column_id}: {e}",
                error_code=ErrorCode.DATABASE_ERROR,
            ) from e

    def is_owner(self, column_id: str, user_id: str) -> bool:
        """Check whether ``user_id`` owns ``column_id``."""
        column = self.get_column(column_id)
        return column is not None and column.user_id == user_id
