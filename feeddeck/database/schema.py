"""
FeedDeck Database Schema
========================

SQLite database schema with foreign key constraints and indexes for the
refresh queries.

Tables:
- profiles: accounts and their service tier
- columns: user groupings of sources
- sources: configured feed subscriptions, keyed by content-addressed id
- items: normalized entries, keyed by content-addressed id
"""

import sqlite3
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class DatabaseSchema:
    """Database schema manager for the FeedDeck SQLite database."""

    EXPECTED_TABLES = {"profiles", "columns", "sources", "items"}

    def __init__(self, db_path: str = "data/feeddeck.db"):
        """Initialize database schema manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables with proper schema."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("PRAGMA foreign_keys = ON")

            # Create tables in dependency order
            self._create_profiles_table(conn)
            self._create_columns_table(conn)
            self._create_sources_table(conn)
            self._create_items_table(conn)

            self._create_indexes(conn)

            conn.commit()
            logger.info("Database schema created successfully")

    def _create_profiles_table(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS profiles (
                id TEXT PRIMARY KEY,
                tier TEXT NOT NULL DEFAULT 'free' CHECK (tier IN ('free', 'premium')),
                created_at INTEGER NOT NULL DEFAULT 0,
                updated_at INTEGER NOT NULL DEFAULT 0
            )
        """
        )

    def _create_columns_table(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS columns (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                name TEXT NOT NULL DEFAULT '',
                position INTEGER NOT NULL DEFAULT 0,
                FOREIGN KEY (user_id) REFERENCES profiles(id) ON DELETE CASCADE
            )
        """
        )

    def _create_sources_table(self, conn: sqlite3.Connection) -> None:
        """Create sources table; ``options`` holds the type specific JSON config."""
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS sources (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                column_id TEXT NOT NULL,
                type TEXT NOT NULL,
                title TEXT NOT NULL DEFAULT '',
                link TEXT NOT NULL DEFAULT '',
                icon TEXT,
                options TEXT NOT NULL DEFAULT '{}',
                created_at INTEGER NOT NULL DEFAULT 0,
                updated_at INTEGER NOT NULL DEFAULT 0,
                FOREIGN KEY (user_id) REFERENCES profiles(id) ON DELETE CASCADE,
                FOREIGN KEY (column_id) REFERENCES columns(id) ON DELETE CASCADE
            )
        """
        )

    def _create_items_table(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS items (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                column_id TEXT NOT NULL,
                source_id TEXT NOT NULL,
                title TEXT NOT NULL,
                link TEXT NOT NULL,
                media TEXT,
                description TEXT,
                author TEXT,
                published_at INTEGER NOT NULL,
                FOREIGN KEY (source_id) REFERENCES sources(id) ON DELETE CASCADE
            )
        """
        )

    def _create_indexes(self, conn: sqlite3.Connection) -> None:
        """Create database indexes for the refresh selection queries."""
        indexes = [
            "CREATE INDEX IF NOT EXISTS idx_profiles_tier_created ON profiles(tier, created_at)",
            "CREATE INDEX IF NOT EXISTS idx_columns_user ON columns(user_id)",
            "CREATE INDEX IF NOT EXISTS idx_sources_user_updated ON sources(user_id, updated_at)",
            "CREATE INDEX IF NOT EXISTS idx_sources_column ON sources(column_id, user_id)",
            "CREATE INDEX IF NOT EXISTS idx_items_source_published ON items(source_id, published_at)",
            "CREATE INDEX IF NOT EXISTS idx_items_column_published ON items(column_id, published_at)",
        ]

        for index_sql in indexes:
            conn.execute(index_sql)

    def drop_tables(self) -> None:
        """Drop all tables (for testing/reset purposes)."""
        with sqlite3.connect(self.db_path) as conn:
            for table in ["items", "sources", "columns", "profiles"]:
                conn.execute(f"DROP TABLE IF EXISTS {table}")

            conn.commit()
            logger.info("All database tables dropped")

    def get_connection(self) -> sqlite3.Connection:
        """Get database connection with foreign keys enabled."""
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON")
        conn.row_factory = sqlite3.Row
        return conn

    def verify_schema(self) -> bool:
        """Verify database schema is correctly created."""
        try:
            with self.get_connection() as conn:
                cursor = conn.execute(
                    """
                    SELECT name FROM sqlite_master
                    WHERE type='table' AND name NOT LIKE 'sqlite_%'
                    ORDER BY name
                """
                )

                tables = {row[0] for row in cursor.fetchall()}

                if not self.EXPECTED_TABLES.issubset(tables):
                    logger.error(
                        f"Missing tables. Expected: {self.EXPECTED_TABLES}, Found: {tables}"
                    )
                    return False

                conn.execute("PRAGMA foreign_key_check")

                logger.info("Database schema verification passed")
                return True

        except sqlite3.Error as e:
            logger.error(f"Schema verification failed: {e}")
            return False


def create_tables(db_path: str = "data/feeddeck.db") -> None:
    """Convenience function to create database tables."""
    schema = DatabaseSchema(db_path)
    schema.create_tables()
