"""
PyTest Configuration and Fixtures
=================================

Shared fixtures and configuration for FeedDeck tests.

Databases are SQLite files under ``tmp_path``: every pooled connection to
``:memory:`` would open its own empty database.
"""

import os
import sys
from email.utils import formatdate
from pathlib import Path
from xml.sax.saxutils import escape

import pytest

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before any imports
os.environ["FEEDDECK_DEBUG"] = "true"
os.environ["FEEDDECK_LOGGING__CONSOLE_LOGGING"] = "false"

# Fixed clock used across tests (2023-11-14T22:13:20Z)
NOW = 1_700_000_000
HOUR = 60 * 60
DAY = 24 * HOUR


# ============================================================================
# Settings and Database Fixtures
# ============================================================================


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a temporary database with scheduler secrets set."""
    from feeddeck.config.settings import (
        FeedDeckSettings,
        AuthSettings,
        DatabaseSettings,
        LoggingSettings,
    )

    return FeedDeckSettings(
        database=DatabaseSettings(path=str(tmp_path / "feeddeck_test.db"), pool_size=2),
        auth=AuthSettings(cron_secret="test-cron-secret", service_role_key="test-service-key"),
        logging=LoggingSettings(file_path=None, console_logging=False),
    )


@pytest.fixture
def test_database(settings):
    """Create the schema in the temporary database file."""
    from feeddeck.database.schema import DatabaseSchema

    schema = DatabaseSchema(settings.database.path)
    schema.create_tables()
    return settings.database.path


@pytest.fixture
def db_connection(test_database):
    """Create a database connection manager for testing."""
    from feeddeck.database.connection import DatabaseConnection

    connection = DatabaseConnection(test_database, pool_size=2)
    yield connection

    connection.close_all_connections()


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def make_profile(db_connection):
    """Insert a profile; ``created_at`` defaults to long before ``NOW``."""
    from feeddeck.database.models import Profile, ProfileTier
    from feeddeck.storage import ProfileRepository

    repo = ProfileRepository(db_connection)

    def _make(profile_id, tier=ProfileTier.FREE, created_at=NOW - 100 * DAY):
        profile = Profile(id=profile_id, tier=tier, created_at=created_at, updated_at=created_at)
        repo.upsert_profile(profile)
        return profile

    return _make


@pytest.fixture
def make_column(db_connection):
    from feeddeck.database.models import Column
    from feeddeck.storage import ColumnRepository

    repo = ColumnRepository(db_connection)

    def _make(column_id, user_id, name="Column"):
        column = Column(id=column_id, user_id=user_id, name=name)
        repo.upsert_column(column)
        return column

    return _make


@pytest.fixture
def make_source(db_connection):
    """Insert an already resolved source whose option is its feed URL."""
    from feeddeck.database.models import Source, SourceOptions, SourceType
    from feeddeck.ingestion.identity import generate_source_id
    from feeddeck.storage import SourceRepository

    repo = SourceRepository(db_connection)

    def _make(source_type, url, user_id, column_id, updated_at=NOW - 2 * HOUR, title=""):
        source_type = SourceType(source_type)
        options = SourceOptions()
        setattr(options, source_type.value, url)
        source = Source(
            id=generate_source_id(source_type.value, user_id, column_id, url),
            user_id=user_id,
            column_id=column_id,
            type=source_type,
            title=title or f"{source_type.value} source",
            options=options,
            created_at=NOW - 30 * DAY,
            updated_at=updated_at,
        )
        repo.upsert_source(source)
        return source

    return _make


# ============================================================================
# Feed Document Fixtures
# ============================================================================


def _rss_item(entry):
    parts = ["<item>"]
    if entry.get("title") is not None:
        parts.append(f"<title>{escape(entry['title'])}</title>")
    if entry.get("link"):
        parts.append(f"<link>{escape(entry['link'])}</link>")
    if entry.get("guid"):
        parts.append(f'<guid isPermaLink="false">{escape(entry["guid"])}</guid>')
    if entry.get("published") is not None:
        parts.append(f"<pubDate>{formatdate(entry['published'], usegmt=True)}</pubDate>")
    if entry.get("description"):
        parts.append(f"<description>{escape(entry['description'])}</description>")
    if entry.get("author"):
        parts.append(f"<dc:creator>{escape(entry['author'])}</dc:creator>")
    parts.append(entry.get("extra", ""))
    parts.append("</item>")
    return "".join(parts)


def build_rss(title="Example Feed", link="https://example.com/", entries=(), channel_extra=""):
    """Build an RSS 2.0 document.

    ``entries`` are dicts with optional ``title``, ``link``, ``guid``,
    ``published`` (unix seconds), ``description``, ``author`` and raw
    ``extra`` XML.
    """
    title_xml = f"<title>{escape(title)}</title>" if title else ""
    items = "".join(_rss_item(entry) for entry in entries)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/" '
        'xmlns:media="http://search.yahoo.com/mrss/" '
        'xmlns:content="http://purl.org/rss/1.0/modules/content/">'
        f"<channel>{title_xml}<link>{escape(link)}</link>"
        f"<description>Test feed</description>{channel_extra}{items}"
        "</channel></rss>"
    )


@pytest.fixture
def rss_feed():
    """Builder for RSS 2.0 documents, see ``build_rss``."""
    return build_rss


@pytest.fixture
def recent_entries():
    """Three entries published within the last hour before ``NOW``."""
    return [
        {
            "title": f"Post {i}",
            "link": f"https://example.com/posts/{i}",
            "guid": f"post-{i}",
            "published": NOW - (i + 1) * 600,
            "description": f"Body of post {i}",
        }
        for i in range(3)
    ]
