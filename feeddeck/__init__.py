"""
FeedDeck - Feed Ingestion Core
==============================

Ingests platform specific RSS/Atom feeds and normalizes them into one
deduplicated item stream.

Main Components:
- Database: SQLite with connection pooling and schema management
- Configuration: environment variables with Pydantic validation
- Ingestion: content-addressed ids, entry admission, fetching and parsing
- Feeds: one adapter per platform resolving and normalizing sources
- Refresh: manual (per column) and scheduled (per profile batch) runs
"""

__version__ = "1.0.0"
__author__ = "FeedDeck Development Team"
__description__ = "Feed ingestion and normalization core"

# Core imports for easy access
from .config.settings import get_settings
from .database.connection import get_db_manager
from .database.schema import DatabaseSchema
from .utils.logging import configure_application_logging, get_logger_for_component
from .utils.exceptions import FeedDeckError

__all__ = [
    "get_settings",
    "get_db_manager",
    "DatabaseSchema",
    "configure_application_logging",
    "get_logger_for_component",
    "FeedDeckError",
]
