"""
FeedDeck Storage Layer
======================

Repository pattern implementations for data access abstraction.

This module provides:
- Source repository for idempotent source upserts and refresh selection
- Item repository for batch item upserts
- Profile and column repositories for eligibility and ownership checks
"""

from .source_repository import SourceRepository
from .item_repository import ItemRepository
from .profile_repository import ProfileRepository, ColumnRepository

__all__ = [
    "SourceRepository",
    "ItemRepository",
    "ProfileRepository",
    "ColumnRepository",
]
