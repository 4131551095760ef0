"""
FeedDeck Services
=================

Shared service layer used across different interfaces (CLI, API handlers).
"""

from .manual_refresh_service import ManualRefreshService, ColumnRefreshResult

__all__ = [
    'ManualRefreshService',
    'ColumnRefreshResult',
]
