"""
FeedDeck Processing Module
==========================

The per-source refresh pipeline and the result types shared by the manual
and scheduled refresh runs.
"""

from .pipeline import (
    RefreshPipeline,
    SourceRefreshResult,
    RefreshError,
    RefreshSummary,
)

__all__ = [
    'RefreshPipeline',
    'SourceRefreshResult',
    'RefreshError',
    'RefreshSummary',
]
