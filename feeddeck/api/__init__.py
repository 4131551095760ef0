"""
FeedDeck API Entry Points
=========================

Handlers for the manual (per column) and scheduled refresh requests.
"""

from .handlers import HandlerResponse, handle_manual_refresh, handle_scheduled_refresh

__all__ = [
    "HandlerResponse",
    "handle_manual_refresh",
    "handle_scheduled_refresh",
]
