"""
FeedDeck Ingestion Module
=========================

Feed ingestion building blocks shared by every platform adapter.

This module handles:
- Content-addressed ids for sources and items
- Entry admission (item limit, link requirement, time buffer)
- Feed fetching over HTTP and parsing into typed documents
- HTML cleanup for descriptions, media and icons
"""
