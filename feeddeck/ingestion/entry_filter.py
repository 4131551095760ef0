"""
Entry Admission Policy
======================

Decides which feed entries are ingested during a refresh. Entries are
examined in document order; the index passed in is the entry's position in
that order and is never re-sorted here.

Decision order, first match wins:
1. ``index >= max_items``: skip
2. no first link with an href: skip
3. timestamp known and ``timestamp <= source_updated_at - time_buffer``: skip
4. keep
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, List, Optional, Union

from .feed_document import FeedEntry, DublinCoreDate
from ..utils.logging import get_logger_for_component

logger = get_logger_for_component("entry_filter")


@dataclass(frozen=True)
class FeedParserConfig:
    """Entry admission limits.

    Attributes:
        max_items: Entries considered per refresh; later entries are skipped
        time_buffer: Seconds of tolerance when comparing an entry's date
            with the source's last refresh
    """

    max_items: int = 50
    time_buffer: int = 10

    @classmethod
    def from_settings(cls, settings) -> "FeedParserConfig":
        return cls(
            max_items=settings.refresh.max_items,
            time_buffer=settings.refresh.time_buffer,
        )


def to_unix_seconds(value: datetime) -> int:
    """Floor a datetime to unix seconds; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return math.floor(value.timestamp())


def get_dc_date_timestamp(value: Union[datetime, DublinCoreDate, None]) -> Optional[int]:
    """Floor a Dublin Core date, bare or wrapped, to unix seconds."""
    if isinstance(value, DublinCoreDate):
        value = value.value
    if isinstance(value, datetime):
        return to_unix_seconds(value)
    return None


def get_entry_timestamp(entry: FeedEntry) -> Optional[int]:
    """Get the entry's date in unix seconds.

    Precedence: published, updated, Dublin Core date. Returns None when the
    entry carries none of them.
    """
    if entry.published is not None:
        return to_unix_seconds(entry.published)
    if entry.updated is not None:
        return to_unix_seconds(entry.updated)
    return get_dc_date_timestamp(entry.dc_date)


def has_required_fields(entry: FeedEntry) -> bool:
    """Check that the entry has a first link with a non-empty href."""
    return entry.link is not None


def should_skip_entry(
    index: int,
    entry: FeedEntry,
    source_updated_at: int,
    config: Optional[FeedParserConfig] = None,
) -> bool:
    """Decide whether an entry is left out of this refresh.

    Args:
        index: Zero-based position of the entry in the document
        entry: Parsed entry
        source_updated_at: Unix time of the source's last successful refresh
        config: Admission limits, defaults to ``FeedParserConfig()``

    Returns:
        True if the entry must be skipped
    """
    config = config or FeedParserConfig()

    if index >= config.max_items:
        return True

    if not has_required_fields(entry):
        return True

    timestamp = get_entry_timestamp(entry)
    if timestamp is not None and timestamp <= source_updated_at - config.time_buffer:
        return True

    return False


def validate_required_feed_fields(entry: Any, paths: List[str]) -> bool:
    """Check that every dotted attribute path resolves to a truthy value.

    ``validate_required_feed_fields(entry, ["title", "links.0.href"])``
    """
    for path in paths:
        value = entry
        for part in path.split("."):
            if value is None:
                break
            if part.isdigit():
                position = int(part)
                value = value[position] if len(value) > position else None
            else:
                value = getattr(value, part, None)
        if not value:
            return False
    return True


def log_skipped_entry(reason: str, entry: FeedEntry, index: int, **context) -> None:
    logger.debug(
        f"Skipping entry {index}: {reason}",
        extra={"entry_id": entry.id, "entry_link": entry.link, **context},
    )
