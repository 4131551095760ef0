"""
Feed Adapter Base
=================

Every platform adapter resolves a source's options into a canonical feed URL
and normalizes a parsed feed document into the updated source and its items.
The steps shared by all platforms live here; subclasses implement the URL
rules and override the per-entry extraction hooks.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from ..config.settings import get_settings
from ..database.models import Source, Item, SourceType
from ..ingestion.entry_filter import (
    FeedParserConfig,
    should_skip_entry,
    get_entry_timestamp,
    log_skipped_entry,
    to_unix_seconds,
)
from ..ingestion.feed_document import FeedDocument, FeedEntry
from ..ingestion.http_client import HttpClient
from ..ingestion.identity import generate_source_id, generate_item_id
from ..ingestion.content_cleaner import unescape_html
from ..utils.exceptions import FeedDeckError, ParseError
from ..utils.logging import get_logger_for_component
from ..utils.validators import URLValidator


class FeedAdapter(ABC):
    """Resolver and normalizer for one platform type."""

    source_type: SourceType

    # Entries must carry a published date; updated/Dublin Core dates are not
    # accepted as the item's publication time.
    requires_published: bool = False

    def __init__(
        self,
        http_client: Optional[HttpClient] = None,
        settings=None,
        config: Optional[FeedParserConfig] = None,
    ):
        """Initialize adapter.

        Args:
            http_client: Client for secondary lookups (channel pages, icons)
            settings: Application settings (default: global settings)
            config: Entry admission limits (default: from settings)
        """
        self.settings = settings or get_settings()
        self.http = http_client or HttpClient(self.settings)
        self.config = config or FeedParserConfig.from_settings(self.settings)
        self.logger = get_logger_for_component(f"feeds.{self.source_type.value}")

    # Source resolution

    @property
    def option_name(self) -> str:
        return self.source_type.value

    def resolve(self, source: Source) -> Source:
        """Validate the source options and canonicalize its feed URL.

        Returns:
            A copy of ``source`` whose options hold the canonical feed URL

        Raises:
            ValidationError: If the options are missing or malformed
        """
        resolved = source.model_copy(deep=True)
        url = self.canonical_url(resolved)
        url = URLValidator.validate_feed_url(url, field_name=self.option_name)
        self.set_feed_url(resolved, url)
        return resolved

    @abstractmethod
    def canonical_url(self, source: Source) -> str:
        """Build the canonical feed URL from the source options."""

    def feed_url(self, source: Source) -> str:
        return getattr(source.options, self.option_name) or ""

    def set_feed_url(self, source: Source, url: str) -> None:
        setattr(source.options, self.option_name, url)

    def resolve_icon(self, source: Source, document: FeedDocument) -> Optional[str]:
        """Look up an icon for a newly created source."""
        return None

    def _try_resolve_icon(
        self, source: Source, document: FeedDocument
    ) -> Optional[str]:
        try:
            return self.resolve_icon(source, document)
        except FeedDeckError as e:
            self.logger.warning(
                f"Icon lookup failed, continuing without icon: {e}",
                extra={"source_id": source.id, "error": str(e)},
            )
            return None

    # Normalization

    def normalize(
        self, source: Source, document: FeedDocument
    ) -> Tuple[Source, List[Item]]:
        """Turn a parsed feed into the updated source and its new items.

        The input source is never modified.

        Raises:
            ParseError: If the feed has no title
        """
        feed_url = self.feed_url(source)

        if not document.title:
            raise ParseError("Invalid feed", feed_url=feed_url)

        updated = source.model_copy(deep=True)
        is_new = not updated.id

        if is_new:
            updated.id = generate_source_id(
                self.source_type.value, updated.user_id, updated.column_id, feed_url
            )
        updated.type = self.source_type
        updated.title = document.title
        if document.link:
            updated.link = document.link

        if is_new and not updated.icon:
            updated.icon = self._try_resolve_icon(updated, document)

        items = []
        for index, entry in enumerate(document.entries):
            if should_skip_entry(index, entry, source.updated_at or 0, self.config):
                continue

            item = self.build_item(updated, document, entry, index)
            if item is not None:
                items.append(item)

        self.logger.debug(
            f"Normalized {len(items)} of {len(document.entries)} entries",
            extra={"source_id": updated.id, "items_count": len(items)},
        )
        return updated, items

    def build_item(
        self, source: Source, document: FeedDocument, entry: FeedEntry, index: int
    ) -> Optional[Item]:
        """Build the item for an admitted entry, or None if it must be skipped."""
        if not entry.title:
            log_skipped_entry("Missing title", entry, index, source_id=source.id)
            return None

        published_at = self.published_at(entry)
        if published_at is None:
            log_skipped_entry(
                "Missing published date", entry, index, source_id=source.id
            )
            return None

        identifier = entry.id or entry.link
        if not identifier:
            log_skipped_entry("Missing ID and link", entry, index, source_id=source.id)
            return None

        return Item(
            id=generate_item_id(source.id, identifier),
            user_id=source.user_id,
            column_id=source.column_id,
            source_id=source.id,
            title=entry.title,
            link=entry.link,
            media=self.extract_media(entry),
            description=self.extract_description(entry),
            author=self.extract_author(entry, document),
            published_at=published_at,
        )

    def published_at(self, entry: FeedEntry) -> Optional[int]:
        if self.requires_published:
            if entry.published is None:
                return None
            return to_unix_seconds(entry.published)
        return get_entry_timestamp(entry)

    # Extraction hooks

    def extract_description(self, entry: FeedEntry) -> Optional[str]:
        return unescape_html(entry.content or entry.description)

    def extract_media(self, entry: FeedEntry) -> Optional[str]:
        return None

    def extract_author(
        self, entry: FeedEntry, document: FeedDocument
    ) -> Optional[str]:
        return entry.author
