"""
Stack Overflow Adapter
======================

Tag feeds built from a tag name and sort order, or any Stack Exchange feed
URL given directly.
"""

from typing import Optional
from urllib.parse import quote

from .base import FeedAdapter
from ..database.models import Source, SourceType, StackoverflowOptions
from ..ingestion.content_cleaner import unescape_html
from ..ingestion.feed_document import FeedDocument, FeedEntry
from ..utils.exceptions import ValidationError, ErrorCode
from ..utils.validators import require_option


class StackoverflowAdapter(FeedAdapter):
    """Adapter for Stack Overflow tag and question feeds."""

    source_type = SourceType.STACKOVERFLOW
    requires_published = True

    def _options(self, source: Source) -> StackoverflowOptions:
        options = source.options.stackoverflow
        if options is None or not options.type:
            raise ValidationError(
                "Invalid source options",
                error_code=ErrorCode.VALIDATION_REQUIRED_FIELD,
                field_name="stackoverflow.type",
            )
        return options

    def canonical_url(self, source: Source) -> str:
        options = self._options(source)

        if options.type == "tag":
            tag = require_option(options.tag, "stackoverflow.tag")
            sort = options.sort or "newest"
            return f"https://stackoverflow.com/feeds/tag?tagnames={quote(tag)}&sort={sort}"

        return require_option(options.url, "stackoverflow.url")

    def feed_url(self, source: Source) -> str:
        options = source.options.stackoverflow
        return (options.url if options else None) or ""

    def set_feed_url(self, source: Source, url: str) -> None:
        source.options.stackoverflow.url = url

    def extract_description(self, entry: FeedEntry) -> Optional[str]:
        return unescape_html(entry.description)

    def extract_author(self, entry: FeedEntry, document: FeedDocument) -> Optional[str]:
        return None
