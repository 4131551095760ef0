"""
Google News Adapter
===================

Either a news.google.com page (topic, section, publication) rewritten to its
``/rss`` form, or a search query with language and edition parameters.
"""

from typing import Optional
from urllib.parse import urlencode, urlparse

from .base import FeedAdapter
from ..database.models import Source, SourceType, GoogleNewsOptions
from ..ingestion.feed_document import FeedDocument, FeedEntry, GoogleNewsSource
from ..utils.exceptions import ValidationError, ErrorCode
from ..utils.validators import URLValidator, require_option

GOOGLE_NEWS_HOST = "news.google.com"

DEFAULT_HL = "en-US"
DEFAULT_GL = "US"
DEFAULT_CEID = "US:en"


class GoogleNewsAdapter(FeedAdapter):
    """Adapter for Google News pages and searches."""

    source_type = SourceType.GOOGLENEWS

    def _options(self, source: Source) -> GoogleNewsOptions:
        options = source.options.googlenews
        if options is None or options.type not in ("url", "search"):
            raise ValidationError(
                "Invalid source options",
                error_code=ErrorCode.VALIDATION_REQUIRED_FIELD,
                field_name="googlenews.type",
            )
        return options

    def canonical_url(self, source: Source) -> str:
        options = self._options(source)

        if options.type == "search":
            query = urlencode(
                {
                    "q": require_option(options.search, "googlenews.search"),
                    "hl": options.hl or DEFAULT_HL,
                    "gl": options.gl or DEFAULT_GL,
                    "ceid": options.ceid or DEFAULT_CEID,
                }
            )
            return f"https://{GOOGLE_NEWS_HOST}/rss/search?{query}"

        url = require_option(options.url, "googlenews.url")
        if not URLValidator.hostname_matches(url, GOOGLE_NEWS_HOST):
            raise ValidationError("Invalid source options", field_name="googlenews.url")

        parsed = urlparse(url)
        if parsed.path.startswith("/rss"):
            return url

        rss_url = f"https://{GOOGLE_NEWS_HOST}/rss{parsed.path}"
        return f"{rss_url}?{parsed.query}" if parsed.query else rss_url

    def feed_url(self, source: Source) -> str:
        options = source.options.googlenews
        return (options.url if options else None) or ""

    def set_feed_url(self, source: Source, url: str) -> None:
        source.options.googlenews.url = url

    def extract_description(self, entry: FeedEntry) -> Optional[str]:
        # Descriptions are lists of related links
        return None

    def extract_author(self, entry: FeedEntry, document: FeedDocument) -> Optional[str]:
        return GoogleNewsSource.from_entry(entry).title
