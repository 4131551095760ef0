"""
Tumblr Adapter
==============

A bare blog name maps to ``https://<name>.tumblr.com/rss``.
"""

from typing import Optional

from .base import FeedAdapter
from ..database.models import Source, SourceType
from ..ingestion.content_cleaner import first_image_src
from ..ingestion.feed_document import FeedEntry
from ..utils.validators import URLValidator, require_option


class TumblrAdapter(FeedAdapter):
    """Adapter for Tumblr blogs."""

    source_type = SourceType.TUMBLR

    def canonical_url(self, source: Source) -> str:
        value = require_option(source.options.tumblr, "tumblr")

        if "://" not in value and "." not in value and "/" not in value:
            return f"https://{value}.tumblr.com/rss"

        if URLValidator.hostname_matches(value, "tumblr.com"):
            value = value.rstrip("/")
            if not value.endswith("/rss"):
                return f"{value}/rss"

        return value

    def extract_media(self, entry: FeedEntry) -> Optional[str]:
        return first_image_src(entry.description)
