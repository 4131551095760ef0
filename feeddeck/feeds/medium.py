"""
Medium Adapter
==============

``@user`` and ``#tag`` shorthands, and medium.com URLs which get the
``/feed`` path inserted after the host.
"""

from typing import Optional
from urllib.parse import urlparse

from .base import FeedAdapter
from ..database.models import Source, SourceType
from ..ingestion.content_cleaner import first_image_src
from ..ingestion.feed_document import FeedEntry
from ..utils.validators import URLValidator, require_option


class MediumAdapter(FeedAdapter):
    """Adapter for Medium users, tags and publications."""

    source_type = SourceType.MEDIUM

    def canonical_url(self, source: Source) -> str:
        value = require_option(source.options.medium, "medium")

        if value.startswith("@"):
            return f"https://medium.com/feed/{value}"
        if value.startswith("#"):
            return f"https://medium.com/feed/tag/{value[1:]}"

        if URLValidator.hostname_matches(value, "medium.com"):
            parsed = urlparse(value)
            if not parsed.path.startswith("/feed"):
                return f"{parsed.scheme}://{parsed.netloc}/feed{parsed.path}".rstrip("/")

        return value

    def extract_media(self, entry: FeedEntry) -> Optional[str]:
        return first_image_src(entry.content or entry.description)
