"""
Mastodon Adapter
================

Accounts given as ``@user@instance`` or as a profile URL; both map to the
profile's ``.rss`` feed.
"""

from typing import Optional

from .base import FeedAdapter
from ..database.models import Source, SourceType
from ..ingestion.content_cleaner import unescape_html
from ..ingestion.feed_document import FeedEntry, MediaRss
from ..utils.exceptions import ValidationError
from ..utils.validators import require_option


class MastodonAdapter(FeedAdapter):
    """Adapter for Mastodon accounts."""

    source_type = SourceType.MASTODON

    def canonical_url(self, source: Source) -> str:
        value = require_option(source.options.mastodon, "mastodon")

        if value.startswith("@"):
            parts = value[1:].split("@")
            if len(parts) != 2 or not all(parts):
                raise ValidationError("Invalid source options", field_name="mastodon")
            user, instance = parts
            return f"https://{instance}/@{user}.rss"

        value = value.rstrip("/")
        if not value.endswith(".rss"):
            return f"{value}.rss"
        return value

    def extract_description(self, entry: FeedEntry) -> Optional[str]:
        return unescape_html(entry.description)

    def extract_media(self, entry: FeedEntry) -> Optional[str]:
        return MediaRss.from_entry(entry).image_content
