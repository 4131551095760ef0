"""
RSS Adapter
===========

Generic RSS/Atom/RDF feeds given by URL.
"""

from typing import Optional

from .base import FeedAdapter
from ..database.models import Source, SourceType
from ..ingestion.content_cleaner import find_favicon, first_image_src
from ..ingestion.feed_document import FeedDocument, FeedEntry, MediaRss
from ..utils.validators import require_option


class RssAdapter(FeedAdapter):
    """Adapter for plain RSS and Atom feeds."""

    source_type = SourceType.RSS

    def canonical_url(self, source: Source) -> str:
        return require_option(source.options.rss, "rss")

    def resolve_icon(self, source: Source, document: FeedDocument) -> Optional[str]:
        """Use the feed image, else the icon declared by the feed's website."""
        if document.image:
            return document.image

        site = document.link or self.feed_url(source)
        return find_favicon(self.http.get_text(site), site)

    def extract_media(self, entry: FeedEntry) -> Optional[str]:
        image = MediaRss.from_entry(entry).image
        if image:
            return image
        return first_image_src(entry.content or entry.description)
