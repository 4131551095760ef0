"""
Podcast Adapter
===============

Podcast RSS feeds with iTunes extensions. Items link to the episode page and
carry the audio enclosure as their media.
"""

from typing import Optional

from .base import FeedAdapter
from ..database.models import Source, SourceType
from ..ingestion.content_cleaner import unescape_html
from ..ingestion.feed_document import FeedDocument, FeedEntry, MediaRss, PodcastInfo
from ..utils.validators import require_option


class PodcastAdapter(FeedAdapter):
    """Adapter for podcast feeds."""

    source_type = SourceType.PODCAST

    def canonical_url(self, source: Source) -> str:
        return require_option(source.options.podcast, "podcast")

    def resolve_icon(self, source: Source, document: FeedDocument) -> Optional[str]:
        return PodcastInfo.from_document(document).image

    def extract_description(self, entry: FeedEntry) -> Optional[str]:
        return unescape_html(entry.description)

    def extract_media(self, entry: FeedEntry) -> Optional[str]:
        return MediaRss.from_entry(entry).audio_enclosure

    def extract_author(self, entry: FeedEntry, document: FeedDocument) -> Optional[str]:
        return entry.author or PodcastInfo.from_document(document).author
