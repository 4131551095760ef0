"""
YouTube Adapter
===============

Resolves channel URLs to the channel's ``feeds/videos.xml`` feed. Channel
URLs that do not carry the channel id (handles, custom URLs) are resolved by
fetching the channel page and extracting the feed reference embedded in it.
"""

import re
from typing import Optional
from urllib.parse import urlencode

from .base import FeedAdapter
from ..database.models import Source, SourceType
from ..ingestion.content_cleaner import unescape_html
from ..ingestion.feed_document import FeedDocument, FeedEntry, YoutubeMedia
from ..utils.exceptions import FetchError, ValidationError, ErrorCode
from ..utils.validators import require_option

FEED_PREFIX = "https://www.youtube.com/feeds/videos.xml?channel_id="
CHANNEL_PREFIXES = (
    "https://www.youtube.com/channel/",
    "https://m.youtube.com/channel/",
)
YOUTUBE_PREFIXES = (
    "https://www.youtube.com/",
    "https://m.youtube.com/",
    "https://youtube.com/",
)
CHANNEL_API_URL = "https://www.googleapis.com/youtube/v3/channels"

FEED_REFERENCE_PATTERN = re.compile(
    r'"https://www\.youtube\.com/feeds/videos\.xml\?channel_id=(.*?)"'
)


def is_youtube_url(url: str) -> bool:
    return url.startswith(YOUTUBE_PREFIXES)


class YoutubeAdapter(FeedAdapter):
    """Adapter for YouTube channels."""

    source_type = SourceType.YOUTUBE
    requires_published = True

    def canonical_url(self, source: Source) -> str:
        url = require_option(source.options.youtube, "youtube")

        # Mobile channel URLs share the www feed
        for prefix in CHANNEL_PREFIXES:
            if url.startswith(prefix):
                channel_id = url.split("?")[0][len(prefix):]
                return f"{FEED_PREFIX}{channel_id}"

        if url.startswith(FEED_PREFIX):
            return url

        if is_youtube_url(url):
            return f"{FEED_PREFIX}{self.lookup_channel_id(url)}"

        raise ValidationError(
            "Invalid source options",
            error_code=ErrorCode.VALIDATION_INVALID_FORMAT,
            field_name="youtube",
        )

    def lookup_channel_id(self, url: str) -> str:
        """Extract the channel id from the feed reference on a channel page.

        Raises:
            ValidationError: If the page cannot be loaded or has no reference
        """
        try:
            html = self.http.get_text(url)
        except FetchError as e:
            self.logger.debug(
                f"Failed to get YouTube channel page: {e}", extra={"url": url}
            )
            raise ValidationError(
                "Invalid source options", field_name="youtube"
            ) from e

        match = FEED_REFERENCE_PATTERN.search(html)
        if not match or not match.group(1):
            raise ValidationError("Invalid source options", field_name="youtube")
        return match.group(1)

    def resolve_icon(self, source: Source, document: FeedDocument) -> Optional[str]:
        """Get the channel thumbnail from the YouTube Data API.

        Needs ``sources.youtube_api_key``; without it sources get no icon.
        """
        api_key = self.settings.sources.youtube_api_key
        if not api_key:
            return None

        channel_id = self.feed_url(source).replace(FEED_PREFIX, "")
        query = urlencode(
            {"id": channel_id, "part": "id,snippet", "maxResults": 1, "key": api_key}
        )
        data = self.http.get_json(f"{CHANNEL_API_URL}?{query}")

        try:
            items = data.get("items") or []
            if len(items) != 1:
                return None
            return items[0]["snippet"]["thumbnails"]["default"]["url"] or None
        except (AttributeError, KeyError, TypeError):
            self.logger.debug(
                "Unexpected YouTube API response", extra={"channel_id": channel_id}
            )
            return None

    def extract_description(self, entry: FeedEntry) -> Optional[str]:
        return unescape_html(YoutubeMedia.from_entry(entry).description)

    def extract_media(self, entry: FeedEntry) -> Optional[str]:
        return YoutubeMedia.from_entry(entry).thumbnail

    def extract_author(self, entry: FeedEntry, document: FeedDocument) -> Optional[str]:
        return document.author
