"""
Reddit Adapter
==============

Subreddit and user feeds. ``/r/<name>`` and ``/u/<name>`` shorthands expand to
``https://www.reddit.com/<path>.rss``.
"""

from typing import Optional

from .base import FeedAdapter
from ..database.models import Source, SourceType
from ..ingestion.content_cleaner import strip_tags, unescape_html
from ..ingestion.feed_document import FeedEntry, RedditMedia
from ..utils.validators import URLValidator, require_option

# Post bodies of link posts are wrapped in a layout table
TABLE_TAGS = ("table", "tr", "td")


def is_reddit_url(url: str) -> bool:
    return URLValidator.hostname_matches(url, "reddit.com")


class RedditAdapter(FeedAdapter):
    """Adapter for Reddit subreddits and users."""

    source_type = SourceType.REDDIT
    requires_published = True

    def canonical_url(self, source: Source) -> str:
        value = require_option(source.options.reddit, "reddit")

        if value.startswith(("/r/", "/u/")):
            return f"https://www.reddit.com{value}.rss"

        if is_reddit_url(value) and not value.endswith(".rss"):
            return f"{value}.rss"

        return value

    def extract_description(self, entry: FeedEntry) -> Optional[str]:
        content = unescape_html(RedditMedia.from_entry(entry).content)
        return strip_tags(content, TABLE_TAGS)

    def extract_media(self, entry: FeedEntry) -> Optional[str]:
        return RedditMedia.from_entry(entry).thumbnail
