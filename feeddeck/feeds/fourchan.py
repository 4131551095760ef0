"""
4chan Adapter
=============

Board index feeds, given as a board name (``g`` or ``/g/``) or a board URL.
"""

import re
from typing import Optional
from urllib.parse import urlparse

from .base import FeedAdapter
from ..database.models import Source, SourceType
from ..ingestion.content_cleaner import first_image_src, unescape_html
from ..ingestion.feed_document import FeedEntry
from ..utils.exceptions import ValidationError
from ..utils.validators import URLValidator, require_option

BOARD_PATTERN = re.compile(r"^[a-z0-9]+$")
BOARD_HOSTS = ("4chan.org", "4channel.org")


class FourchanAdapter(FeedAdapter):
    """Adapter for 4chan boards."""

    source_type = SourceType.FOURCHAN

    def canonical_url(self, source: Source) -> str:
        value = require_option(source.options.fourchan, "fourchan")

        if any(URLValidator.hostname_matches(value, host) for host in BOARD_HOSTS):
            if value.endswith("index.rss"):
                return value
            board = urlparse(value).path.strip("/").split("/")[0]
        else:
            board = value.strip("/")

        if not BOARD_PATTERN.match(board):
            raise ValidationError("Invalid source options", field_name="fourchan")

        return f"https://boards.4chan.org/{board}/index.rss"

    def extract_description(self, entry: FeedEntry) -> Optional[str]:
        return unescape_html(entry.description)

    def extract_media(self, entry: FeedEntry) -> Optional[str]:
        return first_image_src(entry.description)
