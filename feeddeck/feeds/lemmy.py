"""
Lemmy Adapter
=============

Community (``/c/<name>``) and user (``/u/<name>``) pages on any Lemmy
instance map to the instance's ``/feeds/`` endpoint.
"""

import re
from typing import Optional
from urllib.parse import urlparse

from .base import FeedAdapter
from ..database.models import Source, SourceType
from ..ingestion.content_cleaner import unescape_html
from ..ingestion.feed_document import FeedEntry, MediaRss
from ..utils.exceptions import ValidationError
from ..utils.validators import require_option

PAGE_PATTERN = re.compile(r"^/(c|u)/([^/]+)/?$")


class LemmyAdapter(FeedAdapter):
    """Adapter for Lemmy communities and users."""

    source_type = SourceType.LEMMY

    def canonical_url(self, source: Source) -> str:
        url = require_option(source.options.lemmy, "lemmy")
        parsed = urlparse(url)

        if parsed.path.startswith("/feeds/"):
            return url

        match = PAGE_PATTERN.match(parsed.path)
        if not parsed.netloc or not match:
            raise ValidationError("Invalid source options", field_name="lemmy")

        kind, name = match.groups()
        return f"{parsed.scheme}://{parsed.netloc}/feeds/{kind}/{name}.xml?sort=New"

    def extract_description(self, entry: FeedEntry) -> Optional[str]:
        return unescape_html(entry.description)

    def extract_media(self, entry: FeedEntry) -> Optional[str]:
        media = MediaRss.from_entry(entry)
        return media.image_enclosure or media.thumbnail
