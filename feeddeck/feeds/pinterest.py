"""
Pinterest Adapter
=================

``@user`` maps to the user's feed, ``@user/board`` to a board feed.
"""

from typing import Optional
from urllib.parse import urlparse

from .base import FeedAdapter
from ..database.models import Source, SourceType
from ..ingestion.content_cleaner import first_image_src, unescape_html
from ..ingestion.feed_document import FeedEntry
from ..utils.exceptions import ValidationError
from ..utils.validators import URLValidator, require_option

BASE_URL = "https://www.pinterest.com"


class PinterestAdapter(FeedAdapter):
    """Adapter for Pinterest users and boards."""

    source_type = SourceType.PINTEREST

    def canonical_url(self, source: Source) -> str:
        value = require_option(source.options.pinterest, "pinterest")

        if value.startswith("@"):
            path = value[1:].strip("/")
        elif URLValidator.hostname_matches(value, "pinterest.com"):
            if value.endswith(".rss"):
                return value
            path = urlparse(value).path.strip("/")
        else:
            raise ValidationError("Invalid source options", field_name="pinterest")

        if not path:
            raise ValidationError("Invalid source options", field_name="pinterest")

        if "/" in path:
            return f"{BASE_URL}/{path}.rss"
        return f"{BASE_URL}/{path}/feed.rss"

    def extract_description(self, entry: FeedEntry) -> Optional[str]:
        return unescape_html(entry.description)

    def extract_media(self, entry: FeedEntry) -> Optional[str]:
        return first_image_src(entry.description)
