"""
Feed Fetcher
============

Downloads a feed document and hands it to the parser.
"""

import time
from typing import Optional

from .feed_document import FeedDocument
from .feed_parser import parse_feed
from .http_client import HttpClient
from ..utils.logging import get_logger_for_component


class FeedFetcher:
    """Fetches and parses feeds over an ``HttpClient``."""

    def __init__(self, http_client: Optional[HttpClient] = None):
        self.http = http_client or HttpClient()
        self.logger = get_logger_for_component("feed_fetcher")

    def fetch(self, url: str) -> FeedDocument:
        """Fetch and parse the feed at ``url``.

        Raises:
            FetchError: If the document cannot be downloaded
        """
        self.logger.debug(f"Fetching feed: {url}")
        start_time = time.time()

        response = self.http.get(url)
        document = parse_feed(response.content, response_headers=dict(response.headers))

        self.logger.debug(
            f"Fetched {len(document.entries)} entries from {url} "
            f"in {time.time() - start_time:.2f}s"
        )
        return document
