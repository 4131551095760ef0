"""
HTTP Client
===========

requests session with a retry strategy and a fixed per-request timeout,
shared by the feed fetcher and the adapters' secondary lookups (channel
pages, platform APIs, favicons).
"""

from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config.settings import get_settings
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import FetchError, ErrorCode


class HttpClient:
    """Blocking HTTP client raising ``FetchError`` on any transport failure."""

    def __init__(self, settings=None, session: Optional[requests.Session] = None):
        """Initialize HTTP client.

        Args:
            settings: Application settings (default: global settings)
            session: Preconfigured session, mainly for tests
        """
        self.settings = settings or get_settings()
        self.timeout = self.settings.limits.request_timeout
        self.logger = get_logger_for_component("http_client")

        self.session = session or self._build_session()

    def _build_session(self) -> requests.Session:
        session = requests.Session()
        retry_strategy = Retry(
            total=self.settings.limits.http_retries,
            backoff_factor=0.5,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update(
            {
                "User-Agent": f"{self.settings.app_name}/{self.settings.version}",
                "Accept": "application/rss+xml, application/atom+xml, application/xml, text/xml, text/html, */*",
            }
        )
        return session

    def get(
        self,
        url: str,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """Send a GET request.

        Args:
            url: Request URL
            timeout: Seconds before giving up (default: ``limits.request_timeout``)
            headers: Extra request headers

        Returns:
            Successful response

        Raises:
            FetchError: On timeout, connection failure or non-2xx status
        """
        timeout = timeout or self.timeout

        try:
            response = self.session.get(url, timeout=timeout, headers=headers)
            response.raise_for_status()
            return response

        except requests.Timeout as e:
            raise FetchError(
                f"Request timeout after {timeout}s: {url}",
                feed_url=url,
                error_code=ErrorCode.FEED_FETCH_TIMEOUT,
            ) from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            if status in (401, 403):
                code = ErrorCode.FEED_ACCESS_DENIED
            elif status == 404:
                code = ErrorCode.FEED_NOT_FOUND
            else:
                code = ErrorCode.FEED_NETWORK_ERROR
            raise FetchError(
                f"HTTP {status} for {url}",
                feed_url=url,
                error_code=code,
                context={"status_code": status},
            ) from e
        except requests.RequestException as e:
            raise FetchError(f"Failed to fetch {url}: {e}", feed_url=url) from e

    def get_text(self, url: str, timeout: Optional[float] = None) -> str:
        return self.get(url, timeout=timeout).text

    def get_json(self, url: str, timeout: Optional[float] = None) -> Any:
        """GET a URL and decode its JSON body."""
        response = self.get(url, timeout=timeout)
        try:
            return response.json()
        except ValueError as e:
            raise FetchError(
                f"Invalid JSON response from {url}",
                feed_url=url,
                error_code=ErrorCode.FEED_PARSE_ERROR,
            ) from e

    def close(self) -> None:
        self.session.close()
