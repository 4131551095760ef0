"""
Tests for HTTP Client and Feed Fetcher
======================================

All requests go to a mocked requests session; nothing touches the network.
"""

from unittest.mock import Mock

import pytest
import requests

from feeddeck.ingestion.feed_fetcher import FeedFetcher
from feeddeck.ingestion.http_client import HttpClient
from feeddeck.utils.exceptions import ErrorCode, FetchError


def make_response(status_code=200, text="", content=b"", json_data=None, headers=None):
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.text = text
    response.content = content
    response.headers = headers or {}
    if json_data is not None:
        response.json.return_value = json_data
    else:
        response.json.side_effect = ValueError("No JSON object could be decoded")

    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(response=response)
    return response


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def client(settings, session):
    return HttpClient(settings, session=session)


class TestSessionSetup:
    def test_retry_strategy_and_headers(self, settings):
        settings.limits.http_retries = 3
        client = HttpClient(settings)

        adapter = client.session.get_adapter("https://example.com/")

        assert adapter.max_retries.total == 3
        assert 429 in adapter.max_retries.status_forcelist
        assert client.session.headers["User-Agent"] == "FeedDeck/1.0.0"
        client.close()


class TestHttpClient:
    def test_get_uses_configured_timeout(self, client, session, settings):
        session.get.return_value = make_response(text="ok")

        client.get("https://example.com/")

        session.get.assert_called_once_with(
            "https://example.com/", timeout=settings.limits.request_timeout, headers=None
        )

    def test_get_text(self, client, session):
        session.get.return_value = make_response(text="<html></html>")

        assert client.get_text("https://example.com/") == "<html></html>"

    def test_get_json(self, client, session):
        session.get.return_value = make_response(json_data={"items": []})

        assert client.get_json("https://example.com/api") == {"items": []}

    def test_invalid_json(self, client, session):
        session.get.return_value = make_response(text="<html>")

        with pytest.raises(FetchError) as exc_info:
            client.get_json("https://example.com/api")

        assert exc_info.value.error_code == ErrorCode.FEED_PARSE_ERROR

    def test_timeout(self, client, session):
        session.get.side_effect = requests.Timeout("read timed out")

        with pytest.raises(FetchError) as exc_info:
            client.get("https://slow.example.com/feed")

        assert exc_info.value.error_code == ErrorCode.FEED_FETCH_TIMEOUT
        assert exc_info.value.context["feed_url"] == "https://slow.example.com/feed"

    @pytest.mark.parametrize(
        "status, code",
        [
            (401, ErrorCode.FEED_ACCESS_DENIED),
            (403, ErrorCode.FEED_ACCESS_DENIED),
            (404, ErrorCode.FEED_NOT_FOUND),
            (500, ErrorCode.FEED_NETWORK_ERROR),
        ],
    )
    def test_http_errors(self, client, session, status, code):
        session.get.return_value = make_response(status_code=status)

        with pytest.raises(FetchError) as exc_info:
            client.get("https://example.com/feed")

        assert exc_info.value.error_code == code
        assert exc_info.value.context["status_code"] == status

    def test_connection_error(self, client, session):
        session.get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(FetchError) as exc_info:
            client.get("https://down.example.com/feed")

        assert exc_info.value.recoverable is True


class TestFeedFetcher:
    def test_fetch_parses_response(self, rss_feed, recent_entries):
        http = Mock(spec=HttpClient)
        http.get.return_value = make_response(
            content=rss_feed(entries=recent_entries).encode("utf-8"),
            headers={"Content-Type": "application/rss+xml; charset=utf-8"},
        )

        document = FeedFetcher(http).fetch("https://example.com/feed.xml")

        assert document.title == "Example Feed"
        assert len(document.entries) == 3
        http.get.assert_called_once_with("https://example.com/feed.xml")

    def test_fetch_error_propagates(self):
        http = Mock(spec=HttpClient)
        http.get.side_effect = FetchError("HTTP 503 for https://example.com/feed.xml")

        with pytest.raises(FetchError):
            FeedFetcher(http).fetch("https://example.com/feed.xml")
