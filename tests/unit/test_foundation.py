"""
Foundation Tests for FeedDeck
=============================

Test suite for core foundation components: configuration, logging,
exceptions, validators and HTML helpers.
"""

import logging
import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError as PydanticValidationError

from feeddeck.config.settings import FeedDeckSettings, RefreshSettings
from feeddeck.ingestion.content_cleaner import (
    find_favicon,
    first_image_src,
    strip_tags,
    unescape_html,
)
from feeddeck.utils.exceptions import (
    AuthorizationError,
    DatabaseError,
    ErrorCode,
    FeedDeckError,
    FetchError,
    ParseError,
    PersistenceError,
    ValidationError,
)
from feeddeck.utils.logging import PerformanceLogger, get_logger_for_component, setup_logger
from feeddeck.utils.validators import URLValidator, require_option


class TestConfiguration:
    """Test configuration system."""

    def test_defaults(self):
        settings = FeedDeckSettings()

        assert settings.refresh.max_items == 50
        assert settings.refresh.time_buffer == 10
        assert settings.refresh.staleness_seconds == 3600
        assert settings.refresh.sources_per_profile == 10
        assert settings.refresh.default_batch == 50
        assert settings.refresh.default_max_sources == 100
        assert settings.refresh.free_trial_days == 7
        assert settings.refresh.throttled_source_type == "reddit"
        assert settings.refresh.throttle_seconds == 86400
        assert settings.refresh.deprecated_source_types == ["nitter"]
        assert settings.limits.request_timeout == 5

    def test_nested_environment_variables(self):
        with patch.dict(os.environ, {
            "FEEDDECK_REFRESH__MAX_ITEMS": "25",
            "FEEDDECK_AUTH__CRON_SECRET": "env-secret",
        }):
            settings = FeedDeckSettings()

        assert settings.refresh.max_items == 25
        assert settings.auth.accepted_credentials() == ["env-secret"]

    def test_no_credentials_by_default(self):
        assert FeedDeckSettings().auth.accepted_credentials() == []

    def test_invalid_limits_rejected(self):
        with pytest.raises(PydanticValidationError):
            RefreshSettings(max_items=0)

    def test_deprecated_types_normalized(self):
        refresh = RefreshSettings(deprecated_source_types=["Nitter", " nitter ", ""])

        assert refresh.deprecated_source_types == ["nitter"]

    def test_effective_log_level(self):
        assert FeedDeckSettings(debug=True).get_effective_log_level() == "DEBUG"
        assert FeedDeckSettings(debug=False).get_effective_log_level() == "INFO"

    def test_validate_configuration_creates_directories(self, tmp_path):
        settings = FeedDeckSettings(
            database={"path": str(tmp_path / "data" / "feeddeck.db")},
            logging={"file_path": str(tmp_path / "logs" / "feeddeck.log")},
        )

        settings.validate_configuration()

        assert (tmp_path / "data").is_dir()
        assert (tmp_path / "logs").is_dir()


class TestLogging:
    """Test logging system."""

    def test_logger_setup(self, tmp_path):
        log_file = tmp_path / "test.log"
        logger = setup_logger(
            name="feeddeck_test_logger",
            level="INFO",
            log_file=str(log_file),
            console=False,
            structured=True,
        )

        logger.info("Test message")
        logger.error("Test error message")

        log_content = log_file.read_text()
        assert "Test message" in log_content
        assert "Test error message" in log_content

    def test_component_logger_context(self, caplog):
        caplog.set_level(logging.INFO, logger="feeddeck.test_component")
        logger = get_logger_for_component("test_component", source_id="src-1", user_id="user-1")

        logger.info("Component test message", extra={"items_count": 3})

        record = caplog.records[-1]
        assert record.name == "feeddeck.test_component"
        assert record.source_id == "src-1"
        assert record.user_id == "user-1"
        assert record.items_count == 3

    def test_performance_logger(self, caplog):
        caplog.set_level(logging.INFO)
        logger = logging.getLogger("feeddeck_test_perf")
        logger.setLevel(logging.INFO)

        with PerformanceLogger(logger, "test_operation", column_id="c1"):
            pass

        assert "Completed test_operation" in caplog.text


class TestExceptions:
    """Test exception handling system."""

    def test_feeddeck_error(self):
        error = FeedDeckError(
            message="Test error",
            error_code=ErrorCode.CONFIG_INVALID,
            context={"key": "value"},
            recoverable=True,
        )

        assert str(error) == "[C001] Test error"
        assert error.message == "Test error"
        assert error.to_dict() == {
            "error_type": "FeedDeckError",
            "error_code": "C001",
            "error_message": "Test error",
            "context": {"key": "value"},
            "recoverable": True,
        }

    def test_fetch_error_is_recoverable(self):
        error = FetchError("timeout", feed_url="https://example.com/feed")

        assert error.recoverable is True
        assert error.context["feed_url"] == "https://example.com/feed"

    def test_parse_error_is_not_recoverable(self):
        error = ParseError("Invalid feed")

        assert error.error_code == ErrorCode.FEED_PARSE_ERROR

    def test_persistence_error_is_database_error(self):
        error = PersistenceError("Failed to save items", record_id="src-1")

        assert isinstance(error, DatabaseError)
        assert error.context["record_id"] == "src-1"
        assert error.error_code == ErrorCode.DATABASE_ERROR

    def test_validation_error_field(self):
        error = ValidationError("Invalid source options", field_name="reddit")

        assert error.context["field_name"] == "reddit"
        assert error.recoverable is False

    def test_authorization_error(self):
        forbidden = AuthorizationError("Column not found or unauthorized", resource_id="c1")
        unauthenticated = AuthorizationError("Unauthorized", error_code=ErrorCode.AUTH_UNAUTHENTICATED)

        assert forbidden.is_unauthenticated is False
        assert forbidden.context["resource_id"] == "c1"
        assert unauthenticated.is_unauthenticated is True


class TestValidators:
    """Test input validators."""

    def test_valid_feed_url(self):
        assert URLValidator.validate_feed_url(" https://example.com/feed ") == "https://example.com/feed"

    @pytest.mark.parametrize(
        "url",
        [None, "", "   ", "example.com", "javascript:alert(1)", "https://localhost/feed", "http://10.0.0.1/rss"],
    )
    def test_invalid_feed_url(self, url):
        with pytest.raises(ValidationError):
            URLValidator.validate_feed_url(url)

    def test_hostname_matches(self):
        assert URLValidator.hostname_matches("https://www.reddit.com/r/x", "reddit.com")
        assert URLValidator.hostname_matches("https://reddit.com/r/x", "reddit.com")
        assert not URLValidator.hostname_matches("https://notreddit.com/r/x", "reddit.com")
        assert not URLValidator.hostname_matches("/r/x", "reddit.com")

    def test_require_option(self):
        assert require_option("  value ", "rss") == "value"

        with pytest.raises(ValidationError) as exc_info:
            require_option("   ", "rss")

        assert exc_info.value.error_code == ErrorCode.VALIDATION_REQUIRED_FIELD


class TestContentCleaner:
    """Test HTML helpers."""

    def test_unescape_html(self):
        assert unescape_html("Tom &amp; Jerry &#39;cartoon&#39;") == "Tom & Jerry 'cartoon'"
        assert unescape_html("") is None
        assert unescape_html(None) is None

    def test_strip_tags_keeps_children(self):
        html = "<table><tr><td><b>bold</b></td><td>text</td></tr></table>"

        assert strip_tags(html, ["table", "tr", "td"]) == "<b>bold</b>text"

    def test_first_image_src(self):
        html = '<p><img src="data:image/gif;base64,R0l"><img src="https://example.com/a.png"></p>'

        assert first_image_src(html) == "https://example.com/a.png"
        assert first_image_src("<p>No images</p>") is None

    def test_find_favicon(self):
        html = (
            '<html><head><link rel="stylesheet" href="/s.css">'
            '<link rel="apple-touch-icon" href="/touch.png">'
            '<link rel="shortcut icon" href="/favicon.ico"></head></html>'
        )

        assert find_favicon(html, "https://example.com/blog/") == "https://example.com/favicon.ico"

    def test_find_favicon_missing(self):
        assert find_favicon("<html></html>", "https://example.com/") is None
