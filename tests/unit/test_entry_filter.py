"""
Tests for Entry Admission
=========================

Covers the skip decision order, timestamp precedence and the helpers used
by the adapters when an entry is left out.
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone, timedelta

import pytest

from feeddeck.ingestion.entry_filter import (
    FeedParserConfig,
    get_dc_date_timestamp,
    get_entry_timestamp,
    has_required_fields,
    should_skip_entry,
    to_unix_seconds,
    validate_required_feed_fields,
)
from feeddeck.ingestion.feed_document import DublinCoreDate, FeedEntry, FeedLink

NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
NOW_TS = int(NOW.timestamp())


def make_entry(link="https://example.com/post", published=None, updated=None, dc_date=None):
    links = [FeedLink(href=link)] if link else []
    return FeedEntry(
        id="entry",
        title="Entry",
        links=links,
        published=published,
        updated=updated,
        dc_date=dc_date,
    )


class TestIndexBound:
    """The first ``max_items`` entries are the only ones considered."""

    def test_default_bound(self):
        entry = make_entry()

        assert should_skip_entry(49, entry, 0) is False
        assert should_skip_entry(50, entry, 0) is True

    def test_custom_bound(self):
        entry = make_entry()
        config = FeedParserConfig(max_items=100)

        assert should_skip_entry(99, entry, 0, config) is False
        assert should_skip_entry(100, entry, 0, config) is True

    def test_bound_checked_before_timestamp(self):
        entry = make_entry(published=NOW)

        assert should_skip_entry(50, entry, 0) is True


class TestLinkRequirement:
    """Entries need a first link with an href."""

    def test_no_links_skipped(self):
        entry = make_entry(link=None, published=NOW)

        assert should_skip_entry(0, entry, 0) is True

    def test_no_links_skipped_even_when_new(self):
        entry = make_entry(link=None, published=NOW + timedelta(days=1))

        assert should_skip_entry(0, entry, NOW_TS) is True

    def test_empty_first_href(self):
        entry = FeedEntry(links=[FeedLink(href=""), FeedLink(href="https://example.com/b")])

        assert has_required_fields(entry) is False
        assert should_skip_entry(0, entry, 0) is True

    def test_link_present(self):
        assert has_required_fields(make_entry()) is True


class TestTimeBuffer:
    """Entries not newer than the last refresh minus the buffer are skipped."""

    def test_recent_entry_kept(self):
        entry = make_entry(published=NOW - timedelta(seconds=5))

        assert should_skip_entry(0, entry, NOW_TS) is False

    def test_old_entry_skipped(self):
        entry = make_entry(published=NOW - timedelta(seconds=20))

        assert should_skip_entry(0, entry, NOW_TS) is True

    def test_wider_buffer_keeps_entry(self):
        entry = make_entry(published=NOW - timedelta(seconds=15))

        assert should_skip_entry(0, entry, NOW_TS, FeedParserConfig(time_buffer=20)) is False
        assert should_skip_entry(0, entry, NOW_TS, FeedParserConfig(time_buffer=10)) is True

    def test_boundary_is_inclusive(self):
        entry = make_entry(published=NOW - timedelta(seconds=10))

        assert should_skip_entry(0, entry, NOW_TS) is True

    def test_entry_without_date_is_kept(self):
        entry = make_entry()

        assert should_skip_entry(0, entry, NOW_TS) is False

    def test_never_refreshed_source_keeps_everything(self):
        entry = make_entry(published=datetime(2001, 1, 1, tzinfo=timezone.utc))

        assert should_skip_entry(0, entry, 0) is False


class TestTimestampExtraction:
    """published, then updated, then Dublin Core date."""

    def test_published_wins(self):
        entry = make_entry(
            published=NOW,
            updated=NOW + timedelta(hours=1),
            dc_date=NOW + timedelta(hours=2),
        )

        assert get_entry_timestamp(entry) == NOW_TS

    def test_updated_before_dc_date(self):
        entry = make_entry(updated=NOW, dc_date=NOW + timedelta(hours=2))

        assert get_entry_timestamp(entry) == NOW_TS

    def test_bare_dc_date(self):
        entry = make_entry(dc_date=NOW)

        assert get_entry_timestamp(entry) == NOW_TS

    def test_wrapped_dc_date(self):
        entry = make_entry(dc_date=DublinCoreDate(value=NOW))

        assert get_entry_timestamp(entry) == NOW_TS

    def test_empty_wrapper(self):
        assert get_dc_date_timestamp(DublinCoreDate()) is None

    def test_no_dates(self):
        assert get_entry_timestamp(make_entry()) is None

    def test_floors_fractional_seconds(self):
        value = NOW + timedelta(milliseconds=999)

        assert to_unix_seconds(value) == NOW_TS

    def test_naive_datetime_is_utc(self):
        assert to_unix_seconds(datetime(2024, 3, 1, 12, 0, 0)) == NOW_TS

    def test_offset_datetime(self):
        value = datetime(2024, 3, 1, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))

        assert to_unix_seconds(value) == NOW_TS


class TestFeedParserConfig:
    def test_defaults(self):
        config = FeedParserConfig()

        assert config.max_items == 50
        assert config.time_buffer == 10

    def test_from_settings(self, settings):
        settings.refresh.max_items = 20
        settings.refresh.time_buffer = 30

        config = FeedParserConfig.from_settings(settings)

        assert config == FeedParserConfig(max_items=20, time_buffer=30)

    def test_frozen(self):
        config = FeedParserConfig()

        with pytest.raises(FrozenInstanceError):
            config.max_items = 10


class TestValidateRequiredFeedFields:
    def test_all_paths_present(self):
        entry = make_entry()

        assert validate_required_feed_fields(entry, ["title", "links.0.href"]) is True

    def test_missing_index(self):
        entry = make_entry(link=None)

        assert validate_required_feed_fields(entry, ["links.0.href"]) is False

    def test_missing_attribute(self):
        entry = make_entry()
        entry.title = None

        assert validate_required_feed_fields(entry, ["title"]) is False
