"""
Tests for Feed Parsing
======================

Parses small RSS, Atom and YouTube-style documents and checks the typed
FeedDocument/FeedEntry view the adapters work with.
"""

from datetime import datetime, timezone

from feeddeck.ingestion.entry_filter import get_entry_timestamp
from feeddeck.ingestion.feed_document import MediaRss, GoogleNewsSource, YoutubeMedia
from feeddeck.ingestion.feed_parser import parse_feed


ATOM_FEED = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Example</title>
  <link rel="alternate" href="https://atom.example.com/"/>
  <author><name>Feed Author</name></author>
  <id>urn:uuid:feed</id>
  <updated>2024-03-01T12:00:00Z</updated>
  <entry>
    <title>First Atom Entry</title>
    <link rel="alternate" href="https://atom.example.com/first"/>
    <id>urn:uuid:first</id>
    <published>2024-03-01T10:00:00Z</published>
    <updated>2024-03-01T11:00:00Z</updated>
    <author><name>Entry Author</name></author>
    <summary>Short summary</summary>
  </entry>
  <entry>
    <title>Second Atom Entry</title>
    <link rel="alternate" href="https://atom.example.com/second"/>
    <id>urn:uuid:second</id>
    <updated>2024-03-01T09:00:00Z</updated>
  </entry>
</feed>
"""

YOUTUBE_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns:yt="http://www.youtube.com/xml/schemas/2015"
      xmlns:media="http://search.yahoo.com/mrss/"
      xmlns="http://www.w3.org/2005/Atom">
  <title>Example Channel</title>
  <link rel="alternate" href="https://www.youtube.com/channel/UCexample"/>
  <author><name>Example Channel</name></author>
  <entry>
    <id>yt:video:abc123</id>
    <yt:videoId>abc123</yt:videoId>
    <title>Example Video</title>
    <link rel="alternate" href="https://www.youtube.com/watch?v=abc123"/>
    <published>2024-03-01T10:00:00+00:00</published>
    <updated>2024-03-01T10:30:00+00:00</updated>
    <media:group>
      <media:title>Example Video</media:title>
      <media:thumbnail url="https://i.ytimg.com/vi/abc123/hqdefault.jpg" width="480" height="360"/>
      <media:description>Video description</media:description>
    </media:group>
  </entry>
</feed>
"""


class TestParseRss:
    """RSS 2.0 documents."""

    def test_feed_level_fields(self, rss_feed):
        document = parse_feed(rss_feed(title="My Blog", link="https://blog.example.com/"))

        assert document.title == "My Blog"
        assert document.link == "https://blog.example.com/"
        assert document.entries == []

    def test_entries_keep_document_order(self, rss_feed, recent_entries):
        document = parse_feed(rss_feed(entries=recent_entries))

        assert [e.title for e in document.entries] == ["Post 0", "Post 1", "Post 2"]

    def test_entry_fields(self, rss_feed, now):
        entry_data = {
            "title": "Hello",
            "link": "https://example.com/hello",
            "guid": "hello-1",
            "published": now,
            "description": "Plain body",
            "author": "Jane",
        }

        entry = parse_feed(rss_feed(entries=[entry_data])).entries[0]

        assert entry.id == "hello-1"
        assert entry.title == "Hello"
        assert entry.link == "https://example.com/hello"
        assert entry.published == datetime.fromtimestamp(now, tz=timezone.utc)
        assert entry.description == "Plain body"
        assert entry.author == "Jane"

    def test_dc_date_only_entry_has_timestamp(self, rss_feed, now):
        extra = "<dc:date>2023-11-14T22:13:20Z</dc:date>"
        entry_data = {"title": "Dated", "link": "https://example.com/d", "extra": extra}

        entry = parse_feed(rss_feed(entries=[entry_data])).entries[0]

        assert entry.published is None
        assert get_entry_timestamp(entry) == now

    def test_entry_without_dates(self, rss_feed):
        entry_data = {"title": "Undated", "link": "https://example.com/u"}

        entry = parse_feed(rss_feed(entries=[entry_data])).entries[0]

        assert get_entry_timestamp(entry) is None

    def test_media_and_enclosures(self, rss_feed, now):
        extra = (
            '<media:thumbnail url="https://example.com/thumb.jpg"/>'
            '<media:content url="https://example.com/photo.png" medium="image"/>'
            '<enclosure url="https://example.com/ep.mp3" type="audio/mpeg" length="1234"/>'
        )
        entry_data = {
            "title": "Media",
            "link": "https://example.com/m",
            "published": now,
            "extra": extra,
        }

        entry = parse_feed(rss_feed(entries=[entry_data])).entries[0]
        media = MediaRss.from_entry(entry)

        assert media.thumbnail == "https://example.com/thumb.jpg"
        assert media.image_content == "https://example.com/photo.png"
        assert media.audio_enclosure == "https://example.com/ep.mp3"
        assert media.image == "https://example.com/thumb.jpg"
        assert entry.enclosures[0].length == 1234

    def test_content_encoded(self, rss_feed, now):
        extra = "<content:encoded><![CDATA[<p>Full <b>body</b></p>]]></content:encoded>"
        entry_data = {"title": "C", "link": "https://example.com/c", "published": now, "extra": extra}

        entry = parse_feed(rss_feed(entries=[entry_data])).entries[0]

        assert "Full" in entry.content
        assert "<b>body</b>" in entry.content

    def test_entry_source_element(self, rss_feed, now):
        extra = '<source url="https://publisher.example.com/rss">The Publisher</source>'
        entry_data = {"title": "News", "link": "https://example.com/n", "published": now, "extra": extra}

        entry = parse_feed(rss_feed(entries=[entry_data])).entries[0]
        source = GoogleNewsSource.from_entry(entry)

        assert source.title == "The Publisher"
        assert source.url == "https://publisher.example.com/rss"

    def test_channel_image(self, rss_feed):
        image = "<image><url>https://example.com/logo.png</url><title>Logo</title><link>https://example.com/</link></image>"

        document = parse_feed(rss_feed(channel_extra=image))

        assert document.image == "https://example.com/logo.png"

    def test_bytes_input(self, rss_feed, recent_entries):
        document = parse_feed(rss_feed(entries=recent_entries).encode("utf-8"))

        assert document.title == "Example Feed"
        assert len(document.entries) == 3


class TestParseAtom:
    """Atom documents."""

    def test_feed_level_fields(self):
        document = parse_feed(ATOM_FEED)

        assert document.title == "Atom Example"
        assert document.link == "https://atom.example.com/"
        assert document.author == "Feed Author"

    def test_entry_dates(self):
        first, second = parse_feed(ATOM_FEED).entries

        assert first.published == datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
        assert first.updated == datetime(2024, 3, 1, 11, 0, tzinfo=timezone.utc)
        assert second.published is None
        assert get_entry_timestamp(second) == int(
            datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc).timestamp()
        )

    def test_entry_identity_fields(self):
        first = parse_feed(ATOM_FEED).entries[0]

        assert first.id == "urn:uuid:first"
        assert first.link == "https://atom.example.com/first"
        assert first.author == "Entry Author"


class TestParseYoutube:
    """YouTube channel feeds with a media:group per video."""

    def test_media_group(self):
        entry = parse_feed(YOUTUBE_FEED).entries[0]
        media = YoutubeMedia.from_entry(entry)

        assert media.thumbnail == "https://i.ytimg.com/vi/abc123/hqdefault.jpg"
        assert media.description == "Video description"

    def test_channel_author(self):
        document = parse_feed(YOUTUBE_FEED)

        assert document.author == "Example Channel"
        assert document.entries[0].id == "yt:video:abc123"


class TestMalformedInput:
    def test_non_feed_document(self):
        document = parse_feed(b"<html><body><p>Not a feed</p></body></html>")

        assert document.title is None
        assert document.entries == []
