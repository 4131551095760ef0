"""
Feed Parser
===========

Parses RSS 2.0, RSS 1.0 and Atom documents with feedparser and converts the
result into ``FeedDocument``/``FeedEntry`` dataclasses.

feedparser reports ``dc:date`` as the entry's ``updated`` value, so parsed
entries carry it in ``updated`` and leave ``dc_date`` empty.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

import feedparser

from .feed_document import (
    FeedDocument,
    FeedEntry,
    FeedLink,
    MediaContent,
    Enclosure,
    EntrySource,
)
from ..utils.logging import get_logger_for_component

logger = get_logger_for_component("feed_parser")


def _parse_date(parsed: Any) -> Optional[datetime]:
    if not parsed:
        return None
    try:
        return datetime(*parsed[:6], tzinfo=timezone.utc)
    except (ValueError, TypeError):
        return None


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _links(data: Dict[str, Any]) -> List[FeedLink]:
    links = []
    for link in data.get("links") or []:
        href = _text(link.get("href"))
        if href:
            links.append(FeedLink(href=href, rel=link.get("rel"), type=link.get("type")))

    # Plain RSS <link> without a links list
    if not links and _text(data.get("link")):
        links.append(FeedLink(href=_text(data.get("link")), rel="alternate"))
    return links


def _media(items: Any) -> List[MediaContent]:
    media = []
    for item in items or []:
        url = _text(item.get("url"))
        if url:
            media.append(
                MediaContent(url=url, medium=item.get("medium"), type=item.get("type"))
            )
    return media


def _enclosures(items: Any) -> List[Enclosure]:
    enclosures = []
    for item in items or []:
        href = _text(item.get("href"))
        if not href:
            continue
        try:
            length = int(item.get("length")) if item.get("length") else None
        except (TypeError, ValueError):
            length = None
        enclosures.append(Enclosure(href=href, type=item.get("type"), length=length))
    return enclosures


def _entry_source(data: Dict[str, Any]) -> Optional[EntrySource]:
    source = data.get("source")
    if not source:
        return None
    return EntrySource(title=_text(source.get("title")), href=_text(source.get("href")))


def _content(data: Dict[str, Any]) -> Optional[str]:
    content = data.get("content")
    if isinstance(content, list) and content:
        return _text(content[0].get("value"))
    return None


def _convert_entry(data: Dict[str, Any]) -> FeedEntry:
    return FeedEntry(
        id=_text(data.get("id")),
        title=_text(data.get("title")),
        links=_links(data),
        published=_parse_date(data.get("published_parsed")),
        updated=_parse_date(data.get("updated_parsed")),
        description=_text(data.get("summary")),
        content=_content(data),
        author=_text(data.get("author")),
        media_thumbnail=_media(data.get("media_thumbnail")),
        media_content=_media(data.get("media_content")),
        media_description=_text(data.get("media_description")),
        source=_entry_source(data),
        enclosures=_enclosures(data.get("enclosures")),
    )


def parse_feed(
    raw: Union[str, bytes], response_headers: Optional[Dict[str, str]] = None
) -> FeedDocument:
    """Parse a raw feed document.

    Args:
        raw: Document body
        response_headers: HTTP headers of the response, used by feedparser
            for encoding detection

    Returns:
        Parsed document; entries keep document order
    """
    parsed = feedparser.parse(raw, response_headers=response_headers or {})

    if parsed.bozo:
        # Many feeds have minor formatting issues; keep whatever was parsed
        logger.warning(
            f"Feed parsing warning: {parsed.get('bozo_exception')}",
            extra={"entries_count": len(parsed.entries)},
        )

    feed = parsed.feed
    image = feed.get("image")

    return FeedDocument(
        title=_text(feed.get("title")),
        links=_links(feed),
        description=_text(feed.get("subtitle")),
        author=_text(feed.get("author")),
        image=_text(image.get("href")) if image else None,
        entries=[_convert_entry(entry) for entry in parsed.entries],
    )
