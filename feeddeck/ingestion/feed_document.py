"""
Parsed Feed Document
====================

Typed view of a parsed RSS/Atom/RDF document. The parser fills these
dataclasses; platform adapters read them. Platform specific extension data
is exposed through a closed set of typed fields on ``FeedEntry`` and turned
into one variant per platform by the ``from_entry``/``from_document``
constructors below.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union


@dataclass
class FeedLink:
    """A link element of a feed or entry."""

    href: str
    rel: Optional[str] = None
    type: Optional[str] = None


@dataclass
class MediaContent:
    """A media:thumbnail or media:content element."""

    url: str
    medium: Optional[str] = None
    type: Optional[str] = None

    @property
    def is_image(self) -> bool:
        if self.medium:
            return self.medium == "image"
        return bool(self.type and self.type.startswith("image/"))


@dataclass
class Enclosure:
    """An RSS enclosure."""

    href: str
    type: Optional[str] = None
    length: Optional[int] = None


@dataclass
class EntrySource:
    """The ``<source>`` element an aggregated entry was taken from."""

    title: Optional[str] = None
    href: Optional[str] = None


@dataclass
class DublinCoreDate:
    """A Dublin Core ``dc:date`` value wrapped in an element object."""

    value: Optional[datetime] = None


@dataclass
class FeedEntry:
    """One entry of a feed document, in document order."""

    id: Optional[str] = None
    title: Optional[str] = None
    links: List[FeedLink] = field(default_factory=list)
    published: Optional[datetime] = None
    updated: Optional[datetime] = None
    dc_date: Union[datetime, DublinCoreDate, None] = None
    description: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None

    # Extension elements
    media_thumbnail: List[MediaContent] = field(default_factory=list)
    media_content: List[MediaContent] = field(default_factory=list)
    media_description: Optional[str] = None
    source: Optional[EntrySource] = None
    enclosures: List[Enclosure] = field(default_factory=list)

    @property
    def link(self) -> Optional[str]:
        """The href of the first link, if any."""
        if self.links and self.links[0].href:
            return self.links[0].href
        return None


@dataclass
class FeedDocument:
    """A parsed feed with its entries."""

    title: Optional[str] = None
    links: List[FeedLink] = field(default_factory=list)
    description: Optional[str] = None
    author: Optional[str] = None
    image: Optional[str] = None
    entries: List[FeedEntry] = field(default_factory=list)

    @property
    def link(self) -> Optional[str]:
        if self.links and self.links[0].href:
            return self.links[0].href
        return None


# Platform variants


@dataclass(frozen=True)
class YoutubeMedia:
    """The media:group of a YouTube video entry."""

    description: Optional[str] = None
    thumbnail: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: FeedEntry) -> "YoutubeMedia":
        thumbnail = entry.media_thumbnail[0].url if entry.media_thumbnail else None
        return cls(
            description=entry.media_description or entry.description,
            thumbnail=thumbnail,
        )


@dataclass(frozen=True)
class RedditMedia:
    """Reddit post body and preview image."""

    content: Optional[str] = None
    thumbnail: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: FeedEntry) -> "RedditMedia":
        thumbnail = entry.media_thumbnail[0].url if entry.media_thumbnail else None
        return cls(content=entry.content, thumbnail=thumbnail)


@dataclass(frozen=True)
class MediaRss:
    """Image candidates from the Media RSS and enclosure elements."""

    thumbnail: Optional[str] = None
    image_content: Optional[str] = None
    image_enclosure: Optional[str] = None
    audio_enclosure: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: FeedEntry) -> "MediaRss":
        image_content = next(
            (m.url for m in entry.media_content if m.url and m.is_image), None
        )
        image_enclosure = next(
            (
                e.href
                for e in entry.enclosures
                if e.href and e.type and e.type.startswith("image/")
            ),
            None,
        )
        audio_enclosure = next(
            (
                e.href
                for e in entry.enclosures
                if e.href and e.type and e.type.startswith("audio/")
            ),
            None,
        )
        return cls(
            thumbnail=entry.media_thumbnail[0].url if entry.media_thumbnail else None,
            image_content=image_content,
            image_enclosure=image_enclosure,
            audio_enclosure=audio_enclosure,
        )

    @property
    def image(self) -> Optional[str]:
        """Best image: thumbnail, then image content, then image enclosure."""
        return self.thumbnail or self.image_content or self.image_enclosure


@dataclass(frozen=True)
class GoogleNewsSource:
    """Publisher an aggregated Google News entry links to."""

    title: Optional[str] = None
    url: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: FeedEntry) -> "GoogleNewsSource":
        if entry.source is None:
            return cls()
        return cls(title=entry.source.title, url=entry.source.href)


@dataclass(frozen=True)
class PodcastInfo:
    """Show level iTunes artwork and author."""

    image: Optional[str] = None
    author: Optional[str] = None

    @classmethod
    def from_document(cls, document: FeedDocument) -> "PodcastInfo":
        return cls(image=document.image, author=document.author)

