"""
FeedDeck Data Models
====================

Pydantic data models for profiles, columns, sources and items. These models
correspond to the database schema and carry the canonical shape every
platform adapter normalizes into.

All timestamps are unix seconds.
"""

import json
from enum import Enum
from typing import Optional, Dict, Any

from pydantic import BaseModel, Field, field_validator


class ProfileTier(str, Enum):
    """Service level of an account."""
    FREE = "free"
    PREMIUM = "premium"


class SourceType(str, Enum):
    """Platform adapters a source can be configured for."""
    RSS = "rss"
    YOUTUBE = "youtube"
    REDDIT = "reddit"
    STACKOVERFLOW = "stackoverflow"
    LEMMY = "lemmy"
    MEDIUM = "medium"
    PODCAST = "podcast"
    GOOGLENEWS = "googlenews"
    PINTEREST = "pinterest"
    TUMBLR = "tumblr"
    FOURCHAN = "fourchan"
    MASTODON = "mastodon"
    NITTER = "nitter"


class Profile(BaseModel):
    """Account owning columns and sources."""
    id: str = Field(..., min_length=1, description="Profile (user) ID")
    tier: ProfileTier = Field(default=ProfileTier.FREE, description="Service level")
    created_at: int = Field(default=0, ge=0, description="Sign-up time")
    updated_at: int = Field(default=0, ge=0, description="Last profile change")

    @property
    def is_premium(self) -> bool:
        return self.tier == ProfileTier.PREMIUM

    def __str__(self) -> str:
        return f"Profile({self.id}:{self.tier.value})"


class Column(BaseModel):
    """A user's grouping of sources."""
    id: str = Field(..., min_length=1, description="Column ID")
    user_id: str = Field(..., min_length=1, description="Owning profile ID")
    name: str = Field(default="", max_length=255, description="Column display name")
    position: int = Field(default=0, ge=0, description="Column order in the deck")


class StackoverflowOptions(BaseModel):
    """Stack Overflow source configuration."""
    type: Optional[str] = Field(default=None, description="'tag' or 'url'")
    tag: Optional[str] = Field(default=None, description="Tag name for tag feeds")
    sort: Optional[str] = Field(default="newest", description="Sort order for tag feeds")
    url: Optional[str] = Field(default=None, description="Feed URL")


class GoogleNewsOptions(BaseModel):
    """Google News source configuration."""
    type: Optional[str] = Field(default=None, description="'url' or 'search'")
    url: Optional[str] = Field(default=None, description="news.google.com URL")
    search: Optional[str] = Field(default=None, description="Search query")
    hl: Optional[str] = Field(default=None, description="Interface language")
    gl: Optional[str] = Field(default=None, description="Country")
    ceid: Optional[str] = Field(default=None, description="Country:language edition")


class SourceOptions(BaseModel):
    """Type specific source configuration; one field per platform."""
    rss: Optional[str] = None
    youtube: Optional[str] = None
    reddit: Optional[str] = None
    stackoverflow: Optional[StackoverflowOptions] = None
    lemmy: Optional[str] = None
    medium: Optional[str] = None
    podcast: Optional[str] = None
    googlenews: Optional[GoogleNewsOptions] = None
    pinterest: Optional[str] = None
    tumblr: Optional[str] = None
    fourchan: Optional[str] = None
    mastodon: Optional[str] = None
    nitter: Optional[str] = None

    model_config = {"extra": "ignore"}


class Source(BaseModel):
    """A configured subscription to one external feed for one user/column."""
    id: str = Field(default="", description="Content-addressed ID, empty until first resolution")
    user_id: str = Field(..., min_length=1, description="Owning profile ID")
    column_id: str = Field(..., min_length=1, description="Column containing the source")
    type: SourceType = Field(..., description="Platform adapter")
    title: str = Field(default="", description="Feed title")
    link: str = Field(default="", description="Site link reported by the feed")
    icon: Optional[str] = Field(default=None, description="Icon URL, set on first creation only")
    options: SourceOptions = Field(default_factory=SourceOptions)
    created_at: int = Field(default=0, ge=0)
    updated_at: int = Field(default=0, ge=0, description="Last successful refresh")

    @field_validator('options', mode='before')
    @classmethod
    def parse_options(cls, v):
        """Accept options stored as a JSON string."""
        if v is None:
            return SourceOptions()
        if isinstance(v, str):
            return json.loads(v) if v.strip() else {}
        return v

    def options_json(self) -> str:
        """Get options as JSON string for database storage."""
        return self.options.model_dump_json(exclude_none=True)

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> "Source":
        """Create Source from database row with JSON parsing."""
        data = dict(row)
        data["options"] = data.get("options") or "{}"
        return cls(**data)

    def __str__(self) -> str:
        return f"Source({self.type.value}:{self.id or '<new>'})"


class Item(BaseModel):
    """One normalized entry ingested from a source."""
    id: str = Field(..., min_length=1, description="Content-addressed item ID")
    user_id: str = Field(..., description="Owning profile ID")
    column_id: str = Field(..., description="Column containing the source")
    source_id: str = Field(..., min_length=1, description="Source the item came from")
    title: str = Field(..., min_length=1, description="Entry title")
    link: str = Field(..., min_length=1, description="Entry link")
    media: Optional[str] = Field(default=None, description="Thumbnail or media URL")
    description: Optional[str] = Field(default=None, description="Cleaned entry body")
    author: Optional[str] = Field(default=None, description="Entry or feed author")
    published_at: int = Field(..., ge=0, description="Publication time")

    def __str__(self) -> str:
        return f"Item({self.title[:50]})"
