"""
FeedDeck Platform Adapters
==========================

One adapter per supported source type. ``get_adapter`` is the only way the
refresh pipeline obtains one; deprecated types have no adapter.
"""

from typing import Dict, Optional, Type, Union

from .base import FeedAdapter
from .fourchan import FourchanAdapter
from .googlenews import GoogleNewsAdapter
from .lemmy import LemmyAdapter
from .mastodon import MastodonAdapter
from .medium import MediumAdapter
from .pinterest import PinterestAdapter
from .podcast import PodcastAdapter
from .reddit import RedditAdapter
from .rss import RssAdapter
from .stackoverflow import StackoverflowAdapter
from .tumblr import TumblrAdapter
from .youtube import YoutubeAdapter
from ..database.models import SourceType
from ..ingestion.entry_filter import FeedParserConfig
from ..ingestion.http_client import HttpClient
from ..utils.exceptions import ValidationError, ErrorCode

ADAPTERS: Dict[SourceType, Type[FeedAdapter]] = {
    adapter.source_type: adapter
    for adapter in (
        RssAdapter,
        YoutubeAdapter,
        RedditAdapter,
        StackoverflowAdapter,
        LemmyAdapter,
        MediumAdapter,
        PodcastAdapter,
        GoogleNewsAdapter,
        PinterestAdapter,
        TumblrAdapter,
        FourchanAdapter,
        MastodonAdapter,
    )
}


def get_adapter(
    source_type: Union[SourceType, str],
    http_client: Optional[HttpClient] = None,
    settings=None,
    config: Optional[FeedParserConfig] = None,
) -> FeedAdapter:
    """Get the adapter for a source type.

    Raises:
        ValidationError: If the type is unknown or deprecated
    """
    try:
        adapter_class = ADAPTERS[SourceType(source_type)]
    except (KeyError, ValueError) as e:
        raise ValidationError(
            f"Unsupported source type: {getattr(source_type, 'value', source_type)}",
            error_code=ErrorCode.VALIDATION_UNSUPPORTED_TYPE,
            field_name="type",
        ) from e

    return adapter_class(http_client=http_client, settings=settings, config=config)


__all__ = [
    "ADAPTERS",
    "FeedAdapter",
    "get_adapter",
]
