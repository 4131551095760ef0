"""
Source Refresh Pipeline
=======================

The per-source pipeline shared by the manual and scheduled refresh entry
points:

    resolve -> fetch -> normalize -> persist source -> persist items

``process`` wraps one pipeline run and turns any failure into an entry of the
run's error list, so a single source can never abort a multi-source run.
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Dict, Any

from ..config.settings import get_settings
from ..database.connection import DatabaseConnection
from ..database.models import Source, Item
from ..feeds import get_adapter
from ..ingestion.entry_filter import FeedParserConfig
from ..ingestion.feed_fetcher import FeedFetcher
from ..ingestion.feed_parser import parse_feed
from ..ingestion.http_client import HttpClient
from ..storage import SourceRepository, ItemRepository
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import FeedDeckError, FetchError, PersistenceError


@dataclass
class SourceRefreshResult:
    """Outcome of a successful pipeline run for one source."""

    source: Source
    items: List[Item]
    created: bool = False

    @property
    def items_count(self) -> int:
        return len(self.items)


@dataclass
class RefreshError:
    """A per-source failure recorded during a run."""

    owner_id: str
    source_id: str
    error: str

    def to_dict(self) -> Dict[str, str]:
        return {"profileId": self.owner_id, "sourceId": self.source_id, "error": self.error}


@dataclass
class RefreshSummary:
    """Counts and failures of a refresh run."""

    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    errors: List[RefreshError] = field(default_factory=list)

    def record_success(self) -> None:
        self.processed += 1
        self.succeeded += 1

    def record_failure(self, error: RefreshError) -> None:
        self.processed += 1
        self.failed += 1
        self.errors.append(error)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processed": self.processed,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "errors": [e.to_dict() for e in self.errors],
        }


def error_message(exc: Exception) -> str:
    """Message recorded for a failed source; never includes a traceback."""
    if isinstance(exc, FeedDeckError):
        return exc.message
    return str(exc) or "Unknown error"


class RefreshPipeline:
    """Runs resolve, fetch, normalize and persist for single sources."""

    def __init__(
        self,
        db_connection: Optional[DatabaseConnection] = None,
        settings=None,
        http_client: Optional[HttpClient] = None,
        fetcher: Optional[FeedFetcher] = None,
        source_repository: Optional[SourceRepository] = None,
        item_repository: Optional[ItemRepository] = None,
    ):
        """Initialize refresh pipeline.

        Args:
            db_connection: Database connection manager; required unless both
                repositories are given
            settings: Application settings (default: global settings)
            http_client: Client for feed fetches and secondary lookups
            fetcher: Feed fetcher (default: one over ``http_client``)
            source_repository: Sink for updated sources
            item_repository: Sink for new items
        """
        self.settings = settings or get_settings()
        self.logger = get_logger_for_component("pipeline")

        self.http = http_client or HttpClient(self.settings)
        self.fetcher = fetcher or FeedFetcher(self.http)
        self.config = FeedParserConfig.from_settings(self.settings)

        self.source_repository = source_repository or SourceRepository(db_connection)
        self.item_repository = item_repository or ItemRepository(db_connection)

    def _load(
        self, source: Source, feed_data: Optional[str] = None
    ) -> Tuple[Source, List[Item]]:
        adapter = get_adapter(source.type, self.http, self.settings, self.config)
        resolved = adapter.resolve(source)

        if feed_data is not None:
            document = parse_feed(feed_data)
        else:
            document = self.fetcher.fetch(adapter.feed_url(resolved))

        return adapter.normalize(resolved, document)

    def preview(
        self, source: Source, feed_data: Optional[str] = None
    ) -> Tuple[Source, List[Item]]:
        """Resolve, fetch and normalize a source without persisting anything."""
        return self._load(source, feed_data)

    def refresh_source(
        self,
        source: Source,
        feed_data: Optional[str] = None,
        now: Optional[int] = None,
    ) -> SourceRefreshResult:
        """Refresh one source and persist the result.

        Args:
            source: Source to refresh; not modified
            feed_data: Raw feed document to use instead of fetching
            now: Refresh time in unix seconds (default: current time)

        Returns:
            Updated source and the items written

        Raises:
            ValidationError, FetchError, ParseError, PersistenceError
        """
        now = now if now is not None else int(time.time())
        created = not source.id

        updated, items = self._load(source, feed_data)

        updated.updated_at = now
        if created or not updated.created_at:
            updated.created_at = now

        try:
            self.source_repository.upsert_source(updated)
        except PersistenceError as e:
            raise PersistenceError(
                "Failed to update source",
                record_id=updated.id,
                context={"cause": e.message},
            ) from e

        if items:
            try:
                self.item_repository.upsert_items(items)
            except PersistenceError as e:
                raise PersistenceError(
                    "Failed to save items",
                    record_id=updated.id,
                    context={"cause": e.message},
                ) from e

        return SourceRefreshResult(source=updated, items=items, created=created)

    def process(
        self,
        source: Source,
        owner_id: str,
        summary: RefreshSummary,
        now: Optional[int] = None,
    ) -> Optional[SourceRefreshResult]:
        """Refresh a source, recording the outcome in ``summary``.

        Returns:
            The refresh result, or None if the source failed
        """
        context = {
            "source_id": source.id,
            "owner_id": owner_id,
            "source_type": source.type.value,
        }

        try:
            self.logger.info("Processing source", extra=context)
            result = self.refresh_source(source, now=now)

        except Exception as e:
            message = error_message(e)
            context["error"] = message

            if isinstance(e, FetchError):
                self.logger.warning("Failed to fetch source", extra=context)
            elif isinstance(e, FeedDeckError):
                self.logger.error("Failed to process source", extra=context)
            else:
                self.logger.error(
                    "Unexpected error processing source", extra=context, exc_info=True
                )

            summary.record_failure(
                RefreshError(owner_id=owner_id, source_id=source.id, error=message)
            )
            return None

        summary.record_success()
        self.logger.info(
            "Successfully processed source",
            extra={**context, "items_count": result.items_count},
        )
        return result
