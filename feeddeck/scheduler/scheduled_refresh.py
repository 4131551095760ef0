"""
FeedDeck Scheduled Refresh - Cron Coordination
==============================================

Unattended refresh run, triggered by an external scheduler with a shared
secret or the service credential.

Selection:
- profiles: premium, or free profiles still inside the trial window,
  bounded by ``batch``
- sources: per profile, the stalest sources not refreshed within the
  staleness threshold, deprecated types excluded, bounded overall by
  the number of sources refreshed successfully (``max_sources``)
- free profiles refresh the throttled source type at most once per
  ``throttle_seconds``
"""

import hmac
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..config.settings import get_settings
from ..database.connection import DatabaseConnection
from ..database.models import Profile, Source
from ..processing.pipeline import RefreshPipeline, RefreshSummary
from ..storage import SourceRepository, ProfileRepository
from ..utils.logging import get_logger_for_component, PerformanceLogger
from ..utils.exceptions import DatabaseError, ErrorCode, ValidationError

BEARER_PREFIX = "Bearer "


@dataclass
class ScheduledRefreshResult:
    """Outcome of a scheduled run."""

    profiles_processed: int = 0
    summary: RefreshSummary = field(default_factory=RefreshSummary)

    def to_response_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "success": True,
            "profilesProcessed": self.profiles_processed,
            "sourcesProcessed": self.summary.succeeded,
            "errors": self.summary.failed,
        }
        if self.summary.errors:
            body["errorDetails"] = [e.to_dict() for e in self.summary.errors]
        return body


class ScheduledRefresh:
    """Selects eligible profiles and stale sources and refreshes them."""

    def __init__(
        self,
        db_connection: DatabaseConnection,
        settings=None,
        pipeline: Optional[RefreshPipeline] = None,
    ):
        self.settings = settings or get_settings()
        self.pipeline = pipeline or RefreshPipeline(db_connection, self.settings)
        self.profile_repository = ProfileRepository(db_connection)
        self.source_repository = SourceRepository(db_connection)
        self.logger = get_logger_for_component("scheduler")

    def authorize(self, authorization: Optional[str]) -> bool:
        """Check the caller's credential against the configured secrets.

        Accepts the raw credential or an ``Authorization`` header value with
        a ``Bearer`` prefix. With no secrets configured every caller is
        rejected.
        """
        if not authorization:
            return False

        credential = authorization
        if credential.startswith(BEARER_PREFIX):
            credential = credential[len(BEARER_PREFIX):]
        credential = credential.strip()

        return any(
            hmac.compare_digest(credential.encode(), accepted.encode())
            for accepted in self.settings.auth.accepted_credentials()
        )

    def is_throttled(self, profile: Profile, source: Source, now: int) -> bool:
        """Whether the per-type throttle keeps ``source`` out of this run.

        Premium profiles are exempt.
        """
        refresh = self.settings.refresh
        if not refresh.throttled_source_type or profile.is_premium:
            return False
        if source.type.value != refresh.throttled_source_type:
            return False
        return source.updated_at > now - refresh.throttle_seconds

    def run(
        self,
        batch: Optional[int] = None,
        max_sources: Optional[int] = None,
        now: Optional[int] = None,
    ) -> ScheduledRefreshResult:
        """Execute one scheduled refresh run.

        Args:
            batch: Maximum number of profiles (default: ``refresh.default_batch``)
            max_sources: Maximum number of sources refreshed successfully
                across the run; failed sources do not count
                (default: ``refresh.default_max_sources``)
            now: Run time in unix seconds (default: current time)

        Returns:
            Run result with per-source failures

        Raises:
            ValidationError: If ``batch`` or ``max_sources`` is below 1
            DatabaseError: If eligible profiles cannot be loaded
        """
        refresh = self.settings.refresh
        if batch is None:
            batch = refresh.default_batch
        if max_sources is None:
            max_sources = refresh.default_max_sources
        for name, value in (("batch", batch), ("max_sources", max_sources)):
            if value < 1:
                raise ValidationError(f"{name} must be at least 1, got {value}", field_name=name)
        now = now if now is not None else int(time.time())

        self.logger.info(
            "Starting scheduled feed refresh",
            extra={"batch": batch, "max_sources": max_sources},
        )

        try:
            profiles = self.profile_repository.get_eligible_profiles(
                created_after=now - refresh.free_trial_days * 24 * 60 * 60,
                limit=batch,
            )
        except DatabaseError as e:
            self.logger.error(f"Failed to get profiles: {e}")
            raise DatabaseError(
                "Failed to get profiles", error_code=ErrorCode.DATABASE_ERROR
            ) from e

        result = ScheduledRefreshResult(profiles_processed=len(profiles))
        summary = result.summary
        updated_before = now - refresh.staleness_seconds

        with PerformanceLogger(self.logger, "scheduled refresh", batch=batch):
            for profile in profiles:
                if summary.succeeded >= max_sources:
                    break

                try:
                    sources = self.source_repository.get_stale_sources(
                        profile.id,
                        updated_before=updated_before,
                        limit=refresh.sources_per_profile,
                        exclude_types=refresh.deprecated_source_types,
                    )
                except DatabaseError as e:
                    self.logger.error(
                        f"Failed to get sources: {e}", extra={"owner_id": profile.id}
                    )
                    continue

                for source in sources:
                    if summary.succeeded >= max_sources:
                        break

                    if self.is_throttled(profile, source, now):
                        self.logger.debug(
                            "Skipping throttled source",
                            extra={"source_id": source.id, "owner_id": profile.id},
                        )
                        continue

                    self.pipeline.process(source, profile.id, summary, now=now)

        self.logger.info(
            f"Scheduled refresh finished: {summary.succeeded} succeeded, {summary.failed} failed",
            extra={"profiles_processed": result.profiles_processed},
        )
        return result
