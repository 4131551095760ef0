"""
Manual Refresh Service
======================

Refreshes every source of one column on behalf of its owner, regardless of
how recently the sources were refreshed. Used by the API handler and the CLI.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config.settings import get_settings
from ..database.connection import DatabaseConnection
from ..processing.pipeline import RefreshPipeline, RefreshSummary, RefreshError
from ..storage import SourceRepository, ProfileRepository, ColumnRepository
from ..utils.logging import get_logger_for_component, PerformanceLogger
from ..utils.exceptions import AuthorizationError, DatabaseError, ErrorCode


@dataclass
class ColumnRefreshResult:
    """Outcome of a manual column refresh."""

    column_id: str
    total_sources: int
    summary: RefreshSummary = field(default_factory=RefreshSummary)

    @property
    def updated_count(self) -> int:
        return self.summary.succeeded

    @property
    def errors(self) -> List[RefreshError]:
        return self.summary.errors

    def to_response_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "success": True,
            "updatedCount": self.updated_count,
            "totalSources": self.total_sources,
        }
        if self.errors:
            body["errors"] = [
                {"sourceId": e.source_id, "error": e.error} for e in self.errors
            ]
        return body


class ManualRefreshService:
    """Refreshes the sources of a column for its owner."""

    def __init__(
        self,
        db_connection: DatabaseConnection,
        settings=None,
        pipeline: Optional[RefreshPipeline] = None,
    ):
        """Initialize the manual refresh service.

        Args:
            db_connection: Database connection manager
            settings: Application settings (default: global settings)
            pipeline: Per-source pipeline (default: one over ``db_connection``)
        """
        self.db = db_connection
        self.settings = settings or get_settings()
        self.pipeline = pipeline or RefreshPipeline(db_connection, self.settings)
        self.profile_repository = ProfileRepository(db_connection)
        self.column_repository = ColumnRepository(db_connection)
        self.source_repository = SourceRepository(db_connection)
        self.logger = get_logger_for_component("manual_refresh")

    def refresh_column(
        self, user_id: Optional[str], column_id: str, now: Optional[int] = None
    ) -> ColumnRefreshResult:
        """Refresh all non-deprecated sources of a column.

        Args:
            user_id: Authenticated caller, None when unauthenticated
            column_id: Column to refresh
            now: Refresh time in unix seconds (default: current time)

        Returns:
            Column refresh result; per-source failures are in its errors

        Raises:
            AuthorizationError: Caller unauthenticated or not the column owner
            DatabaseError: Profile or sources could not be loaded
        """
        if not user_id:
            raise AuthorizationError(
                "Unauthorized", error_code=ErrorCode.AUTH_UNAUTHENTICATED
            )

        try:
            profile = self.profile_repository.get_profile(user_id)
        except DatabaseError as e:
            raise DatabaseError(
                "Failed to get user profile", error_code=ErrorCode.DATABASE_ERROR
            ) from e
        if profile is None:
            raise DatabaseError(
                "Failed to get user profile", error_code=ErrorCode.DATABASE_ERROR
            )

        try:
            is_owner = self.column_repository.is_owner(column_id, user_id)
        except DatabaseError as e:
            self.logger.error(
                f"Failed to get column: {e}",
                extra={"column_id": column_id, "user_id": user_id},
            )
            is_owner = False
        if not is_owner:
            raise AuthorizationError(
                "Column not found or unauthorized", resource_id=column_id
            )

        try:
            sources = self.source_repository.get_sources_for_column(column_id, user_id)
        except DatabaseError as e:
            raise DatabaseError(
                "Failed to get sources", error_code=ErrorCode.DATABASE_ERROR
            ) from e

        result = ColumnRefreshResult(column_id=column_id, total_sources=len(sources))
        deprecated = set(self.settings.refresh.deprecated_source_types)

        with PerformanceLogger(
            self.logger, "column refresh", column_id=column_id, user_id=user_id
        ):
            for source in sources:
                if source.type.value in deprecated:
                    self.logger.debug(
                        "Skipping deprecated source",
                        extra={"source_id": source.id, "source_type": source.type.value},
                    )
                    continue

                self.pipeline.process(source, user_id, result.summary, now=now)

        self.logger.info(
            f"Refreshed column {column_id}: {result.updated_count}/{result.total_sources} sources",
            extra={"column_id": column_id, "user_id": user_id},
        )
        return result
