"""
Refresh Entry Points
====================

Transport-independent handlers for the manual and scheduled refresh
requests. Each returns a ``HandlerResponse`` carrying the status code and the
JSON body; framing the HTTP response is left to the hosting server.

Unexpected failures are logged with their traceback and answered with a
generic body so internals never reach the caller.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..database.connection import DatabaseConnection
from ..scheduler.scheduled_refresh import ScheduledRefresh
from ..services.manual_refresh_service import ManualRefreshService
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import AuthorizationError, DatabaseError, ValidationError

logger = get_logger_for_component("api")

MANUAL_FAILURE = "An unexpected error occurred"
SCHEDULED_FAILURE = "Scheduled refresh failed"


@dataclass
class HandlerResponse:
    """Status code and JSON body of a handler result."""

    status_code: int
    body: Dict[str, Any]


def _parse_positive_int(name: str, value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    number = int(value)
    if number < 1:
        raise ValidationError(f"{name} must be at least 1, got {number}", field_name=name)
    return number


def handle_manual_refresh(
    caller_id: Optional[str],
    body: Optional[Mapping[str, Any]],
    db_connection: DatabaseConnection,
    settings=None,
    service: Optional[ManualRefreshService] = None,
) -> HandlerResponse:
    """Refresh one column for its owner.

    Args:
        caller_id: Resolved caller identity, None if unauthenticated
        body: Request body ``{"columnId": ...}``
        db_connection: Database connection manager
        settings: Application settings (default: global settings)
        service: Preconfigured service, mainly for tests

    Returns:
        200 with ``{success, updatedCount, totalSources, errors?}``, 401, 403
        or 500
    """
    try:
        if not caller_id:
            return HandlerResponse(401, {"error": "Unauthorized"})

        service = service or ManualRefreshService(db_connection, settings)
        column_id = (body or {})["columnId"]

        result = service.refresh_column(caller_id, column_id)
        return HandlerResponse(200, result.to_response_body())

    except AuthorizationError as e:
        logger.warning(
            f"Manual refresh rejected: {e.message}", extra={"user_id": caller_id}
        )
        return HandlerResponse(401 if e.is_unauthenticated else 403, {"error": e.message})
    except DatabaseError as e:
        logger.error(
            f"Manual refresh failed: {e.message}",
            extra={"user_id": caller_id, **e.to_dict()},
        )
        return HandlerResponse(500, {"error": e.message})
    except Exception:
        logger.error(MANUAL_FAILURE, extra={"user_id": caller_id}, exc_info=True)
        return HandlerResponse(500, {"error": MANUAL_FAILURE})


def handle_scheduled_refresh(
    authorization: Optional[str],
    params: Optional[Mapping[str, Any]],
    db_connection: DatabaseConnection,
    settings=None,
    scheduler: Optional[ScheduledRefresh] = None,
) -> HandlerResponse:
    """Run a scheduled refresh.

    Args:
        authorization: Shared secret or ``Bearer`` service credential
        params: Query parameters ``batch`` and ``max``
        db_connection: Database connection manager
        settings: Application settings (default: global settings)
        scheduler: Preconfigured scheduler, mainly for tests

    Returns:
        200 with ``{success, profilesProcessed, sourcesProcessed, errors,
        errorDetails?}``, 401 or 500
    """
    try:
        scheduler = scheduler or ScheduledRefresh(db_connection, settings)
        if not scheduler.authorize(authorization):
            return HandlerResponse(401, {"error": "Unauthorized"})

        refresh = scheduler.settings.refresh
        params = params or {}
        batch = _parse_positive_int("batch", params.get("batch"), refresh.default_batch)
        max_sources = _parse_positive_int("max", params.get("max"), refresh.default_max_sources)

        result = scheduler.run(batch=batch, max_sources=max_sources)
        return HandlerResponse(200, result.to_response_body())

    except DatabaseError as e:
        logger.error(f"Scheduled refresh failed: {e.message}", extra=e.to_dict())
        return HandlerResponse(500, {"error": e.message})
    except Exception:
        logger.error(SCHEDULED_FAILURE, exc_info=True)
        return HandlerResponse(500, {"error": SCHEDULED_FAILURE})
