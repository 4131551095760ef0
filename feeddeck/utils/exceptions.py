"""
FeedDeck Custom Exceptions
==========================

Custom exception hierarchy for FeedDeck with error codes, context
information and a recoverable flag used by the refresh orchestrator to
decide how loudly a per-source failure is reported.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for categorizing exceptions."""

    # Configuration errors (C001-C099)
    CONFIG_INVALID = "C001"
    CONFIG_MISSING = "C002"

    # Database errors (D001-D099)
    DATABASE_CONNECTION = "D001"
    DATABASE_SCHEMA = "D002"
    DATABASE_CONSTRAINT = "D003"
    DATABASE_TRANSACTION = "D004"
    DATABASE_ERROR = "D006"

    # Feed ingestion errors (F001-F099)
    FEED_INVALID_URL = "F001"
    FEED_FETCH_TIMEOUT = "F002"
    FEED_PARSE_ERROR = "F003"
    FEED_NETWORK_ERROR = "F004"
    FEED_ACCESS_DENIED = "F005"
    FEED_NOT_FOUND = "F006"

    # Validation errors (V001-V099)
    VALIDATION_REQUIRED_FIELD = "V001"
    VALIDATION_INVALID_FORMAT = "V002"
    VALIDATION_UNSUPPORTED_TYPE = "V003"

    # Authorization errors (U001-U099)
    AUTH_UNAUTHENTICATED = "U001"
    AUTH_FORBIDDEN = "U002"


class FeedDeckError(Exception):
    """Base exception for all FeedDeck errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        context: Optional[Dict[str, Any]] = None,
        recoverable: bool = False,
    ):
        """Initialize FeedDeck error.

        Args:
            message: Technical error message for logging
            error_code: Categorized error code
            context: Additional context information
            recoverable: Whether a later refresh may succeed without changes
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.recoverable = recoverable

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code.value if self.error_code else None,
            "error_message": self.message,
            "context": self.context,
            "recoverable": self.recoverable,
        }

    def __str__(self) -> str:
        """String representation with error code."""
        if self.error_code:
            return f"[{self.error_code.value}] {self.message}"
        return self.message


class ConfigurationError(FeedDeckError):
    """Configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", {})
        if config_key:
            context["config_key"] = config_key

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", ErrorCode.CONFIG_INVALID),
            context=context,
            **kwargs,
        )


class DatabaseError(FeedDeckError):
    """Database-related errors."""

    def __init__(self, message: str, query: Optional[str] = None, **kwargs):
        """Initialize database error.

        Args:
            message: Error message
            query: SQL query that caused the error
            **kwargs: Additional arguments for FeedDeckError
        """
        context = kwargs.pop("context", {})
        if query:
            context["query"] = query

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", ErrorCode.DATABASE_CONNECTION),
            context=context,
            recoverable=kwargs.pop("recoverable", True),
            **kwargs,
        )


class PersistenceError(DatabaseError):
    """The persistence sink rejected an upsert.

    The source keeps its old ``updated_at`` and is picked up again by the
    next scheduled pass.
    """

    def __init__(self, message: str, record_id: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", {})
        if record_id:
            context["record_id"] = record_id

        super().__init__(
            message,
            context=context,
            error_code=kwargs.pop("error_code", ErrorCode.DATABASE_ERROR),
            **kwargs,
        )


class FeedError(FeedDeckError):
    """Feed ingestion and parsing errors."""

    def __init__(self, message: str, feed_url: Optional[str] = None, **kwargs):
        """Initialize feed error.

        Args:
            message: Error message
            feed_url: Feed URL that caused the error
            **kwargs: Additional arguments for FeedDeckError
        """
        context = kwargs.pop("context", {})
        if feed_url:
            context["feed_url"] = feed_url

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", ErrorCode.FEED_NETWORK_ERROR),
            context=context,
            recoverable=kwargs.pop("recoverable", True),
            **kwargs,
        )


class FetchError(FeedError):
    """Network failure or timeout while fetching a feed or doing a lookup."""

    pass


class ParseError(FeedError):
    """Feed document is missing fields required to normalize it."""

    def __init__(self, message: str, feed_url: Optional[str] = None, **kwargs):
        super().__init__(
            message,
            feed_url=feed_url,
            error_code=kwargs.pop("error_code", ErrorCode.FEED_PARSE_ERROR),
            recoverable=kwargs.pop("recoverable", False),
            **kwargs,
        )


class ValidationError(FeedDeckError):
    """Source configuration or input validation errors."""

    def __init__(self, message: str, field_name: Optional[str] = None, **kwargs):
        """Initialize validation error.

        Args:
            message: Error message
            field_name: Field name that failed validation
            **kwargs: Additional arguments for FeedDeckError
        """
        context = kwargs.pop("context", {})
        if field_name:
            context["field_name"] = field_name

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", ErrorCode.VALIDATION_INVALID_FORMAT),
            context=context,
            recoverable=kwargs.pop("recoverable", False),
            **kwargs,
        )


class AuthorizationError(FeedDeckError):
    """Caller is not authenticated or not allowed to act on a resource."""

    def __init__(self, message: str, resource_id: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", {})
        if resource_id:
            context["resource_id"] = resource_id

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", ErrorCode.AUTH_FORBIDDEN),
            context=context,
            recoverable=False,
            **kwargs,
        )

    @property
    def is_unauthenticated(self) -> bool:
        return self.error_code == ErrorCode.AUTH_UNAUTHENTICATED
