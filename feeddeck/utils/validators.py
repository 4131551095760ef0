"""
FeedDeck Input Validators
=========================

Validation helpers for the user-supplied parts of a source configuration.
Feed URLs are checked but never rewritten here: the canonical URL is used
as the identity input for source ids, so any normalization belongs to the
platform adapter that owns the URL format.
"""

import re
from typing import Optional
from urllib.parse import urlparse

from .exceptions import ValidationError, ErrorCode


class URLValidator:
    """URL validation utilities."""

    ALLOWED_SCHEMES = {"http", "https"}

    SUSPICIOUS_PATTERNS = [
        r"javascript:",
        r"data:",
        r"file:",
        r"localhost",
        r"127\.0\.0\.1",
        r"10\.\d+\.\d+\.\d+",
        r"192\.168\.\d+\.\d+",
    ]

    @classmethod
    def validate_feed_url(cls, url: Optional[str], field_name: str = "url") -> str:
        """Validate a feed URL.

        Args:
            url: URL to validate
            field_name: Option name reported in the error context

        Returns:
            The URL with surrounding whitespace removed

        Raises:
            ValidationError: If URL is invalid
        """
        if not url or not isinstance(url, str) or not url.strip():
            raise ValidationError(
                "URL is required and must be a string",
                error_code=ErrorCode.VALIDATION_REQUIRED_FIELD,
                field_name=field_name,
            )

        url = url.strip()

        try:
            parsed = urlparse(url)
        except ValueError as e:
            raise ValidationError(
                f"Invalid URL format: {e}",
                field_name=field_name,
            ) from e

        if parsed.scheme.lower() not in cls.ALLOWED_SCHEMES:
            raise ValidationError(
                f"URL scheme must be {' or '.join(sorted(cls.ALLOWED_SCHEMES))}",
                field_name=field_name,
            )

        if not parsed.netloc:
            raise ValidationError(
                "URL must include a hostname",
                field_name=field_name,
            )

        if cls._has_suspicious_patterns(parsed.netloc):
            raise ValidationError(
                "URL points to a disallowed host",
                field_name=field_name,
            )

        return url

    @classmethod
    def _has_suspicious_patterns(cls, value: str) -> bool:
        value = value.lower()
        return any(re.search(pattern, value) for pattern in cls.SUSPICIOUS_PATTERNS)

    @classmethod
    def hostname_matches(cls, url: str, domain: str) -> bool:
        """Check whether ``url`` is served from ``domain`` or one of its subdomains."""
        try:
            hostname = (urlparse(url).hostname or "").lower()
        except ValueError:
            return False
        domain = domain.lower()
        return hostname == domain or hostname.endswith(f".{domain}")


def require_option(value: Optional[str], field_name: str) -> str:
    """Return a stripped, non-empty option value or raise ValidationError."""
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationError(
            "Invalid source options",
            error_code=ErrorCode.VALIDATION_REQUIRED_FIELD,
            field_name=field_name,
        )
    return value.strip()
