"""
Content-Addressed Identifiers
=============================

Deterministic ids for sources and items. The digest is taken over the exact
UTF-8 bytes of the identifier; no URL or whitespace normalization happens
here, so identifiers that differ by a single byte yield different ids.
"""

import hashlib


def _digest(identifier: str) -> str:
    if not identifier:
        raise ValueError("identifier must be a non-empty string")
    return hashlib.md5(identifier.encode("utf-8")).hexdigest()


def generate_source_id(
    source_type: str, user_id: str, column_id: str, identifier: str
) -> str:
    """Build the id of a source.

    Args:
        source_type: Platform type of the source (e.g. ``"reddit"``)
        user_id: Owning profile ID
        column_id: Column containing the source
        identifier: Canonical feed URL of the source

    Returns:
        ``{source_type}-{user_id}-{column_id}-{md5(identifier)}``
    """
    source_type = getattr(source_type, "value", source_type)
    return f"{source_type}-{user_id}-{column_id}-{_digest(identifier)}"


def generate_item_id(source_id: str, identifier: str) -> str:
    """Build the id of an item from its source id and entry id or link."""
    return f"{source_id}-{_digest(identifier)}"
