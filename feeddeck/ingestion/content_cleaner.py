"""
Content Cleaner
===============

HTML helpers used by the platform adapters when extracting descriptions,
media and icons from feed entries and web pages.
"""

import html
from typing import Iterable, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from ..utils.logging import get_logger_for_component

logger = get_logger_for_component("content_cleaner")

PARSER = "html.parser"

ICON_RELS = ("icon", "shortcut icon", "apple-touch-icon")


def unescape_html(value: Optional[str]) -> Optional[str]:
    """Decode HTML entities; None and empty values pass through as None."""
    if not value:
        return None
    return html.unescape(value)


def strip_tags(html_content: Optional[str], tags: Iterable[str]) -> Optional[str]:
    """Remove the given tags while keeping their children.

    ``strip_tags("<table><tr><td>a</td></tr></table>", ["table", "tr", "td"])``
    returns ``"a"``.
    """
    if not html_content:
        return None

    soup = BeautifulSoup(html_content, PARSER)
    for element in soup.find_all(list(tags)):
        element.unwrap()
    return str(soup)


def first_image_src(html_content: Optional[str]) -> Optional[str]:
    """Return the src of the first ``<img>`` element, if any."""
    if not html_content:
        return None

    soup = BeautifulSoup(html_content, PARSER)
    for img in soup.find_all("img"):
        src = (img.get("src") or "").strip()
        if src.startswith(("http://", "https://")):
            return src
    return None


def find_favicon(html_content: Optional[str], base_url: str) -> Optional[str]:
    """Find the icon a web page declares in its ``<link rel>`` elements.

    Args:
        html_content: Page HTML
        base_url: URL the page was served from, for relative hrefs

    Returns:
        Absolute icon URL or None
    """
    if not html_content:
        return None

    soup = BeautifulSoup(html_content, PARSER)
    for rel in ICON_RELS:
        for link in soup.find_all("link", href=True):
            link_rel = " ".join(link.get("rel") or []).lower()
            if link_rel == rel:
                return urljoin(base_url, link["href"].strip())

    logger.debug(f"No icon link found on {base_url}")
    return None
