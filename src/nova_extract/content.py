from __future__ import annotations

import logging
from typing import Final

from bs4 import BeautifulSoup

from .errors import BlockedBySource

logger = logging.getLogger(__name__)

# Exact <title> texts of interstitials served instead of real pages.
BLOCKED_TITLES: Final[frozenset[str]] = frozenset(
    {
        "Attention Required! | Cloudflare",
        "Just a moment...",
    }
)


def page_title(soup: BeautifulSoup) -> str:
    return "".join(t.get_text() for t in soup.select("title"))


def ensure_not_blocked(soup: BeautifulSoup, *, url: str | None = None) -> None:
    title = page_title(soup)
    if title in BLOCKED_TITLES:
        logger.warning("Challenge page %r served for %s", title, url or "<document>")
        raise BlockedBySource(url=url, title=title)


def parse_html(text: str, *, url: str | None = None) -> BeautifulSoup:
    """Parse a fetched document, refusing challenge pages.

    The check runs before any caller gets to read a field: a challenge page
    parses fine and would otherwise yield empty or bogus data.
    """

    soup = BeautifulSoup(text, "html.parser")
    ensure_not_blocked(soup, url=url)
    return soup
