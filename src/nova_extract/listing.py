from __future__ import annotations

import json
import logging
from typing import Any, Iterable

from bs4 import BeautifulSoup, Tag

from .content import parse_html
from .errors import MalformedResponse
from .http_client import Transport
from .models import CatalogEntry
from .urls import SITE, search_feed_url, search_page_url, strip_origin

logger = logging.getLogger(__name__)

GRID_CELL_SELECTOR = ".dt-css-grid div.wf-cell"
CELL_TITLE_SELECTOR = "h4.entry-title a"

# Listing cells lazy-load their thumbnails, so the lazy attribute comes first.
LISTING_COVER_ATTRS = ("data-src", "data-cfsrc", "src")

FEED_ACTION = "product_search"


def attr_text(node: Tag | None, name: str) -> str:
    if node is None:
        return ""
    val = node.get(name)
    if isinstance(val, list):
        return str(val[0]) if val else ""
    return str(val or "")


def first_attr(node: Tag | None, names: Iterable[str]) -> str:
    """Return the first non-empty attribute among ``names``, or ``""``."""

    for name in names:
        value = attr_text(node, name)
        if value:
            return value
    return ""


def parse_search_feed(
    text: str,
    *,
    site: str = SITE,
    url: str | None = None,
) -> list[CatalogEntry]:
    try:
        records: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponse(
            f"Search feed is not valid JSON: {e}", url=url
        ) from e

    if not isinstance(records, list):
        raise MalformedResponse(
            f"Search feed must be a JSON array, got {type(records).__name__}",
            url=url,
        )

    entries: list[CatalogEntry] = []
    for record in records:
        if not isinstance(record, dict) or "url" not in record:
            raise MalformedResponse(
                f"Unexpected search feed record: {record!r}", url=url
            )
        entries.append(
            CatalogEntry(
                name=str(record.get("title") or ""),
                cover=str(record.get("thumbnail") or ""),
                path=strip_origin(str(record["url"] or ""), site=site),
            )
        )
    return entries


def _cell_entry(cell: Tag, *, site: str) -> CatalogEntry:
    link = cell.select_one(CELL_TITLE_SELECTOR)
    img = cell.select_one("img")
    return CatalogEntry(
        name=link.get_text().strip() if link is not None else "",
        cover=first_attr(img, LISTING_COVER_ATTRS),
        path=strip_origin(attr_text(link, "href"), site=site),
    )


def parse_search_page(
    html: str,
    *,
    site: str = SITE,
    url: str | None = None,
) -> list[CatalogEntry]:
    soup: BeautifulSoup = parse_html(html, url=url)
    return [_cell_entry(cell, site=site) for cell in soup.select(GRID_CELL_SELECTOR)]


def search_novels(
    http: Transport,
    term: str,
    page: int = 1,
    *,
    site: str = SITE,
) -> list[CatalogEntry]:
    """Search the catalogue.

    The first page comes from the JSON search feed; later pages are scraped
    from the rendered search results, which only exist from page 2 on.
    """

    if page <= 1:
        url = search_feed_url(site=site)
        res = http.fetch(
            url,
            method="POST",
            form={
                "action": FEED_ACTION,
                "product-search": str(page),
                "product-query": term,
            },
        )
        entries = parse_search_feed(res.text, site=site, url=url)
    else:
        url = search_page_url(term, page, site=site)
        res = http.fetch(url)
        entries = parse_search_page(res.text, site=site, url=url)

    logger.info("Search %r page %d: %d entries", term, page, len(entries))
    return entries


def popular_novels(
    http: Transport,
    page: int = 1,
    *,
    site: str = SITE,
) -> list[CatalogEntry]:
    return search_novels(http, "", page, site=site)
