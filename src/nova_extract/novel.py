from __future__ import annotations

import logging

from bs4 import BeautifulSoup

from .chapters import extract_chapters
from .content import parse_html
from .http_client import Transport
from .listing import first_attr
from .models import UNTITLED, NovelDocument
from .urls import SITE, absolute_url

logger = logging.getLogger(__name__)

GALLERY_IMAGE_SELECTOR = ".woocommerce-product-gallery img"
SUMMARY_SELECTOR = ".woocommerce-product-details__short-description"

# Product pages render the gallery image eagerly, so plain src comes first.
NOVEL_COVER_ATTRS = ("src", "data-cfsrc", "data-src")

_ATTRIBUTE_ROW = ".woocommerce-product-attributes-item--attribute_pa_{} td"
AUTHOR_SELECTOR = _ATTRIBUTE_ROW.format("escritor")
ARTIST_SELECTOR = _ATTRIBUTE_ROW.format("ilustrador")
STATUS_SELECTOR = _ATTRIBUTE_ROW.format("estado")


def _cell_text(soup: BeautifulSoup, selector: str) -> str | None:
    cells = soup.select(selector)
    if not cells:
        return None
    return "".join(c.get_text() for c in cells).strip() or None


def _summary(soup: BeautifulSoup) -> str | None:
    container = soup.select_one(SUMMARY_SELECTOR)
    if container is None:
        return None
    # Re-parse the fragment on its own so nested markup flattens to text.
    fragment = BeautifulSoup(container.decode_contents(), "html.parser")
    return fragment.get_text().strip()


def parse_novel_page(
    html: str,
    path: str,
    *,
    site: str = SITE,
    url: str | None = None,
) -> NovelDocument:
    soup = parse_html(html, url=url)

    heading = soup.select_one("h1")
    name = heading.get_text().strip() if heading is not None else ""

    gallery_img = soup.select_one(GALLERY_IMAGE_SELECTOR)
    cover = (
        first_attr(gallery_img, NOVEL_COVER_ATTRS) if gallery_img is not None else None
    )

    return NovelDocument(
        path=path,
        name=name or UNTITLED,
        cover=cover,
        author=_cell_text(soup, AUTHOR_SELECTOR),
        artist=_cell_text(soup, ARTIST_SELECTOR),
        status=_cell_text(soup, STATUS_SELECTOR),
        summary=_summary(soup),
        chapters=tuple(extract_chapters(soup, site=site)),
    )


def parse_novel(http: Transport, path: str, *, site: str = SITE) -> NovelDocument:
    url = absolute_url(path, site=site)
    res = http.fetch(url)
    novel = parse_novel_page(res.text, path, site=site, url=url)
    logger.info("Parsed %r with %d chapters", novel.name, len(novel.chapters))
    return novel
