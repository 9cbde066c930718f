from __future__ import annotations

import logging
from typing import Final

from bs4 import BeautifulSoup, Tag

from .content import parse_html
from .http_client import Transport
from .listing import attr_text
from .urls import SITE, absolute_url

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_SELECTOR: Final = ".wpb_text_column.wpb_content_element > .wpb_wrapper"

# (fingerprint, selector) pairs, checked in order against the raw document.
# Chapter pages come from several templates with different DOM shapes and the
# only reliable tell is boilerplate text particular to each one.
CONTENT_TEMPLATES: Final[tuple[tuple[str, str], ...]] = (
    ("Nadie entra sin permiso en la Gran Tumba de Nazarick", "#content"),
)

AD_BLOCK_TAG = "center"


def content_selector(raw_text: str) -> str:
    for fingerprint, selector in CONTENT_TEMPLATES:
        if fingerprint in raw_text:
            return selector
    return DEFAULT_CONTENT_SELECTOR


def remove_ad_blocks(container: Tag) -> int:
    removed = 0
    for block in container.find_all(AD_BLOCK_TAG):
        # Nested ads go down with their outer block.
        if block.decomposed:
            continue
        block.decompose()
        removed += 1
    return removed


def _is_style_centered(el: Tag) -> bool:
    style = attr_text(el, "style").lower()
    return "text-align" in style and "center" in style


def normalize_centering(container: Tag) -> int:
    """Replace inline ``text-align: center`` elements with bare <center> tags.

    Children are moved into the new tag rather than re-serialized, so nested
    matches are still attached and get rewritten in the same pass. The
    replacement carries no style, so a second pass is a no-op.
    """

    factory = BeautifulSoup("", "html.parser")
    replaced = 0
    for el in container.find_all(True):
        if not _is_style_centered(el):
            continue
        center = factory.new_tag("center")
        center.extend(list(el.contents))
        el.replace_with(center)
        replaced += 1
    return replaced


def sanitize_chapter_html(raw_text: str, *, url: str | None = None) -> str:
    soup = parse_html(raw_text, url=url)

    selector = content_selector(raw_text)
    container = soup.select_one(selector)
    if container is None:
        logger.info("No content container %r in %s", selector, url or "<document>")
        return ""

    # Ads go first: the rewrite below produces <center> tags of its own.
    removed = remove_ad_blocks(container)
    centered = normalize_centering(container)
    logger.debug("Removed %d ad blocks, normalized %d centered", removed, centered)

    return container.decode_contents()


def parse_chapter(http: Transport, path: str, *, site: str = SITE) -> str:
    url = absolute_url(path, site=site)
    res = http.fetch(url)
    return sanitize_chapter_html(res.text, url=url)
