from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup, Tag

from .listing import attr_text
from .models import ChapterEntry
from .urls import SITE, strip_origin

logger = logging.getLogger(__name__)

BLOCK_SELECTOR = ".vc_row div.vc_column-inner > div.wpb_wrapper"
BLOCK_TITLE_SELECTOR = ".dt-fancy-title"
CHAPTER_LINK_SELECTOR = ".wpb_tab a"

VOLUME_MARKER = re.compile(r"^Volumen", re.IGNORECASE)

# "Parte 2 - Capítulo 5: El título"
#   group 1: part ("Parte 2"), group 2: chapter label, group 3: title.
# The separator after the part is any single character.
CHAPTER_NAME = re.compile(r"(Parte \d+)\s*.\s*(.+?):\s*(.+)", re.IGNORECASE)


def chapter_display_name(volume: str, text: str) -> str:
    """Build the display name for one chapter link.

    ``"Parte N <sep> <label>: <title>"`` becomes
    ``"<volume> - <label> - Parte N: <title>"`` so the chapter label sorts
    ahead of the part number. Anything else is kept verbatim as
    ``"<volume> - <text>"``.
    """

    match = CHAPTER_NAME.search(text)
    if match is None:
        return f"{volume} - {text}"
    part, label, title = match.groups()
    return f"{volume} - {label} - {part}: {title}"


def volume_title(block: Tag) -> str | None:
    title = block.select_one(BLOCK_TITLE_SELECTOR)
    if title is None:
        return None
    return title.get_text().strip()


def extract_chapters(soup: BeautifulSoup, *, site: str = SITE) -> list[ChapterEntry]:
    chapters: list[ChapterEntry] = []

    for block in soup.select(BLOCK_SELECTOR):
        volume = volume_title(block)
        if not volume or not VOLUME_MARKER.search(volume):
            logger.debug("Skipping non-volume block %r", volume)
            continue

        for link in block.select(CHAPTER_LINK_SELECTOR):
            chapters.append(
                ChapterEntry(
                    name=chapter_display_name(volume, link.get_text().strip()),
                    path=strip_origin(attr_text(link, "href"), site=site),
                )
            )

    return chapters
