from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from . import __version__
from .config import SourceConfig
from .http_client import Transport
from .listing import popular_novels, search_novels
from .models import CatalogEntry, NovelDocument
from .novel import parse_novel
from .sanitize import parse_chapter
from .urls import SITE


@dataclass(frozen=True)
class NovaSource:
    """The four host-facing operations bound to one transport.

    Holds no state besides the transport and the site origin; every call
    fetches and parses independently.
    """

    id: ClassVar[str] = "novelasligeras.net"
    name: ClassVar[str] = "NOVA"
    version: ClassVar[str] = __version__

    http: Transport
    site: str = SITE

    @classmethod
    def from_config(cls, config: SourceConfig) -> NovaSource:
        return cls(http=config.http_client(), site=config.site)

    def popular_novels(self, page: int = 1) -> list[CatalogEntry]:
        return popular_novels(self.http, page, site=self.site)

    def search_novels(self, term: str, page: int = 1) -> list[CatalogEntry]:
        return search_novels(self.http, term, page, site=self.site)

    def parse_novel(self, path: str) -> NovelDocument:
        return parse_novel(self.http, path, site=self.site)

    def parse_chapter(self, path: str) -> str:
        return parse_chapter(self.http, path, site=self.site)
