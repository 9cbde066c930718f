from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

UNTITLED = "Untitled"


@dataclass(frozen=True)
class CatalogEntry:
    name: str
    cover: str
    path: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ChapterEntry:
    name: str
    path: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class NovelDocument:
    path: str
    name: str = UNTITLED
    cover: str | None = None
    author: str | None = None
    artist: str | None = None
    status: str | None = None
    summary: str | None = None
    chapters: tuple[ChapterEntry, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["chapters"] = [c.to_dict() for c in self.chapters]
        return out
