from __future__ import annotations

from dataclasses import dataclass, field

import pytest

CHALLENGE_HTML = (
    "<html><head><title>Just a moment...</title></head>"
    "<body><h1>Checking your browser</h1>"
    '<div class="dt-css-grid"><div class="wf-cell">'
    '<h4 class="entry-title"><a href="/trap">Trap</a></h4></div></div>'
    "</body></html>"
)


@dataclass(frozen=True)
class FakeResponse:
    text: str


@dataclass
class FakeHttp:
    """Transport stand-in: serves ``routes[url]`` or ``default`` for any URL."""

    default: str = ""
    routes: dict[str, str] = field(default_factory=dict)
    calls: list[tuple[str, str, dict[str, str] | None]] = field(
        default_factory=list
    )

    def fetch(
        self,
        url: str,
        *,
        method: str = "GET",
        form: dict[str, str] | None = None,
    ) -> FakeResponse:
        self.calls.append((method, url, form))
        return FakeResponse(self.routes.get(url, self.default))


@pytest.fixture
def challenge_http() -> FakeHttp:
    return FakeHttp(default=CHALLENGE_HTML)
