from __future__ import annotations

from urllib.parse import ParseResult, quote, urlparse, urlunparse

SITE = "https://novelasligeras.net"

SEARCH_FEED_PATH = (
    "/wp-admin/admin-ajax.php?tags=1&sku=&limit=30&category_results="
    "&order=DESC&category_limit=5&order_by=title&product_thumbnails=1"
    "&title=1&excerpt=1&content=&categories=1&attributes=1"
)

_SEARCH_PAGE_SCOPE = (
    "post_type=product&title=1&excerpt=1&content=0&categories=1"
    "&attributes=1&tags=1&sku=0&orderby=popularity&ixwps=1"
)

# Characters encodeURIComponent leaves alone.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def normalize_url(raw_url: str) -> str:
    """Lowercase scheme + hostname and drop the fragment."""

    parsed: ParseResult = urlparse(raw_url)
    parsed = parsed._replace(
        scheme=(parsed.scheme or "").lower(),
        netloc=(parsed.netloc or "").lower(),
        fragment="",
    )
    return urlunparse(parsed)


def strip_origin(url: str | None, *, site: str = SITE) -> str:
    """Turn an absolute site URL into a site-relative path.

    Only the first occurrence of the origin is removed; URLs on other hosts
    pass through untouched.
    """

    return (url or "").replace(site, "", 1)


def absolute_url(path: str, *, site: str = SITE) -> str:
    return site + path


def search_feed_url(*, site: str = SITE) -> str:
    return site + SEARCH_FEED_PATH


def search_page_url(term: str, page: int, *, site: str = SITE) -> str:
    encoded = quote(term, safe=_URI_COMPONENT_SAFE)
    return f"{site}/index.php/page/{page}/?s={encoded}&{_SEARCH_PAGE_SCOPE}"
