from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Mapping, Protocol, runtime_checkable

import requests
from requests import exceptions as req_exc

from .content import BLOCKED_TITLES
from .errors import TransportError
from .urls import normalize_url

logger = logging.getLogger(__name__)

TRANSIENT_HTTP_STATUSES = {429, 500, 502, 503, 504}

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)


def _retry_after_seconds(headers: dict[str, str]) -> float | None:
    retry_after = headers.get("Retry-After")
    if not retry_after:
        return None
    try:
        return float(retry_after)
    except ValueError:
        return None


def _lower_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {str(k).lower(): str(v) for k, v in headers.items()}


_CHALLENGE_TITLE = re.compile(
    r"<title>\s*(?:"
    + "|".join(re.escape(t) for t in sorted(BLOCKED_TITLES))
    + r")\s*</title>",
    re.IGNORECASE,
)


def is_cloudflare_challenge(
    status_code: int,
    headers: Mapping[str, str],
    body: bytes,
) -> bool:
    """True for Cloudflare interstitials, which must not be retried."""

    lowered = _lower_headers(headers)
    if lowered.get("cf-mitigated", "").lower() == "challenge":
        return True
    if status_code not in {403, 503}:
        return False
    server = lowered.get("server", "").lower()
    content_type = lowered.get("content-type", "").lower()
    if server == "cloudflare" and "html" in content_type:
        return True
    text = body[:20_000].decode("utf-8", errors="ignore")
    return _CHALLENGE_TITLE.search(text) is not None


def response_encoding(resp: requests.Response) -> str | None:
    """Encoding to decode ``resp`` with.

    requests assumes ISO-8859-1 for text/* without a charset, which mangles
    the site's UTF-8 pages; sniff instead in that case.
    """

    content_type = _lower_headers(resp.headers).get("content-type", "").lower()
    if "charset=" in content_type:
        return resp.encoding
    return getattr(resp, "apparent_encoding", None) or "utf-8"


def build_session(user_agent: str = DEFAULT_USER_AGENT) -> requests.Session:
    session = requests.Session()
    session.headers["User-Agent"] = user_agent
    return session


@dataclass(frozen=True)
class FetchResult:
    url: str
    final_url: str
    status_code: int
    headers: dict[str, str]
    fetched_at: float
    body: bytes
    encoding: str | None = None

    @property
    def text(self) -> str:
        try:
            return self.body.decode(self.encoding or "utf-8", errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")


class Fetched(Protocol):
    @property
    def text(self) -> str: ...


@runtime_checkable
class Transport(Protocol):
    """What the extractors need from a transport: one fetch per call."""

    def fetch(
        self,
        url: str,
        *,
        method: str = "GET",
        form: dict[str, str] | None = None,
    ) -> Fetched: ...


class HttpClient:
    """Thin retrying wrapper around a requests session.

    Non-success statuses are returned rather than raised: challenge pages
    come back as 403/503 and callers need to look at their bodies.
    """

    def __init__(
        self,
        session: requests.Session,
        *,
        timeout_s: int = 45,
        max_retries: int = 4,
        backoff_base_s: float = 1.0,
    ) -> None:
        self._session = session
        self._timeout_s = timeout_s
        self._max_retries = max_retries
        self._backoff_base_s = backoff_base_s

    def fetch(
        self,
        url: str,
        *,
        method: str = "GET",
        form: dict[str, str] | None = None,
    ) -> FetchResult:
        verb = method.upper()
        if verb == "GET":
            return self.get(url)
        if verb == "POST":
            return self.post(url, form=form)
        raise ValueError(f"Unsupported HTTP method: {method}")

    def get(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> FetchResult:
        return self._request("GET", url, headers=headers)

    def post(
        self,
        url: str,
        *,
        form: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> FetchResult:
        # Nameless file parts make requests emit multipart/form-data, which is
        # what a browser FormData body looks like on the wire.
        files = {k: (None, str(v)) for k, v in (form or {}).items()}
        return self._request("POST", url, headers=headers, files=files or None)

    def _request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        files: dict[str, tuple[None, str]] | None = None,
    ) -> FetchResult:
        normalized = normalize_url(url)
        last_error: Exception | None = None

        for attempt in range(self._max_retries + 1):
            try:
                logger.debug("%s %s (attempt %d)", method, normalized, attempt + 1)
                resp = self._session.request(
                    method,
                    normalized,
                    timeout=self._timeout_s,
                    headers=headers,
                    files=files,
                )

                if (
                    resp.status_code in TRANSIENT_HTTP_STATUSES
                    and attempt < self._max_retries
                    and not is_cloudflare_challenge(
                        resp.status_code, resp.headers, resp.content
                    )
                ):
                    retry_after = _retry_after_seconds(dict(resp.headers))
                    wait_s = (
                        retry_after
                        if retry_after is not None
                        else self._backoff_base_s * (2**attempt)
                    )
                    logger.info(
                        "HTTP %d from %s, retrying in %.1fs",
                        resp.status_code,
                        normalized,
                        wait_s,
                    )
                    time.sleep(wait_s)
                    continue

                return FetchResult(
                    url=normalized,
                    final_url=str(resp.url),
                    status_code=int(resp.status_code),
                    headers={k: str(v) for k, v in resp.headers.items()},
                    fetched_at=time.time(),
                    body=resp.content,
                    encoding=response_encoding(resp),
                )
            except req_exc.RequestException as e:
                last_error = e
                if attempt >= self._max_retries:
                    break
                time.sleep(self._backoff_base_s * (2**attempt))

        raise TransportError(f"Failed to fetch {normalized}: {last_error}")
