from __future__ import annotations


class ExtractError(Exception):
    """Base class for errors raised by the extraction core."""


class BlockedBySource(ExtractError):
    """The source answered with an anti-bot interstitial instead of content."""

    def __init__(
        self,
        message: str = "Captcha error, please open in webview",
        *,
        url: str | None = None,
        title: str | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.title = title


class MalformedResponse(ExtractError, ValueError):
    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class TransportError(RuntimeError):
    """Raised by HttpClient when a request cannot be completed at all."""
