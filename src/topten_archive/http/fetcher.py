"""Blocking httpx client for the news site's HTML pages."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from topten_archive import __version__

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_USER_AGENT = f"Mozilla/5.0 (compatible; TopTenArchiveBot/{__version__})"
HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


@dataclass(slots=True)
class FetchResult:
    url: str
    status_code: int
    content: str
    is_success: bool
    error: str | None = None

    @classmethod
    def failed(cls, url: str, error: str, status_code: int = 0) -> FetchResult:
        return cls(url=url, status_code=status_code, content="", is_success=False, error=error)


class HttpFetcher:
    """Fetches pages and reports transport or status problems as failed results.

    Connection-level retries are left to the httpx transport. A response whose
    ``Content-Type`` is present but not HTML counts as a failure as well, since
    every caller hands the body to an HTML parser.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if transport is None:
            transport = httpx.HTTPTransport(retries=max_retries)
        self._client = httpx.Client(
            timeout=httpx.Timeout(timeout_seconds, connect=10.0),
            headers={"User-Agent": user_agent, "Accept": ", ".join(HTML_CONTENT_TYPES)},
            transport=transport,
            follow_redirects=True,
        )

    def fetch(self, url: str) -> FetchResult:
        try:
            response = self._client.get(url)
        except httpx.TimeoutException:
            logger.warning("Timeout fetching %s", url)
            return FetchResult.failed(url, "timeout")
        except httpx.HTTPError as exc:
            logger.warning("HTTP error fetching %s: %s", url, exc)
            return FetchResult.failed(url, str(exc))

        status = response.status_code
        if not response.is_success:
            return FetchResult.failed(url, f"HTTP {status}", status_code=status)
        content_type = response.headers.get("content-type", "")
        if content_type and not content_type.lower().startswith(HTML_CONTENT_TYPES):
            return FetchResult.failed(
                url,
                f"unexpected content type {content_type!r}",
                status_code=status,
            )
        return FetchResult(url=url, status_code=status, content=response.text, is_success=True)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpFetcher:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
