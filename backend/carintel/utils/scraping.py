"""
Shared scraping utilities for HTTP-based listing scrapers.

Provides fetch_html with:
- A fixed, browser-like header bundle
- A single attempt with an explicit timeout (no retry)
- Typed FetchError on non-2xx or network failure
- Digits-only number parsing from messy HTML text
"""

import logging
import re

import httpx

from carintel.config import settings

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)

_NON_DIGITS_RE = re.compile(r"[^0-9]")


class FetchError(Exception):
    """Raised when a listing page cannot be fetched."""

    def __init__(self, status: int | None, message: str, url: str = ""):
        super().__init__(message)
        self.status = status
        self.message = message
        self.url = url

    def __str__(self) -> str:
        if self.status is not None:
            return f"Failed to fetch {self.url}: {self.status} {self.message}"
        return f"Failed to fetch {self.url}: {self.message}"


def default_headers() -> dict:
    """Return the browser-like header bundle sent with every fetch."""
    return {
        "User-Agent": USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "Referer": "https://www.google.com/",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
        "Sec-Ch-Ua": '"Chromium";v="131", "Google Chrome";v="131", "Not-A.Brand";v="99"',
        "Sec-Ch-Ua-Mobile": "?0",
        "Sec-Ch-Ua-Platform": '"Windows"',
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "none",
        "Upgrade-Insecure-Requests": "1",
    }


async def fetch_html(
    url: str,
    headers: dict | None = None,
    timeout: float | None = None,
) -> str:
    """
    Fetch HTML from a URL with browser-like headers.

    Returns the response body text.
    Raises FetchError on a non-2xx status or a network error.
    """
    merged_headers = default_headers()
    if headers:
        merged_headers.update(headers)

    try:
        async with httpx.AsyncClient(
            timeout=timeout or settings.fetch_timeout,
            follow_redirects=True,
            headers=merged_headers,
            http2=True,
        ) as client:
            response = await client.get(url)
    except httpx.HTTPError as e:
        logger.warning(f"Fetch failed for {url}: {e!r}")
        raise FetchError(None, str(e) or type(e).__name__, url) from e

    if not response.is_success:
        raise FetchError(response.status_code, response.reason_phrase or "HTTP error", url)

    return response.text


def parse_int(text: str | None) -> int | None:
    """
    Parse an integer from messy text by keeping digits only.
    "$6,500" -> 6500, "123,456 mi" -> 123456, "" -> None.
    """
    if not text:
        return None
    digits = _NON_DIGITS_RE.sub("", text)
    if not digits:
        return None
    return int(digits)
