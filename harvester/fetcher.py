"""
HTTP fetching of listing pages over Playwright's request API.
"""
import re
from typing import Optional

from bs4 import UnicodeDammit
from playwright.async_api import async_playwright, Error as PlaywrightError, TimeoutError as PlaywrightTimeout

from .document import ParsedDocument, parse_document
from .errors import BlockedContentError, FetchError


DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "ko-KR,ko;q=0.9,en;q=0.8",
    "Upgrade-Insecure-Requests": "1",
}

MIN_BODY_LENGTH = 500
CHALLENGE_RE = re.compile(r"cloudflare.*challenge|checking your browser|ray id:|cf-ray", re.I)


def check_page_body(text: str, min_length: int = MIN_BODY_LENGTH) -> None:
    """Raise BlockedContentError if the body looks like a challenge page."""
    if CHALLENGE_RE.search(text or ""):
        raise BlockedContentError("Blocked or challenge page detected")
    if len(text or "") < min_length:
        raise BlockedContentError(f"Response body too short ({len(text or '')} chars)")


def decode_body(body: bytes, content_type: str = "") -> str:
    """Decode a response body, honouring the declared charset (often EUC-KR)."""
    m = re.search(r"charset=([\w\-]+)", content_type or "", re.I)
    hints = [m.group(1)] if m else []
    # header charset first, then utf-8, then any <meta charset> in the page
    dammit = UnicodeDammit(body, known_definite_encodings=hints, user_encodings=["utf-8"], is_html=True)
    if dammit.unicode_markup is None:
        return body.decode("utf-8", errors="replace")
    return dammit.unicode_markup


class PageFetcher:
    """
    Fetches listing pages and image payloads.

    Use as an async context manager; one instance serves a whole batch.
    """

    def __init__(self, min_body_length: int = MIN_BODY_LENGTH, headers: Optional[dict] = None, logger=None):
        self.min_body_length = min_body_length
        self.headers = dict(headers or DEFAULT_HEADERS)
        self.logger = logger
        self._playwright = None
        self._request = None

    async def __aenter__(self) -> "PageFetcher":
        self._playwright = await async_playwright().start()
        self._request = await self._playwright.request.new_context(extra_http_headers=self.headers)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self._request is not None:
            await self._request.dispose()
            self._request = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def _get(self, url: str, timeout_ms: int):
        if self._request is None:
            raise RuntimeError("PageFetcher used outside of 'async with'")
        try:
            resp = await self._request.get(url, timeout=timeout_ms)
        except PlaywrightTimeout as e:
            raise FetchError(f"Request timed out after {timeout_ms}ms", url=url) from e
        except PlaywrightError as e:
            raise FetchError(f"HTTP fetch failed: {e.message}", url=url) from e

        if not resp.ok:
            status, status_text = resp.status, resp.status_text
            await resp.dispose()
            raise FetchError(f"HTTP {status}: {status_text}", url=url, status=status)
        return resp

    async def fetch_and_parse(self, url: str, timeout_ms: int) -> ParsedDocument:
        """Fetch one listing page and parse it; single attempt, no retries."""
        resp = await self._get(url, timeout_ms)
        try:
            body = await resp.body()
            content_type = resp.headers.get("content-type", "")
        finally:
            await resp.dispose()

        text = decode_body(body, content_type)
        try:
            check_page_body(text, self.min_body_length)
        except BlockedContentError as e:
            e.url = url
            raise

        if self.logger:
            self.logger.debug(f">>> Fetched {url} ({len(text)} chars)")
        return parse_document(text, base_url=url)

    async def fetch_bytes(self, url: str, timeout_ms: int = 20_000) -> bytes:
        """Download a raw payload such as a listing image."""
        resp = await self._get(url, timeout_ms)
        try:
            return await resp.body()
        finally:
            await resp.dispose()
