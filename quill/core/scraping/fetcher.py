"""Page fetcher - raw HTML via direct HTTP GET or a headless browser render."""

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum

import httpx
import structlog
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from quill.config import settings
from quill.utils.exceptions import FetchError, FetchTimeoutError

logger = structlog.get_logger(__name__)

BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


class FetchMode(str, Enum):
    """How a page is retrieved."""

    DIRECT = "direct"
    RENDERED = "rendered"


class Fetcher:
    """
    Retrieve raw HTML for a URL.

    Two modes are supported:
    - DIRECT: one GET through httpx, fails fast on timeout or non-2xx
    - RENDERED: a fresh headless Chromium per call, closed on every exit path

    Nothing is retried; callers decide whether a failure skips a candidate.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        user_agent: str | None = None,
        direct_timeout: float | None = None,
        render_timeout: float | None = None,
        settle_seconds: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize Fetcher.

        Args:
            client: Shared httpx client for direct fetches (a short-lived one is
                created per call when omitted)
            user_agent: Identity header (defaults to settings.user_agent)
            direct_timeout: Seconds before a direct GET times out
            render_timeout: Seconds before a headless navigation times out
            settle_seconds: Fixed wait after navigation for deferred content
            sleep: Awaitable sleep, injectable for tests
        """
        self.client = client
        self.user_agent = user_agent or settings.user_agent
        self.direct_timeout = direct_timeout or settings.direct_timeout_seconds
        self.render_timeout = render_timeout or settings.render_timeout_seconds
        self.settle_seconds = (
            settle_seconds if settle_seconds is not None else settings.render_settle_seconds
        )
        self._sleep = sleep

    async def fetch(self, url: str, mode: FetchMode = FetchMode.DIRECT) -> str:
        """
        Fetch a page and return its HTML.

        Args:
            url: Page URL
            mode: DIRECT for a plain GET, RENDERED for a headless browser render

        Returns:
            Raw (or fully rendered) HTML

        Raises:
            FetchTimeoutError: If the request or navigation timed out
            FetchError: On connection errors, non-2xx responses or browser failures
        """
        if mode is FetchMode.RENDERED:
            return await self._fetch_rendered(url)
        return await self._fetch_direct(url)

    async def _fetch_direct(self, url: str) -> str:
        if self.client is not None:
            return await self._get(self.client, url)

        async with httpx.AsyncClient() as client:
            return await self._get(client, url)

    async def _get(self, client: httpx.AsyncClient, url: str) -> str:
        try:
            response = await client.get(
                url,
                headers={"User-Agent": self.user_agent},
                timeout=self.direct_timeout,
                follow_redirects=True,
            )
        except httpx.TimeoutException as e:
            logger.warning("fetch_timeout", url=url, timeout=self.direct_timeout)
            raise FetchTimeoutError(
                f"Timed out after {self.direct_timeout}s fetching {url}", url=url
            ) from e
        except httpx.RequestError as e:
            logger.warning("fetch_request_error", url=url, error=str(e))
            raise FetchError(f"Request error for {url}: {e}", url=url) from e

        if not response.is_success:
            logger.warning("fetch_http_error", url=url, status_code=response.status_code)
            raise FetchError(
                f"HTTP {response.status_code} for {url}",
                url=url,
                status_code=response.status_code,
            )

        logger.debug("fetch_direct_complete", url=url, bytes=len(response.content))
        return response.text

    async def _fetch_rendered(self, url: str) -> str:
        timeout_ms = self.render_timeout * 1000

        logger.info("render_page", url=url)
        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=True, args=BROWSER_ARGS)
                try:
                    page = await browser.new_page(user_agent=self.user_agent)
                    await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
                    await self._sleep(self.settle_seconds)
                    html = await page.content()
                finally:
                    await browser.close()
        except PlaywrightTimeoutError as e:
            logger.warning("render_timeout", url=url, timeout=self.render_timeout)
            raise FetchTimeoutError(
                f"Timed out after {self.render_timeout}s rendering {url}", url=url
            ) from e
        except PlaywrightError as e:
            logger.warning("render_failed", url=url, error=str(e))
            raise FetchError(f"Browser error for {url}: {e}", url=url) from e

        logger.debug("render_complete", url=url, chars=len(html))
        return html
