"""Reference discovery via the Google Custom Search JSON API."""

from typing import Any

import httpx
import structlog

from quill.config import settings
from quill.utils.exceptions import SearchAPIError

logger = structlog.get_logger(__name__)

SEARCH_API_URL = "https://www.googleapis.com/customsearch/v1"
MAX_REFERENCES = 2


class ReferenceFinder:
    """
    Find competing top-ranking articles for a title.

    One search request per title. Results are taken in API order, with no
    re-ranking, until the cap is reached. Any API failure yields an empty
    list, which the pipeline treats as "no suitable competing content".
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None = None,
        engine_id: str | None = None,
        blocked_domains: list[str] | None = None,
        max_results: int = MAX_REFERENCES,
        timeout: float = 15.0,
    ) -> None:
        """
        Initialize ReferenceFinder.

        Args:
            client: Shared httpx client
            api_key: Search API key (defaults to settings.google_api_key)
            engine_id: Search engine id (defaults to settings.google_cx)
            blocked_domains: Substrings that disqualify a URL (video/social platforms)
            max_results: Cap on returned URLs
            timeout: Request timeout in seconds
        """
        if api_key is None and settings.google_api_key is not None:
            api_key = settings.google_api_key.get_secret_value()

        self.client = client
        self.api_key = api_key
        self.engine_id = engine_id or settings.google_cx
        self.blocked_domains = (
            blocked_domains
            if blocked_domains is not None
            else settings.blocked_reference_domains
        )
        self.max_results = max_results
        self.timeout = timeout

    async def find_references(self, title: str) -> list[str]:
        """
        Search for articles competing with ``title``.

        Args:
            title: Original article title used as the query

        Returns:
            Up to ``max_results`` reference URLs (empty on any API error)
        """
        logger.info("reference_search", query=title[:80])

        try:
            items = await self._search(title)
        except SearchAPIError as e:
            logger.error("reference_search_failed", query=title[:80], error=str(e))
            return []

        urls = self.filter_candidates(items)
        logger.info("reference_search_complete", found=len(urls), urls=urls)
        return urls

    def filter_candidates(self, items: list[dict[str, Any]]) -> list[str]:
        """
        Keep usable reference URLs from raw search items, in order.

        Args:
            items: ``items`` array from the search response

        Returns:
            URLs that are present, HTTP(S), not on a blocked domain, capped
        """
        urls: list[str] = []
        for item in items:
            if len(urls) >= self.max_results:
                break
            url = item.get("link") if isinstance(item, dict) else None
            if not isinstance(url, str) or not url.startswith("http"):
                continue
            if any(domain in url for domain in self.blocked_domains):
                logger.debug("reference_blocked", url=url)
                continue
            urls.append(url)
        return urls

    async def _search(self, query: str) -> list[dict[str, Any]]:
        params = {
            "key": self.api_key,
            "cx": self.engine_id,
            "q": query,
            "num": self.max_results,
        }
        try:
            response = await self.client.get(
                SEARCH_API_URL, params=params, timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise SearchAPIError(
                f"Search API HTTP {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except httpx.RequestError as e:
            raise SearchAPIError(f"Search API network error: {e}") from e
        except ValueError as e:
            raise SearchAPIError(f"Search API returned invalid JSON: {e}") from e

        items = data.get("items", []) if isinstance(data, dict) else []
        return items if isinstance(items, list) else []
