"""Async client for the article CRUD service."""

from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from quill.config import settings
from quill.models import Article, ArticleType, EnhancedArticle
from quill.utils.exceptions import BootstrapError, PersistenceError

logger = structlog.get_logger(__name__)


class ArticleStoreClient:
    """
    Thin wrapper over the ``/articles`` endpoints of the CRUD service.

    The service answers with ``{"success": true, "data": ...}`` envelopes;
    a bare JSON payload is accepted as well.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str | None = None,
        timeout: float = 15.0,
    ) -> None:
        """
        Initialize ArticleStoreClient.

        Args:
            client: Shared httpx client
            base_url: API base URL (defaults to settings.api_base_url)
            timeout: Request timeout in seconds
        """
        self.client = client
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout

    @property
    def articles_url(self) -> str:
        return f"{self.base_url}/articles"

    async def ping(self) -> None:
        """
        Verify the service is reachable.

        Raises:
            BootstrapError: If the service cannot be reached or errors
        """
        try:
            response = await self.client.get(self.articles_url, timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("store_unreachable", url=self.articles_url, error=str(e))
            raise BootstrapError(
                f"Cannot reach article store at {self.articles_url}: {e}"
            ) from e
        logger.info("store_reachable", url=self.articles_url)

    async def list_articles(self, article_type: ArticleType | None = None) -> list[dict[str, Any]]:
        """
        List article records, optionally filtered by type.

        Args:
            article_type: ORIGINAL or UPDATED filter

        Returns:
            Raw article dicts as returned by the service

        Raises:
            PersistenceError: If the request fails
        """
        params = {"type": article_type.value} if article_type else None
        data = await self._request("GET", self.articles_url, params=params)
        if not isinstance(data, list):
            raise PersistenceError("Unexpected article list payload")
        return data

    async def list_originals(self) -> list[Article]:
        """List original articles as models, skipping records that do not validate."""
        articles: list[Article] = []
        for record in await self.list_articles(ArticleType.ORIGINAL):
            try:
                articles.append(Article.model_validate(record))
            except ValidationError as e:
                record_id = record.get("_id") if isinstance(record, dict) else None
                logger.warning(
                    "invalid_article_record",
                    article_id=record_id,
                    errors=e.error_count(),
                )
        return articles

    async def get_article(self, article_id: str) -> dict[str, Any]:
        """Fetch one article by id."""
        return await self._request("GET", f"{self.articles_url}/{article_id}")

    async def find_by_url(self, url: str) -> dict[str, Any] | None:
        """Return the original article stored under ``url``, if any."""
        for record in await self.list_articles(ArticleType.ORIGINAL):
            if isinstance(record, dict) and record.get("url") == url:
                return record
        return None

    async def create_article(self, record: Article | EnhancedArticle) -> dict[str, Any]:
        """
        Persist a new article record.

        Args:
            record: Original or enhanced article

        Returns:
            The stored record as returned by the service

        Raises:
            PersistenceError: If the service rejects the record
        """
        created = await self._request("POST", self.articles_url, json=record.to_payload())
        logger.info("article_created", title=record.title[:60], type=record.type.value)
        return created

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self.client.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            raise PersistenceError(
                f"{method} {url} failed: HTTP {e.response.status_code} {e.response.text[:200]}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise PersistenceError(f"{method} {url} failed: {e}") from e
        except ValueError as e:
            raise PersistenceError(f"{method} {url} returned invalid JSON: {e}") from e

        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body
