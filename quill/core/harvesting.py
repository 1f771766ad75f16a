"""Article harvesting - listing page to stored original articles."""

from dataclasses import dataclass, field

import structlog

from quill.config import settings
from quill.core.pacing import PacingPolicy
from quill.core.scraping.content_extractor import ContentExtractor, ExtractionConfig
from quill.core.scraping.fetcher import Fetcher, FetchMode
from quill.core.scraping.link_harvester import HarvestConfig, LinkHarvester
from quill.core.scraping.pagination import PaginationProbe, page_url
from quill.models import Article
from quill.store.api_client import ArticleStoreClient
from quill.utils.exceptions import FetchError, PersistenceError

logger = structlog.get_logger(__name__)


@dataclass
class FailedLink:
    """Record of a link that could not be turned into an article."""

    url: str
    error: str


@dataclass
class HarvestResult:
    """Result of a harvesting run."""

    listing_url: str
    links_found: int = 0
    scraped: int = 0
    created: int = 0
    duplicates: int = 0
    failures: list[FailedLink] = field(default_factory=list)

    @property
    def failure_count(self) -> int:
        return len(self.failures)


class ArticleHarvester:
    """Coordinate the harvesting path.

    Orchestrates:
    - Last-page discovery on the listing
    - Article link discovery on that page
    - Rendering and extraction of each article
    - Deduplication by URL against the store
    - Creation of original article records
    """

    def __init__(
        self,
        store: ArticleStoreClient,
        fetcher: Fetcher,
        listing_url: str | None = None,
        site_origin: str | None = None,
        pacing: PacingPolicy | None = None,
    ) -> None:
        self.store = store
        self.fetcher = fetcher
        self.listing_url = listing_url or settings.listing_url
        origin = site_origin or settings.site_origin

        self.probe = PaginationProbe(fetcher)
        self.link_harvester = LinkHarvester(HarvestConfig(site_origin=origin))
        self.extractor = ContentExtractor(ExtractionConfig.for_harvest(origin))
        self.pacing = pacing or PacingPolicy.from_settings()

    async def run(self) -> HarvestResult:
        """Harvest the most recent listing page into the store.

        Returns:
            HarvestResult with counts and per-link failures

        Raises:
            BootstrapError: If the article store is unreachable
        """
        await self.store.ping()

        last_page = await self.probe.find_last_page(self.listing_url)
        target_url = page_url(self.listing_url, last_page)
        result = HarvestResult(listing_url=target_url)

        links = await self._harvest_links(target_url)
        result.links_found = len(links)
        if not links:
            logger.warning("no_article_links", url=target_url)
            return result

        articles = await self._scrape_articles(links, result)
        await self._save_articles(articles, result)

        logger.info(
            "harvest_complete",
            links=result.links_found,
            scraped=result.scraped,
            created=result.created,
            duplicates=result.duplicates,
            failures=result.failure_count,
        )
        return result

    async def _harvest_links(self, url: str) -> list[str]:
        try:
            html = await self.fetcher.fetch(url, FetchMode.RENDERED)
        except FetchError as e:
            logger.error("listing_fetch_failed", url=url, error=str(e))
            return []
        return self.link_harvester.harvest(html)

    async def _scrape_articles(self, links: list[str], result: HarvestResult) -> list[Article]:
        articles: list[Article] = []

        for index, url in enumerate(links, start=1):
            logger.info("article_scrape", url=url, position=index, total=len(links))
            try:
                extracted = self.extractor.extract(
                    await self.fetcher.fetch(url, FetchMode.RENDERED)
                )
            except FetchError as e:
                result.failures.append(FailedLink(url=url, error=str(e)))
                extracted = None
            else:
                if extracted is None:
                    result.failures.append(FailedLink(url=url, error="insufficient content"))

            if extracted is not None:
                articles.append(
                    Article(
                        title=extracted.title,
                        content=extracted.content,
                        url=url,
                        author=extracted.author,
                        image_url=extracted.image_url,
                    )
                )
                result.scraped += 1
                logger.info("article_scraped", url=url, title=extracted.title[:60])

            await self.pacing.pause(self.pacing.inter_link_delay)

        return articles

    async def _save_articles(self, articles: list[Article], result: HarvestResult) -> None:
        for article in articles:
            try:
                if await self.store.find_by_url(article.url):
                    result.duplicates += 1
                    logger.info("article_exists", url=article.url)
                    continue
                await self.store.create_article(article)
                result.created += 1
            except PersistenceError as e:
                result.failures.append(FailedLink(url=article.url, error=str(e)))
                logger.error("article_save_failed", url=article.url, error=str(e))
