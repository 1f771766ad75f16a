"""Enhancement pipeline - coordinates search, reference scraping, rewriting and saving."""

from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

import structlog

from quill.core.enhancement.citations import append_citations
from quill.core.enhancement.enhancer import ArticleEnhancer
from quill.core.enhancement.reference_finder import ReferenceFinder
from quill.core.pacing import PacingPolicy
from quill.core.scraping.content_extractor import ContentExtractor, ExtractionConfig
from quill.core.scraping.fetcher import Fetcher, FetchMode
from quill.models import Article, ArticleType, EnhancedArticle, Reference
from quill.store.api_client import ArticleStoreClient
from quill.utils.exceptions import FetchError, PersistenceError

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# A reference must be longer than this to be worth prompting with
MIN_REFERENCE_LENGTH = 500


class PipelineStage(str, Enum):
    """States of the per-article state machine."""

    SEARCHING = "searching"
    SCRAPING_REFS = "scraping_refs"
    ENHANCING = "enhancing"
    CITING = "citing"
    SAVING = "saving"
    DONE = "done"
    SKIPPED = "skipped"


class SkipReason:
    NO_SEARCH_RESULTS = "no search results"
    SCRAPING_FAILED = "scraping failed"
    AI_FAILED = "AI failed"
    SAVE_FAILED = "save failed"


@dataclass
class StageOutcome(Generic[T]):
    """Result of one stage: a value to carry forward, or the reason to stop."""

    value: T | None = None
    skip_reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.skip_reason is None

    @classmethod
    def success(cls, value: T) -> "StageOutcome[T]":
        return cls(value=value)

    @classmethod
    def skip(cls, reason: str) -> "StageOutcome[T]":
        return cls(skip_reason=reason)


@dataclass
class ArticleResult:
    """Outcome of processing one original article."""

    article_id: str | None
    title: str
    stage: PipelineStage
    reason: str | None = None
    failed_at: PipelineStage | None = None
    references: list[str] = field(default_factory=list)
    saved: dict[str, Any] | None = None

    @property
    def succeeded(self) -> bool:
        return self.stage is PipelineStage.DONE


@dataclass
class BatchResult:
    """Result of an enhancement batch."""

    total: int = 0
    results: list[ArticleResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.succeeded)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if not r.succeeded)

    @property
    def skip_reasons(self) -> Counter[str]:
        return Counter(r.reason for r in self.results if not r.succeeded and r.reason)


ResultCallback = Callable[[int, int, ArticleResult], None]


class EnhancementPipeline:
    """Coordinate the enhancement of original articles.

    Per article: SEARCHING -> SCRAPING_REFS -> ENHANCING -> CITING -> SAVING -> DONE.
    A stage that cannot produce its output ends the article as SKIPPED with
    a reason; the batch always continues with the next article.

    Articles, references and pages are processed strictly one at a time.
    """

    def __init__(
        self,
        store: ArticleStoreClient,
        reference_finder: ReferenceFinder,
        fetcher: Fetcher,
        enhancer: ArticleEnhancer,
        extractor: ContentExtractor | None = None,
        pacing: PacingPolicy | None = None,
    ) -> None:
        """Initialize pipeline with its collaborators and pacing policy."""
        self.store = store
        self.reference_finder = reference_finder
        self.fetcher = fetcher
        self.enhancer = enhancer
        self.extractor = extractor or ContentExtractor(ExtractionConfig.for_reference())
        self.pacing = pacing or PacingPolicy.from_settings()

    async def run(
        self,
        limit: int | None = None,
        skip_already_enhanced: bool = False,
        on_result: ResultCallback | None = None,
    ) -> BatchResult:
        """Enhance every original article in the store.

        Args:
            limit: Process at most this many originals (all when None)
            skip_already_enhanced: Skip originals that already have an updated record
            on_result: Called after each article with (index, total, result)

        Returns:
            BatchResult with per-article outcomes

        Raises:
            BootstrapError: If the article store is unreachable
        """
        await self.store.ping()

        originals = await self._load_originals(skip_already_enhanced)
        if limit is not None:
            originals = originals[:limit]

        batch = BatchResult(total=len(originals))
        if not originals:
            logger.warning("no_original_articles")
            return batch

        logger.info("enhancement_batch_started", total=batch.total)
        await self.pacing.pause(self.pacing.warm_up_delay)

        for index, article in enumerate(originals, start=1):
            result = await self.process_article(article)
            batch.results.append(result)

            if on_result is not None:
                on_result(index, batch.total, result)

            if index < batch.total:
                await self.pacing.pause(self.pacing.inter_article_delay)

        logger.info(
            "enhancement_batch_complete",
            total=batch.total,
            succeeded=batch.succeeded,
            skipped=batch.skipped,
            reasons=dict(batch.skip_reasons),
        )
        return batch

    async def process_article(self, article: Article) -> ArticleResult:
        """Run one original article through every stage.

        Never raises: unexpected errors end the article as SKIPPED.
        """
        structlog.contextvars.bind_contextvars(article_id=article.id)
        logger.info("article_processing_started", title=article.title[:80])

        stage = PipelineStage.SEARCHING
        try:
            urls = await self._search(article)
            if not urls.ok:
                return self._skipped(article, stage, urls.skip_reason)

            stage = PipelineStage.SCRAPING_REFS
            references = await self._scrape_references(urls.value)
            if not references.ok:
                return self._skipped(article, stage, references.skip_reason)

            stage = PipelineStage.ENHANCING
            rewritten = await self._enhance(article, references.value)
            if not rewritten.ok:
                return self._skipped(article, stage, rewritten.skip_reason)

            stage = PipelineStage.CITING
            content = append_citations(rewritten.value, references.value)

            stage = PipelineStage.SAVING
            record = EnhancedArticle.from_original(
                article, content, [ref.url for ref in references.value]
            )
            saved = await self._save(record)
            if not saved.ok:
                return self._skipped(article, stage, saved.skip_reason)

            logger.info("article_enhanced", references=len(record.references))
            return ArticleResult(
                article_id=article.id,
                title=article.title,
                stage=PipelineStage.DONE,
                references=record.references,
                saved=saved.value,
            )
        except Exception as e:
            logger.error("article_processing_error", stage=stage.value, error=str(e))
            return self._skipped(article, stage, str(e))
        finally:
            structlog.contextvars.unbind_contextvars("article_id")

    async def _load_originals(self, skip_already_enhanced: bool) -> list[Article]:
        try:
            originals = await self.store.list_originals()
        except PersistenceError as e:
            logger.error("list_originals_failed", error=str(e))
            return []

        if not skip_already_enhanced:
            return originals

        try:
            enhanced = await self.store.list_articles(ArticleType.UPDATED)
        except PersistenceError as e:
            logger.error("list_enhanced_failed", error=str(e))
            return originals

        done_ids = {record.get("originalArticleId") for record in enhanced}
        remaining = [a for a in originals if a.id not in done_ids]
        logger.info(
            "already_enhanced_skipped", skipped=len(originals) - len(remaining)
        )
        return remaining

    async def _search(self, article: Article) -> StageOutcome[list[str]]:
        urls = await self.reference_finder.find_references(article.title)
        if not urls:
            return StageOutcome.skip(SkipReason.NO_SEARCH_RESULTS)
        return StageOutcome.success(urls)

    async def _scrape_references(self, urls: list[str]) -> StageOutcome[list[Reference]]:
        references: list[Reference] = []

        for url in urls:
            try:
                html = await self.fetcher.fetch(url, FetchMode.DIRECT)
                content = self.extractor.extract_text(html)
            except FetchError as e:
                logger.warning("reference_scrape_failed", url=url, error=str(e))
                content = ""
            except Exception as e:
                logger.error("reference_extraction_error", url=url, error=str(e))
                content = ""

            if len(content) > MIN_REFERENCE_LENGTH:
                references.append(Reference(url=url, content=content))
                logger.info("reference_scraped", url=url, chars=len(content))
            else:
                logger.info("reference_too_short", url=url, chars=len(content))

            await self.pacing.pause(self.pacing.inter_reference_delay)

        if not references:
            return StageOutcome.skip(SkipReason.SCRAPING_FAILED)
        return StageOutcome.success(references)

    async def _enhance(
        self, article: Article, references: list[Reference]
    ) -> StageOutcome[str]:
        text = await self.enhancer.enhance(article.title, article.content, references)
        if text is None:
            return StageOutcome.skip(SkipReason.AI_FAILED)
        return StageOutcome.success(text)

    async def _save(self, record: EnhancedArticle) -> StageOutcome[dict[str, Any]]:
        try:
            saved = await self.store.create_article(record)
        except PersistenceError as e:
            logger.error("enhanced_article_save_failed", error=str(e))
            return StageOutcome.skip(SkipReason.SAVE_FAILED)
        return StageOutcome.success(saved)

    def _skipped(
        self, article: Article, stage: PipelineStage, reason: str | None
    ) -> ArticleResult:
        logger.warning("article_skipped", stage=stage.value, reason=reason)
        return ArticleResult(
            article_id=article.id,
            title=article.title,
            stage=PipelineStage.SKIPPED,
            reason=reason,
            failed_at=stage,
        )
