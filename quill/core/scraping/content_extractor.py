"""Content extraction module - recover title, body, author and image from HTML pages."""

import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional
from urllib.parse import urljoin

import structlog
from bs4 import BeautifulSoup, Tag

logger = structlog.get_logger(__name__)

# Removed before any text is read; these regions inflate length-based heuristics.
NOISE_SELECTORS = [
    "script",
    "style",
    "nav",
    "header",
    "footer",
    "aside",
    "iframe",
    ".advertisement",
    ".ads",
    ".comments",
    ".sidebar",
    ".related-posts",
]

TITLE_SELECTORS = ["h1", ".entry-title", ".post-title", "h1.title", "article h1"]

ARTICLE_CONTENT_SELECTORS = [
    "article",
    ".entry-content",
    ".post-content",
    ".article-content",
    ".content",
    "main article",
    ".post-body",
]

REFERENCE_CONTENT_SELECTORS = [
    "article",
    '[role="main"]',
    ".post-content",
    ".entry-content",
    ".article-content",
    ".article-body",
    ".content",
    "main",
    ".post-body",
    '[itemprop="articleBody"]',
]

AUTHOR_SELECTORS = [".author", ".by-author", ".post-author", ".author-name"]

IMAGE_SELECTORS = ["article img", ".post-thumbnail img", ".featured-image img", "img"]

UNKNOWN_AUTHOR = "Unknown"

_WHITESPACE = re.compile(r"\s+")


@dataclass
class ExtractedContent:
    """Content recovered from an article page."""

    title: str
    content: str
    author: str = UNKNOWN_AUTHOR
    image_url: Optional[str] = None


@dataclass
class ExtractionConfig:
    """Configuration for content extraction."""

    site_origin: Optional[str] = None
    content_selectors: List[str] = field(
        default_factory=lambda: list(ARTICLE_CONTENT_SELECTORS)
    )
    # A content match must be longer than this to stop the cascade
    sufficient_content_length: int = 200
    # Anything shorter is discarded as a failed extraction
    min_content_length: int = 100
    max_content_length: Optional[int] = None

    @classmethod
    def for_harvest(cls, site_origin: Optional[str] = None) -> "ExtractionConfig":
        """Profile used when scraping original articles from the target site."""
        return cls(site_origin=site_origin, sufficient_content_length=200)

    @classmethod
    def for_reference(cls) -> "ExtractionConfig":
        """Profile used when scraping competing articles for the AI prompt."""
        return cls(
            content_selectors=list(REFERENCE_CONTENT_SELECTORS),
            sufficient_content_length=500,
            max_content_length=4000,
        )


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return _WHITESPACE.sub(" ", text).strip()


class ContentExtractor:
    """Extract article fields from HTML using ranked selector cascades.

    Every field is resolved by walking an ordered selector list and taking
    the first selector that yields a usable value. Body content also has to
    clear a length threshold; when no selector does, the whole document
    body is used instead.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        """Initialize content extractor with configuration."""
        self.config = config or ExtractionConfig()

    def extract(self, html: str) -> Optional[ExtractedContent]:
        """Extract title, content, author and lead image from an article page.

        Args:
            html: The HTML content of the page

        Returns:
            ExtractedContent, or None when the title is missing or the content
            is shorter than ``min_content_length``
        """
        soup = self._parse(html)

        title = self._first_text(soup, TITLE_SELECTORS)
        content = self._extract_content(soup)

        if not title or len(content) < self.config.min_content_length:
            logger.info(
                "extraction_insufficient",
                has_title=bool(title),
                content_length=len(content),
            )
            return None

        author = self._first_text(soup, AUTHOR_SELECTORS) or UNKNOWN_AUTHOR
        image_url = self._extract_image(soup)

        return ExtractedContent(
            title=title,
            content=content,
            author=author,
            image_url=image_url,
        )

    def extract_text(self, html: str) -> str:
        """Extract main body text only, with no title requirement.

        Args:
            html: The HTML content of the page

        Returns:
            Normalized body text (possibly empty), truncated to
            ``max_content_length`` when configured
        """
        return self._extract_content(self._parse(html))

    def _parse(self, html: str) -> BeautifulSoup:
        soup = BeautifulSoup(html, "html.parser")
        for element in soup.select(", ".join(NOISE_SELECTORS)):
            element.decompose()
        return soup

    def _extract_content(self, soup: BeautifulSoup) -> str:
        threshold = self.config.sufficient_content_length
        selectors = self.config.content_selectors

        content = self._first_text(soup, selectors, accept=lambda text: len(text) > threshold)
        if content is None:
            first_match = self._first_text(soup, selectors) or ""
            body_text = normalize_whitespace((soup.body or soup).get_text(" "))
            logger.debug(
                "content_body_fallback",
                selector_chars=len(first_match),
                body_chars=len(body_text),
            )
            content = body_text or first_match

        return self._truncate(content)

    def _extract_image(self, soup: BeautifulSoup) -> Optional[str]:
        src = self._cascade(soup, IMAGE_SELECTORS, lambda el: (el.get("src") or "").strip())
        if not src:
            return None
        if not src.startswith("http") and self.config.site_origin:
            return urljoin(self.config.site_origin.rstrip("/") + "/", src)
        return src

    def _first_text(
        self,
        soup: BeautifulSoup,
        selectors: List[str],
        accept: Callable[[str], bool] = bool,
    ) -> Optional[str]:
        return self._cascade(
            soup, selectors, lambda el: normalize_whitespace(el.get_text(" ")), accept
        )

    def _truncate(self, text: str) -> str:
        limit = self.config.max_content_length
        if limit is not None and len(text) > limit:
            return text[:limit]
        return text

    @staticmethod
    def _cascade(
        soup: BeautifulSoup,
        selectors: List[str],
        read: Callable[[Tag], str],
        accept: Callable[[str], bool] = bool,
    ) -> Optional[str]:
        """Return the first value read from a selector's first match that is accepted.

        Args:
            soup: Parsed document
            selectors: Ranked CSS selectors
            read: Turns the matched element into a value
            accept: Predicate the value must satisfy (non-empty by default)

        Returns:
            The accepted value, or None when no selector qualifies
        """
        for selector in selectors:
            element = soup.select_one(selector)
            if element is None:
                continue
            value = read(element)
            if value and accept(value):
                return value
        return None
