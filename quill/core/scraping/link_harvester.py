"""Link harvesting module - discover article links on a listing page."""

from dataclasses import dataclass, field
from typing import List, Optional

import structlog
from bs4 import BeautifulSoup

logger = structlog.get_logger(__name__)

ANCHOR_SELECTORS = [
    "article a",
    ".post a",
    ".blog-post a",
    ".entry a",
    "h2 a",
    "h3 a",
    ".post-title a",
    ".entry-title a",
]


@dataclass
class HarvestConfig:
    """Configuration for link harvesting."""

    site_origin: str
    path_marker: str = "blog"
    max_links: int = 5
    selectors: List[str] = field(default_factory=lambda: list(ANCHOR_SELECTORS))


class LinkHarvester:
    """Discover candidate article links on a listing page.

    No single selector finds article links across every page template, so
    anchors are collected from a ranked list of selectors until the cap is
    reached.
    """

    def __init__(self, config: HarvestConfig):
        """Initialize link harvester with configuration."""
        self.config = config

    def harvest(self, html: str) -> List[str]:
        """Collect article links from listing page HTML.

        Args:
            html: Listing page HTML

        Returns:
            Ordered, deduplicated absolute URLs, at most ``max_links`` long
        """
        soup = BeautifulSoup(html, "html.parser")
        links: List[str] = []

        for selector in self.config.selectors:
            for anchor in soup.select(selector):
                url = self._accept(anchor.get("href"))
                if url and url not in links:
                    links.append(url)

            if len(links) >= self.config.max_links:
                logger.debug("link_cap_reached", selector=selector)
                break

        links = links[: self.config.max_links]
        logger.info("links_harvested", count=len(links))
        return links

    def _accept(self, href: Optional[str]) -> Optional[str]:
        """Return the absolute URL for an article href, or None to skip it."""
        if not href:
            return None
        href = href.strip()
        if self.config.path_marker not in href or "#" in href:
            return None
        return self._absolutize(href)

    def _absolutize(self, href: str) -> str:
        if href.startswith("http"):
            return href
        origin = self.config.site_origin.rstrip("/")
        return origin + (href if href.startswith("/") else "/" + href)
