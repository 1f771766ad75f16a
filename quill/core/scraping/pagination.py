"""Pagination probe - find the highest-numbered listing page."""

import re

import structlog
from bs4 import BeautifulSoup

from quill.core.scraping.fetcher import Fetcher, FetchMode
from quill.utils.exceptions import FetchError

logger = structlog.get_logger(__name__)

PAGE_NUMBER_PATTERN = re.compile(r"/blogs/page/(\d+)")


def parse_last_page(html: str, pattern: re.Pattern[str] = PAGE_NUMBER_PATTERN) -> int:
    """
    Return the highest page number linked from a listing page.

    Args:
        html: Listing page HTML
        pattern: Regex with one group capturing the page number from an href

    Returns:
        Maximum page number found, or 1 when no anchor matches
    """
    soup = BeautifulSoup(html, "html.parser")
    last_page = 1

    for anchor in soup.find_all("a", href=True):
        match = pattern.search(anchor["href"])
        if match:
            last_page = max(last_page, int(match.group(1)))

    return last_page


def page_url(base_url: str, page: int) -> str:
    """Build the listing URL for a page number (the base URL for page 1)."""
    if page <= 1:
        return base_url
    return f"{base_url.rstrip('/')}/page/{page}/"


class PaginationProbe:
    """Discover the last listing page so harvesting starts from the most recent content."""

    def __init__(
        self, fetcher: Fetcher, pattern: re.Pattern[str] = PAGE_NUMBER_PATTERN
    ) -> None:
        self.fetcher = fetcher
        self.pattern = pattern

    async def find_last_page(self, base_url: str) -> int:
        """
        Render the listing page and return the highest page number it links to.

        Never raises: any failure degrades to a single page.

        Args:
            base_url: Listing base URL

        Returns:
            Positive page number, 1 by default
        """
        try:
            html = await self.fetcher.fetch(base_url, FetchMode.RENDERED)
            last_page = parse_last_page(html, self.pattern)
        except FetchError as e:
            logger.warning("pagination_probe_failed", url=base_url, error=str(e))
            return 1
        except Exception as e:
            logger.error("pagination_probe_error", url=base_url, error=str(e))
            return 1

        logger.info("last_page_found", url=base_url, last_page=last_page)
        return last_page
