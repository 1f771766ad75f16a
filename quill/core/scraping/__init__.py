"""Scraping module for Quill.

This module provides the page acquisition building blocks:
- Raw HTML retrieval via direct GET or headless render
- Title, body, author and image extraction using ranked selector cascades
- Article link discovery on listing pages
- Last-page discovery for paginated listings
"""

from quill.core.scraping.content_extractor import (
    ContentExtractor,
    ExtractedContent,
    ExtractionConfig,
)
from quill.core.scraping.fetcher import Fetcher, FetchMode
from quill.core.scraping.link_harvester import HarvestConfig, LinkHarvester
from quill.core.scraping.pagination import PaginationProbe, page_url, parse_last_page

__all__ = [
    "ContentExtractor",
    "ExtractedContent",
    "ExtractionConfig",
    "Fetcher",
    "FetchMode",
    "HarvestConfig",
    "LinkHarvester",
    "PaginationProbe",
    "page_url",
    "parse_last_page",
]
