"""Enhancement module for Quill.

Turns stored original articles into enhanced ones:
- Competing reference discovery through a search API
- Reference scraping with length filtering
- AI rewriting through an OpenAI-compatible chat API
- Citation appending and persistence
"""

from quill.core.enhancement.citations import append_citations, build_citation_block
from quill.core.enhancement.enhancer import ArticleEnhancer, build_prompt
from quill.core.enhancement.pipeline import (
    ArticleResult,
    BatchResult,
    EnhancementPipeline,
    PipelineStage,
    SkipReason,
    StageOutcome,
)
from quill.core.enhancement.reference_finder import ReferenceFinder

__all__ = [
    "append_citations",
    "build_citation_block",
    "ArticleEnhancer",
    "build_prompt",
    "ArticleResult",
    "BatchResult",
    "EnhancementPipeline",
    "PipelineStage",
    "SkipReason",
    "StageOutcome",
    "ReferenceFinder",
]
