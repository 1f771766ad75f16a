"""Article records exchanged with the article store.

Field names on the wire follow the CRUD service (``imageUrl``,
``originalArticleId``, ``_id``); Python code uses snake_case attributes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

ENHANCED_TITLE_SUFFIX = " (Enhanced)"


class ArticleType(str, Enum):
    """Type discriminator stored on every article record."""

    ORIGINAL = "original"
    UPDATED = "updated"


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))

    def to_payload(self) -> dict[str, Any]:
        """Serialize for ``POST /articles`` (wire names, no id)."""
        return self.model_dump(by_alias=True, exclude={"id"}, mode="json")


class Article(_Record):
    """An original article scraped from the target site."""

    title: str
    content: str
    url: str
    author: str = "Unknown"
    image_url: str | None = Field(
        default=None,
        alias="imageUrl",
        validation_alias=AliasChoices("imageUrl", "image_url"),
    )
    type: ArticleType = ArticleType.ORIGINAL


class EnhancedArticle(_Record):
    """AI-rewritten derivative of an original article, with citations appended."""

    title: str
    content: str
    original_article_id: str | None = Field(
        default=None,
        alias="originalArticleId",
        validation_alias=AliasChoices("originalArticleId", "original_article_id"),
    )
    references: list[str] = Field(default_factory=list, max_length=2)
    type: ArticleType = ArticleType.UPDATED

    @classmethod
    def from_original(
        cls, original: Article, content: str, references: list[str]
    ) -> "EnhancedArticle":
        """Build the enhanced record for an original article."""
        return cls(
            title=f"{original.title}{ENHANCED_TITLE_SUFFIX}",
            content=content,
            original_article_id=original.id,
            references=references,
        )


@dataclass
class Reference:
    """A competing article scraped during one pipeline run. Never persisted."""

    url: str
    content: str
