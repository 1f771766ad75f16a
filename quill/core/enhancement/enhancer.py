"""Article rewriting through an OpenAI-compatible chat completions API."""

import structlog
from openai import AsyncOpenAI, AuthenticationError

from quill.config import settings
from quill.models import Reference
from quill.utils.exceptions import GenerationAuthError, GenerationError
from quill.utils.openai_client import get_generation_client

logger = structlog.get_logger(__name__)

SYSTEM_PROMPT = "You are a professional SEO content writer."

ORIGINAL_CONTENT_LIMIT = 2000
REFERENCE_CONTENT_LIMIT = 1500
MISSING_REFERENCE = "Not available"

ENHANCEMENT_PROMPT = """You are an expert SEO content writer. Your task is to rewrite an article to match the quality and style of top-ranking Google articles.

**ORIGINAL ARTICLE:**
Title: {title}
Content: {content}

**TOP-RANKING ARTICLE #1:**
{reference_1}

**TOP-RANKING ARTICLE #2:**
{reference_2}

**YOUR TASK:**
Rewrite the original article by:
1. Matching the style and tone of the top-ranking articles
2. Using similar heading structure (H2, H3)
3. Making it more comprehensive and engaging
4. Keeping the core topic the same
5. Making it 1000-1500 words
6. Using markdown formatting

**FORMATTING RULES:**
- Use ## for H2 headings
- Use ### for H3 headings
- Use **bold** for emphasis
- Use bullet points where appropriate
- Include introduction, body sections, conclusion

**IMPORTANT:**
- Write in professional, clear English
- Don't mention this is a rewrite
- Don't add meta descriptions
- Just provide the article content

Write the enhanced article now:"""


def build_prompt(title: str, content: str, references: list[Reference]) -> str:
    """
    Build the user prompt for a rewrite.

    Args:
        title: Original article title
        content: Original article body
        references: Up to two scraped references (missing slots are marked)

    Returns:
        Prompt text with every embedded body truncated to its limit
    """
    slots = [ref.content[:REFERENCE_CONTENT_LIMIT] for ref in references[:2]]
    slots += [MISSING_REFERENCE] * (2 - len(slots))

    return ENHANCEMENT_PROMPT.format(
        title=title,
        content=content[:ORIGINAL_CONTENT_LIMIT],
        reference_1=slots[0],
        reference_2=slots[1],
    )


class ArticleEnhancer:
    """
    Rewrite an article in the style of its top-ranking competitors.

    Failures never propagate: ``enhance`` returns None so the pipeline can
    skip the article and move on.
    """

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> None:
        """
        Initialize ArticleEnhancer.

        Args:
            client: Optional AsyncOpenAI client (created from settings on first use)
            model: Chat model name (defaults to settings.generation_model)
            max_tokens: Output cap (defaults to settings.generation_max_tokens)
            temperature: Sampling temperature (defaults to settings.generation_temperature)
        """
        self._client = client
        self.model = model or settings.generation_model
        self.max_tokens = max_tokens or settings.generation_max_tokens
        self.temperature = (
            temperature if temperature is not None else settings.generation_temperature
        )

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = get_generation_client()
        return self._client

    async def enhance(
        self, title: str, content: str, references: list[Reference]
    ) -> str | None:
        """
        Produce the rewritten article text.

        Args:
            title: Original article title
            content: Original article body
            references: Scraped references (0-2)

        Returns:
            Rewritten markdown text, or None if generation failed
        """
        try:
            text = await self._generate(build_prompt(title, content, references))
        except GenerationAuthError as e:
            logger.error(
                "generation_auth_failed",
                error=str(e),
                hint="Check GENERATION_API_KEY",
            )
            return None
        except GenerationError as e:
            logger.error("generation_failed", error=str(e))
            return None

        logger.info("generation_complete", chars=len(text))
        return text

    async def _generate(self, prompt: str) -> str:
        """
        Send one chat completion request.

        Raises:
            GenerationAuthError: If the API rejects the credentials
            GenerationError: On any other failure or an empty completion
        """
        logger.info("generation_request", model=self.model, prompt_chars=len(prompt))
        client = self.client
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except AuthenticationError as e:
            raise GenerationAuthError(f"Generation API rejected credentials: {e}") from e
        except Exception as e:
            raise GenerationError(f"Generation request failed: {e}") from e

        text = response.choices[0].message.content if response.choices else None
        if not text or not text.strip():
            raise GenerationError("Generation API returned an empty completion")

        usage = response.usage
        if usage:
            logger.debug(
                "generation_usage",
                prompt_tokens=usage.prompt_tokens,
                completion_tokens=usage.completion_tokens,
            )
        return text
