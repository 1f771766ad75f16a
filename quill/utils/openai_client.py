"""Centralized client initialization for the OpenAI-compatible generation API."""

from openai import AsyncOpenAI

from quill.config import settings
from quill.utils.exceptions import GenerationAuthError


def get_generation_client() -> AsyncOpenAI:
    """
    Get configured async client for the generation endpoint.

    The endpoint only needs to speak the OpenAI chat completions protocol,
    so Groq, OpenAI and local gateways all work by changing the base URL.

    Returns:
        Configured AsyncOpenAI client with API key and base URL from settings

    Raises:
        GenerationAuthError: If no generation API key is configured

    Example:
        ```python
        client = get_generation_client()
        response = await client.chat.completions.create(...)
        ```
    """
    if settings.generation_api_key is None:
        raise GenerationAuthError("GENERATION_API_KEY is not set")

    return AsyncOpenAI(
        api_key=settings.generation_api_key.get_secret_value(),
        base_url=settings.generation_base_url,
    )
