"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator
from unittest.mock import AsyncMock

import pytest

from quill.config import Settings
from quill.core.pacing import PacingPolicy
from quill.models import Article


@pytest.fixture
def test_settings() -> Generator[Settings, None, None]:
    """
    Provide test configuration with overrides.

    Yields:
        Settings instance for testing
    """
    # Save original environment
    original_env = os.environ.copy()

    os.environ["API_BASE_URL"] = "http://store.test/api/"
    os.environ["GOOGLE_API_KEY"] = "google-test-key"
    os.environ["GOOGLE_CX"] = "test-cx"
    os.environ["GENERATION_API_KEY"] = "gsk-test-key"
    os.environ["LOG_LEVEL"] = "debug"

    settings = Settings(_env_file=None)

    yield settings

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def no_wait_pacing() -> PacingPolicy:
    """Pacing policy whose pauses are recorded instead of slept."""
    return PacingPolicy(sleep=AsyncMock())


@pytest.fixture
def original_article() -> Article:
    """A stored original article."""
    return Article(
        id="64f1c0ffee",
        title="How Chatbots Improve Customer Support",
        content="Chatbots answer common questions instantly. " * 20,
        url="https://beyondchats.com/blogs/chatbots-customer-support/",
        author="Jane Writer",
    )
