"""Fixed-delay pacing between calls to third-party services."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from quill.config import settings


@dataclass
class PacingPolicy:
    """Delays (in seconds) inserted between external calls.

    Attributes:
        inter_reference_delay: After each reference scrape
        inter_link_delay: After each harvested article scrape
        inter_article_delay: Between two articles of an enhancement batch
        warm_up_delay: Once, before the first article of a batch
        sleep: Awaitable sleep used for every pause
    """

    inter_reference_delay: float = 1.0
    inter_link_delay: float = 1.0
    inter_article_delay: float = 3.0
    warm_up_delay: float = 2.0
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    @classmethod
    def from_settings(cls) -> "PacingPolicy":
        return cls(
            inter_reference_delay=settings.inter_reference_delay,
            inter_link_delay=settings.inter_link_delay,
            inter_article_delay=settings.inter_article_delay,
            warm_up_delay=settings.warm_up_delay,
        )

    async def pause(self, seconds: float) -> None:
        if seconds > 0:
            await self.sleep(seconds)
