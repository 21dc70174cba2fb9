"""Strategy dispatch for source fetching."""

import logging
from typing import Optional

import httpx

from ..config import IngestionConfig
from ..models import Source
from .feed_fetcher import FeedFetcher
from .models import FetchResult
from .scrape_fetcher import ScrapeFetcher

logger = logging.getLogger(__name__)


class SourceFetcher:
    """Pick the fetch strategy configured on a source."""

    def __init__(
        self,
        config: Optional[IngestionConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        config = config or IngestionConfig()
        options = dict(
            timeout=config.timeout,
            user_agent=config.user_agent,
            max_redirects=config.max_redirects,
            transport=transport,
        )
        self.feed = FeedFetcher(**options)
        self.scrape = ScrapeFetcher(**options)

    async def fetch(self, source: Source) -> FetchResult:
        """Fetch raw records for one source. Failures come back as results."""
        if source.strategy == "feed":
            return await self.feed.fetch(source)
        if source.strategy == "scrape":
            return await self.scrape.fetch(source)

        logger.error("Unknown strategy %r for %s", source.strategy, source.name)
        return FetchResult.failed(
            source, "unknown-strategy", f"Unknown source strategy: {source.strategy}"
        )
