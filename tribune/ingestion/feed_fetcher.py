"""Syndication feed fetcher (RSS and Atom)."""

import logging
import re
from typing import Any, List, Optional

import feedparser
import httpx
from bs4 import BeautifulSoup

from ..config.models import DEFAULT_USER_AGENT
from ..models import Source
from .models import FetchResult, RawRecord

logger = logging.getLogger(__name__)

# Summaries some feeds ship instead of real content (e.g. a bare "Comments" link)
JUNK_SUMMARY_PATTERNS = [
    re.compile(r"^comments$", re.IGNORECASE),
    re.compile(r"^read more$", re.IGNORECASE),
    re.compile(r"^continue reading$", re.IGNORECASE),
    re.compile(r"^view article$", re.IGNORECASE),
    re.compile(r"^click here$", re.IGNORECASE),
]
MIN_SUMMARY_LENGTH = 20


def strip_html(text: str) -> str:
    """Reduce an HTML fragment to its text."""
    if "<" not in text:
        return text
    return BeautifulSoup(text, "html.parser").get_text(" ", strip=True)


def clean_feed_summary(text: Optional[str]) -> str:
    """Plain-text summary, or "" for junk and too-short summaries."""
    summary = strip_html(text or "").strip()
    if len(summary) < MIN_SUMMARY_LENGTH:
        return ""
    if any(pattern.match(summary) for pattern in JUNK_SUMMARY_PATTERNS):
        return ""
    return summary


def _first_href(items: Any, key: str) -> Optional[str]:
    for item in items or []:
        value = item.get(key) if isinstance(item, dict) else None
        if value:
            return value
    return None


def entry_to_record(entry: Any) -> RawRecord:
    """Map a feedparser entry onto a RawRecord."""
    summary = entry.get("summary")
    if not summary and entry.get("content"):
        summary = entry["content"][0].get("value")
    if not summary:
        summary = entry.get("description")

    return RawRecord(
        title=entry.get("title"),
        link=entry.get("link"),
        summary=clean_feed_summary(summary),
        author=entry.get("author") or entry.get("dc_creator"),
        pub_date=entry.get("published") or entry.get("updated"),
        image=_first_href(entry.get("enclosures"), "href"),
        thumbnail=_first_href(entry.get("media_thumbnail"), "url"),
    )


class FeedFetcher:
    """Fetch and parse syndication feeds."""

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        max_redirects: int = 5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize feed fetcher."""
        self.timeout = timeout
        self.user_agent = user_agent
        self.max_redirects = max_redirects
        self.transport = transport

    async def fetch(self, source: Source) -> FetchResult:
        """Fetch and parse a single feed. Never raises."""
        logger.info("Fetching feed from %s (%s)", source.name, source.url)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                max_redirects=self.max_redirects,
                headers={"User-Agent": self.user_agent},
                transport=self.transport,
            ) as client:
                response = await client.get(source.url)
                response.raise_for_status()

            feed = feedparser.parse(response.content)

            # Lenient feeds still parse with bozo set; only give up when nothing came out
            if feed.bozo and not feed.entries:
                return FetchResult.failed(
                    source, "feed-parse-failed", f"Invalid feed: {feed.bozo_exception}"
                )

            records: List[RawRecord] = [entry_to_record(entry) for entry in feed.entries]
            logger.info("Fetched %d items from %s", len(records), source.name)
            return FetchResult.succeeded(source, records)

        except httpx.HTTPStatusError as e:
            detail = f"HTTP {e.response.status_code}"
        except httpx.TimeoutException:
            detail = "Request timed out"
        except httpx.HTTPError as e:
            detail = f"HTTP error: {e}"
        except Exception as e:
            detail = f"Unexpected error: {e}"

        logger.error("Feed fetch failed for %s: %s", source.name, detail)
        return FetchResult.failed(source, "feed-parse-failed", detail)
