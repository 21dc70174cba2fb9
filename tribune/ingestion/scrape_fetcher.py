"""HTML scraper driven by per-source CSS selectors."""

import logging
from typing import List, Optional
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup, Tag

from ..config.models import DEFAULT_USER_AGENT
from ..models import ScrapeSelectors, Source
from .models import FetchResult, RawRecord

logger = logging.getLogger(__name__)


def origin_of(url: str) -> Optional[str]:
    """Return ``scheme://host`` of a URL, or None if it has neither."""
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return None
    return f"{parsed.scheme}://{parsed.netloc}"


def _text(element: Tag, selector: Optional[str]) -> str:
    if not selector:
        return ""
    found = element.select_one(selector)
    return found.get_text(" ", strip=True) if found else ""


def _attr(element: Tag, selector: Optional[str], attr: str) -> str:
    if not selector:
        return ""
    found = element.select_one(selector)
    if found is None:
        return ""
    value = found.get(attr)
    return value.strip() if isinstance(value, str) else ""


def extract_records(html: str, selectors: ScrapeSelectors, page_url: str) -> List[RawRecord]:
    """Extract one RawRecord per container that has both a headline and a link."""
    soup = BeautifulSoup(html, "html.parser")
    origin = origin_of(page_url)
    records = []

    for element in soup.select(selectors.container):
        title = _text(element, selectors.headline)
        link = _attr(element, selectors.link, "href")
        if not title or not link:
            continue

        if not link.startswith(("http://", "https://")) and origin:
            link = urljoin(origin, link)

        records.append(
            RawRecord(
                title=title,
                url=link,
                summary=_text(element, selectors.summary),
                image=_attr(element, selectors.image, "src") or None,
                pub_date=_text(element, selectors.date) or None,
            )
        )
    return records


class ScrapeFetcher:
    """Scrape article listings from HTML pages."""

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        max_redirects: int = 5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.max_redirects = max_redirects
        self.transport = transport

    async def fetch(self, source: Source) -> FetchResult:
        """Scrape a single source. Never raises."""
        if source.selectors is None:
            logger.error("No selectors configured for scraping %s", source.name)
            return FetchResult.failed(
                source, "selectors-missing", "No selectors configured for scraping"
            )

        logger.info("Scraping articles from %s (%s)", source.name, source.url)
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

            records = extract_records(response.text, source.selectors, source.url)
            logger.info("Scraped %d articles from %s", len(records), source.name)
            return FetchResult.succeeded(source, records)

        except httpx.HTTPStatusError as e:
            detail = f"HTTP {e.response.status_code}"
        except httpx.TimeoutException:
            detail = "Request timed out"
        except httpx.HTTPError as e:
            detail = f"HTTP error: {e}"
        except Exception as e:
            detail = f"Unexpected error: {e}"

        logger.error("Scrape failed for %s: %s", source.name, detail)
        return FetchResult.failed(source, "scrape-failed", detail)
