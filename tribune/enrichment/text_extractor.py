"""Full-page article text extraction."""

import logging
import re
from typing import List, Optional

import httpx
import trafilatura
from bs4 import BeautifulSoup
from pydantic import BaseModel, Field

from ..config.models import EXTRACTION_USER_AGENT

logger = logging.getLogger(__name__)

NOISE_SELECTORS = [
    "script, style, nav, header, footer, aside, iframe, noscript",
    ".ad, .advertisement, .social-share, .comments",
    "[class*='ad-'], [class*='banner'], [id*='ad-']",
]

CONTENT_SELECTORS = [
    "article",
    "[role='main']",
    "main",
    ".article-content",
    ".post-content",
    ".entry-content",
    ".story-body",
    "#article-body",
    ".article-body",
]

JUNK_PARAGRAPH_PATTERNS = [
    re.compile(r"^(share|tweet|email|print|subscribe)"),
    re.compile(r"^(advertisement|sponsored)"),
    re.compile(r"^(related|more stories|read more)"),
    re.compile(r"cookie policy|privacy policy"),
    re.compile(r"sign up|newsletter|follow us"),
    re.compile(r"\d+\s*(comments|shares)"),
]

MIN_PARAGRAPH_LENGTH = 50
MIN_WORD_COUNT = 50
MIN_PARAGRAPHS = 2


class ExtractionResult(BaseModel):
    """Extracted article text."""

    url: str = Field(..., description="Page URL")
    success: bool = Field(..., description="Whether the page was fetched and parsed")
    full_text: str = Field("", description="Paragraphs joined by blank lines")
    paragraphs: List[str] = Field(default_factory=list)
    word_count: int = Field(0)
    error: Optional[str] = Field(None, description="Error message if failed")


def is_junk_paragraph(text: str) -> bool:
    """Check whether a paragraph looks like page chrome rather than content."""
    lower = text.lower()
    return any(pattern.search(lower) for pattern in JUNK_PARAGRAPH_PATTERNS)


def extract_paragraphs(html: str, url: Optional[str] = None) -> List[str]:
    """Pull body paragraphs out of an HTML page."""
    soup = BeautifulSoup(html, "html.parser")
    for selector in NOISE_SELECTORS:
        for element in soup.select(selector):
            element.decompose()

    content = None
    for selector in CONTENT_SELECTORS:
        content = soup.select_one(selector)
        if content is not None:
            break
    if content is None:
        content = soup.body or soup

    paragraphs = []
    for element in content.find_all("p"):
        text = element.get_text(" ", strip=True)
        if len(text) > MIN_PARAGRAPH_LENGTH and not is_junk_paragraph(text):
            paragraphs.append(text)

    if paragraphs:
        return paragraphs

    # Pages without <p> markup: let trafilatura find the main text
    extracted = trafilatura.extract(
        html,
        include_comments=False,
        include_tables=False,
        deduplicate=True,
        favor_precision=True,
        url=url,
    )
    if not extracted:
        return []
    return [
        line.strip()
        for line in extracted.splitlines()
        if len(line.strip()) > MIN_PARAGRAPH_LENGTH and not is_junk_paragraph(line.strip())
    ]


def validate_extracted_text(result: ExtractionResult) -> bool:
    """Quick check that extracted text looks like an article."""
    if not result.success or not result.full_text:
        return False
    return result.word_count >= MIN_WORD_COUNT and len(result.paragraphs) >= MIN_PARAGRAPHS


class TextExtractor:
    """Fetch an article page and extract its body paragraphs."""

    def __init__(
        self,
        timeout: float = 15.0,
        user_agent: str = EXTRACTION_USER_AGENT,
        max_redirects: int = 5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize text extractor."""
        self.timeout = timeout
        self.user_agent = user_agent
        self.max_redirects = max_redirects
        self.transport = transport

    async def extract(self, url: str) -> ExtractionResult:
        """Extract main text from a URL. Never raises."""
        logger.info("Extracting text from %s", url)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                max_redirects=self.max_redirects,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "text/html,application/xhtml+xml",
                },
                transport=self.transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()

            paragraphs = extract_paragraphs(response.text, str(response.url))
            full_text = "\n\n".join(paragraphs)
            word_count = len(full_text.split())

            logger.info(
                "Extracted %d paragraphs, %d words from %s", len(paragraphs), word_count, url
            )
            return ExtractionResult(
                url=url,
                success=True,
                full_text=full_text,
                paragraphs=paragraphs,
                word_count=word_count,
            )

        except httpx.HTTPStatusError as e:
            error = f"HTTP {e.response.status_code}"
        except httpx.TimeoutException:
            error = "Request timed out"
        except Exception as e:
            error = f"Unexpected error: {e}"

        logger.warning("Text extraction failed for %s: %s", url, error)
        return ExtractionResult(url=url, success=False, error=error)
