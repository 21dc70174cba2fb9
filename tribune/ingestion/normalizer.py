"""Normalize raw records into canonical articles."""

import hashlib
import re
from datetime import date, datetime
from typing import Optional
from urllib.parse import urljoin

import pendulum

from ..models import Article, Source
from .models import RawRecord
from .scrape_fetcher import origin_of

RSS_SUFFIX = re.compile(r"\s*-\s*RSS$", re.IGNORECASE)
WHITESPACE = re.compile(r"\s+")


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace and newlines to single spaces and trim."""
    if not text:
        return ""
    return WHITESPACE.sub(" ", text).strip()


def clean_title(title: Optional[str]) -> str:
    """Clean a title and drop a trailing "- RSS" feed suffix."""
    return RSS_SUFFIX.sub("", clean_text(title)).strip()


def resolve_url(url: Optional[str], base_url: str) -> str:
    """Resolve a possibly relative URL against the origin of ``base_url``.

    Absolute http(s) URLs pass through. If the base has no usable origin, the
    raw value is returned unchanged.
    """
    if not url or not url.strip():
        return ""
    url = url.strip()
    if url.startswith(("http://", "https://")):
        return url

    origin = origin_of(base_url)
    if origin is None:
        return url
    try:
        return urljoin(origin, url)
    except ValueError:
        return url


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a date string, strict ISO-8601 first, then leniently.

    Returns None when neither parse yields a date.
    """
    if not value or not value.strip():
        return None

    for strict in (True, False):
        try:
            parsed = pendulum.parse(value.strip(), strict=strict)
        except (ValueError, OverflowError, TypeError):
            continue
        if isinstance(parsed, datetime):
            return parsed
        if isinstance(parsed, date):
            return pendulum.datetime(parsed.year, parsed.month, parsed.day)
    return None


def hash_url(url: str) -> str:
    """Stable article ID for a canonical URL."""
    return hashlib.sha256(url.encode("utf-8")).hexdigest()


def normalize_record(
    raw: RawRecord,
    source: Source,
    fetched_at: Optional[datetime] = None,
) -> Optional[Article]:
    """
    Convert a raw record into an Article.

    Returns:
        The Article, or None if the record has no title or no URL
    """
    raw_title = raw.title or raw.headline
    raw_url = raw.link or raw.url
    if not raw_title or not raw_url:
        return None

    title = clean_title(raw_title)
    url = resolve_url(raw_url, source.url)
    if not title or not url:
        return None

    image_url = resolve_url(raw.image or raw.thumbnail, source.url)

    return Article(
        id=hash_url(url),
        title=title,
        url=url,
        source_id=source.id,
        source_name=source.name,
        summary=clean_text(raw.summary or raw.description),
        author=clean_text(raw.author),
        published_date=parse_date(raw.pub_date or raw.published),
        image_url=image_url or None,
        fetched_at=fetched_at or pendulum.now("UTC"),
    )
