"""Source fetching and normalization."""

from .feed_fetcher import FeedFetcher
from .fetcher import SourceFetcher
from .models import FetchError, FetchResult, RawRecord
from .normalizer import hash_url, normalize_record
from .scrape_fetcher import ScrapeFetcher

__all__ = [
    "FeedFetcher",
    "FetchError",
    "FetchResult",
    "RawRecord",
    "ScrapeFetcher",
    "SourceFetcher",
    "hash_url",
    "normalize_record",
]
