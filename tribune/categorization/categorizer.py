"""Rule-based article categorization."""

import logging
from typing import Callable, List, Optional, Sequence
from urllib.parse import urlparse

from ..models import UNCATEGORIZED_SLUG, Article, Category

logger = logging.getLogger(__name__)


def _hostname(url: str) -> Optional[str]:
    try:
        return urlparse(url).hostname
    except ValueError:
        return None


def matches_category(category: Category, haystack: str, article: Article, hostname: Optional[str]) -> bool:
    """True if any keyword, source or domain rule of the category hits."""
    rules = category.rules

    if any(keyword.lower() in haystack for keyword in rules.keywords if keyword):
        return True

    if article.source_id in rules.sources:
        return True

    if hostname and any(domain in hostname for domain in rules.domains if domain):
        return True

    return False


class RuleCategorizer:
    """Assign category IDs to articles from keyword, source and domain rules.

    The sentinel resolver returns the ID of the "uncategorized" category and
    may create it; by default the slug itself is used.
    """

    def __init__(self, uncategorized: Optional[Callable[[], str]] = None) -> None:
        self.uncategorized = uncategorized or (lambda: UNCATEGORIZED_SLUG)

    def _fallback(self) -> List[str]:
        try:
            return [self.uncategorized()]
        except Exception as e:
            logger.error("Failed to get or create uncategorized category: %s", e)
            return []

    def categorize(self, article: Article, categories: Sequence[Category]) -> List[str]:
        """
        Categorize one article.

        Returns:
            Matching category IDs, or just the sentinel when nothing matches
        """
        try:
            haystack = f"{article.title} {article.summary}".lower()
            hostname = _hostname(article.url)

            matches = [
                category.id
                for category in categories
                if not category.is_sentinel
                and matches_category(category, haystack, article, hostname)
            ]
        except Exception as e:
            logger.error("Failed to categorize article %r: %s", article.title, e)
            return self._fallback()

        if not matches:
            return self._fallback()
        return matches
