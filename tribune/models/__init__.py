"""Data models for Tribune."""

from .article import Article
from .category import UNCATEGORIZED_SLUG, Category, CategoryRules, uncategorized_category
from .run import RunReport, SourceRunResult
from .source import ScrapeSelectors, Source

__all__ = [
    "Article",
    "Category",
    "CategoryRules",
    "RunReport",
    "ScrapeSelectors",
    "Source",
    "SourceRunResult",
    "UNCATEGORIZED_SLUG",
    "uncategorized_category",
]
