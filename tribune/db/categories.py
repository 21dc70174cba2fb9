"""Category rule storage."""

import logging
from typing import List

from ..config import CategoryConfig
from ..models import UNCATEGORIZED_SLUG, Category, CategoryRules, uncategorized_category
from .store import DocumentStore

logger = logging.getLogger(__name__)

CATEGORIES = "categories"


class CategoryRepository:
    """Manage category rules in the store."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def sync_categories(self, categories: List[CategoryConfig]) -> List[str]:
        """Create or refresh categories from config. Returns their IDs."""
        ids = []
        for config in categories:
            category = Category(
                id=config.category_id,
                name=config.name,
                slug=config.category_slug,
                description=config.description,
                color=config.color,
                icon=config.icon,
                rules=CategoryRules(
                    keywords=config.keywords,
                    sources=config.sources,
                    domains=config.domains,
                ),
                order=config.order,
            )
            doc = category.to_document()
            if not self.store.insert_if_absent(CATEGORIES, category.id, doc):
                self.store.update(CATEGORIES, category.id, doc)
            ids.append(category.id)

        logger.info("Synced %d categories", len(ids))
        return ids

    def get_all_categories(self) -> List[Category]:
        """All categories by display order."""
        docs = self.store.query(CATEGORIES, order_by="order")
        return [Category.from_document(d) for d in docs]

    def get_or_create_uncategorized(self) -> str:
        """
        Return the sentinel category ID, creating it if needed.

        The sentinel is keyed by its slug, so concurrent callers all land on
        the same document.
        """
        sentinel = uncategorized_category()
        if self.store.insert_if_absent(CATEGORIES, UNCATEGORIZED_SLUG, sentinel.to_document()):
            logger.info("Created sentinel category %s", UNCATEGORIZED_SLUG)
        return UNCATEGORIZED_SLUG
