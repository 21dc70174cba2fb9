"""Article storage with URL-hash deduplication."""

import logging
from datetime import datetime
from typing import List, Optional

import pendulum

from ..models import Article
from .store import DocumentStore, Filter

logger = logging.getLogger(__name__)

ARTICLES = "articles"


class ArticleRepository:
    """Handle article storage and deduplication."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def save_if_absent(self, article: Article) -> bool:
        """
        Store the article unless its ID already exists.

        Returns:
            True if the article was new
        """
        inserted = self.store.insert_if_absent(ARTICLES, article.id, article.to_document())
        if not inserted:
            logger.debug("Article already exists: %s", article.title)
        return inserted

    def get_article(self, article_id: str) -> Optional[Article]:
        doc = self.store.get(ARTICLES, article_id)
        return Article.from_document(doc) if doc else None

    def get_recent_articles(self, limit: int = 50) -> List[Article]:
        docs = self.store.query(ARTICLES, order_by="fetched_at", descending=True, limit=limit)
        return [Article.from_document(d) for d in docs]

    def get_articles_by_category(self, category_id: str, limit: int = 50) -> List[Article]:
        # Membership is not a store predicate, so filter after the read
        docs = self.store.query(ARTICLES, order_by="fetched_at", descending=True)
        articles = [Article.from_document(d) for d in docs]
        return [a for a in articles if category_id in a.categories][:limit]

    def get_articles_since(self, cutoff: datetime) -> List[Article]:
        """Articles fetched at or after ``cutoff``, newest first."""
        docs = self.store.query(
            ARTICLES,
            where=[Filter("fetched_at", ">=", cutoff)],
            order_by="fetched_at",
            descending=True,
        )
        return [Article.from_document(d) for d in docs]

    def delete_old_articles(self, days_to_keep: int) -> int:
        """Delete articles fetched more than ``days_to_keep`` days ago."""
        cutoff = pendulum.now("UTC").subtract(days=days_to_keep)
        docs = self.store.query(ARTICLES, where=[Filter("fetched_at", "<", cutoff)])

        deleted = sum(1 for doc in docs if self.store.delete(ARTICLES, doc["id"]))
        if deleted:
            logger.info("Deleted %d old articles", deleted)
        else:
            logger.info("No old articles to delete")
        return deleted
