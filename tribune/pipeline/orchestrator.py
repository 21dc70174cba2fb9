"""Ingestion orchestrator: fetch, normalize, categorize and store every source."""

import asyncio
import logging
import time
from datetime import datetime
from typing import List, Optional, Sequence

import pendulum

from ..categorization import RuleCategorizer
from ..config import IngestionConfig
from ..db.articles import ArticleRepository
from ..db.categories import CategoryRepository
from ..db.runs import RunReportRepository
from ..db.store import DocumentStore
from ..enrichment import TextExtractor, create_short_summary, validate_extracted_text
from ..ingestion import SourceFetcher, normalize_record
from ..models import Article, Category, RunReport, Source, SourceRunResult
from .health import SourceHealthTracker

logger = logging.getLogger(__name__)


class IngestionOrchestrator:
    """Drive one ingestion run across all eligible sources.

    Sources are processed concurrently and independently: every source
    settles to a success or failure record before health is updated and the
    run report is written.
    """

    def __init__(
        self,
        store: DocumentStore,
        config: Optional[IngestionConfig] = None,
        fetcher: Optional[SourceFetcher] = None,
        categorizer: Optional[RuleCategorizer] = None,
        extractor: Optional[TextExtractor] = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            store: Document store for articles, sources and run reports
            config: Ingestion settings
            fetcher: Strategy dispatcher (defaults to one built from config)
            categorizer: Rule categorizer (defaults to one backed by the store's sentinel)
            extractor: Optional text extractor used to enrich thin articles
        """
        self.config = config or IngestionConfig()
        self.store = store
        self.fetcher = fetcher or SourceFetcher(self.config)
        self.articles = ArticleRepository(store)
        self.category_repo = CategoryRepository(store)
        self.categorizer = categorizer or RuleCategorizer(self.category_repo.get_or_create_uncategorized)
        self.extractor = extractor
        self.health = SourceHealthTracker(store, self.config.failure_threshold)
        self.reports = RunReportRepository(store)

    async def _fetch(self, source: Source):
        return await asyncio.wait_for(self.fetcher.fetch(source), timeout=self.config.source_timeout)

    def _categorize_all(self, articles: Sequence[Article], categories: Sequence[Category]) -> None:
        for article in articles:
            article.categories = self.categorizer.categorize(article, categories)

    def _unseen(self, articles: Sequence[Article]) -> List[Article]:
        return [article for article in articles if self.articles.get_article(article.id) is None]

    def _save_all(self, articles: Sequence[Article]) -> int:
        return sum(1 for article in articles if self.articles.save_if_absent(article))

    async def _enrich(self, article: Article) -> None:
        try:
            result = await self.extractor.extract(article.url)
            if not validate_extracted_text(result):
                logger.warning("Text extraction failed for %s: %s", article.title, result.error)
                return

            article.full_text = result.full_text
            article.word_count = result.word_count

            summary = create_short_summary(result.full_text)
            if summary.success:
                article.extracted_summary = summary.summary
                article.summarized_at = pendulum.now("UTC")
                article.summarization_method = summary.method
        except Exception as e:
            logger.error("Error enriching article %s: %s", article.title, e)

    async def enrich_articles(self, articles: List[Article]) -> None:
        """Extract text for new articles whose feed summary is missing or short."""
        thin = [article for article in articles if len(article.summary) <= self.config.min_summary_length]
        if not thin:
            return
        candidates = await asyncio.to_thread(self._unseen, thin)
        if not candidates:
            return

        logger.info("Extracting text for %d/%d articles", len(candidates), len(articles))
        semaphore = asyncio.Semaphore(self.config.max_concurrent_extractions)

        async def enrich_with_semaphore(article: Article) -> None:
            async with semaphore:
                await self._enrich(article)

        await asyncio.gather(*(enrich_with_semaphore(article) for article in candidates))

    async def process_source(self, source: Source, categories: Sequence[Category]) -> SourceRunResult:
        """
        Fetch, normalize, categorize and store one source.

        Store calls run in worker threads so one source's writes never hold
        up another source's fetch.

        Returns:
            The source's outcome; failures are returned, not raised
        """
        try:
            result = await self._fetch(source)
        except asyncio.TimeoutError:
            result = None
            error = f"Fetch timed out after {self.config.source_timeout:g}s"
        else:
            error = result.error_message

        if result is None or not result.success:
            logger.warning("Source %s failed: %s", source.name, error)
            return SourceRunResult(
                source_id=source.id, name=source.name, success=False, article_count=0, error=error
            )

        fetched_at = pendulum.now("UTC")
        articles = {}
        for record in result.records:
            article = normalize_record(record, source, fetched_at)
            if article is not None and article.id not in articles:
                articles[article.id] = article

        batch = list(articles.values())
        await asyncio.to_thread(self._categorize_all, batch, categories)

        if self.extractor is not None and self.config.extract_text:
            await self.enrich_articles(batch)

        saved = await asyncio.to_thread(self._save_all, batch)

        logger.info(
            "Processed %s: fetched=%d normalized=%d saved=%d",
            source.name,
            len(result.records),
            len(articles),
            saved,
        )
        return SourceRunResult(source_id=source.id, name=source.name, success=True, article_count=saved)

    async def _process_isolated(
        self,
        source: Source,
        categories: Sequence[Category],
        semaphore: asyncio.Semaphore,
    ) -> SourceRunResult:
        async with semaphore:
            try:
                return await self.process_source(source, categories)
            except Exception as e:
                logger.exception("Failed to process source %s", source.name)
                return SourceRunResult(
                    source_id=source.id,
                    name=source.name,
                    success=False,
                    article_count=0,
                    error=str(e) or type(e).__name__,
                )

    async def run_ingestion(
        self,
        sources: Sequence[Source],
        categories: Optional[Sequence[Category]] = None,
        now: Optional[datetime] = None,
    ) -> RunReport:
        """
        Run one ingestion pass.

        Args:
            sources: All configured sources; disabled ones are skipped
            categories: Rule set for this run (loaded from the store if omitted)
            now: Run timestamp

        Returns:
            The run report (persisted unless no source was eligible)
        """
        started = time.time()
        eligible = [source for source in sources if source.enabled]
        if not eligible:
            logger.warning("No enabled sources found")
            return RunReport(timestamp=now or pendulum.now("UTC"))

        if categories is None:
            categories = self.category_repo.get_all_categories()

        logger.info("Starting ingestion for %d enabled sources", len(eligible))

        semaphore = asyncio.Semaphore(self.config.max_concurrent)
        settled = await asyncio.gather(
            *(self._process_isolated(source, categories, semaphore) for source in eligible),
            return_exceptions=True,
        )

        details: List[SourceRunResult] = []
        for source, outcome in zip(eligible, settled):
            if isinstance(outcome, BaseException):
                outcome = SourceRunResult(
                    source_id=source.id,
                    name=source.name,
                    success=False,
                    article_count=0,
                    error=str(outcome) or type(outcome).__name__,
                )
            details.append(outcome)

        now = now or pendulum.now("UTC")
        for detail in details:
            self.health.record(detail, now)

        report = RunReport(
            timestamp=now,
            sources_processed=len(eligible),
            articles_added=sum(d.article_count for d in details),
            errors=sum(1 for d in details if not d.success),
            details=details,
        )
        self.reports.append(report)

        logger.info(
            "Ingestion completed in %.1fs: %d sources, %d articles added, %d errors",
            time.time() - started,
            report.sources_processed,
            report.articles_added,
            report.errors,
        )
        return report

    def run_ingestion_sync(
        self,
        sources: Sequence[Source],
        categories: Optional[Sequence[Category]] = None,
    ) -> RunReport:
        """Synchronous wrapper for run_ingestion."""
        return asyncio.run(self.run_ingestion(sources, categories))
