"""Source-balanced random sampling of recent articles."""

import logging
import random
from typing import Dict, List, Optional, Sequence, TypeVar

import pendulum

from ..db.articles import ArticleRepository
from ..models import Article

logger = logging.getLogger(__name__)

T = TypeVar("T")


def shuffled(items: Sequence[T], rng: random.Random) -> List[T]:
    """Return a Fisher-Yates shuffled copy of ``items``."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def group_by_source(pool: Sequence[Article]) -> Dict[str, List[Article]]:
    """Group articles by source ID, in order of first appearance."""
    groups: Dict[str, List[Article]] = {}
    for article in pool:
        groups.setdefault(article.source_id, []).append(article)
    return groups


class DistributionSampler:
    """Pick a randomized subset that spreads evenly across sources."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def sample(self, pool: Sequence[Article], target: int) -> List[Article]:
        """
        Select ``target`` articles balanced across sources.

        Each source gets ``target // S`` articles and the first
        ``target % S`` sources one more. A source that runs short triggers
        the leftover pool, which later fills the gap with unselected articles
        from the other sources.
        """
        if target <= 0 or not pool:
            return []

        if len(pool) <= target:
            logger.info("Fewer articles than requested, returning all randomized")
            return shuffled(pool, self.rng)

        by_source = group_by_source(pool)
        source_count = len(by_source)
        per_source, remainder = divmod(target, source_count)
        logger.info(
            "Distribution: %d sources, %d per source, %d remainder",
            source_count,
            per_source,
            remainder,
        )

        selected: List[Article] = []
        leftovers: List[Article] = []

        for index, (source_id, articles) in enumerate(by_source.items()):
            quota = per_source + 1 if index < remainder else per_source
            taken = shuffled(articles, self.rng)[:quota]
            selected.extend(taken)

            if len(taken) < quota:
                logger.info(
                    "Source %s only had %d/%d articles, %d short",
                    source_id,
                    len(taken),
                    quota,
                    quota - len(taken),
                )
                for other_id, other_articles in by_source.items():
                    if other_id != source_id:
                        leftovers.extend(other_articles)

        needed = target - len(selected)
        if needed > 0 and leftovers:
            seen = {article.id for article in selected}
            available = []
            for article in leftovers:
                if article.id not in seen:
                    seen.add(article.id)
                    available.append(article)

            logger.info("Filling %d gaps from %d leftover articles", needed, len(available))
            selected.extend(shuffled(available, self.rng)[:needed])

        final = shuffled(selected, self.rng)[:target]

        distribution: Dict[str, int] = {}
        for article in final:
            distribution[article.source_id] = distribution.get(article.source_id, 0) + 1
        logger.info("Returning %d articles, distribution by source: %s", len(final), distribution)
        return final


def get_serendipity_articles(
    repository: ArticleRepository,
    total_articles: int,
    window_days: int = 3,
    sampler: Optional[DistributionSampler] = None,
) -> List[Article]:
    """Sample the articles fetched in the last ``window_days`` days."""
    cutoff = pendulum.now("UTC").subtract(days=window_days)
    pool = repository.get_articles_since(cutoff)
    if not pool:
        logger.warning("No articles found in last %d days", window_days)
        return []

    logger.info("Found %d articles from last %d days", len(pool), window_days)
    return (sampler or DistributionSampler()).sample(pool, total_articles)
