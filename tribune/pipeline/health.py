"""Per-source health state machine."""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

import pendulum

from ..db.sources import SOURCES
from ..db.store import DocumentStore
from ..models import Source, SourceRunResult
from ..models.base import format_timestamp

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_THRESHOLD = 5


def apply_fetch_outcome(
    source: Source,
    outcome: SourceRunResult,
    now: datetime,
    failure_threshold: int = DEFAULT_FAILURE_THRESHOLD,
) -> Dict[str, Any]:
    """
    Compute the health fields that change after one fetch attempt.

    Pure function of the current source state; the returned dict is merged
    into the stored source document.
    """
    stamp = format_timestamp(now)
    updates: Dict[str, Any] = {"last_fetched_at": stamp}

    if outcome.success:
        fetches = source.successful_fetches
        if fetches == 0:
            average = float(outcome.article_count)
        else:
            average = (source.average_articles_per_fetch * fetches + outcome.article_count) / (fetches + 1)

        updates.update(
            last_success_at=stamp,
            consecutive_failures=0,
            status="active",
            error_message="",
            total_articles_fetched=source.total_articles_fetched + outcome.article_count,
            average_articles_per_fetch=average,
            successful_fetches=fetches + 1,
        )
    else:
        failures = source.consecutive_failures + 1
        updates.update(
            consecutive_failures=failures,
            error_message=outcome.error or "Unknown error",
        )
        if failures >= failure_threshold:
            updates["status"] = "error"

    return updates


class SourceHealthTracker:
    """Fold fetch outcomes into stored source health."""

    def __init__(
        self,
        store: DocumentStore,
        failure_threshold: int = DEFAULT_FAILURE_THRESHOLD,
    ) -> None:
        self.store = store
        self.failure_threshold = failure_threshold

    def record(self, outcome: SourceRunResult, now: Optional[datetime] = None) -> Optional[Source]:
        """
        Apply one outcome as a single atomic update of the source document.

        Returns:
            The updated source, or None if the source is not stored
        """
        now = now or pendulum.now("UTC")
        updated = self.store.transform(
            SOURCES,
            outcome.source_id,
            lambda doc: apply_fetch_outcome(
                Source.from_document(doc), outcome, now, self.failure_threshold
            ),
        )
        if updated is None:
            logger.warning("Cannot record health for unknown source %s", outcome.source_id)
            return None

        source = Source.from_document(updated)
        if not outcome.success and source.status == "error":
            logger.warning(
                "Source %s has failed %d times in a row; status is now error",
                source.name,
                source.consecutive_failures,
            )
        return source
