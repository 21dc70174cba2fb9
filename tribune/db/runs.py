"""Run report storage."""

import logging
import uuid
from typing import List

import pendulum

from ..models import RunReport
from .store import DocumentStore, Filter

logger = logging.getLogger(__name__)

FETCH_LOGS = "fetch_logs"


class RunReportRepository:
    """Append-only store of ingestion run reports."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def append(self, report: RunReport) -> str:
        """
        Persist a run report.

        Returns:
            Report ID
        """
        if report.id is None:
            report.id = uuid.uuid4().hex
        self.store.insert_if_absent(FETCH_LOGS, report.id, report.to_document())
        logger.info(
            "Fetch log created: %s (%d sources, %d articles, %d errors)",
            report.id,
            report.sources_processed,
            report.articles_added,
            report.errors,
        )
        return report.id

    def get_recent(self, limit: int = 10) -> List[RunReport]:
        docs = self.store.query(FETCH_LOGS, order_by="timestamp", descending=True, limit=limit)
        return [RunReport.from_document(d) for d in docs]

    def delete_old(self, days_to_keep: int = 30) -> int:
        cutoff = pendulum.now("UTC").subtract(days=days_to_keep)
        docs = self.store.query(FETCH_LOGS, where=[Filter("timestamp", "<", cutoff)])
        deleted = sum(1 for doc in docs if self.store.delete(FETCH_LOGS, doc["id"]))
        if deleted:
            logger.info("Deleted %d old fetch logs", deleted)
        return deleted
