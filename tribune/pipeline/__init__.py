"""Ingestion pipeline: orchestration and source health."""

from .health import SourceHealthTracker, apply_fetch_outcome
from .orchestrator import IngestionOrchestrator

__all__ = ["IngestionOrchestrator", "SourceHealthTracker", "apply_fetch_outcome"]
