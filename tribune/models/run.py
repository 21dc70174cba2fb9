"""Run report models for tracking ingestion runs."""

from typing import List, Optional

from pydantic import BaseModel, Field

from .base import DBModel, Timestamp


class SourceRunResult(BaseModel):
    """Outcome of one source within a run."""

    source_id: str = Field(..., description="Source ID")
    name: str = Field(..., description="Source name")
    success: bool = Field(..., description="Whether the source was processed")
    article_count: int = Field(0, description="Newly stored articles")
    error: Optional[str] = Field(None, description="Error message if failed")


class RunReport(DBModel):
    """Append-only audit record of one ingestion run."""

    timestamp: Timestamp = Field(..., description="When the run finished")
    sources_processed: int = Field(0, description="Eligible sources attempted")
    articles_added: int = Field(0, description="Sum of article counts")
    errors: int = Field(0, description="Sources that failed")
    details: List[SourceRunResult] = Field(default_factory=list)
