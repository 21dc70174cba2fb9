"""Data models for ingestion."""

from typing import List, Optional

from pydantic import BaseModel, Field


class RawRecord(BaseModel):
    """Un-normalized item as returned by a fetch strategy.

    Field names differ between strategies; the normalizer resolves the
    fallbacks (title/headline, link/url, summary/description,
    pub_date/published, image/thumbnail).
    """

    title: Optional[str] = None
    headline: Optional[str] = None
    link: Optional[str] = None
    url: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    author: Optional[str] = None
    pub_date: Optional[str] = None
    published: Optional[str] = None
    image: Optional[str] = None
    thumbnail: Optional[str] = None


class FetchError(BaseModel):
    """Typed fetch failure."""

    reason: str = Field(..., description="Machine-readable failure reason")
    detail: str = Field("", description="Human-readable detail")

    def __str__(self) -> str:
        return f"{self.reason}: {self.detail}" if self.detail else self.reason


class FetchResult(BaseModel):
    """Result of fetching one source."""

    source_id: Optional[str] = Field(None, description="Source ID")
    source_name: str = Field(..., description="Source name")
    success: bool = Field(..., description="Whether fetch was successful")
    records: List[RawRecord] = Field(default_factory=list, description="Raw records")
    error: Optional[FetchError] = Field(None, description="Failure if unsuccessful")

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error else None

    @classmethod
    def failed(cls, source, reason: str, detail: str = "") -> "FetchResult":
        return cls(
            source_id=source.id,
            source_name=source.name,
            success=False,
            error=FetchError(reason=reason, detail=detail),
        )

    @classmethod
    def succeeded(cls, source, records: List[RawRecord]) -> "FetchResult":
        return cls(
            source_id=source.id,
            source_name=source.name,
            success=True,
            records=records,
        )
