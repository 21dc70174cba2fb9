"""Article model for canonical, deduplicated content."""

from typing import List, Optional

from pydantic import Field

from .base import DBModel, Timestamp


class Article(DBModel):
    """Article model.

    ``id`` is the SHA-256 of the canonical URL, so the same URL always maps to
    the same document.
    """

    title: str = Field(..., description="Cleaned title")
    url: str = Field(..., description="Canonical absolute URL")
    source_id: str = Field(..., description="Owning source ID")
    source_name: str = Field(..., description="Denormalized source name")
    summary: str = Field("", description="Cleaned summary")
    author: str = Field("", description="Author")
    published_date: Optional[Timestamp] = Field(None, description="Publication timestamp")
    image_url: Optional[str] = Field(None, description="Absolute image URL")
    fetched_at: Timestamp = Field(..., description="When the article was fetched")
    categories: List[str] = Field(default_factory=list, description="Category IDs")

    # Enrichment
    full_text: Optional[str] = Field(None, description="Extracted page text")
    word_count: Optional[int] = Field(None, description="Words in full_text")
    extracted_summary: Optional[str] = Field(None, description="Extractive summary")
    summarized_at: Optional[Timestamp] = Field(None)
    summarization_method: Optional[str] = Field(None)
