"""Source model for feed and scrape origins."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from .base import DBModel, Timestamp

FetchStrategy = Literal["feed", "scrape"]
UpdateFrequency = Literal["hourly", "daily", "manual"]
SourceStatus = Literal["active", "error", "disabled"]


class ScrapeSelectors(BaseModel):
    """CSS selectors used by the scrape strategy."""

    container: str = Field(..., description="Selector for each article container")
    headline: str = Field(..., description="Selector for the headline inside a container")
    link: str = Field(..., description="Selector for the anchor inside a container")
    summary: Optional[str] = Field(None, description="Selector for the summary text")
    image: Optional[str] = Field(None, description="Selector for the image element")
    date: Optional[str] = Field(None, description="Selector for the date text")


class Source(DBModel):
    """Configured origin polled for articles, with its health fields."""

    name: str = Field(..., description="Display name")
    url: str = Field(..., description="Feed or page URL")
    strategy: FetchStrategy = Field("feed", description="Fetch strategy")
    selectors: Optional[ScrapeSelectors] = Field(None, description="Scrape selectors")
    enabled: bool = Field(True, description="Whether the source is eligible for runs")
    category: str = Field("general", description="Display category")
    update_frequency: UpdateFrequency = Field("daily", description="Advisory polling hint")
    priority: int = Field(5, description="Display ordering hint", ge=1, le=10)

    # Health
    last_fetched_at: Optional[Timestamp] = Field(None, description="Last attempt")
    last_success_at: Optional[Timestamp] = Field(None, description="Last successful attempt")
    consecutive_failures: int = Field(0, ge=0)
    status: SourceStatus = Field("active")
    error_message: str = Field("")
    total_articles_fetched: int = Field(0, ge=0)
    average_articles_per_fetch: float = Field(0.0, ge=0.0)
    successful_fetches: int = Field(0, ge=0, description="Count of successful fetches")

    # Compliance
    robots_txt_compliant: bool = Field(True)
    terms_accepted: bool = Field(True)
    notes: str = Field("")
