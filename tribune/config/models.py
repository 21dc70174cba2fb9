"""Configuration models."""

import re
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.source import FetchStrategy, ScrapeSelectors, UpdateFrequency

DEFAULT_USER_AGENT = "Tribune News Aggregator/1.0"
EXTRACTION_USER_AGENT = "Mozilla/5.0 (compatible; TribuneBot/1.0; +https://tribune.news/bot)"


def slugify(value: str) -> str:
    """Lowercase, hyphen-separated slug."""
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


class StoreConfig(BaseModel):
    """Document store selection."""

    backend: Literal["postgres", "memory"] = Field("postgres", description="Store backend")


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("tribune", description="Database name")
    user: str = Field("tribune", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(None, description="Environment variable for password")


class IngestionConfig(BaseModel):
    """Ingestion run parameters."""

    timeout: float = Field(10.0, description="Per-request timeout in seconds", gt=0)
    source_timeout: float = Field(15.0, description="Ceiling for one source's fetch", gt=0)
    user_agent: str = Field(DEFAULT_USER_AGENT)
    max_redirects: int = Field(5, ge=0, le=20)
    max_concurrent: int = Field(10, ge=1, le=100)
    failure_threshold: int = Field(5, ge=1, description="Consecutive failures before error status")
    extract_text: bool = Field(True, description="Enrich articles with short summaries")
    min_summary_length: int = Field(80, ge=0)
    max_concurrent_extractions: int = Field(5, ge=1, le=50, description="Page extractions in flight per source")


class ExtractionConfig(BaseModel):
    """Full-page text extraction parameters."""

    timeout: float = Field(15.0, gt=0)
    user_agent: str = Field(EXTRACTION_USER_AGENT)
    max_redirects: int = Field(5, ge=0, le=20)


class SerendipityConfig(BaseModel):
    """Serendipity feed defaults."""

    window_days: int = Field(3, ge=1, le=90)
    default_count: int = Field(30, ge=1, le=500)


class RetentionConfig(BaseModel):
    """Retention sweep thresholds."""

    article_days: int = Field(30, ge=1)
    run_report_days: int = Field(30, ge=1)


class ConfigModel(BaseModel):
    """Main configuration model."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    serendipity: SerendipityConfig = Field(default_factory=SerendipityConfig)
    retention: RetentionConfig = Field(default_factory=RetentionConfig)


class SourceConfig(BaseModel):
    """Source configuration from sources.yaml."""

    id: Optional[str] = Field(None, description="Stable source ID (defaults to slug of name)")
    name: str = Field(..., description="Source name")
    url: str = Field(..., description="Feed or page URL")
    strategy: FetchStrategy = Field("feed", description="Fetch strategy")
    selectors: Optional[ScrapeSelectors] = Field(None, description="Scrape selectors")
    enabled: bool = Field(True, description="Whether source is enabled")
    category: str = Field("general", description="Display category")
    update_frequency: UpdateFrequency = Field("daily")
    priority: int = Field(5, ge=1, le=10)
    robots_txt_compliant: bool = Field(True)
    terms_accepted: bool = Field(True)
    notes: str = Field("")

    @property
    def source_id(self) -> str:
        return self.id or slugify(self.name)


class CategoryConfig(BaseModel):
    """Category configuration from categories.yaml."""

    id: Optional[str] = Field(None, description="Stable category ID (defaults to slug)")
    name: str = Field(..., description="Category name")
    slug: Optional[str] = Field(None, description="Slug (defaults to slug of name)")
    description: str = Field("")
    color: str = Field("#6366f1")
    icon: str = Field("📰")
    keywords: List[str] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list)
    domains: List[str] = Field(default_factory=list)
    order: int = Field(0)

    @field_validator("keywords", "domains")
    @classmethod
    def strip_blank(cls, v: List[str]) -> List[str]:
        """Drop blank rule entries, which would otherwise match everything."""
        return [item.strip() for item in v if item and item.strip()]

    @property
    def category_slug(self) -> str:
        return self.slug or slugify(self.name)

    @property
    def category_id(self) -> str:
        return self.id or self.category_slug
