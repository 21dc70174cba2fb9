"""Category models for rule-based categorization."""

from typing import List

from pydantic import BaseModel, Field

from .base import DBModel

UNCATEGORIZED_SLUG = "uncategorized"


class CategoryRules(BaseModel):
    """Matching rules; any single hit matches."""

    keywords: List[str] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list, description="Source IDs")
    domains: List[str] = Field(default_factory=list, description="Hostname substrings")


class Category(DBModel):
    """Named rule bundle."""

    name: str = Field(..., description="Display name")
    slug: str = Field(..., description="Stable slug")
    description: str = Field("")
    color: str = Field("#6366f1", description="Hex color for display")
    icon: str = Field("📰")
    rules: CategoryRules = Field(default_factory=CategoryRules)
    order: int = Field(0, description="Display order")

    @property
    def is_sentinel(self) -> bool:
        return self.slug == UNCATEGORIZED_SLUG


def uncategorized_category() -> Category:
    """Build the sentinel category."""
    return Category(
        id=UNCATEGORIZED_SLUG,
        name="Uncategorized",
        slug=UNCATEGORIZED_SLUG,
        description="Articles that don't match any category rules",
        color="#9ca3af",
        icon="📋",
        order=999,
    )
