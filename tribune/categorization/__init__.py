"""Rule-based categorization."""

from .categorizer import RuleCategorizer, matches_category

__all__ = ["RuleCategorizer", "matches_category"]
