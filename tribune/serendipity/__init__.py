"""Serendipity feed: source-balanced random sampling."""

from .sampler import DistributionSampler, get_serendipity_articles, group_by_source, shuffled

__all__ = ["DistributionSampler", "get_serendipity_articles", "group_by_source", "shuffled"]
