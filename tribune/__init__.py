"""Tribune: news aggregation with rule-based categorization and a serendipity feed."""

__version__ = "0.1.0"
