"""Optional article enrichment: page text extraction and extractive summaries."""

from .summarizer import (
    SummaryResult,
    create_extractive_summary,
    create_medium_summary,
    create_short_summary,
)
from .text_extractor import ExtractionResult, TextExtractor, validate_extracted_text

__all__ = [
    "ExtractionResult",
    "SummaryResult",
    "TextExtractor",
    "create_extractive_summary",
    "create_medium_summary",
    "create_short_summary",
    "validate_extracted_text",
]
