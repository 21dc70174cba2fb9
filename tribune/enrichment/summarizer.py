"""Extractive summaries built from the leading sentences of an article."""

import logging
import re
from typing import List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Abbreviation -> placeholder, so their periods don't end a sentence
ABBREVIATIONS = [
    ("Mr.", "Mr"),
    ("Mrs.", "Mrs"),
    ("Ms.", "Ms"),
    ("Dr.", "Dr"),
    ("Inc.", "Inc"),
    ("Ltd.", "Ltd"),
    ("Jr.", "Jr"),
    ("Sr.", "Sr"),
    ("U.S.", "US"),
    ("U.K.", "UK"),
    ("etc.", "etc"),
]

SENTENCE_BOUNDARY = re.compile(r"[.!?]+")
MIN_SENTENCE_LENGTH = 20


class SummaryResult(BaseModel):
    """Extractive summary."""

    success: bool
    summary: str = ""
    sentences: List[str] = Field(default_factory=list)
    method: str = "extractive"
    error: Optional[str] = None


def split_into_sentences(text: str) -> List[str]:
    """Split text into sentences, keeping common abbreviations intact."""
    processed = text
    for abbreviation, placeholder in ABBREVIATIONS:
        processed = processed.replace(abbreviation, placeholder)

    sentences = []
    for fragment in SENTENCE_BOUNDARY.split(processed):
        fragment = fragment.strip()
        if len(fragment) <= MIN_SENTENCE_LENGTH:
            continue
        for abbreviation, placeholder in ABBREVIATIONS:
            fragment = re.sub(rf"\b{re.escape(placeholder)}\b", abbreviation, fragment)
        if not fragment.endswith((".", "!", "?")):
            fragment += "."
        sentences.append(fragment)
    return sentences


def create_extractive_summary(
    text: str,
    sentence_count: int = 2,
    max_length: int = 300,
    min_length: int = 100,
) -> SummaryResult:
    """
    Summarize by taking the first sentences of the text.

    Args:
        text: Full article text
        sentence_count: Sentences to start from
        max_length: Hard cap on summary characters
        min_length: Keep adding sentences until at least this long

    Returns:
        SummaryResult with the summary and the sentences used
    """
    if not text or not text.strip():
        return SummaryResult(success=False, error="No text provided")

    sentences = split_into_sentences(text)
    if not sentences:
        return SummaryResult(success=False, error="No sentences found")

    selected = sentences[:sentence_count]
    summary = " ".join(selected)

    while len(summary) < min_length and len(selected) < len(sentences):
        selected.append(sentences[len(selected)])
        summary = " ".join(selected)

    if len(summary) > max_length:
        summary = summary[:max_length].strip()
        last_period = summary.rfind(".")
        if last_period > min_length:
            summary = summary[: last_period + 1]
        else:
            summary += "..."

    logger.debug("Created extractive summary: %d sentences, %d chars", len(selected), len(summary))
    return SummaryResult(success=True, summary=summary.strip(), sentences=selected)


def create_short_summary(text: str) -> SummaryResult:
    """One or two sentences for list views."""
    return create_extractive_summary(text, sentence_count=2, max_length=200, min_length=80)


def create_medium_summary(text: str) -> SummaryResult:
    """Two or three sentences for article cards."""
    return create_extractive_summary(text, sentence_count=3, max_length=300, min_length=150)
