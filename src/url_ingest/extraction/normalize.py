"""ExtractedContent -> NormalizedContent, plus excerpt helpers for collaborators."""

import math

from url_ingest.models.content import (
    ContentBody,
    ContentMetadata,
    ExtractedContent,
    MediaInfo,
    NormalizedContent,
    SourceInfo,
)

WORDS_PER_MINUTE = 200


def count_words(text: str) -> int:
    return len(text.split())


def normalize(content: ExtractedContent) -> NormalizedContent:
    """Reshape one extractor record into the fixed normalized schema.

    Text precedence: transcript, then description, then "". Pure and total.
    """
    text = content.transcript or content.description or ""
    word_count = count_words(text)

    return NormalizedContent(
        source=SourceInfo(
            platform=content.platform,
            url=content.url,
            title=content.title,
            author=content.author,
            author_url=content.author_url,
            date=content.date,
        ),
        content=ContentBody(
            text=text,
            word_count=word_count,
            reading_time_minutes=math.ceil(word_count / WORDS_PER_MINUTE),
        ),
        media=MediaInfo(
            embed_markup=content.embed_markup or "",
            thumbnail_url=content.thumbnail_url,
        ),
        metadata=ContentMetadata(
            links=list(content.links),
            timestamps=list(content.timestamps),
            duration_seconds=content.duration_seconds,
        ),
    )


def truncate_content(text: str, max_length: int) -> str:
    """Cut ``text`` to ``max_length`` characters, preferring a word boundary.

    Breaks at the last space when that keeps at least 80% of the budget.
    """
    if len(text) <= max_length:
        return text
    truncated = text[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > max_length * 0.8:
        return truncated[:last_space] + "..."
    return truncated + "..."


def get_excerpt(content: NormalizedContent, max_length: int = 500) -> str:
    return truncate_content(content.content.text, max_length)
