"""Data models for the url-ingest pipeline."""

from url_ingest.models.content import (
    ContentBody,
    ContentMetadata,
    ExtractedContent,
    MediaInfo,
    NormalizedContent,
    PlatformTag,
    RouteResult,
    SourceInfo,
    Timestamp,
    TranscriptionResult,
)

__all__ = [
    "PlatformTag",
    "RouteResult",
    "Timestamp",
    "ExtractedContent",
    "TranscriptionResult",
    "SourceInfo",
    "ContentBody",
    "MediaInfo",
    "ContentMetadata",
    "NormalizedContent",
]
