"""Platform tags, extracted content, and normalized content models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PlatformTag(str, Enum):
    """Content-source categories a URL can be routed to."""

    VIDEO = "video"
    ARTICLE = "article"
    MICROPOST = "micropost"
    SHORTVIDEO = "shortvideo"
    IMAGEVIDEO = "imagevideo"
    AUDIOEPISODE = "audioepisode"
    UNKNOWN = "unknown"


class RouteResult(BaseModel):
    """Routing decision for one URL."""

    model_config = ConfigDict(frozen=True)

    platform: PlatformTag
    url: str  # Trimmed input URL
    id: str | None = None  # Video id, status id, etc. when the pattern captures one


class Timestamp(BaseModel):
    """A chapter marker parsed from source text."""

    time_seconds: int = Field(ge=0)
    label: str


class ExtractedContent(BaseModel):
    """Raw extractor output. Same shape for every platform."""

    platform: PlatformTag
    url: str
    title: str
    author: str
    author_url: str | None = None
    date: str | None = None  # YYYY-MM-DD where the source allows, else as given
    duration_seconds: float | None = None
    transcript: str | None = None  # Full text (article body, captions, speech-to-text)
    description: str | None = None
    links: list[str] = Field(default_factory=list)
    timestamps: list[Timestamp] = Field(default_factory=list)
    thumbnail_url: str | None = None
    embed_markup: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict)  # Platform-specific extras, never interpreted


class TranscriptionResult(BaseModel):
    """Speech-to-text output for one file (or the reassembled chunks of one)."""

    text: str
    duration_seconds: float | None = None
    language: str | None = None


class SourceInfo(BaseModel):
    platform: PlatformTag
    url: str
    title: str
    author: str
    author_url: str | None = None
    date: str | None = None


class ContentBody(BaseModel):
    text: str
    word_count: int
    reading_time_minutes: int


class MediaInfo(BaseModel):
    embed_markup: str
    thumbnail_url: str | None = None


class ContentMetadata(BaseModel):
    links: list[str] = Field(default_factory=list)
    timestamps: list[Timestamp] = Field(default_factory=list)
    duration_seconds: float | None = None


class NormalizedContent(BaseModel):
    """Final pipeline artifact handed to the generation collaborator."""

    source: SourceInfo
    content: ContentBody
    media: MediaInfo
    metadata: ContentMetadata
