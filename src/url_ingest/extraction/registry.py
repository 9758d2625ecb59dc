"""Extractor registry: platform tag -> extractor dispatch table."""

import logging
from collections.abc import Mapping
from typing import Protocol

from url_ingest.config import Settings
from url_ingest.errors import InvalidUrl, NoExtractorAvailable
from url_ingest.extraction.article import ArticleExtractor
from url_ingest.extraction.instagram import InstagramExtractor
from url_ingest.extraction.podcast import PodcastExtractor
from url_ingest.extraction.router import route
from url_ingest.extraction.tiktok import TikTokExtractor
from url_ingest.extraction.twitter import TwitterExtractor
from url_ingest.extraction.youtube import YouTubeExtractor
from url_ingest.models.content import ExtractedContent, PlatformTag
from url_ingest.process import ProcessRunner, Runner
from url_ingest.transcription import Transcriber

logger = logging.getLogger(__name__)


class Extractor(Protocol):
    """Capability shared by every platform extractor."""

    platform: PlatformTag

    def can_handle(self, url: str) -> bool: ...

    async def extract(self, url: str) -> ExtractedContent: ...


class ExtractorRegistry:
    """Fixed mapping from platform tag to extractor, article as the default."""

    def __init__(self, extractors: Mapping[PlatformTag, Extractor]):
        self._extractors = dict(extractors)

    def for_platform(self, platform: PlatformTag) -> Extractor | None:
        """Dedicated extractor, else the article extractor. ``unknown`` gets None."""
        if platform == PlatformTag.UNKNOWN:
            return None
        return self._extractors.get(platform) or self._extractors.get(PlatformTag.ARTICLE)

    def supported_platforms(self) -> list[PlatformTag]:
        return list(self._extractors)

    async def extract(self, url: str) -> ExtractedContent:
        """Route ``url`` and run the resolved extractor.

        Raises:
            InvalidUrl: the URL routes to ``unknown``.
            NoExtractorAvailable: resolution produced nothing.
        """
        result = route(url)
        if result.platform == PlatformTag.UNKNOWN:
            raise InvalidUrl(f"Not a supported URL: {url!r}")

        extractor = self.for_platform(result.platform)
        if extractor is None:
            raise NoExtractorAvailable(f"No extractor available for URL: {url}")

        logger.info(
            "Extracting",
            extra={
                "url": result.url,
                "platform": result.platform.value,
                "extractor": type(extractor).__name__,
            },
        )
        return await extractor.extract(result.url)

    def can_extract(self, url: str) -> bool:
        """True when an extractor resolves and accepts this specific URL shape."""
        extractor = self.for_platform(route(url).platform)
        return extractor is not None and extractor.can_handle(url.strip())


def build_registry(
    settings: Settings,
    runner: Runner | None = None,
    transcriber: Transcriber | None = None,
) -> ExtractorRegistry:
    """Wire the six platform extractors with shared collaborators."""
    runner = runner or ProcessRunner()
    transcriber = transcriber or Transcriber(settings, runner)
    return ExtractorRegistry(
        {
            PlatformTag.VIDEO: YouTubeExtractor(settings, runner, transcriber),
            PlatformTag.ARTICLE: ArticleExtractor(settings),
            PlatformTag.AUDIOEPISODE: PodcastExtractor(settings, runner, transcriber),
            PlatformTag.MICROPOST: TwitterExtractor(settings),
            PlatformTag.SHORTVIDEO: TikTokExtractor(settings, runner, transcriber),
            PlatformTag.IMAGEVIDEO: InstagramExtractor(settings, runner, transcriber),
        }
    )
