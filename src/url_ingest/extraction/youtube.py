"""YouTube extraction: yt-dlp metadata, captions first, speech-to-text second."""

import logging

from url_ingest.config import Settings
from url_ingest.errors import InvalidUrl, UpstreamFetchFailed
from url_ingest.extraction.embeds import youtube_embed
from url_ingest.extraction.fallback import first_success
from url_ingest.extraction.router import extract_video_id
from url_ingest.extraction.text import (
    clean_vtt,
    extract_links,
    extract_timestamps,
    format_upload_date,
)
from url_ingest.models.content import ExtractedContent, PlatformTag
from url_ingest.process import Runner
from url_ingest.tempfiles import remove_paths
from url_ingest.transcription import Transcriber
from url_ingest.ytdlp import download_subtitles, fetch_metadata

logger = logging.getLogger(__name__)


class YouTubeExtractor:
    platform = PlatformTag.VIDEO

    def __init__(self, settings: Settings, runner: Runner, transcriber: Transcriber):
        self.settings = settings
        self.runner = runner
        self.transcriber = transcriber

    def can_handle(self, url: str) -> bool:
        return extract_video_id(url) is not None

    async def extract(self, url: str) -> ExtractedContent:
        """Extract metadata, transcript, chapters and links for a video.

        Transcript tiers, in order: English captions (manual preferred over
        auto-generated), then audio + speech-to-text when a credential is
        configured. A video with neither still extracts.

        Raises:
            InvalidUrl: no video id in the URL.
            UpstreamFetchFailed: the metadata call failed.
        """
        video_id = extract_video_id(url)
        if video_id is None:
            raise InvalidUrl(f"Invalid YouTube URL: {url}")

        try:
            metadata = await fetch_metadata(self.runner, self.settings, url)
        except UpstreamFetchFailed as exc:
            raise UpstreamFetchFailed(f"Failed to fetch YouTube metadata: {exc}") from exc

        attempts = [("captions", lambda: self._captions(url))]
        if self.transcriber.enabled:
            attempts.append(("speech-to-text", lambda: self._speech_to_text(url)))
        transcript = await first_success(attempts, url=url)
        if transcript is None:
            logger.info("No transcript available for %s", url)

        description = metadata.get("description") or ""
        return ExtractedContent(
            platform=PlatformTag.VIDEO,
            url=url,
            title=metadata.get("title") or f"YouTube video {video_id}",
            author=metadata.get("channel") or metadata.get("uploader") or "Unknown",
            author_url=metadata.get("channel_url"),
            date=format_upload_date(metadata.get("upload_date")),
            duration_seconds=metadata.get("duration"),
            transcript=transcript,
            description=description or None,
            links=extract_links(description),
            timestamps=extract_timestamps(description),
            thumbnail_url=metadata.get("thumbnail"),
            embed_markup=youtube_embed(video_id),
            raw={
                "video_id": video_id,
                "view_count": metadata.get("view_count"),
            },
        )

    async def _captions(self, url: str) -> str | None:
        vtt = await download_subtitles(self.runner, self.settings, url)
        if not vtt:
            return None
        return clean_vtt(vtt) or None

    async def _speech_to_text(self, url: str) -> str | None:
        logger.info("No captions available, attempting speech-to-text: %s", url)
        audio_path = await self.transcriber.extract_audio_from_url(url)
        try:
            result = await self.transcriber.transcribe(audio_path=audio_path)
        finally:
            remove_paths(audio_path)
        return result.text or None
