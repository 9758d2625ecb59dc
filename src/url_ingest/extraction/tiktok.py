"""TikTok extraction: yt-dlp metadata plus speech-to-text of the clip audio."""

import logging
import re
from typing import Any

from url_ingest.config import Settings
from url_ingest.errors import IngestError, UpstreamFetchFailed
from url_ingest.extraction.embeds import tiktok_embed
from url_ingest.extraction.text import extract_links, format_upload_date
from url_ingest.models.content import ExtractedContent, PlatformTag
from url_ingest.process import Runner
from url_ingest.tempfiles import remove_paths
from url_ingest.transcription import Transcriber
from url_ingest.ytdlp import fetch_metadata

logger = logging.getLogger(__name__)

# First pattern captures the username; the short-link forms carry none
TIKTOK_PATTERNS = [
    re.compile(r"tiktok\.com/@([\w.-]+)/video/(\d+)"),
    re.compile(r"tiktok\.com/t/(\w+)"),
    re.compile(r"vm\.tiktok\.com/(\w+)"),
]

SPOKEN_MARKER = "[Spoken content]"


def combine_caption_and_speech(caption: str | None, transcript: str | None) -> str | None:
    """Caption text followed by a bracketed spoken-content section.

    Both are kept when both exist; either alone is returned as-is.
    """
    parts = []
    if caption:
        parts.append(caption)
    if transcript:
        parts.append(f"\n\n{SPOKEN_MARKER}: {transcript}" if caption else transcript)
    return "".join(parts) or None


async def transcribe_remote_audio(transcriber: Transcriber, url: str, prefix: str) -> str | None:
    """Download a clip's audio and transcribe it; None on any pipeline failure.

    Failure is logged, not raised: the caption/description path still
    produces a record. The audio temp file never outlives this call.
    """
    try:
        audio_path = await transcriber.extract_audio_from_url(url, prefix=prefix)
    except IngestError as exc:
        logger.warning("Audio download failed for %s: %s", url, exc)
        return None
    try:
        result = await transcriber.transcribe(audio_path=audio_path)
    except IngestError as exc:
        logger.warning("Transcription failed for %s: %s", url, exc)
        return None
    finally:
        remove_paths(audio_path)
    return result.text or None


class TikTokExtractor:
    platform = PlatformTag.SHORTVIDEO

    def __init__(self, settings: Settings, runner: Runner, transcriber: Transcriber):
        self.settings = settings
        self.runner = runner
        self.transcriber = transcriber

    def can_handle(self, url: str) -> bool:
        return any(pattern.search(url) for pattern in TIKTOK_PATTERNS)

    def _username(self, url: str, metadata: dict[str, Any]) -> str:
        match = TIKTOK_PATTERNS[0].search(url)
        if match:
            return match.group(1)
        return metadata.get("uploader") or metadata.get("creator") or "unknown"

    async def extract(self, url: str) -> ExtractedContent:
        """Extract a TikTok clip.

        Raises:
            UpstreamFetchFailed: the metadata call failed.
        """
        try:
            metadata = await fetch_metadata(self.runner, self.settings, url)
        except UpstreamFetchFailed as exc:
            raise UpstreamFetchFailed(f"Failed to fetch TikTok metadata: {exc}") from exc

        username = self._username(url, metadata)

        transcript = None
        if self.transcriber.enabled:
            logger.info("Transcribing TikTok audio: %s", url)
            transcript = await transcribe_remote_audio(self.transcriber, url, prefix="tiktok")

        caption = metadata.get("description") or metadata.get("title")
        full_text = combine_caption_and_speech(caption, transcript)

        return ExtractedContent(
            platform=PlatformTag.SHORTVIDEO,
            url=url,
            title=metadata.get("title") or f"TikTok by @{username}",
            author=username,
            author_url=f"https://tiktok.com/@{username}",
            date=format_upload_date(metadata.get("upload_date")),
            duration_seconds=metadata.get("duration"),
            transcript=full_text,
            description=caption,
            links=extract_links(caption or ""),
            thumbnail_url=metadata.get("thumbnail"),
            embed_markup=tiktok_embed(url),
            raw={
                "video_id": metadata.get("id"),
                "likes": metadata.get("like_count"),
                "comments": metadata.get("comment_count"),
                "shares": metadata.get("repost_count"),
                "views": metadata.get("view_count"),
            },
        )
