"""Instagram posts and reels: yt-dlp first, oEmbed when the tool fails outright."""

import logging
import re

from url_ingest.config import Settings
from url_ingest.errors import UpstreamFetchFailed
from url_ingest.extraction.embeds import instagram_embed
from url_ingest.extraction.text import extract_links, format_upload_date
from url_ingest.extraction.tiktok import combine_caption_and_speech, transcribe_remote_audio
from url_ingest.fetch import fetch_json
from url_ingest.models.content import ExtractedContent, PlatformTag
from url_ingest.process import Runner
from url_ingest.transcription import Transcriber
from url_ingest.ytdlp import fetch_metadata

logger = logging.getLogger(__name__)

INSTAGRAM_PATTERNS = [
    re.compile(r"instagram\.com/p/([a-zA-Z0-9_-]+)"),
    re.compile(r"instagram\.com/reel/([a-zA-Z0-9_-]+)"),
    re.compile(r"instagram\.com/reels/([a-zA-Z0-9_-]+)"),
]
REEL_PATTERN = re.compile(r"/reels?/")
OEMBED_ENDPOINT = "https://api.instagram.com/oembed"


class InstagramExtractor:
    platform = PlatformTag.IMAGEVIDEO

    def __init__(self, settings: Settings, runner: Runner, transcriber: Transcriber):
        self.settings = settings
        self.runner = runner
        self.transcriber = transcriber

    def can_handle(self, url: str) -> bool:
        return any(pattern.search(url) for pattern in INSTAGRAM_PATTERNS)

    async def extract(self, url: str) -> ExtractedContent:
        """Extract an Instagram post or reel.

        Audio is only transcribed when the media reports a positive duration
        (image posts have none).

        Raises:
            UpstreamFetchFailed: both yt-dlp and the oEmbed fallback failed.
        """
        is_reel = REEL_PATTERN.search(url) is not None
        try:
            metadata = await fetch_metadata(self.runner, self.settings, url)
        except UpstreamFetchFailed as exc:
            logger.info("yt-dlp failed for %s, falling back to oEmbed (%s)", url, exc)
            return await self._extract_via_oembed(url)

        username = metadata.get("uploader") or metadata.get("channel") or "unknown"
        duration = metadata.get("duration")

        transcript = None
        if duration and duration > 0 and self.transcriber.enabled:
            logger.info("Transcribing Instagram audio: %s", url)
            transcript = await transcribe_remote_audio(self.transcriber, url, prefix="instagram")

        caption = metadata.get("description") or metadata.get("title")
        kind = "Reel" if is_reel else "Post"
        return ExtractedContent(
            platform=PlatformTag.IMAGEVIDEO,
            url=url,
            title=metadata.get("title") or f"{kind} by @{username}",
            author=username,
            author_url=f"https://instagram.com/{username}",
            date=format_upload_date(metadata.get("upload_date")),
            duration_seconds=duration,
            transcript=combine_caption_and_speech(caption, transcript),
            description=caption,
            links=extract_links(caption or ""),
            thumbnail_url=metadata.get("thumbnail"),
            embed_markup=instagram_embed(url),
            raw={
                "post_id": metadata.get("id"),
                "likes": metadata.get("like_count"),
                "comments": metadata.get("comment_count"),
                "is_reel": is_reel,
            },
        )

    async def _extract_via_oembed(self, url: str) -> ExtractedContent:
        try:
            data = await fetch_json(
                OEMBED_ENDPOINT,
                params={"url": url},
                timeout=self.settings.http_timeout,
                user_agent=self.settings.user_agent,
            )
        except UpstreamFetchFailed as exc:
            raise UpstreamFetchFailed(f"Failed to extract Instagram content: {exc}") from exc

        if not isinstance(data, dict):
            raise UpstreamFetchFailed(
                f"Failed to extract Instagram content: unexpected oEmbed response for {url}"
            )

        return ExtractedContent(
            platform=PlatformTag.IMAGEVIDEO,
            url=url,
            title=data.get("title") or "Instagram Post",
            author=data.get("author_name") or "unknown",
            author_url=data.get("author_url"),
            description=data.get("title"),
            thumbnail_url=data.get("thumbnail_url"),
            embed_markup=instagram_embed(url),
            raw={"source": "oembed", "is_reel": REEL_PATTERN.search(url) is not None},
        )
