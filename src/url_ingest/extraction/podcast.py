"""Podcast episodes: direct audio files, Spotify pages, and yt-dlp-supported hosts.

Exactly one branch runs per URL, chosen in this order:
1. direct audio file URL -> download, measure, transcribe
2. Spotify episode -> page metadata only (audio needs privileged API access)
3. anything else -> yt-dlp metadata + audio, then transcribe
"""

import logging
import re
from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

from url_ingest.config import Settings
from url_ingest.errors import IngestError, UpstreamFetchFailed
from url_ingest.extraction.embeds import podcast_embed
from url_ingest.extraction.html import first_meta, page_title, parse_html
from url_ingest.extraction.text import extract_links, format_upload_date
from url_ingest.fetch import download_to_file, fetch_text
from url_ingest.models.content import ExtractedContent, PlatformTag
from url_ingest.process import Runner
from url_ingest.tempfiles import remove_paths, temp_path
from url_ingest.transcription import Transcriber
from url_ingest.ytdlp import fetch_metadata

logger = logging.getLogger(__name__)

PODCAST_PATTERNS = [
    re.compile(r"\.mp3(?:\?|$)", re.IGNORECASE),
    re.compile(r"\.m4a(?:\?|$)", re.IGNORECASE),
    re.compile(r"\.wav(?:\?|$)", re.IGNORECASE),
    re.compile(r"anchor\.fm"),
    re.compile(r"podcasts\.apple\.com"),
    re.compile(r"open\.spotify\.com/episode"),
    re.compile(r"soundcloud\.com"),
    re.compile(r"overcast\.fm"),
    re.compile(r"pocketcasts\.com"),
]
DIRECT_AUDIO_PATTERN = re.compile(r"\.(mp3|m4a|wav|ogg|opus)(?:\?|$)", re.IGNORECASE)
_AUDIO_EXTENSION = re.compile(r"\.(mp3|m4a|wav|ogg|opus)$", re.IGNORECASE)
_SPOTIFY_TITLE_SUFFIX = " | Podcast on Spotify"


def title_from_audio_url(url: str) -> str:
    """Human title from an audio URL's filename: ``my-show_ep%201.mp3`` -> ``my show ep 1``."""
    filename = PurePosixPath(urlparse(url).path).name or "podcast"
    stem = _AUDIO_EXTENSION.sub("", filename)
    title = unquote(re.sub(r"[-_]", " ", stem)).strip()
    return title or "Podcast Episode"


class PodcastExtractor:
    platform = PlatformTag.AUDIOEPISODE

    def __init__(self, settings: Settings, runner: Runner, transcriber: Transcriber):
        self.settings = settings
        self.runner = runner
        self.transcriber = transcriber

    def can_handle(self, url: str) -> bool:
        return any(pattern.search(url) for pattern in PODCAST_PATTERNS)

    async def extract(self, url: str) -> ExtractedContent:
        if DIRECT_AUDIO_PATTERN.search(url):
            return await self._extract_direct_audio(url)
        if "spotify.com" in url:
            return await self._extract_spotify(url)
        return await self._extract_generic(url)

    async def _extract_direct_audio(self, url: str) -> ExtractedContent:
        """Download, measure and transcribe a bare audio file.

        Without a transcription credential the file is not downloaded at all
        and a metadata-only record comes back.

        Raises:
            UpstreamFetchFailed: download failed.
            TranscriptionUnavailable: the transcription itself failed.
        """
        record = ExtractedContent(
            platform=PlatformTag.AUDIOEPISODE,
            url=url,
            title=title_from_audio_url(url),
            author=urlparse(url).hostname or "Unknown",
            embed_markup=podcast_embed(url),
            raw={"source": "direct-audio"},
        )
        if not self.transcriber.enabled:
            logger.warning("Transcription not configured; returning metadata only for %s", url)
            return record

        suffix = _AUDIO_EXTENSION.search(PurePosixPath(urlparse(url).path).name)
        audio_path = temp_path(self.settings, "podcast", suffix.group(0) if suffix else ".mp3")
        try:
            logger.info("Downloading audio: %s", url)
            await download_to_file(
                url,
                audio_path,
                timeout=self.settings.download_timeout,
                user_agent=self.settings.user_agent,
            )
            duration = await self.transcriber.probe_duration(audio_path)
            logger.info("Transcribing audio (long episodes take a while): %s", url)
            result = await self.transcriber.transcribe(audio_path=audio_path)
        finally:
            remove_paths(audio_path)

        return record.model_copy(
            update={"duration_seconds": round(duration), "transcript": result.text or None}
        )

    async def _extract_spotify(self, url: str) -> ExtractedContent:
        """Page metadata only; the transcript is intentionally absent."""
        html = await fetch_text(
            url, timeout=self.settings.http_timeout, user_agent=self.settings.user_agent
        )
        soup = parse_html(html)
        title = (page_title(soup) or "").replace(_SPOTIFY_TITLE_SUFFIX, "").strip()
        description = first_meta(soup, "description", "og:description")
        return ExtractedContent(
            platform=PlatformTag.AUDIOEPISODE,
            url=url,
            title=title or "Spotify Podcast",
            author="Spotify",
            description=description,
            links=extract_links(description or ""),
            thumbnail_url=first_meta(soup, "og:image"),
            embed_markup=podcast_embed(url),
            raw={"source": "spotify-page"},
        )

    async def _extract_generic(self, url: str) -> ExtractedContent:
        """yt-dlp metadata (defaults if unavailable), audio, transcription.

        Transcription problems are tolerated when the episode has a
        description to fall back on.
        """
        try:
            metadata = await fetch_metadata(self.runner, self.settings, url)
        except UpstreamFetchFailed as exc:
            logger.info("No metadata for %s, using defaults (%s)", url, exc)
            metadata = {}

        description = metadata.get("description") or None
        transcript = None
        if self.transcriber.enabled:
            try:
                transcript = await self._transcribe_remote(url)
            except IngestError:
                if not description:
                    raise
                logger.warning("Transcription failed for %s, keeping description only", url)
        else:
            logger.warning("Transcription not configured; returning metadata only for %s", url)

        return ExtractedContent(
            platform=PlatformTag.AUDIOEPISODE,
            url=url,
            title=metadata.get("title") or "Podcast Episode",
            author=metadata.get("uploader") or metadata.get("channel") or "Unknown",
            date=format_upload_date(metadata.get("upload_date")),
            duration_seconds=metadata.get("duration") or 0,
            transcript=transcript,
            description=description,
            links=extract_links(description or ""),
            thumbnail_url=metadata.get("thumbnail"),
            embed_markup=podcast_embed(url),
            raw={"source": "yt-dlp", "episode_id": metadata.get("id")},
        )

    async def _transcribe_remote(self, url: str) -> str | None:
        logger.info("Downloading podcast audio: %s", url)
        audio_path = await self.transcriber.extract_audio_from_url(url, prefix="podcast")
        try:
            logger.info("Transcribing podcast: %s", url)
            result = await self.transcriber.transcribe(audio_path=audio_path)
        finally:
            remove_paths(audio_path)
        return result.text or None
