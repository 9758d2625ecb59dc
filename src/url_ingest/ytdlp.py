"""yt-dlp invocations: JSON metadata, subtitle download, audio extraction.

The tool is driven purely through its CLI contract. Cookies are passed when
the configured cookie file exists.
"""

import json
import logging
from pathlib import Path
from typing import Any

from url_ingest.config import Settings
from url_ingest.errors import ProcessFailed, UpstreamFetchFailed
from url_ingest.process import Runner
from url_ingest.tempfiles import remove_with_prefix, temp_path

logger = logging.getLogger(__name__)

SUBTITLE_SUFFIXES = (".en.vtt", ".en-US.vtt", ".en-GB.vtt")


def base_args(settings: Settings) -> list[str]:
    args = [settings.ytdlp_path]
    cookies = settings.cookies_file
    if cookies:
        args += ["--cookies", cookies]
    return args


async def fetch_metadata(runner: Runner, settings: Settings, url: str) -> dict[str, Any]:
    """``yt-dlp --skip-download -j``: one JSON document describing the media.

    Raises:
        UpstreamFetchFailed: tool failure or unparseable output.
    """
    result = await runner.run(
        [*base_args(settings), "--skip-download", "-j", url],
        timeout=settings.metadata_timeout,
    )
    try:
        metadata = json.loads(result.stdout)
    except json.JSONDecodeError as exc:
        raise UpstreamFetchFailed(f"yt-dlp returned invalid JSON for {url}") from exc
    if not isinstance(metadata, dict):
        raise UpstreamFetchFailed(f"yt-dlp returned unexpected metadata for {url}")
    return metadata


async def download_subtitles(runner: Runner, settings: Settings, url: str) -> str | None:
    """Download English captions as WebVTT and return the raw file contents.

    Manual captions are requested alongside auto-generated ones; yt-dlp
    prefers the manual track when both exist. Returns None when no caption
    file was produced. Every file written under the temp prefix is removed
    before returning.
    """
    base = temp_path(settings, "subs")
    try:
        await runner.run(
            [
                *base_args(settings),
                "--skip-download",
                "--write-sub",
                "--write-auto-sub",
                "--sub-lang",
                "en",
                "--sub-format",
                "vtt",
                "-o",
                str(base),
                url,
            ],
            timeout=settings.metadata_timeout,
        )
        for suffix in SUBTITLE_SUFFIXES:
            candidate = base.with_name(base.name + suffix)
            if candidate.is_file():
                return candidate.read_text(encoding="utf-8", errors="replace")
        return None
    finally:
        remove_with_prefix(base)


async def download_audio(runner: Runner, settings: Settings, url: str, prefix: str = "ytaudio") -> Path:
    """Extract the audio track of a remote media URL to an mp3 temp file.

    The caller owns the returned file. On failure nothing is left behind.

    Raises:
        ProcessFailed: the tool failed or produced no file.
    """
    base = temp_path(settings, prefix)
    try:
        await runner.run(
            [
                *base_args(settings),
                "-x",
                "--audio-format",
                "mp3",
                "--audio-quality",
                "128K",
                "-o",
                f"{base}.%(ext)s",
                url,
            ],
            timeout=settings.download_timeout,
        )
        produced = sorted(base.parent.glob(f"{base.name}.*"))
        audio = next((p for p in produced if p.suffix == ".mp3"), None) or (
            produced[0] if produced else None
        )
        if audio is None:
            raise ProcessFailed(f"yt-dlp produced no audio file for {url}")
    except BaseException:
        remove_with_prefix(base)
        raise

    for leftover in produced:
        if leftover != audio:
            leftover.unlink(missing_ok=True)
    logger.debug("Extracted audio %s from %s", audio, url)
    return audio
