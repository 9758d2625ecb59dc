"""Speech-to-text through an OpenAI-compatible transcription endpoint.

Handles the endpoint's 25 MiB upload limit by splitting oversized audio into
fixed-length segments with ffmpeg, transcribing each, and reassembling the
text in segment order. Uploads are retried on transient errors with
tenacity; every temp file or chunk directory created here is removed on
all exit paths.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from url_ingest.config import Settings
from url_ingest.errors import TranscriptionUnavailable, UpstreamFetchFailed
from url_ingest.fetch import download_to_file
from url_ingest.models.content import TranscriptionResult
from url_ingest.process import ProcessRunner, Runner
from url_ingest.tempfiles import make_temp_dir, remove_paths, temp_path
from url_ingest.transcription import audio
from url_ingest.ytdlp import download_audio

logger = logging.getLogger(__name__)


def _is_retryable(error: BaseException) -> bool:
    """Transport errors, rate limits (429) and server errors (5xx) are transient."""
    if isinstance(error, httpx.TransportError):
        return True
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        return status == 429 or status >= 500
    return False


@retry(
    retry=retry_if_exception(_is_retryable),
    wait=wait_exponential_jitter(initial=1, max=20, jitter=2),
    stop=stop_after_attempt(3),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
async def _post_audio(
    api_url: str,
    api_key: str,
    path: Path,
    *,
    language: str,
    model: str,
    timeout: float,
) -> dict[str, Any]:
    """One multipart POST of an audio file; returns the verbose_json body."""
    content = await asyncio.to_thread(path.read_bytes)
    async with httpx.AsyncClient(timeout=httpx.Timeout(timeout)) as client:
        response = await client.post(
            api_url,
            headers={"Authorization": f"Bearer {api_key}"},
            data={"model": model, "language": language, "response_format": "verbose_json"},
            files={"file": (path.name, content, "audio/mpeg")},
        )
        response.raise_for_status()
        return response.json()


def merge_chunk_results(
    results: list[TranscriptionResult], language: str | None
) -> TranscriptionResult:
    """Reassemble per-segment transcripts in segment order.

    Texts are joined with a single space. Durations are summed; a segment
    whose duration was not reported counts as zero, so the total can
    under-report for long files.
    """
    return TranscriptionResult(
        text=" ".join(r.text for r in results),
        duration_seconds=sum(r.duration_seconds or 0 for r in results),
        language=language,
    )


class Transcriber:
    """Audio acquisition and speech-to-text for a single request."""

    def __init__(self, settings: Settings, runner: Runner | None = None):
        self.settings = settings
        self.runner = runner or ProcessRunner()

    @property
    def enabled(self) -> bool:
        return self.settings.transcription_enabled

    async def transcribe(
        self,
        audio_path: Path | str | None = None,
        audio_url: str | None = None,
        language: str | None = None,
        model: str | None = None,
    ) -> TranscriptionResult:
        """Transcribe a local file or a remote audio URL (exactly one).

        Raises:
            ValueError: neither or both sources given.
            TranscriptionUnavailable: no credential, missing file, endpoint
                or tooling failure.
        """
        if (audio_path is None) == (audio_url is None):
            raise ValueError("Exactly one of audio_path or audio_url must be provided")
        if not self.enabled:
            raise TranscriptionUnavailable(
                "OPENAI_API_KEY is not configured; transcription is unavailable"
            )

        language = language or self.settings.transcription_language
        model = model or self.settings.transcription_model

        downloaded: Path | None = None
        try:
            if audio_url is not None:
                downloaded = temp_path(self.settings, "audio", ".mp3")
                try:
                    await download_to_file(
                        audio_url,
                        downloaded,
                        timeout=self.settings.download_timeout,
                        user_agent=self.settings.user_agent,
                    )
                except UpstreamFetchFailed as exc:
                    raise TranscriptionUnavailable(f"Could not download audio: {exc}") from exc
                path = downloaded
            else:
                path = Path(audio_path)

            if not path.is_file():
                raise TranscriptionUnavailable(f"Audio file not found: {path}")

            size = path.stat().st_size
            if size > self.settings.max_upload_bytes:
                logger.info(
                    "Audio exceeds upload limit, chunking",
                    extra={"path": str(path), "bytes": size},
                )
                result = await self._transcribe_chunked(path, language, model)
            else:
                result = await self._transcribe_file(path, language, model)
        finally:
            remove_paths(downloaded)

        logger.info(
            "Transcription complete",
            extra={
                "model": model,
                "language": result.language,
                "audio_seconds": result.duration_seconds,
                "characters": len(result.text),
            },
        )
        return result

    async def _transcribe_file(self, path: Path, language: str, model: str) -> TranscriptionResult:
        try:
            data = await _post_audio(
                self.settings.transcription_api_url,
                self.settings.openai_api_key,
                path,
                language=language,
                model=model,
                timeout=self.settings.transcription_timeout,
            )
        except httpx.HTTPStatusError as exc:
            raise TranscriptionUnavailable(
                f"Transcription API error: {exc.response.status_code} - {exc.response.text[:500]}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise TranscriptionUnavailable(f"Transcription request failed: {exc}") from exc

        return TranscriptionResult(
            text=(data.get("text") or "").strip(),
            duration_seconds=data.get("duration"),
            language=data.get("language"),
        )

    async def _transcribe_chunked(self, path: Path, language: str, model: str) -> TranscriptionResult:
        chunk_dir = make_temp_dir(self.settings, "chunks")
        try:
            try:
                chunks = await audio.split_audio(self.runner, self.settings, path, chunk_dir)
            except UpstreamFetchFailed as exc:
                raise TranscriptionUnavailable(f"Failed to split audio: {exc}") from exc
            if not chunks:
                raise TranscriptionUnavailable("Failed to split audio into chunks")

            logger.info("Transcribing %d chunks", len(chunks), extra={"chunks": len(chunks)})
            semaphore = asyncio.Semaphore(max(1, self.settings.chunk_concurrency))

            async def _one(chunk: Path) -> TranscriptionResult:
                async with semaphore:
                    return await self._transcribe_file(chunk, language, model)

            # gather keeps input order regardless of completion order
            tasks = [asyncio.ensure_future(_one(chunk)) for chunk in chunks]
            try:
                results = await asyncio.gather(*tasks)
            except BaseException:
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise
            return merge_chunk_results(list(results), language)
        finally:
            remove_paths(chunk_dir)

    async def extract_audio(self, video_path: Path | str) -> Path:
        """Audio track of a local video as an mp3 temp file (caller cleans up)."""
        return await audio.extract_audio(self.runner, self.settings, Path(video_path))

    async def extract_audio_from_url(self, url: str, prefix: str = "ytaudio") -> Path:
        """Audio of a remote video via yt-dlp, without a full video download."""
        return await download_audio(self.runner, self.settings, url, prefix=prefix)

    async def probe_duration(self, path: Path | str) -> float:
        return await audio.probe_duration(self.runner, self.settings, Path(path))
