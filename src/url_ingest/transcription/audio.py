"""ffmpeg/ffprobe operations: audio extraction, duration lookup, segment split."""

import logging
from pathlib import Path

from url_ingest.config import Settings
from url_ingest.errors import ProcessFailed
from url_ingest.process import Runner
from url_ingest.tempfiles import remove_paths, temp_path

logger = logging.getLogger(__name__)

CHUNK_PATTERN = "chunk_%03d.mp3"  # zero-padded so lexical order == temporal order


async def extract_audio(runner: Runner, settings: Settings, video_path: Path) -> Path:
    """Transcode the audio track of a local video file to an mp3 temp file.

    The caller owns the returned file.
    """
    audio_path = temp_path(settings, "extracted", ".mp3")
    try:
        await runner.run(
            [
                settings.ffmpeg_path,
                "-y",
                "-i",
                str(video_path),
                "-vn",
                "-acodec",
                "libmp3lame",
                "-b:a",
                settings.chunk_bitrate,
                str(audio_path),
            ],
            timeout=settings.transcode_timeout,
        )
    except BaseException:
        remove_paths(audio_path)
        raise
    return audio_path


async def probe_duration(runner: Runner, settings: Settings, path: Path) -> float:
    """Media duration in seconds via ffprobe; 0.0 when it cannot be determined."""
    try:
        result = await runner.run(
            [
                settings.ffprobe_path,
                "-v",
                "error",
                "-show_entries",
                "format=duration",
                "-of",
                "default=noprint_wrappers=1:nokey=1",
                str(path),
            ],
            timeout=60.0,
        )
        return float(result.stdout.strip())
    except (ProcessFailed, ValueError):
        logger.warning("Could not read duration of %s", path)
        return 0.0


async def split_audio(runner: Runner, settings: Settings, source: Path, chunk_dir: Path) -> list[Path]:
    """Split ``source`` into fixed-length constant-bitrate mp3 segments.

    Returns segment paths in temporal order. At 128 kbit/s a 10-minute
    segment is about 10 MB, well under the upload limit.
    """
    await runner.run(
        [
            settings.ffmpeg_path,
            "-y",
            "-i",
            str(source),
            "-f",
            "segment",
            "-segment_time",
            str(settings.chunk_seconds),
            "-c:a",
            "libmp3lame",
            "-b:a",
            settings.chunk_bitrate,
            str(chunk_dir / CHUNK_PATTERN),
        ],
        timeout=settings.transcode_timeout,
    )
    return sorted(chunk_dir.glob("chunk_*.mp3"))
