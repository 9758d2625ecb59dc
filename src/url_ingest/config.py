"""Application configuration via pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    A Settings instance is passed explicitly into extractors and the
    transcriber; nothing in the pipeline reads the environment directly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Speech-to-text
    openai_api_key: str = ""
    transcription_api_url: str = "https://api.openai.com/v1/audio/transcriptions"
    transcription_model: str = "whisper-1"
    transcription_language: str = "en"
    transcription_timeout: float = 300.0
    max_upload_bytes: int = 25 * 1024 * 1024  # endpoint limit: 25 MiB
    chunk_seconds: int = 600
    chunk_bitrate: str = "128k"
    chunk_concurrency: int = 1

    # External tools
    ytdlp_path: str = "yt-dlp"
    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"
    ytdlp_cookies_path: str = str(Path.home() / ".config" / "yt-dlp" / "cookies.txt")

    # Timeouts (seconds)
    metadata_timeout: float = 120.0
    download_timeout: float = 600.0
    transcode_timeout: float = 900.0
    http_timeout: float = 20.0
    pipeline_timeout: float = 1800.0

    # Scraping
    temp_dir: str | None = None  # None = system temp directory
    nitter_instances: list[str] = [
        "nitter.poast.org",
        "nitter.privacydev.net",
        "nitter.woodland.cafe",
    ]
    user_agent: str = _DEFAULT_USER_AGENT

    # App
    environment: str = "development"
    log_level: str = "INFO"
    port: int = 8080

    @property
    def transcription_enabled(self) -> bool:
        """True when a speech-to-text credential is configured."""
        return bool(self.openai_api_key)

    @property
    def cookies_file(self) -> str | None:
        """Cookie file path for yt-dlp, or None when the file does not exist."""
        path = Path(self.ytdlp_cookies_path).expanduser()
        return str(path) if path.is_file() else None


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings. Lazy initialization to avoid import-time errors."""
    return Settings()
