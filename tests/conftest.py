"""Shared test fixtures."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from url_ingest.app import app
from url_ingest.config import Settings
from url_ingest.errors import ProcessFailed
from url_ingest.process import ProcessResult


def _arg_after(args: list[str], flag: str) -> str:
    return args[args.index(flag) + 1]


class FakeRunner:
    """Records tool invocations and simulates their outputs on disk.

    Handlers are matched in registration order; an unmatched command fails
    like a missing binary would.
    """

    def __init__(self):
        self.calls: list[list[str]] = []
        self._handlers: list[tuple[Callable[[list[str]], bool], Callable[[list[str]], ProcessResult]]] = []

    def on(self, predicate, handler) -> "FakeRunner":
        self._handlers.append((predicate, handler))
        return self

    async def run(self, args, *, timeout, check=True) -> ProcessResult:
        args = list(args)
        self.calls.append(args)
        for predicate, handler in self._handlers:
            if predicate(args):
                result = handler(args)
                if check and result.returncode != 0:
                    raise ProcessFailed(f"{args[0]} exited with status {result.returncode}", result.returncode)
                return result
        raise ProcessFailed(f"Could not start {args[0]}: not faked", returncode=None)

    def calls_with(self, flag: str) -> list[list[str]]:
        return [c for c in self.calls if flag in c]

    # -- yt-dlp --

    def metadata(self, data: dict | None = None, fail: bool = False) -> "FakeRunner":
        def handler(args):
            if fail:
                return ProcessResult(1, "", "ERROR: Unsupported URL")
            return ProcessResult(0, json.dumps(data or {}), "")

        return self.on(lambda a: "-j" in a, handler)

    def subtitles(self, vtt: str | None, suffix: str = ".en.vtt") -> "FakeRunner":
        def handler(args):
            base = _arg_after(args, "-o")
            if vtt is not None:
                Path(base + suffix).write_text(vtt, encoding="utf-8")
            return ProcessResult(0, "", "")

        return self.on(lambda a: "--write-sub" in a, handler)

    def audio(self, fail: bool = False, payload: bytes = b"ID3audio") -> "FakeRunner":
        def handler(args):
            template = _arg_after(args, "-o")
            if fail:
                # a partial download is left behind, as yt-dlp does
                Path(template.replace("%(ext)s", "webm.part")).write_bytes(b"partial")
                return ProcessResult(1, "", "ERROR: download failed")
            Path(template.replace("%(ext)s", "mp3")).write_bytes(payload)
            return ProcessResult(0, "", "")

        return self.on(lambda a: "-x" in a, handler)

    # -- ffmpeg / ffprobe --

    def segments(self, count: int) -> "FakeRunner":
        def handler(args):
            pattern = args[-1]
            for i in range(count):
                Path(pattern.replace("%03d", f"{i:03d}")).write_bytes(b"chunk")
            return ProcessResult(0, "", "")

        return self.on(lambda a: "segment" in a, handler)

    def duration(self, seconds: float) -> "FakeRunner":
        return self.on(
            lambda a: "format=duration" in a,
            lambda a: ProcessResult(0, f"{seconds}\n", ""),
        )


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with a transcription key and an isolated temp directory."""
    work = tmp_path / "work"
    work.mkdir()
    return Settings(
        _env_file=None,
        openai_api_key="sk-test",
        temp_dir=str(work),
        ytdlp_cookies_path=str(tmp_path / "missing-cookies.txt"),
        nitter_instances=["nitter.one", "nitter.two"],
    )


@pytest.fixture
def no_key_settings(settings: Settings) -> Settings:
    return settings.model_copy(update={"openai_api_key": ""})


@pytest.fixture
def temp_dir(settings: Settings) -> Path:
    """The directory every pipeline temp file must be created in (and vanish from)."""
    return Path(settings.temp_dir)


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Create a TestClient for the FastAPI app."""
    return TestClient(app)
