"""Subprocess execution for external tools (yt-dlp, ffmpeg, ffprobe).

Every tool call goes through a ``ProcessRunner`` so extractors and the
transcriber can be tested with a fake runner instead of real binaries.
Arguments are passed as an argv list (no shell). A call that times out or
whose awaiting task is cancelled has its process killed and reaped before
the exception propagates.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from url_ingest.errors import ProcessFailed

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Completed process output, decoded as UTF-8."""

    returncode: int
    stdout: str
    stderr: str


class Runner(Protocol):
    async def run(
        self,
        args: list[str],
        *,
        timeout: float,
        check: bool = True,
    ) -> ProcessResult: ...


class ProcessRunner:
    """Run external commands with asyncio subprocesses and a hard timeout."""

    async def run(
        self,
        args: list[str],
        *,
        timeout: float,
        check: bool = True,
    ) -> ProcessResult:
        """Run ``args`` to completion within ``timeout`` seconds.

        Raises:
            ProcessFailed: executable missing, timeout, or non-zero exit when
                ``check`` is set.
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise ProcessFailed(f"Could not start {args[0]}: {exc}") from exc

        try:
            async with asyncio.timeout(timeout):
                stdout, stderr = await proc.communicate()
        except TimeoutError as exc:
            await _kill(proc)
            raise ProcessFailed(f"{args[0]} timed out after {timeout:.0f}s") from exc
        except asyncio.CancelledError:
            await _kill(proc)
            raise

        result = ProcessResult(
            returncode=proc.returncode if proc.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )
        if check and result.returncode != 0:
            raise ProcessFailed(
                f"{args[0]} exited with status {result.returncode}",
                returncode=result.returncode,
                stderr=result.stderr[-2000:],
            )
        return result


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            return
        await proc.wait()
        logger.debug("Killed subprocess pid=%s", proc.pid)
