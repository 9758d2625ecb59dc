"""Randomized temp paths and unconditional cleanup.

Concurrent requests share only the temp directory; collisions are avoided
with random suffixes rather than locking.
"""

import logging
import secrets
import shutil
import tempfile
from pathlib import Path

from url_ingest.config import Settings

logger = logging.getLogger(__name__)


def temp_root(settings: Settings) -> Path:
    return Path(settings.temp_dir) if settings.temp_dir else Path(tempfile.gettempdir())


def temp_path(settings: Settings, prefix: str, suffix: str = "") -> Path:
    """A fresh, not-yet-created path like ``<tmp>/url-ingest-<prefix>-<hex><suffix>``."""
    return temp_root(settings) / f"url-ingest-{prefix}-{secrets.token_hex(4)}{suffix}"


def make_temp_dir(settings: Settings, prefix: str) -> Path:
    return Path(tempfile.mkdtemp(prefix=f"url-ingest-{prefix}-", dir=temp_root(settings)))


def remove_paths(*paths: Path | None) -> None:
    """Delete files or directory trees; missing paths are ignored."""
    for path in paths:
        if path is None:
            continue
        if path.is_dir():
            shutil.rmtree(path, ignore_errors=True)
        else:
            path.unlink(missing_ok=True)


def remove_with_prefix(base: Path) -> None:
    """Delete every sibling file whose name starts with ``base.name``.

    Tools like yt-dlp pick the final extension themselves (``base.mp3``,
    ``base.en.vtt``, ``base.webm.part``), so cleanup goes by prefix.
    """
    for path in base.parent.glob(f"{base.name}*"):
        logger.debug("Removing temp file %s", path)
        remove_paths(path)
