"""Thin async HTTP helpers shared by the extractors and the transcriber.

Each call opens its own ``httpx.AsyncClient`` (one request per client, as
the rest of the pipeline does) and converts transport/status errors into
``UpstreamFetchFailed`` so callers only handle the pipeline's taxonomy.
"""

import logging
from pathlib import Path
from typing import Any

import httpx

from url_ingest.errors import UpstreamFetchFailed

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


def _headers(user_agent: str | None) -> dict[str, str]:
    headers = dict(BROWSER_HEADERS)
    if user_agent:
        headers["User-Agent"] = user_agent
    return headers


async def fetch_text(url: str, *, timeout: float, user_agent: str | None = None) -> str:
    """GET ``url`` following redirects and return the decoded body."""
    try:
        async with httpx.AsyncClient(
            follow_redirects=True, timeout=httpx.Timeout(timeout)
        ) as client:
            response = await client.get(url, headers=_headers(user_agent))
            response.raise_for_status()
            return response.text
    except httpx.HTTPError as exc:
        raise UpstreamFetchFailed(f"GET {url} failed: {exc}") from exc


async def fetch_json(
    url: str,
    *,
    timeout: float,
    user_agent: str | None = None,
    params: dict[str, str] | None = None,
) -> Any:
    """GET ``url`` and decode a JSON body."""
    try:
        async with httpx.AsyncClient(
            follow_redirects=True, timeout=httpx.Timeout(timeout)
        ) as client:
            response = await client.get(url, headers=_headers(user_agent), params=params)
            response.raise_for_status()
            return response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise UpstreamFetchFailed(f"GET {url} (json) failed: {exc}") from exc


async def download_to_file(
    url: str, dest: Path, *, timeout: float, user_agent: str | None = None
) -> Path:
    """Stream ``url`` into ``dest``. A partial file is removed on failure."""
    try:
        async with httpx.AsyncClient(
            follow_redirects=True, timeout=httpx.Timeout(timeout)
        ) as client:
            async with client.stream("GET", url, headers=_headers(user_agent)) as response:
                response.raise_for_status()
                with open(dest, "wb") as f:
                    async for chunk in response.aiter_bytes():
                        f.write(chunk)
    except httpx.HTTPError as exc:
        dest.unlink(missing_ok=True)
        raise UpstreamFetchFailed(f"Download of {url} failed: {exc}") from exc
    except BaseException:
        dest.unlink(missing_ok=True)
        raise

    logger.debug("Downloaded %s -> %s (%d bytes)", url, dest, dest.stat().st_size)
    return dest
