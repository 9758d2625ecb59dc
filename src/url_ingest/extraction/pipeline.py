"""Timeout-guarded extraction pipeline with retry logic."""

import asyncio
import logging
import time

from url_ingest.errors import ExtractionTimeout, UpstreamFetchFailed
from url_ingest.extraction.normalize import normalize
from url_ingest.extraction.registry import ExtractorRegistry
from url_ingest.models.content import ExtractedContent, NormalizedContent

logger = logging.getLogger(__name__)

# Minimum remaining time (seconds) to attempt a retry
_RETRY_MIN_REMAINING = 3.0


async def extract_with_timeout(
    url: str,
    registry: ExtractorRegistry,
    timeout_seconds: float,
) -> ExtractedContent:
    """Extract content from a URL within a wall-clock timeout budget.

    The caller owns configuration: the registry carries the settings its
    extractors were built with and ``timeout_seconds`` is the whole budget.
    On timeout the in-flight extraction is cancelled (subprocesses are
    killed, temp files cleaned by their ``finally`` blocks) and
    ``ExtractionTimeout`` is raised.
    """
    try:
        async with asyncio.timeout(timeout_seconds):
            return await _extract_with_retry(url, registry, timeout_seconds)
    except TimeoutError as exc:
        logger.warning("Extraction timed out after %.1fs: %s", timeout_seconds, url)
        raise ExtractionTimeout(f"Extraction timed out after {timeout_seconds:.1f}s: {url}") from exc


async def _extract_with_retry(
    url: str, registry: ExtractorRegistry, budget: float
) -> ExtractedContent:
    """One retry on transient upstream failures.

    Missing content, invalid URLs and transcription problems are permanent
    and never retried. The retry is only attempted if >= 3 seconds remain.
    """
    deadline = time.monotonic() + budget
    try:
        return await registry.extract(url)
    except UpstreamFetchFailed as exc:
        remaining = deadline - time.monotonic()
        if remaining < _RETRY_MIN_REMAINING:
            logger.warning(
                "Upstream error with <%.1fs remaining, skipping retry: %s (%s)",
                _RETRY_MIN_REMAINING,
                url,
                exc,
            )
            raise

        logger.info("Upstream error, retrying (%.1fs remaining): %s (%s)", remaining, url, exc)
        return await registry.extract(url)


async def ingest(
    url: str,
    registry: ExtractorRegistry,
    timeout_seconds: float,
) -> NormalizedContent:
    """URL -> NormalizedContent: route, extract, normalize."""
    extracted = await extract_with_timeout(url, registry, timeout_seconds)
    return normalize(extracted)
