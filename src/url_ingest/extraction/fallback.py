"""Ordered fallback chains: try each acquisition method until one yields."""

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Attempt = tuple[str, Callable[[], Awaitable[T | None]]]


async def first_success(attempts: Sequence[Attempt[T]], *, url: str = "") -> T | None:
    """Await each ``(name, factory)`` in order; return the first non-None result.

    A tier that raises is logged and skipped, never propagated. Later tiers
    are not started once one succeeds. Cancellation is not swallowed
    (``CancelledError`` is not an ``Exception``). Returns None when every
    tier is exhausted; the caller decides what that means.
    """
    for name, factory in attempts:
        try:
            result = await factory()
        except Exception as exc:
            logger.info(
                "Fallback tier failed",
                extra={"tier": name, "url": url, "error": str(exc)},
            )
            continue
        if result is not None:
            logger.debug("Fallback tier succeeded", extra={"tier": name, "url": url})
            return result
        logger.debug("Fallback tier returned nothing", extra={"tier": name, "url": url})
    return None
