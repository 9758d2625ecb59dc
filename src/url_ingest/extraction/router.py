"""URL pattern matching and platform detection.

Pure functions, no I/O. Platforms are tried in the order of ``PATTERNS``
(video, micropost, shortvideo, imagevideo, audioepisode) and patterns within
a platform in list order; the first match wins. URLs that match nothing but
parse as absolute http(s) URLs route to ``article``.
"""

import re
from urllib.parse import urlparse

from url_ingest.models.content import PlatformTag, RouteResult

# Insertion order is the evaluation order -- do not reorder casually
PATTERNS: dict[PlatformTag, list[re.Pattern[str]]] = {
    PlatformTag.VIDEO: [
        re.compile(
            r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/|youtube\.com/v/)"
            r"([a-zA-Z0-9_-]{11})"
        ),
        re.compile(r"youtube\.com/shorts/([a-zA-Z0-9_-]{11})"),
    ],
    PlatformTag.MICROPOST: [
        re.compile(r"(?:twitter\.com|x\.com)/\w+/status/(\d+)"),
    ],
    PlatformTag.SHORTVIDEO: [
        re.compile(r"tiktok\.com/@[\w.-]+/video/(\d+)"),
        re.compile(r"tiktok\.com/t/(\w+)"),
        re.compile(r"vm\.tiktok\.com/(\w+)"),
    ],
    PlatformTag.IMAGEVIDEO: [
        re.compile(r"instagram\.com/(?:p|reel|reels)/([a-zA-Z0-9_-]+)"),
    ],
    PlatformTag.AUDIOEPISODE: [
        re.compile(r"\.mp3(?:\?|$)", re.IGNORECASE),
        re.compile(r"\.m4a(?:\?|$)", re.IGNORECASE),
        re.compile(r"anchor\.fm"),
        re.compile(r"podcasts\.apple\.com"),
        re.compile(r"open\.spotify\.com/episode"),
    ],
}

PLATFORM_NAMES: dict[PlatformTag, str] = {
    PlatformTag.VIDEO: "YouTube",
    PlatformTag.MICROPOST: "Twitter/X",
    PlatformTag.SHORTVIDEO: "TikTok",
    PlatformTag.IMAGEVIDEO: "Instagram",
    PlatformTag.AUDIOEPISODE: "Podcast",
    PlatformTag.ARTICLE: "Article",
    PlatformTag.UNKNOWN: "Unknown",
}


def is_http_url(url: str) -> bool:
    """True if ``url`` is an absolute URL with an http/https scheme and a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _match_id(patterns: list[re.Pattern[str]], url: str) -> tuple[bool, str | None]:
    for pattern in patterns:
        match = pattern.search(url)
        if match:
            return True, match.group(1) if pattern.groups else None
    return False, None


def route(url: str) -> RouteResult:
    """Classify a URL into a platform tag and capture its native id, if any.

    Never raises: malformed input routes to ``unknown``.
    """
    normalized = url.strip() if isinstance(url, str) else ""

    for platform, patterns in PATTERNS.items():
        matched, native_id = _match_id(patterns, normalized)
        if matched:
            return RouteResult(platform=platform, url=normalized, id=native_id)

    if is_http_url(normalized):
        return RouteResult(platform=PlatformTag.ARTICLE, url=normalized)
    return RouteResult(platform=PlatformTag.UNKNOWN, url=normalized)


def extract_video_id(url: str) -> str | None:
    """Extract the 11-character YouTube video id.

    Handles watch?v=, youtu.be/, embed/, v/ and shorts/ forms, including
    URLs with extra query params (&t=120, &list=...).
    """
    _, video_id = _match_id(PATTERNS[PlatformTag.VIDEO], url)
    return video_id


def extract_status_id(url: str) -> str | None:
    """Extract the numeric status id from a twitter.com or x.com status URL."""
    _, status_id = _match_id(PATTERNS[PlatformTag.MICROPOST], url)
    return status_id


def platform_name(platform: PlatformTag) -> str:
    """Human-readable platform name, for presentation layers."""
    return PLATFORM_NAMES[platform]


def is_supported(url: str) -> bool:
    return route(url).platform != PlatformTag.UNKNOWN


def describe(url: str) -> dict[str, str | bool]:
    """Quick routing info for a URL without extracting anything."""
    result = route(url)
    return {
        "platform": result.platform.value,
        "platform_name": platform_name(result.platform),
        "supported": result.platform != PlatformTag.UNKNOWN,
    }
