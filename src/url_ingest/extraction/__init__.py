"""Content extraction: routing, platform extractors, and normalization.

Public API:
    ingest(url, registry, timeout_seconds) -> NormalizedContent
        Single entry point: routes the URL through a registry built by
        build_registry(settings), runs the platform extractor under the
        given timeout, and normalizes the result.
    route(url) -> RouteResult
        Pure URL classification.
"""

from url_ingest.extraction.normalize import normalize
from url_ingest.extraction.pipeline import extract_with_timeout, ingest
from url_ingest.extraction.registry import ExtractorRegistry, build_registry
from url_ingest.extraction.router import describe, platform_name, route

__all__ = [
    "ingest",
    "extract_with_timeout",
    "normalize",
    "route",
    "describe",
    "platform_name",
    "ExtractorRegistry",
    "build_registry",
]
