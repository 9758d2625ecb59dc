"""Exception hierarchy for the ingest pipeline.

All pipeline errors inherit from ``IngestError`` so callers can catch the
whole family with one ``except`` clause.
"""


class IngestError(Exception):
    """Base exception for all url-ingest errors."""


class InvalidUrl(IngestError):
    """Input is not a usable http(s) URL, or not a URL shape the extractor accepts."""


class NoExtractorAvailable(IngestError):
    """Registry resolution produced no extractor for a routed platform."""


class UpstreamFetchFailed(IngestError):
    """A required (non-fallback) network call or subprocess failed."""


class ProcessFailed(UpstreamFetchFailed):
    """An external tool exited non-zero, could not be started, or timed out."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class ExtractionTimeout(UpstreamFetchFailed):
    """The whole extraction exceeded its wall-clock budget."""


class NoContentExtracted(IngestError):
    """Every acquisition method was exhausted, or the source has no readable content."""


class TranscriptionUnavailable(IngestError):
    """Speech-to-text is not configured, or the endpoint/tooling failed."""
