"""Audio acquisition and chunked speech-to-text.

Public API:
    Transcriber(settings, runner).transcribe(audio_path=... | audio_url=...)
        -> TranscriptionResult
"""

from url_ingest.transcription.service import Transcriber, merge_chunk_results

__all__ = [
    "Transcriber",
    "merge_chunk_results",
]
