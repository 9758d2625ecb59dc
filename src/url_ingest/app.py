"""FastAPI application exposing the ingest pipeline."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Request
from pydantic import BaseModel

from url_ingest.config import get_settings
from url_ingest.errors import IngestError, InvalidUrl, NoContentExtracted
from url_ingest.extraction import build_registry, describe, ingest
from url_ingest.logging_config import configure_logging
from url_ingest.models.content import NormalizedContent

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: configure logging and build the registry once."""
    settings = get_settings()
    configure_logging(settings.log_level)
    app.state.settings = settings
    app.state.registry = build_registry(settings)
    yield


app = FastAPI(
    title="URL Ingest",
    lifespan=lifespan,
)


class ExtractRequest(BaseModel):
    url: str


@app.get("/health")
async def health():
    """Health check endpoint for Cloud Run and local development."""
    return {
        "status": "ok",
        "service": "url-ingest",
        "version": "0.1.0",
    }


@app.get("/info")
async def info(url: str = Query(..., min_length=1)):
    """Routing info for a URL without extracting it."""
    return describe(url)


@app.post("/extract", response_model=NormalizedContent)
async def extract_endpoint(body: ExtractRequest, request: Request) -> NormalizedContent:
    """Extract and normalize one URL.

    422 for unusable URLs, 404 when the source has no extractable content,
    502 for upstream/tooling failures.
    """
    settings = getattr(request.app.state, "settings", None) or get_settings()
    registry = getattr(request.app.state, "registry", None) or build_registry(settings)
    try:
        return await ingest(body.url, registry=registry, timeout_seconds=settings.pipeline_timeout)
    except InvalidUrl as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except NoContentExtracted as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except IngestError as exc:
        logger.warning("Extraction failed: %s (%s)", body.url, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
