"""
Printnet Main Application
=========================

FastAPI entry point for the animation server.

The transport layer is deliberately thin: it maps the URL path to an
animation name, asks the AnimationService for a ready-to-stream animation,
and translates the outcome into an HTTP response.

    Found     -> 200, body streamed until the client disconnects
    NotFound  -> 404
    LoadError -> 500

Endpoints:
    GET  /           - Service information
    GET  /health     - Liveness check (is process alive?)
    GET  /metrics    - Cache and session metrics
    GET  /{name}     - Endless stream of the named animation

The fixed endpoints are matched first, so animations named "health" or
"metrics" cannot be streamed (see RESERVED_NAMES).
"""

import logging
import os
import socket
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from printnet.config import settings
from printnet.cache import AnimationCache
from printnet.library import DefinitionLoader, DirectorySource
from printnet.models.outcome import LoadError, NotFound
from printnet.service import AnimationService
from printnet.stream import AnimationStreamResponse


logger = logging.getLogger(__name__)


# =============================================================================
# Global State
# =============================================================================

_service: Optional[AnimationService] = None
_source: Optional[DirectorySource] = None
_startup_time: float = 0.0

# Paths served by fixed endpoints ahead of the animation route
RESERVED_NAMES = frozenset({"health", "metrics"})


# =============================================================================
# Getters
# =============================================================================

def get_service() -> Optional[AnimationService]:
    return _service


def is_valid_name(name: str) -> bool:
    """Reject names that could escape the animation directory."""
    if not name or name in (".", ".."):
        return False
    if "/" in name or "\\" in name or "\x00" in name:
        return False
    return ".." not in name


def available_names() -> List[str]:
    """Animation names that the stream route can actually reach."""
    if _source is None:
        return []
    return [name for name in _source.names() if name not in RESERVED_NAMES]


# =============================================================================
# Service Factory
# =============================================================================

def create_service() -> AnimationService:
    """Build the loader, cache and service from settings."""
    global _source

    _source = DirectorySource(
        directory=settings.animations.directory,
        extension=settings.animations.extension,
        encoding=settings.animations.encoding,
    )
    cache = AnimationCache(
        max_entry_bytes=settings.cache.max_entry_bytes,
        dedupe_inflight=settings.cache.dedupe_inflight,
    )
    return AnimationService(loader=DefinitionLoader(_source), cache=cache)


# =============================================================================
# Lifespan Management
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager with graceful shutdown."""
    global _service, _startup_time

    _startup_time = time.time()
    logger.info(f"Starting {settings.service.name} {settings.service.version}")
    logger.info(f"Configured port: {settings.server.port}")

    _service = create_service()
    logger.info(f"Animations available: {len(available_names())}")
    for name in sorted(RESERVED_NAMES.intersection(_source.names())):
        logger.warning(f"Animation '{name}' is shadowed by the /{name} endpoint")

    yield

    logger.info("Shutting down gracefully...")
    _service.cancel_all()
    _service.cache.clear()
    _service = None
    logger.info("Shutdown complete")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Printnet",
    description="Looping ASCII-art animations over HTTP",
    version=settings.service.version,
    lifespan=lifespan,
)


# =============================================================================
# HTTP Endpoints
# =============================================================================

@app.get("/")
async def root() -> JSONResponse:
    """Service information endpoint."""
    return JSONResponse({
        "service": "Printnet",
        "version": settings.service.version,
        "name": settings.service.name,
        "status": "running",
        "animations": available_names(),
    })


@app.get("/health")
async def health() -> JSONResponse:
    """
    Liveness check - is the process alive?

    Always returns 200 if the service is running.
    """
    return JSONResponse({
        "status": "healthy",
        "uptime_seconds": round(time.time() - _startup_time, 1),
    })


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Cache and session metrics for observability."""
    service = get_service()
    return JSONResponse({
        "uptime_seconds": round(time.time() - _startup_time, 1),
        **(service.metrics() if service else {}),
    })


@app.get("/{anim_name:path}")
async def stream_animation(anim_name: str) -> Response:
    """Stream the named animation until the client disconnects."""
    name = anim_name.rstrip("/")
    service = get_service()

    if service is None:
        return PlainTextResponse("Service not ready", status_code=503)

    if not is_valid_name(name):
        logger.warning(f"Rejected animation name: {name!r}")
        return PlainTextResponse("Animation not found", status_code=404)

    outcome = await service.prepare(name)

    if isinstance(outcome, NotFound):
        return PlainTextResponse("Animation not found", status_code=404)

    if isinstance(outcome, LoadError):
        logger.error(f"Load error for '{name}': {outcome.reason}")
        return PlainTextResponse("Failed to load animation", status_code=500)

    session = service.open_session(outcome.value)
    return AnimationStreamResponse(
        session,
        media_type=settings.stream.media_type,
        tracker=service.track,
    )


# =============================================================================
# Server
# =============================================================================

class AnimationServer(uvicorn.Server):
    """
    uvicorn server that stops live streams before draining connections.

    uvicorn waits for open connections to finish before running the
    lifespan shutdown, and an animation stream never finishes on its own.
    Cancelling the sessions first lets each response send its final chunk
    so the connection can close.
    """

    async def shutdown(self, sockets: Optional[List[socket.socket]] = None) -> None:
        service = get_service()
        if service is not None:
            service.cancel_all()
        await super().shutdown(sockets=sockets)


# =============================================================================
# Main Entry Point
# =============================================================================

def run() -> None:
    """Run the server with uvicorn."""
    port = int(os.environ.get("PORT", settings.server.port))

    config = uvicorn.Config(
        "printnet.main:app",
        host=settings.server.host,
        port=port,
        reload=False,
    )
    AnimationServer(config).run()


if __name__ == "__main__":
    run()
