"""Auralis API"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from redis.asyncio import Redis

from auralis.config import Settings
from auralis.services.fetch_health import init_fetch_health_monitor
from auralis.storage import get_artifact_gateway, get_recording_store
from auralis.utils.logging_setup import setup_logging
from routes.health import router as health_router
from routes.recordings import router as recordings_router
from routes.uploads import router as uploads_router

settings = Settings()
setup_logging(settings)
logger = logging.getLogger("auralis.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.settings = settings
    app.state.redis = Redis.from_url(settings.redis_url, decode_responses=True) if settings.redis_url else None
    init_fetch_health_monitor(redis=app.state.redis)
    # One gateway and store (one boto3 client each) per process.
    app.state.artifact_gateway = get_artifact_gateway(settings)
    app.state.recording_store = get_recording_store(settings)
    logger.info(
        "API starting (backend=%s, redis=%s)",
        settings.artifact_store_backend,
        settings.redis_url or "-",
    )
    try:
        yield
    finally:
        redis: Redis | None = getattr(app.state, "redis", None)
        if redis is not None:
            await redis.aclose()


app = FastAPI(
    title="Auralis API",
    description="Call recording transcripts, sentiment and conversation metrics",
    version="0.1.0",
    lifespan=lifespan,
)


app.include_router(recordings_router)
app.include_router(uploads_router)
app.include_router(health_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}
