"""Health check routes (artifact fetches)."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from auralis.services.fetch_health import get_fetch_health_monitor

router = APIRouter(tags=["health"])


class ArtifactKindHealth(BaseModel):
    status: str  # "ok" | "error" | "unknown"
    last_success_at: str | None = None
    last_error_at: str | None = None
    last_error: str | None = None
    last_error_kind: str | None = None
    last_location: str | None = None
    success_count_1h: int
    error_count_1h: int


class ArtifactHealthResponse(BaseModel):
    status: str  # "healthy" | "degraded" | "unhealthy" | "unknown"
    kinds: dict[str, ArtifactKindHealth]


@router.get("/health/artifacts", response_model=ArtifactHealthResponse)
async def artifact_health() -> ArtifactHealthResponse:
    snapshot = await get_fetch_health_monitor().snapshot()
    return ArtifactHealthResponse.model_validate(snapshot.to_dict())
