"""Recordings API routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import AliasChoices, BaseModel, Field

from auralis.exceptions import StorageError, ValidationError
from auralis.models.artifact import ArtifactKind

from routes._deps import bad_request, not_available, service, storage_http_error

router = APIRouter(prefix="/recordings", tags=["recordings"])


class RecordingItem(BaseModel):
    key: str
    file_name: str
    last_modified: str
    size: int
    user_id: str


class RecordingListResponse(BaseModel):
    recordings: list[RecordingItem]
    count: int


class ViewUrlRequest(BaseModel):
    key: str = ""


class ViewUrlResponse(BaseModel):
    url: str
    expires_in: int


class VideoKeyRequest(BaseModel):
    video_key: str = Field(default="", validation_alias=AliasChoices("video_key", "videoKey"))


class ArtifactUrlResponse(BaseModel):
    url: str


@router.get("", response_model=RecordingListResponse)
async def list_recordings(request: Request) -> RecordingListResponse:
    try:
        recordings = await service(request).list_recordings()
    except StorageError as exc:
        raise storage_http_error(exc) from exc
    items = [RecordingItem.model_validate(r.to_dict()) for r in recordings]
    return RecordingListResponse(recordings=items, count=len(items))


@router.post("/view-url", response_model=ViewUrlResponse)
async def view_url(request: Request, body: ViewUrlRequest) -> ViewUrlResponse:
    svc = service(request)
    try:
        url = await svc.view_url(body.key)
    except ValidationError as exc:
        raise bad_request(exc) from exc
    except StorageError as exc:
        raise storage_http_error(exc) from exc
    return ViewUrlResponse(url=url, expires_in=int(svc.settings.s3.view_url_expires_s))


@router.post("/metrics")
async def recording_metrics(request: Request, body: VideoKeyRequest) -> dict[str, Any]:
    if not body.video_key:
        raise HTTPException(status_code=400, detail="Missing video_key")
    insights = await service(request).insights(body.video_key)
    return insights.to_dict()


@router.post("/{kind}", response_model=ArtifactUrlResponse)
async def artifact_url(request: Request, kind: ArtifactKind, body: VideoKeyRequest):
    if not body.video_key:
        raise HTTPException(status_code=400, detail="Missing video_key")
    try:
        url = await service(request).artifact_url(body.video_key, kind)
    except StorageError as exc:
        raise storage_http_error(exc) from exc
    if url is None:
        return not_available(kind.value.capitalize())
    return ArtifactUrlResponse(url=url)
