"""Uploads API routes."""

from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import AliasChoices, BaseModel, Field

from auralis.exceptions import StorageError, ValidationError

from routes._deps import bad_request, service, storage_http_error

router = APIRouter(tags=["uploads"])


class PresignedUploadRequest(BaseModel):
    file_name: str = Field(default="", validation_alias=AliasChoices("file_name", "fileName"))
    file_type: str = Field(default="", validation_alias=AliasChoices("file_type", "fileType"))
    user_id: str = Field(default="", validation_alias=AliasChoices("user_id", "userId"))


class PresignedUploadResponse(BaseModel):
    upload_url: str
    key: str
    expires_in: int


@router.post("/upload/presigned-url", response_model=PresignedUploadResponse)
async def presigned_upload_url(request: Request, body: PresignedUploadRequest) -> PresignedUploadResponse:
    svc = service(request)
    try:
        url, key = await svc.upload_url(body.file_name, body.file_type, body.user_id)
    except ValidationError as exc:
        raise bad_request(exc) from exc
    except StorageError as exc:
        raise storage_http_error(exc) from exc
    return PresignedUploadResponse(
        upload_url=url,
        key=key,
        expires_in=int(svc.settings.s3.upload_url_expires_s),
    )
