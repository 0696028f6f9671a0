from __future__ import annotations

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from auralis.config import Settings
from auralis.error_codes import FetchErrorKind
from auralis.exceptions import StorageError, ValidationError
from services.recording_service import RecordingService


def settings(request: Request) -> Settings:
    value: Settings | None = getattr(request.app.state, "settings", None)
    if value is None:
        raise HTTPException(status_code=500, detail="settings not initialized")
    return value


def service(request: Request) -> RecordingService:
    state = request.app.state
    return RecordingService(
        settings(request),
        gateway=getattr(state, "artifact_gateway", None),
        store=getattr(state, "recording_store", None),
    )


def storage_http_error(exc: StorageError) -> HTTPException:
    status = 403 if exc.kind is FetchErrorKind.UNAUTHORIZED else 500
    return HTTPException(status_code=status, detail=str(exc))


def bad_request(exc: ValidationError) -> HTTPException:
    return HTTPException(status_code=400, detail=str(exc))


def not_available(what: str) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"error": f"{what} not available for this recording", "exists": False},
    )
