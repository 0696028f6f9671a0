"""boto3 client construction and error classification."""

from __future__ import annotations

from typing import Any

from botocore.config import Config
from botocore.exceptions import ClientError, NoCredentialsError, PartialCredentialsError

from auralis.config import S3Config
from auralis.error_codes import FetchErrorKind

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}
_UNAUTHORIZED_CODES = {
    "401",
    "403",
    "AccessDenied",
    "Forbidden",
    "InvalidAccessKeyId",
    "SignatureDoesNotMatch",
    "ExpiredToken",
    "InvalidToken",
    "AllAccessDisabled",
}


def make_s3_client(cfg: S3Config) -> Any:
    import boto3

    addressing = {"addressing_style": "path"} if cfg.endpoint else {}
    return boto3.client(
        "s3",
        region_name=cfg.region or None,
        endpoint_url=(cfg.endpoint or "").rstrip("/") or None,
        aws_access_key_id=cfg.access_key or None,
        aws_secret_access_key=cfg.secret_key or None,
        config=Config(s3=addressing, retries={"max_attempts": 2, "mode": "standard"}),
    )


def _client_error_code(exc: ClientError) -> tuple[str, int | None]:
    code = str(exc.response.get("Error", {}).get("Code", "") or "")
    status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return code, int(status) if status is not None else None


def is_not_found(exc: BaseException) -> bool:
    if not isinstance(exc, ClientError):
        return False
    code, status = _client_error_code(exc)
    return code in _NOT_FOUND_CODES or status == 404


def classify_error(exc: BaseException) -> FetchErrorKind:
    """Map an SDK failure (other than not-found) to a fetch error kind."""
    if isinstance(exc, (NoCredentialsError, PartialCredentialsError)):
        return FetchErrorKind.UNAUTHORIZED
    if isinstance(exc, ClientError):
        code, status = _client_error_code(exc)
        if code in _UNAUTHORIZED_CODES or status in {401, 403}:
            return FetchErrorKind.UNAUTHORIZED
        return FetchErrorKind.TRANSPORT
    return FetchErrorKind.TRANSPORT
