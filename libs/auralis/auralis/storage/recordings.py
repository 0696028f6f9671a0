"""Recording listing and presigned URL issuance."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from auralis.config import S3Config
from auralis.exceptions import StorageError, ValidationError
from auralis.metrics.formatting import extract_file_name_from_key, extract_user_id_from_key
from auralis.models.recording import Recording
from auralis.storage.s3_client import classify_error, make_s3_client
from auralis.storage.s3_pagination import iter_objects

logger = logging.getLogger(__name__)

RECORDINGS_PREFIX = "recordings/"

_UNSAFE_CHARS_RE = re.compile(r"[^a-zA-Z0-9.-]")


def sanitize_file_name(file_name: str) -> str:
    return _UNSAFE_CHARS_RE.sub("_", str(file_name or ""))


def build_recording_key(user_id: str, file_name: str, *, now_ms: int | None = None) -> str:
    stamp = int(now_ms if now_ms is not None else time.time() * 1000)
    return f"{RECORDINGS_PREFIX}{user_id}/{stamp}-{sanitize_file_name(file_name)}"


def validate_upload_request(file_name: str, file_type: str, user_id: str) -> None:
    if not file_name or not file_type or not user_id:
        raise ValidationError("Missing required fields: file_name, file_type, or user_id")
    if not file_type.startswith("video/"):
        raise ValidationError("Invalid file type. Only video files are allowed.")


def validate_view_key(key: str) -> None:
    if not key:
        raise ValidationError("Missing required field: key")
    if not key.startswith(RECORDINGS_PREFIX):
        raise ValidationError(f"Invalid key format. Must start with {RECORDINGS_PREFIX}")


def _to_recording(key: str, size: int, last_modified: datetime) -> Recording:
    return Recording(
        key=key,
        file_name=extract_file_name_from_key(key),
        last_modified=last_modified,
        size=int(size),
        user_id=extract_user_id_from_key(key),
    )


def _is_listable(key: str, size: int) -> bool:
    return bool(key) and key != RECORDINGS_PREFIX and not key.endswith("/") and size > 0


class RecordingStore(ABC):
    @abstractmethod
    async def list_recordings(self) -> list[Recording]:
        """Uploaded recordings, newest first."""

    @abstractmethod
    async def view_url(self, key: str) -> str:
        """Time-limited GET URL for a recording."""

    @abstractmethod
    async def upload_url(self, key: str, *, content_type: str) -> str:
        """Time-limited PUT URL the browser uploads the recording to."""


class S3RecordingStore(RecordingStore):
    def __init__(self, cfg: S3Config, *, client: Any | None = None) -> None:
        self.cfg = cfg
        self.bucket = cfg.recordings_bucket
        self._client = client

    def _ensure_client(self) -> Any:
        if self._client is None:
            self._client = make_s3_client(self.cfg)
        return self._client

    async def list_recordings(self) -> list[Recording]:
        client = self._ensure_client()

        def _list() -> list[Recording]:
            out: list[Recording] = []
            for obj in iter_objects(client, bucket=self.bucket, prefix=RECORDINGS_PREFIX):
                key = str(obj.get("Key") or "")
                size = int(obj.get("Size") or 0)
                if not _is_listable(key, size):
                    continue
                last_modified = obj.get("LastModified") or datetime.now(tz=timezone.utc)
                out.append(_to_recording(key, size, last_modified))
            return out

        try:
            recordings = await asyncio.to_thread(_list)
        except Exception as exc:
            raise StorageError(classify_error(exc), str(exc), location=RECORDINGS_PREFIX) from exc
        recordings.sort(key=lambda r: r.last_modified, reverse=True)
        logger.info("recordings listed (bucket=%s, count=%d)", self.bucket, len(recordings))
        return recordings

    async def _presign(self, method: str, params: dict[str, Any], expires_in: int) -> str:
        client = self._ensure_client()

        def _gen() -> str:
            return str(client.generate_presigned_url(method, Params=params, ExpiresIn=expires_in))

        try:
            return await asyncio.to_thread(_gen)
        except Exception as exc:
            raise StorageError(classify_error(exc), str(exc), location=params.get("Key")) from exc

    async def view_url(self, key: str) -> str:
        validate_view_key(key)
        return await self._presign(
            "get_object",
            {"Bucket": self.bucket, "Key": key},
            int(self.cfg.view_url_expires_s),
        )

    async def upload_url(self, key: str, *, content_type: str) -> str:
        return await self._presign(
            "put_object",
            {"Bucket": self.bucket, "Key": key, "ContentType": content_type},
            int(self.cfg.upload_url_expires_s),
        )


class LocalRecordingStore(RecordingStore):
    """Recordings under `<base_dir>/recordings/`; URLs are file:// URIs."""

    def __init__(self, base_dir: str) -> None:
        self.base_dir = Path(base_dir)

    async def list_recordings(self) -> list[Recording]:
        root = self.base_dir / RECORDINGS_PREFIX

        def _list() -> list[Recording]:
            if not root.exists():
                return []
            out: list[Recording] = []
            for path in root.rglob("*"):
                if not path.is_file():
                    continue
                stat = path.stat()
                key = path.relative_to(self.base_dir).as_posix()
                if not _is_listable(key, stat.st_size):
                    continue
                modified = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)
                out.append(_to_recording(key, stat.st_size, modified))
            return out

        recordings = await asyncio.to_thread(_list)
        recordings.sort(key=lambda r: r.last_modified, reverse=True)
        return recordings

    async def view_url(self, key: str) -> str:
        validate_view_key(key)
        if ".." in Path(key).parts:
            raise ValidationError("Invalid key format")
        return (self.base_dir / key).resolve().as_uri()

    async def upload_url(self, key: str, *, content_type: str) -> str:  # noqa: ARG002
        target = self.base_dir / key
        target.parent.mkdir(parents=True, exist_ok=True)
        return target.resolve().as_uri()
