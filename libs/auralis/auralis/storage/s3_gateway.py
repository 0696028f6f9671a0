"""S3 artifact gateway."""

from __future__ import annotations

import asyncio
from typing import Any

from auralis.config import S3Config
from auralis.exceptions import ArtifactNotFoundError, StorageError
from auralis.storage.gateway import ArtifactGateway
from auralis.storage.s3_client import classify_error, is_not_found, make_s3_client


class S3ArtifactGateway(ArtifactGateway):
    """Reads artifacts written by the transcription/analysis jobs into one bucket."""

    def __init__(self, cfg: S3Config, *, bucket: str | None = None, client: Any | None = None) -> None:
        self.cfg = cfg
        self.bucket = bucket or cfg.artifacts_bucket
        self._client = client

    def _ensure_client(self) -> Any:
        if self._client is None:
            self._client = make_s3_client(self.cfg)
        return self._client

    def _error(self, exc: Exception, location: str) -> StorageError:
        return StorageError(classify_error(exc), str(exc), location=location)

    async def exists(self, location: str) -> bool:
        client = self._ensure_client()
        try:
            await asyncio.to_thread(client.head_object, Bucket=self.bucket, Key=location)
        except Exception as exc:
            if is_not_found(exc):
                return False
            raise self._error(exc, location) from exc
        return True

    async def get(self, location: str) -> bytes:
        client = self._ensure_client()

        def _get() -> bytes:
            resp = client.get_object(Bucket=self.bucket, Key=location)
            return bytes(resp["Body"].read())

        try:
            return await asyncio.to_thread(_get)
        except Exception as exc:
            if is_not_found(exc):
                raise ArtifactNotFoundError(f"s3://{self.bucket}/{location}") from exc
            raise self._error(exc, location) from exc

    async def presigned_url(self, location: str, *, expires_in: int) -> str:
        client = self._ensure_client()

        def _gen() -> str:
            return str(
                client.generate_presigned_url(
                    "get_object",
                    Params={"Bucket": self.bucket, "Key": location},
                    ExpiresIn=max(1, int(expires_in)),
                )
            )

        try:
            return await asyncio.to_thread(_gen)
        except Exception as exc:
            raise self._error(exc, location) from exc
