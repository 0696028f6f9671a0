"""Artifact gateway interface and local implementation."""

from __future__ import annotations

import asyncio
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from auralis.error_codes import FetchErrorKind
from auralis.exceptions import ArtifactNotFoundError, StorageError


class ArtifactGateway(ABC):
    """Existence + retrieval contract the fetcher relies on.

    `exists` returns False only for a genuine not-found; every other failure
    raises StorageError so callers can tell "not yet" from "broken".
    """

    @abstractmethod
    async def exists(self, location: str) -> bool:
        """Return whether an artifact is present at `location`."""

    @abstractmethod
    async def get(self, location: str) -> bytes:
        """Return artifact bytes; raise ArtifactNotFoundError if absent."""

    @abstractmethod
    async def presigned_url(self, location: str, *, expires_in: int) -> str:
        """Return a time-limited URL a browser can GET the artifact from."""

    async def get_json(self, location: str) -> Any:
        return json.loads((await self.get(location)).decode("utf-8"))


class LocalArtifactGateway(ArtifactGateway):
    """Filesystem gateway for development (artifacts under `<base_dir>/<location>`)."""

    def __init__(self, base_dir: str) -> None:
        self.base_dir = Path(base_dir)

    def _path(self, location: str) -> Path:
        rel = Path(str(location or "").lstrip("/"))
        if ".." in rel.parts:
            raise StorageError(FetchErrorKind.UNAUTHORIZED, "location escapes base dir", location=location)
        return self.base_dir / rel

    async def exists(self, location: str) -> bool:
        path = self._path(location)
        try:
            return await asyncio.to_thread(path.is_file)
        except PermissionError as exc:
            raise StorageError(FetchErrorKind.UNAUTHORIZED, str(exc), location=location) from exc

    async def get(self, location: str) -> bytes:
        path = self._path(location)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as exc:
            raise ArtifactNotFoundError(location) from exc
        except PermissionError as exc:
            raise StorageError(FetchErrorKind.UNAUTHORIZED, str(exc), location=location) from exc
        except OSError as exc:
            raise StorageError(FetchErrorKind.TRANSPORT, str(exc), location=location) from exc

    async def presigned_url(self, location: str, *, expires_in: int) -> str:  # noqa: ARG002
        return self._path(location).resolve().as_uri()
