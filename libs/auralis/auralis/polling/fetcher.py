"""Single existence-check + retrieval of one artifact."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from auralis.error_codes import FetchErrorKind
from auralis.exceptions import ArtifactNotFoundError, PayloadError, StorageError
from auralis.models.artifact import NOT_READY, ArtifactKind, FetchFailed, FetchResult, Ready
from auralis.services.fetch_health import FetchHealthMonitor
from auralis.storage.gateway import ArtifactGateway

logger = logging.getLogger(__name__)

PayloadParser = Callable[[Any], Any]


class ArtifactFetcher:
    """Turns gateway calls into a Ready / NotReady / FetchFailed result.

    Never raises: not-found is the normal state while the producing job runs,
    and every other failure is classified, logged and reported to the monitor.
    No caching; each call goes to storage.
    """

    def __init__(
        self,
        gateway: ArtifactGateway,
        *,
        kind: ArtifactKind,
        monitor: FetchHealthMonitor | None = None,
        parse: PayloadParser | None = None,
    ) -> None:
        self.gateway = gateway
        self.kind = kind
        self._monitor = monitor
        self._parse = parse

    async def fetch(self, location: str) -> FetchResult:
        try:
            if not await self.gateway.exists(location):
                logger.debug("artifact not ready (kind=%s, location=%s)", self.kind.value, location)
                return NOT_READY
            raw = await self.gateway.get(location)
        except ArtifactNotFoundError:
            # Removed between the existence check and the read.
            return NOT_READY
        except StorageError as exc:
            return await self._failed(exc.kind, exc.message, location)
        except Exception as exc:
            return await self._failed(FetchErrorKind.TRANSPORT, f"{type(exc).__name__}: {exc}", location)

        try:
            data: Any = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            return await self._failed(FetchErrorKind.MALFORMED, str(exc), location)

        if self._parse is not None:
            try:
                data = self._parse(data)
            except PayloadError as exc:
                return await self._failed(FetchErrorKind.MALFORMED, str(exc), location)
            except Exception as exc:
                # A parser bug on an unexpected shape is still a bad payload.
                return await self._failed(FetchErrorKind.MALFORMED, f"{type(exc).__name__}: {exc}", location)

        if self._monitor is not None:
            await self._monitor.report_success(self.kind, location=location)
        logger.info("artifact ready (kind=%s, location=%s, bytes=%d)", self.kind.value, location, len(raw))
        return Ready(data)

    async def _failed(self, error_kind: FetchErrorKind, message: str, location: str) -> FetchFailed:
        logger.warning(
            "artifact fetch failed (kind=%s, location=%s, error=%s): %s",
            self.kind.value,
            location,
            error_kind.value,
            message,
        )
        if self._monitor is not None:
            await self._monitor.report_error(self.kind, error_kind, message, location=location)
        return FetchFailed(kind=error_kind, message=message)
