"""Recording + artifact operations behind the HTTP routes."""

from __future__ import annotations

import logging

from auralis.config import Settings
from auralis.models.artifact import ArtifactKind
from auralis.models.recording import Recording
from auralis.services.fetch_health import FetchHealthMonitor, get_fetch_health_monitor
from auralis.services.insights import RecordingInsights, load_insights
from auralis.storage import get_artifact_gateway, get_recording_store
from auralis.storage.gateway import ArtifactGateway
from auralis.storage.locator import locate
from auralis.storage.recordings import RecordingStore, build_recording_key, validate_upload_request

logger = logging.getLogger("auralis.api")


class RecordingService:
    def __init__(
        self,
        settings: Settings,
        *,
        gateway: ArtifactGateway | None = None,
        store: RecordingStore | None = None,
        monitor: FetchHealthMonitor | None = None,
    ) -> None:
        self.settings = settings
        self.gateway = gateway if gateway is not None else get_artifact_gateway(settings)
        self.store = store if store is not None else get_recording_store(settings)
        self.monitor = monitor or get_fetch_health_monitor()

    async def list_recordings(self) -> list[Recording]:
        return await self.store.list_recordings()

    async def view_url(self, key: str) -> str:
        return await self.store.view_url(key)

    async def artifact_url(self, video_key: str, kind: ArtifactKind) -> str | None:
        """Presigned GET for a dependent artifact; None while it does not exist."""
        location = locate(video_key, kind)
        if not await self.gateway.exists(location):
            logger.info("artifact not available (kind=%s, location=%s)", kind.value, location)
            return None
        return await self.gateway.presigned_url(
            location, expires_in=int(self.settings.s3.artifact_url_expires_s)
        )

    async def insights(self, video_key: str) -> RecordingInsights:
        return await load_insights(
            self.gateway,
            video_key,
            metrics_cfg=self.settings.metrics,
            monitor=self.monitor,
        )

    async def upload_url(self, file_name: str, file_type: str, user_id: str) -> tuple[str, str]:
        validate_upload_request(file_name, file_type, user_id)
        key = build_recording_key(user_id, file_name)
        url = await self.store.upload_url(key, content_type=file_type)
        logger.info("upload url issued (key=%s, content_type=%s)", key, file_type)
        return url, key
