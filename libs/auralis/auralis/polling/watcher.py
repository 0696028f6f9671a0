"""Poll every artifact kind of one recording independently."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from auralis.models.artifact import ArtifactKind
from auralis.models.serializers import deserialize_analysis, deserialize_summary, deserialize_transcript
from auralis.polling.controller import PollingController, PollState, SleepFn
from auralis.polling.fetcher import ArtifactFetcher, PayloadParser
from auralis.polling.policy import PollPolicy
from auralis.services.fetch_health import FetchHealthMonitor
from auralis.storage.gateway import ArtifactGateway
from auralis.storage.locator import locate

logger = logging.getLogger(__name__)

KindCallback = Callable[[ArtifactKind, Any], Awaitable[None] | None]

PARSERS: dict[ArtifactKind, PayloadParser] = {
    ArtifactKind.TRANSCRIPT: deserialize_transcript,
    ArtifactKind.ANALYSIS: deserialize_analysis,
    ArtifactKind.SUMMARY: deserialize_summary,
}


def available_kinds(ready: dict[ArtifactKind, Any]) -> set[ArtifactKind]:
    """Kinds with a usable payload. An analysis file without sentiment is Ready but parses to None."""
    return {kind for kind, data in ready.items() if data is not None}


class ArtifactWatcher:
    """One PollingController per artifact kind; kinds never wait on each other.

    Ready payloads are parsed into their models (a parse failure counts as a
    malformed fetch and follows the policy like any other error).
    """

    def __init__(
        self,
        gateway: ArtifactGateway,
        resource_key: str,
        *,
        policy: PollPolicy | None = None,
        monitor: FetchHealthMonitor | None = None,
        kinds: Iterable[ArtifactKind] = tuple(ArtifactKind),
        on_ready: KindCallback | None = None,
        sleep: SleepFn | None = None,
    ) -> None:
        self.resource_key = str(resource_key)
        self._on_ready = on_ready
        self.controllers: dict[ArtifactKind, PollingController] = {}
        for kind in kinds:
            fetcher = ArtifactFetcher(gateway, kind=kind, monitor=monitor, parse=PARSERS[kind])
            self.controllers[kind] = PollingController(
                fetcher,
                locate(self.resource_key, kind),
                policy=policy,
                on_ready=self._callback_for(kind),
                sleep=sleep,
            )

    def _callback_for(self, kind: ArtifactKind) -> Callable[[Any], Awaitable[None] | None] | None:
        callback = self._on_ready
        if callback is None:
            return None

        def _deliver(data: Any) -> Awaitable[None] | None:
            return callback(kind, data)

        return _deliver

    def start(self) -> None:
        logger.info(
            "watching recording (key=%s, kinds=%s)",
            self.resource_key,
            ",".join(k.value for k in self.controllers),
        )
        for controller in self.controllers.values():
            controller.start()

    def stop(self) -> None:
        for controller in self.controllers.values():
            controller.stop()

    def states(self) -> dict[ArtifactKind, PollState]:
        return {kind: c.state for kind, c in self.controllers.items()}

    async def wait_all(self) -> dict[ArtifactKind, Any]:
        """Wait for every controller to settle; only Ready kinds appear in the result."""
        kinds = list(self.controllers)
        values = await asyncio.gather(*(self.controllers[k].wait() for k in kinds))
        return {
            kind: value
            for kind, value in zip(kinds, values)
            if self.controllers[kind].state is PollState.READY
        }

    async def __aenter__(self) -> "ArtifactWatcher":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.stop()
