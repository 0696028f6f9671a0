"""Repeated fetch attempts until the artifact is ready, the subscriber stops, or a limit is hit.

Lifecycle:

    IDLE --start--> POLLING --ready--> READY
                       |--stop-----> STOPPED
                       |--fatal----> FAILED
                       `--limit----> EXHAUSTED

Terminal states are final; a controller is single-use. Every start/stop bumps an
epoch counter and a fetch result is only delivered when its epoch is still
current, so nothing reaches the subscriber after ``stop()`` returns.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from tenacity import AsyncRetrying, RetryCallState, RetryError, retry_if_result

from auralis.models.artifact import NOT_READY, FetchFailed, FetchResult, Ready
from auralis.polling.fetcher import ArtifactFetcher
from auralis.polling.policy import PollPolicy

logger = logging.getLogger(__name__)

ReadyCallback = Callable[[Any], Awaitable[None] | None]
SleepFn = Callable[[float], Awaitable[None]]


class PollState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"
    READY = "ready"
    STOPPED = "stopped"
    FAILED = "failed"
    EXHAUSTED = "exhausted"


TERMINAL_STATES = frozenset({PollState.READY, PollState.STOPPED, PollState.FAILED, PollState.EXHAUSTED})


class PollingController:
    def __init__(
        self,
        fetcher: ArtifactFetcher,
        location: str,
        *,
        policy: PollPolicy | None = None,
        on_ready: ReadyCallback | None = None,
        sleep: SleepFn | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.location = str(location)
        self.policy = policy or PollPolicy()
        self._on_ready = on_ready
        self._sleep: SleepFn = sleep or asyncio.sleep

        self._state = PollState.IDLE
        self._epoch = 0
        self._attempts = 0
        self._data: Any = None
        self._last_failure: FetchFailed | None = None
        self._task: asyncio.Task[None] | None = None
        self._done = asyncio.Event()

    @property
    def state(self) -> PollState:
        return self._state

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def data(self) -> Any:
        return self._data

    @property
    def last_failure(self) -> FetchFailed | None:
        return self._last_failure

    @property
    def done(self) -> bool:
        return self._state in TERMINAL_STATES

    def start(self) -> None:
        """Begin polling. The first attempt is issued without waiting."""
        if self._state is not PollState.IDLE:
            raise RuntimeError(f"polling controller already used (state={self._state.value})")
        self._epoch += 1
        self._state = PollState.POLLING
        logger.info(
            "polling started (kind=%s, location=%s, interval_s=%s)",
            self.fetcher.kind.value,
            self.location,
            self.policy.interval_s,
        )
        self._task = asyncio.create_task(
            self._run(self._epoch),
            name=f"poll:{self.fetcher.kind.value}:{self.location}",
        )

    def stop(self) -> None:
        """Cancel polling. Idempotent; a no-op once a terminal state is reached."""
        if self._state in TERMINAL_STATES:
            return
        self._epoch += 1
        self._state = PollState.STOPPED
        task = self._task
        if task is not None and not task.done():
            task.cancel()
        logger.info(
            "polling stopped (kind=%s, location=%s, attempts=%d)",
            self.fetcher.kind.value,
            self.location,
            self._attempts,
        )
        self._done.set()

    async def wait(self) -> Any | None:
        """Block until a terminal state; returns the artifact data when READY, else None."""
        await self._done.wait()
        return self._data if self._state is PollState.READY else None

    async def __aenter__(self) -> "PollingController":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.stop()

    def _is_current(self, epoch: int) -> bool:
        return epoch == self._epoch and self._state is PollState.POLLING

    def _should_continue(self, result: FetchResult, epoch: int) -> bool:
        if not self._is_current(epoch):
            return False
        if isinstance(result, FetchFailed):
            self._last_failure = result
        return self.policy.should_continue(result)

    def _log_retry(self, state: RetryCallState) -> None:
        result = state.outcome.result() if state.outcome and not state.outcome.failed else None
        wait_s = state.next_action.sleep if state.next_action else None
        logger.debug(
            "polling retrying (kind=%s, location=%s, attempt=%s, wait_s=%s, outcome=%s)",
            self.fetcher.kind.value,
            self.location,
            state.attempt_number,
            wait_s,
            type(result).__name__,
        )

    async def _attempt(self, epoch: int) -> FetchResult:
        if not self._is_current(epoch):
            return NOT_READY
        self._attempts += 1
        return await self.fetcher.fetch(self.location)

    async def _run(self, epoch: int) -> None:
        retrying = AsyncRetrying(
            retry=retry_if_result(lambda result: self._should_continue(result, epoch)),
            wait=self.policy.wait_strategy(),
            stop=self.policy.stop_strategy(),
            sleep=self._sleep,
            before_sleep=self._log_retry,
        )
        try:
            result = await retrying(self._attempt, epoch)
        except RetryError:
            if self._is_current(epoch):
                logger.warning(
                    "polling exhausted (kind=%s, location=%s, attempts=%d)",
                    self.fetcher.kind.value,
                    self.location,
                    self._attempts,
                )
                self._finish(PollState.EXHAUSTED)
            return
        except Exception:
            if self._is_current(epoch):
                logger.exception(
                    "polling crashed (kind=%s, location=%s)", self.fetcher.kind.value, self.location
                )
                self._finish(PollState.FAILED)
            return

        if not self._is_current(epoch):
            logger.debug(
                "discarding stale poll result (kind=%s, location=%s)", self.fetcher.kind.value, self.location
            )
            return

        if isinstance(result, Ready):
            self._data = result.data
            self._finish(PollState.READY)
            await self._emit(result.data)
        elif isinstance(result, FetchFailed):
            self._last_failure = result
            logger.error(
                "polling failed (kind=%s, location=%s, error=%s): %s",
                self.fetcher.kind.value,
                self.location,
                result.kind.value,
                result.message,
            )
            self._finish(PollState.FAILED)

    def _finish(self, state: PollState) -> None:
        self._state = state
        self._done.set()

    async def _emit(self, data: Any) -> None:
        callback = self._on_ready
        if callback is None:
            return
        try:
            out = callback(data)
            if inspect.isawaitable(out):
                await out
        except Exception:
            logger.exception(
                "on_ready callback failed (kind=%s, location=%s)", self.fetcher.kind.value, self.location
            )
