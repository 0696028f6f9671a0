from __future__ import annotations

import asyncio

import pytest

from auralis.error_codes import FetchErrorKind
from auralis.exceptions import StorageError
from auralis.models.artifact import ArtifactKind
from auralis.models.serializers import deserialize_transcript
from auralis.polling.controller import PollingController, PollState
from auralis.polling.fetcher import ArtifactFetcher
from auralis.polling.policy import PollPolicy
from auralis.services.fetch_health import FetchHealthMonitor

LOCATION = "transcript/1761448789852-call.json"


def _controller(gateway, sleep, *, policy: PollPolicy | None = None, on_ready=None, monitor=None):
    fetcher = ArtifactFetcher(gateway, kind=ArtifactKind.TRANSCRIPT, monitor=monitor)
    return PollingController(fetcher, LOCATION, policy=policy, on_ready=on_ready, sleep=sleep)


async def _until(predicate, *, spins: int = 1000) -> None:
    for _ in range(spins):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


@pytest.mark.asyncio
async def test_ready_on_first_fetch_without_waiting(scripted_gateway, recorded_sleep) -> None:
    received: list[object] = []
    gateway = scripted_gateway([True], body={"ok": 1})
    controller = _controller(gateway, recorded_sleep, on_ready=received.append)

    controller.start()
    assert controller.state is PollState.POLLING
    data = await controller.wait()

    assert data == {"ok": 1}
    assert received == [{"ok": 1}]
    assert controller.state is PollState.READY
    assert controller.attempts == 1
    assert recorded_sleep.delays == []


@pytest.mark.asyncio
async def test_not_ready_then_ready_emits_once(scripted_gateway, recorded_sleep) -> None:
    received: list[object] = []
    gateway = scripted_gateway([False, False, True], body={"n": 3})
    controller = _controller(gateway, recorded_sleep, on_ready=received.append)

    controller.start()
    assert await controller.wait() == {"n": 3}
    for _ in range(10):
        await asyncio.sleep(0)

    assert received == [{"n": 3}]
    assert controller.attempts == 3
    assert gateway.exists_calls == 3
    assert recorded_sleep.delays == [5.0, 5.0]


@pytest.mark.asyncio
async def test_async_callback_is_awaited(scripted_gateway, recorded_sleep) -> None:
    received: list[object] = []

    async def _on_ready(data: object) -> None:
        await asyncio.sleep(0)
        received.append(data)

    controller = _controller(scripted_gateway([True], body=[1]), recorded_sleep, on_ready=_on_ready)
    controller.start()
    await controller.wait()
    await _until(lambda: bool(received))
    assert received == [[1]]


@pytest.mark.asyncio
async def test_raising_callback_does_not_escape(scripted_gateway, recorded_sleep) -> None:
    def _boom(data: object) -> None:
        raise ValueError("subscriber bug")

    controller = _controller(scripted_gateway([True]), recorded_sleep, on_ready=_boom)
    controller.start()
    assert await controller.wait() == {}
    assert controller.state is PollState.READY


@pytest.mark.asyncio
async def test_stop_while_polling_halts_fetches(scripted_gateway, recorded_sleep) -> None:
    received: list[object] = []
    gateway = scripted_gateway([False])
    controller = _controller(gateway, recorded_sleep, on_ready=received.append)

    controller.start()
    await _until(lambda: controller.attempts >= 3)
    controller.stop()
    assert controller.state is PollState.STOPPED
    calls = gateway.exists_calls

    for _ in range(20):
        await asyncio.sleep(0)
    assert gateway.exists_calls == calls
    assert received == []
    assert await controller.wait() is None


@pytest.mark.asyncio
async def test_in_flight_result_after_stop_is_discarded(scripted_gateway, recorded_sleep) -> None:
    received: list[object] = []
    gateway = scripted_gateway([True], body={"late": True})
    gateway.block = asyncio.Event()
    controller = _controller(gateway, recorded_sleep, on_ready=received.append)

    controller.start()
    await _until(lambda: gateway.exists_calls == 1)
    controller.stop()
    gateway.block.set()
    for _ in range(20):
        await asyncio.sleep(0)

    assert controller.state is PollState.STOPPED
    assert received == []
    assert controller.data is None


@pytest.mark.asyncio
async def test_stop_is_idempotent_and_noop_when_terminal(scripted_gateway, recorded_sleep) -> None:
    controller = _controller(scripted_gateway([True]), recorded_sleep)
    controller.stop()
    assert controller.state is PollState.STOPPED
    controller.stop()
    assert controller.state is PollState.STOPPED

    ready = _controller(scripted_gateway([True]), recorded_sleep)
    ready.start()
    await ready.wait()
    ready.stop()
    assert ready.state is PollState.READY


@pytest.mark.asyncio
async def test_restart_is_rejected(scripted_gateway, recorded_sleep) -> None:
    controller = _controller(scripted_gateway([True]), recorded_sleep)
    controller.start()
    await controller.wait()
    with pytest.raises(RuntimeError):
        controller.start()

    stopped = _controller(scripted_gateway([False]), recorded_sleep)
    stopped.stop()
    with pytest.raises(RuntimeError):
        stopped.start()


@pytest.mark.asyncio
async def test_errors_keep_polling_by_default(scripted_gateway, recorded_sleep) -> None:
    monitor = FetchHealthMonitor(redis=None, stale_after_s=3600)
    gateway = scripted_gateway(
        [
            StorageError(FetchErrorKind.UNAUTHORIZED, "AccessDenied"),
            StorageError(FetchErrorKind.TRANSPORT, "timeout"),
            True,
        ],
        body={"done": True},
    )
    controller = _controller(gateway, recorded_sleep, monitor=monitor)

    controller.start()
    assert await controller.wait() == {"done": True}
    assert controller.attempts == 3
    health = await monitor.kind_health(ArtifactKind.TRANSCRIPT)
    assert health.error_count_1h == 2
    assert health.success_count_1h == 1
    assert health.status == "ok"


@pytest.mark.asyncio
async def test_fatal_error_kind_ends_in_failed(scripted_gateway, recorded_sleep) -> None:
    received: list[object] = []
    gateway = scripted_gateway([StorageError(FetchErrorKind.UNAUTHORIZED, "AccessDenied"), True])
    policy = PollPolicy(fatal_errors=frozenset({FetchErrorKind.UNAUTHORIZED}))
    controller = _controller(gateway, recorded_sleep, policy=policy, on_ready=received.append)

    controller.start()
    assert await controller.wait() is None
    assert controller.state is PollState.FAILED
    assert controller.last_failure is not None
    assert controller.last_failure.kind is FetchErrorKind.UNAUTHORIZED
    assert controller.attempts == 1
    assert received == []


@pytest.mark.asyncio
async def test_max_attempts_ends_in_exhausted(scripted_gateway, recorded_sleep) -> None:
    gateway = scripted_gateway([False])
    controller = _controller(gateway, recorded_sleep, policy=PollPolicy(max_attempts=3))

    controller.start()
    assert await controller.wait() is None
    assert controller.state is PollState.EXHAUSTED
    assert gateway.exists_calls == 3
    assert len(recorded_sleep.delays) == 2


@pytest.mark.asyncio
async def test_unparseable_payload_keeps_polling_until_exhausted(scripted_gateway, recorded_sleep) -> None:
    body = {"results": {"audio_segments": [{"id": "seg-a", "start_time": "0", "end_time": "1"}]}}
    gateway = scripted_gateway([True], body=body)
    monitor = FetchHealthMonitor(redis=None, stale_after_s=3600)
    fetcher = ArtifactFetcher(gateway, kind=ArtifactKind.TRANSCRIPT, monitor=monitor, parse=deserialize_transcript)
    controller = PollingController(fetcher, LOCATION, policy=PollPolicy(max_attempts=3), sleep=recorded_sleep)

    controller.start()
    assert await controller.wait() is None
    assert controller.state is PollState.EXHAUSTED
    assert controller.attempts == 3
    assert controller.last_failure is not None
    assert controller.last_failure.kind is FetchErrorKind.MALFORMED
    assert (await monitor.kind_health(ArtifactKind.TRANSCRIPT)).error_count_1h == 3


@pytest.mark.asyncio
async def test_backoff_grows_to_the_cap(scripted_gateway, recorded_sleep) -> None:
    policy = PollPolicy(interval_s=1.0, backoff_multiplier=2.0, max_interval_s=4.0, max_attempts=5)
    controller = _controller(scripted_gateway([False]), recorded_sleep, policy=policy)

    controller.start()
    await controller.wait()
    assert recorded_sleep.delays == [1.0, 2.0, 4.0, 4.0]


@pytest.mark.asyncio
async def test_jitter_stays_within_bounds(scripted_gateway, recorded_sleep) -> None:
    policy = PollPolicy(interval_s=2.0, jitter_s=0.5, max_attempts=4)
    controller = _controller(scripted_gateway([False]), recorded_sleep, policy=policy)

    controller.start()
    await controller.wait()
    assert len(recorded_sleep.delays) == 3
    assert all(2.0 <= d <= 2.5 for d in recorded_sleep.delays)


@pytest.mark.asyncio
async def test_context_manager_stops_on_exit(scripted_gateway, recorded_sleep) -> None:
    gateway = scripted_gateway([False])
    controller = _controller(gateway, recorded_sleep)
    async with controller:
        await _until(lambda: controller.attempts >= 1)
    assert controller.state is PollState.STOPPED
