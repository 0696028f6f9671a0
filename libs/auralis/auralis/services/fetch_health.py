"""Artifact fetch health (the observability sink for polling).

- Every fetch outcome is reported here; reads never touch storage.
- State lives in memory, with an optional Redis mirror so the API process can
  see what the watcher processes observed.
"""

from __future__ import annotations

import json
import logging
import os
import time
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

from redis.asyncio import Redis

from auralis.error_codes import FetchErrorKind
from auralis.models.artifact import ArtifactKind

logger = logging.getLogger(__name__)

KindHealthStatus = Literal["ok", "error", "unknown"]
OverallHealthStatus = Literal["healthy", "degraded", "unhealthy", "unknown"]

_STATE_TTL_S = 24 * 60 * 60
_WINDOW_S = 60 * 60


def _ts() -> float:
    return time.time()


def _iso(ts: float | None) -> str | None:
    if ts is None:
        return None
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat().replace("+00:00", "Z")


def _truncate_error(value: str, limit: int = 500) -> str:
    s = str(value or "").strip()
    if len(s) <= limit:
        return s
    return s[:limit].rstrip() + "..."


@dataclass
class _KindState:
    last_success_ts: float | None = None
    last_error_ts: float | None = None
    last_error: str | None = None
    last_error_kind: str | None = None
    last_location: str | None = None

    success_events: deque[float] = field(default_factory=deque)
    error_events: deque[float] = field(default_factory=deque)


@dataclass(frozen=True)
class ArtifactFetchHealth:
    status: KindHealthStatus
    last_success_at: str | None
    last_error_at: str | None
    last_error: str | None
    last_error_kind: str | None
    last_location: str | None
    success_count_1h: int
    error_count_1h: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "last_success_at": self.last_success_at,
            "last_error_at": self.last_error_at,
            "last_error": self.last_error,
            "last_error_kind": self.last_error_kind,
            "last_location": self.last_location,
            "success_count_1h": self.success_count_1h,
            "error_count_1h": self.error_count_1h,
        }


@dataclass(frozen=True)
class FetchHealthSnapshot:
    status: OverallHealthStatus
    kinds: dict[ArtifactKind, ArtifactFetchHealth]

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "kinds": {kind.value: health.to_dict() for kind, health in self.kinds.items()},
        }


class FetchHealthMonitor:
    def __init__(
        self,
        *,
        redis: Redis | None = None,
        stale_after_s: int | None = None,
        key_prefix: str = "auralis:health:fetch",
    ) -> None:
        self._redis = redis
        self._key_prefix = str(key_prefix or "auralis:health:fetch").rstrip(":")
        self._stale_after_s = int(
            stale_after_s
            if stale_after_s is not None
            else int(os.getenv("FETCH_HEALTH_STALE_SECONDS", "600") or "600")
        )
        self._states: dict[ArtifactKind, _KindState] = {kind: _KindState() for kind in ArtifactKind}

    def set_redis(self, redis: Redis | None) -> None:
        self._redis = redis

    def set_stale_after_s(self, stale_after_s: int) -> None:
        self._stale_after_s = int(stale_after_s)

    def _state_key(self, kind: ArtifactKind) -> str:
        return f"{self._key_prefix}:state:{kind.value}"

    def _events_key(self, kind: ArtifactKind, outcome: Literal["success", "error"]) -> str:
        return f"{self._key_prefix}:events:{kind.value}:{outcome}"

    @staticmethod
    def _derive_status(state: _KindState, now_ts: float, *, stale_after_s: int) -> KindHealthStatus:
        last_success = state.last_success_ts
        last_error = state.last_error_ts
        last = max((last_success or 0.0), (last_error or 0.0))
        if last <= 0.0 or (now_ts - last) > float(stale_after_s):
            return "unknown"
        if last_success is not None and last_error is not None:
            return "ok" if last_success >= last_error else "error"
        return "ok" if last_success is not None else "error"

    def _prune(self, items: deque[float], now_ts: float) -> None:
        cutoff = now_ts - float(_WINDOW_S)
        while items and items[0] < cutoff:
            items.popleft()

    async def report_success(
        self,
        kind: ArtifactKind,
        *,
        location: str | None = None,
        at_ts: float | None = None,
    ) -> None:
        try:
            await self._report(kind, ok=True, error=None, error_kind=None, location=location, at_ts=at_ts)
        except Exception:
            logger.debug("fetch health report failed (kind=%s)", kind.value, exc_info=True)

    async def report_error(
        self,
        kind: ArtifactKind,
        error_kind: FetchErrorKind,
        message: str,
        *,
        location: str | None = None,
        at_ts: float | None = None,
    ) -> None:
        try:
            await self._report(
                kind,
                ok=False,
                error=_truncate_error(message) or error_kind.value,
                error_kind=error_kind.value,
                location=location,
                at_ts=at_ts,
            )
        except Exception:
            logger.debug("fetch health report failed (kind=%s)", kind.value, exc_info=True)

    async def _report(
        self,
        kind: ArtifactKind,
        *,
        ok: bool,
        error: str | None,
        error_kind: str | None,
        location: str | None,
        at_ts: float | None,
    ) -> None:
        now_ts = float(at_ts if at_ts is not None else _ts())
        state = self._states[kind]
        state.last_location = location or state.last_location

        if ok:
            state.last_success_ts = now_ts
            state.last_error = None
            state.last_error_kind = None
            state.success_events.append(now_ts)
        else:
            state.last_error_ts = now_ts
            state.last_error = error
            state.last_error_kind = error_kind
            state.error_events.append(now_ts)

        self._prune(state.success_events, now_ts)
        self._prune(state.error_events, now_ts)

        redis = self._redis
        if redis is None:
            return None

        payload = {
            "last_success_ts": state.last_success_ts,
            "last_error_ts": state.last_error_ts,
            "last_error": state.last_error,
            "last_error_kind": state.last_error_kind,
            "last_location": state.last_location,
        }
        events_key = self._events_key(kind, "success" if ok else "error")
        cutoff = now_ts - float(_WINDOW_S)

        pipe = redis.pipeline()
        pipe.set(self._state_key(kind), json.dumps(payload, ensure_ascii=False), ex=_STATE_TTL_S)
        pipe.zadd(events_key, {str(now_ts): now_ts})
        pipe.zremrangebyscore(events_key, "-inf", cutoff)
        pipe.expire(events_key, _STATE_TTL_S)
        await pipe.execute()

    async def _read_state_from_redis(self, kind: ArtifactKind) -> _KindState | None:
        redis = self._redis
        if redis is None:
            return None
        raw = await redis.get(self._state_key(kind))
        if not raw:
            return None
        try:
            obj = json.loads(raw)
        except json.JSONDecodeError:
            return None
        if not isinstance(obj, dict):
            return None

        out = _KindState()
        for key in ("last_error", "last_error_kind", "last_location"):
            setattr(out, key, str(obj.get(key) or "").strip() or None)
        for key in ("last_success_ts", "last_error_ts"):
            value = obj.get(key)
            if isinstance(value, (int, float)):
                setattr(out, key, float(value))
        return out

    async def _counts_1h(self, kind: ArtifactKind) -> tuple[int, int]:
        now_ts = _ts()
        redis = self._redis
        if redis is None:
            state = self._states[kind]
            self._prune(state.success_events, now_ts)
            self._prune(state.error_events, now_ts)
            return len(state.success_events), len(state.error_events)

        cutoff = now_ts - float(_WINDOW_S)
        pipe = redis.pipeline()
        pipe.zcount(self._events_key(kind, "success"), cutoff, "+inf")
        pipe.zcount(self._events_key(kind, "error"), cutoff, "+inf")
        success, error = await pipe.execute()
        return int(success or 0), int(error or 0)

    async def kind_health(self, kind: ArtifactKind) -> ArtifactFetchHealth:
        now_ts = _ts()
        state = await self._read_state_from_redis(kind) or self._states[kind]
        success_1h, error_1h = await self._counts_1h(kind)
        return ArtifactFetchHealth(
            status=self._derive_status(state, now_ts, stale_after_s=self._stale_after_s),
            last_success_at=_iso(state.last_success_ts),
            last_error_at=_iso(state.last_error_ts),
            last_error=state.last_error,
            last_error_kind=state.last_error_kind,
            last_location=state.last_location,
            success_count_1h=int(success_1h),
            error_count_1h=int(error_1h),
        )

    @staticmethod
    def overall_status(kinds: dict[ArtifactKind, ArtifactFetchHealth]) -> OverallHealthStatus:
        statuses = [h.status for h in kinds.values()]
        if all(s == "unknown" for s in statuses):
            return "unknown"
        known = [s for s in statuses if s != "unknown"]
        if all(s == "ok" for s in known):
            return "healthy"
        if all(s == "error" for s in known):
            return "unhealthy"
        return "degraded"

    async def snapshot(self) -> FetchHealthSnapshot:
        kinds = {kind: await self.kind_health(kind) for kind in ArtifactKind}
        return FetchHealthSnapshot(status=self.overall_status(kinds), kinds=kinds)


_FETCH_MONITOR: FetchHealthMonitor | None = None


def get_fetch_health_monitor() -> FetchHealthMonitor:
    global _FETCH_MONITOR
    if _FETCH_MONITOR is None:
        _FETCH_MONITOR = FetchHealthMonitor(redis=None)
    return _FETCH_MONITOR


def init_fetch_health_monitor(
    *, redis: Redis | None, stale_after_s: int | None = None
) -> FetchHealthMonitor:
    monitor = get_fetch_health_monitor()
    monitor.set_redis(redis)
    if stale_after_s is not None:
        monitor.set_stale_after_s(stale_after_s)
    return monitor
