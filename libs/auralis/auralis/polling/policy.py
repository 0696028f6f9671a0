"""Polling cadence, limits and the per-error-kind continue/stop table."""

from __future__ import annotations

from dataclasses import dataclass

from tenacity import (
    stop_after_attempt,
    stop_after_delay,
    stop_never,
    wait_exponential,
    wait_fixed,
    wait_random,
)
from tenacity.stop import stop_base
from tenacity.wait import wait_base

from auralis.config import PollingConfig
from auralis.error_codes import FetchErrorKind
from auralis.models.artifact import FetchFailed, FetchResult, NotReady


@dataclass(frozen=True)
class PollPolicy:
    """Defaults poll every 5s forever and keep polling through every error kind."""

    interval_s: float = 5.0
    max_attempts: int | None = None
    max_duration_s: float | None = None
    backoff_multiplier: float = 1.0
    max_interval_s: float = 60.0
    jitter_s: float = 0.0
    fatal_errors: frozenset[FetchErrorKind] = frozenset()

    @classmethod
    def from_config(cls, cfg: PollingConfig) -> "PollPolicy":
        fatal = {FetchErrorKind.UNAUTHORIZED} if cfg.stop_on_unauthorized else set()
        return cls(
            interval_s=float(cfg.interval_s),
            max_attempts=cfg.max_attempts,
            max_duration_s=cfg.max_duration_s,
            backoff_multiplier=float(cfg.backoff_multiplier),
            max_interval_s=float(cfg.max_interval_s),
            jitter_s=float(cfg.jitter_s),
            fatal_errors=frozenset(fatal),
        )

    def is_fatal(self, kind: FetchErrorKind) -> bool:
        return kind in self.fatal_errors

    def should_continue(self, result: FetchResult) -> bool:
        if isinstance(result, NotReady):
            return True
        if isinstance(result, FetchFailed):
            return not self.is_fatal(result.kind)
        return False

    def wait_strategy(self) -> wait_base:
        if self.backoff_multiplier > 1.0:
            wait: wait_base = wait_exponential(
                multiplier=self.interval_s,
                exp_base=self.backoff_multiplier,
                min=self.interval_s,
                max=self.max_interval_s,
            )
        else:
            wait = wait_fixed(self.interval_s)
        if self.jitter_s > 0:
            wait = wait + wait_random(0, self.jitter_s)
        return wait

    def stop_strategy(self) -> stop_base:
        stop: stop_base = stop_never
        if self.max_attempts is not None:
            stop = stop_after_attempt(int(self.max_attempts))
        if self.max_duration_s is not None:
            by_delay = stop_after_delay(float(self.max_duration_s))
            stop = by_delay if stop is stop_never else stop | by_delay
        return stop
