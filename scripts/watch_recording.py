from __future__ import annotations

import argparse
import asyncio
import json
from typing import Any

from redis.asyncio import Redis

from auralis.config import Settings
from auralis.models.artifact import ArtifactKind
from auralis.polling import ArtifactWatcher, PollPolicy, available_kinds
from auralis.services.fetch_health import init_fetch_health_monitor
from auralis.services.insights import build_insights
from auralis.storage import get_artifact_gateway
from auralis.utils.logging_setup import setup_logging


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Poll the artifacts of one recording and print its metrics once they exist."
    )
    parser.add_argument("--key", required=True, help="Recording key, e.g. recordings/u1/1700000000000-call.mp4")
    parser.add_argument(
        "--kind",
        action="append",
        choices=[k.value for k in ArtifactKind],
        default=None,
        help="Artifact kind to wait for (repeatable; defaults to all)",
    )
    parser.add_argument("--interval-s", type=float, default=None, help="Seconds between fetches")
    parser.add_argument("--max-attempts", type=int, default=None, help="Give up after N fetches per kind")
    parser.add_argument("--max-duration-s", type=float, default=None, help="Give up after N seconds per kind")
    parser.add_argument("--backend", choices=["s3", "local"], default=None, help="Artifact store backend")
    parser.add_argument(
        "--stop-on-unauthorized",
        action="store_true",
        help="Stop polling a kind when storage denies access",
    )
    return parser.parse_args()


async def _run() -> int:
    args = _parse_args()

    settings = Settings()
    if args.backend is not None:
        settings.artifact_store_backend = str(args.backend)
    if args.interval_s is not None:
        settings.polling.interval_s = float(args.interval_s)
        settings.polling.max_interval_s = max(settings.polling.max_interval_s, settings.polling.interval_s)
    if args.max_attempts is not None:
        settings.polling.max_attempts = int(args.max_attempts)
    if args.max_duration_s is not None:
        settings.polling.max_duration_s = float(args.max_duration_s)
    if args.stop_on_unauthorized:
        settings.polling.stop_on_unauthorized = True
    setup_logging(settings)

    redis = Redis.from_url(settings.redis_url, decode_responses=True) if settings.redis_url else None
    monitor = init_fetch_health_monitor(redis=redis)
    kinds = [ArtifactKind(k) for k in args.kind] if args.kind else list(ArtifactKind)

    watcher = ArtifactWatcher(
        get_artifact_gateway(settings),
        str(args.key),
        policy=PollPolicy.from_config(settings.polling),
        monitor=monitor,
        kinds=kinds,
    )
    try:
        async with watcher:
            ready = await watcher.wait_all()
    finally:
        if redis is not None:
            await redis.aclose()

    insights = build_insights(
        str(args.key),
        transcript=ready.get(ArtifactKind.TRANSCRIPT),
        analysis=ready.get(ArtifactKind.ANALYSIS),
        summary=ready.get(ArtifactKind.SUMMARY),
        metrics_cfg=settings.metrics,
    )
    out: dict[str, Any] = insights.to_dict()
    out["states"] = {kind.value: state.value for kind, state in watcher.states().items()}
    print(json.dumps(out, ensure_ascii=False, indent=2))
    return 0 if available_kinds(ready) >= set(kinds) else 1


def main() -> None:
    raise SystemExit(asyncio.run(_run()))


if __name__ == "__main__":
    main()
