"""Assemble the display view of a recording from whatever artifacts exist."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from auralis.config import MetricsConfig
from auralis.metrics.engine import compute_transcript_metrics
from auralis.metrics.formatting import extract_file_name_from_key
from auralis.metrics.sentiment import summarize_sentiment
from auralis.models.analysis import AnalysisPayload
from auralis.models.artifact import ArtifactKind, FetchFailed, Ready
from auralis.models.metrics import SentimentSummary, TranscriptMetrics
from auralis.models.serializers import (
    serialize_sentiment_summary,
    serialize_summary,
    serialize_transcript_metrics,
)
from auralis.models.summary import SummaryPayload
from auralis.models.transcript import TranscriptPayload
from auralis.polling.fetcher import ArtifactFetcher
from auralis.polling.watcher import PARSERS
from auralis.services.fetch_health import FetchHealthMonitor
from auralis.storage.gateway import ArtifactGateway
from auralis.storage.locator import locate

logger = logging.getLogger(__name__)


@dataclass
class RecordingInsights:
    video_key: str
    transcript: TranscriptMetrics | None = None
    sentiment: SentimentSummary | None = None
    summary: SummaryPayload | None = None
    errors: dict[ArtifactKind, str] = field(default_factory=dict)

    @property
    def available(self) -> dict[ArtifactKind, bool]:
        return {
            ArtifactKind.TRANSCRIPT: self.transcript is not None,
            ArtifactKind.ANALYSIS: self.sentiment is not None,
            ArtifactKind.SUMMARY: self.summary is not None,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "video_key": self.video_key,
            "file_name": extract_file_name_from_key(self.video_key),
            "available": {kind.value: ok for kind, ok in self.available.items()},
            "transcript": serialize_transcript_metrics(self.transcript) if self.transcript else None,
            "sentiment": serialize_sentiment_summary(self.sentiment) if self.sentiment else None,
            "summary": serialize_summary(self.summary) if self.summary else None,
            "errors": {kind.value: message for kind, message in self.errors.items()},
        }


def build_insights(
    video_key: str,
    *,
    transcript: TranscriptPayload | None = None,
    analysis: AnalysisPayload | None = None,
    summary: SummaryPayload | None = None,
    metrics_cfg: MetricsConfig | None = None,
) -> RecordingInsights:
    cfg = metrics_cfg or MetricsConfig()
    return RecordingInsights(
        video_key=video_key,
        transcript=(
            compute_transcript_metrics(
                transcript, low_confidence_threshold=float(cfg.low_confidence_threshold)
            )
            if transcript is not None
            else None
        ),
        sentiment=(
            summarize_sentiment(
                analysis, strong_sentiment_threshold=float(cfg.strong_sentiment_threshold)
            )
            if analysis is not None
            else None
        ),
        summary=summary,
    )


async def load_insights(
    gateway: ArtifactGateway,
    video_key: str,
    *,
    metrics_cfg: MetricsConfig | None = None,
    monitor: FetchHealthMonitor | None = None,
) -> RecordingInsights:
    """One fetch per artifact kind (no polling); missing kinds are simply absent."""
    kinds = list(ArtifactKind)
    results = await asyncio.gather(
        *(
            ArtifactFetcher(gateway, kind=kind, monitor=monitor, parse=PARSERS[kind]).fetch(
                locate(video_key, kind)
            )
            for kind in kinds
        )
    )
    payloads: dict[ArtifactKind, Any] = {}
    errors: dict[ArtifactKind, str] = {}
    for kind, result in zip(kinds, results):
        if isinstance(result, Ready):
            payloads[kind] = result.data
        elif isinstance(result, FetchFailed):
            errors[kind] = f"{result.kind.value}: {result.message}" if result.message else result.kind.value

    insights = build_insights(
        video_key,
        transcript=payloads.get(ArtifactKind.TRANSCRIPT),
        analysis=payloads.get(ArtifactKind.ANALYSIS),
        summary=payloads.get(ArtifactKind.SUMMARY),
        metrics_cfg=metrics_cfg,
    )
    insights.errors = errors
    logger.debug(
        "insights loaded (key=%s, ready=%s, errors=%s)",
        video_key,
        ",".join(k.value for k in payloads) or "-",
        ",".join(k.value for k in errors) or "-",
    )
    return insights
