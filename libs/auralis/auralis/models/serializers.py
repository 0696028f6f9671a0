"""Parsing of artifact JSON into models, and metrics back to JSON."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Any

from auralis.exceptions import PayloadError
from auralis.metrics.sentiment import call_analytics_label, call_analytics_scores
from auralis.models.analysis import (
    AnalysisPayload,
    AnalysisSource,
    SegmentSentiment,
    SentimentScores,
)
from auralis.models.metrics import SentimentSummary, TranscriptMetrics
from auralis.models.summary import SummaryPayload
from auralis.models.transcript import (
    AudioSegment,
    TranscriptAlternative,
    TranscriptItem,
    TranscriptPayload,
)


def _float(value: Any, *, field: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise PayloadError(f"{field}: expected a number, got {value!r}") from exc


def _int(value: Any, *, field: str) -> int:
    if isinstance(value, bool):
        raise PayloadError(f"{field}: expected an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise PayloadError(f"{field}: expected an integer, got {value!r}") from exc


def _opt_float(value: Any, *, field: str) -> float | None:
    if value is None or value == "":
        return None
    return _float(value, field=field)


def _require_dict(value: Any, *, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise PayloadError(f"{what} must be a JSON object")
    return value


def _list(value: Any, *, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise PayloadError(f"{what} must be a JSON array")
    return value


def deserialize_transcript(obj: Any) -> TranscriptPayload:
    body = _require_dict(obj, what="transcript")
    results = _require_dict(body.get("results"), what="transcript.results")

    transcripts = _list(results.get("transcripts"), what="results.transcripts")
    full_text = ""
    if transcripts and isinstance(transcripts[0], dict):
        full_text = str(transcripts[0].get("transcript") or "")

    segments: list[AudioSegment] = []
    for i, raw in enumerate(_list(results.get("audio_segments"), what="results.audio_segments")):
        seg = _require_dict(raw, what=f"audio_segments[{i}]")
        segments.append(
            AudioSegment(
                id=_int(seg.get("id", i), field=f"audio_segments[{i}].id"),
                speaker_label=str(seg.get("speaker_label") or ""),
                start=_float(seg.get("start_time"), field=f"audio_segments[{i}].start_time"),
                end=_float(seg.get("end_time"), field=f"audio_segments[{i}].end_time"),
                text=str(seg.get("transcript") or ""),
                item_ids=[
                    _int(x, field=f"audio_segments[{i}].items")
                    for x in _list(seg.get("items"), what=f"audio_segments[{i}].items")
                ],
            )
        )

    items: list[TranscriptItem] = []
    for i, raw in enumerate(_list(results.get("items"), what="results.items")):
        item = _require_dict(raw, what=f"items[{i}]")
        alternatives = [
            TranscriptAlternative(
                content=str(alt.get("content") or ""),
                confidence=_opt_float(alt.get("confidence"), field=f"items[{i}].confidence"),
            )
            for alt in _list(item.get("alternatives"), what=f"items[{i}].alternatives")
            if isinstance(alt, dict)
        ]
        items.append(
            TranscriptItem(
                type=str(item.get("type") or ""),
                alternatives=alternatives,
                start=_opt_float(item.get("start_time"), field=f"items[{i}].start_time"),
                end=_opt_float(item.get("end_time"), field=f"items[{i}].end_time"),
                speaker_label=item.get("speaker_label"),
            )
        )

    return TranscriptPayload(
        full_text=full_text,
        segments=segments,
        items=items,
        job_name=body.get("jobName"),
        status=body.get("status"),
    )


def _scores(obj: Any, *, what: str) -> SentimentScores:
    raw = _require_dict(obj, what=what)
    return SentimentScores(
        positive=_float(raw.get("Positive", 0.0), field=f"{what}.Positive"),
        negative=_float(raw.get("Negative", 0.0), field=f"{what}.Negative"),
        neutral=_float(raw.get("Neutral", 0.0), field=f"{what}.Neutral"),
        mixed=_float(raw.get("Mixed", 0.0), field=f"{what}.Mixed"),
    )


def _from_call_analytics(characteristics: dict[str, Any]) -> AnalysisPayload:
    sentiment = _require_dict(characteristics.get("Sentiment"), what="Sentiment")
    overall = _require_dict(sentiment.get("OverallSentiment") or {}, what="OverallSentiment")
    overall_score = _float(overall.get("CUSTOMER") or overall.get("AGENT") or 0, field="OverallSentiment")

    periods = _require_dict(sentiment.get("SentimentByPeriod") or {}, what="SentimentByPeriod")
    by_period = _require_dict(periods.get("QUARTER") or {}, what="SentimentByPeriod.QUARTER")
    segments: list[SegmentSentiment] = []
    for i, raw in enumerate(_list(by_period.get("CUSTOMER"), what="QUARTER.CUSTOMER")):
        period = _require_dict(raw, what=f"QUARTER.CUSTOMER[{i}]")
        score = _float(period.get("Score"), field=f"QUARTER.CUSTOMER[{i}].Score")
        segments.append(
            SegmentSentiment(
                text="",
                sentiment=call_analytics_label(score),
                scores=call_analytics_scores(score),
                start=_float(period.get("BeginOffsetMillis", 0), field="BeginOffsetMillis") / 1000,
                end=_float(period.get("EndOffsetMillis", 0), field="EndOffsetMillis") / 1000,
            )
        )

    total_ms = characteristics.get("TotalConversationDurationMillis") or 0
    return AnalysisPayload(
        overall_sentiment=call_analytics_label(overall_score),
        scores=call_analytics_scores(overall_score),
        segments=segments,
        duration=_float(total_ms, field="TotalConversationDurationMillis") / 1000,
        source=AnalysisSource.CALL_ANALYTICS,
    )


def _from_comprehend(block: dict[str, Any]) -> AnalysisPayload:
    segments: list[SegmentSentiment] = []
    for i, raw in enumerate(_list(block.get("segment_sentiments"), what="segment_sentiments")):
        seg = _require_dict(raw, what=f"segment_sentiments[{i}]")
        segments.append(
            SegmentSentiment(
                text=str(seg.get("text") or ""),
                sentiment=str(seg.get("sentiment") or ""),
                scores=_scores(seg.get("sentiment_score") or {}, what=f"segment_sentiments[{i}]"),
                start=_float(seg.get("start_time", 0), field=f"segment_sentiments[{i}].start_time"),
                end=_float(seg.get("end_time", 0), field=f"segment_sentiments[{i}].end_time"),
            )
        )
    return AnalysisPayload(
        overall_sentiment=str(block.get("overall_sentiment") or ""),
        scores=_scores(block.get("sentiment_scores") or {}, what="sentiment_scores"),
        segments=segments,
        duration=segments[-1].end if segments else 0.0,
        source=AnalysisSource.COMPREHEND,
    )


def deserialize_analysis(obj: Any) -> AnalysisPayload | None:
    """Parse either analysis layout; None when the file carries no sentiment yet."""
    body = _require_dict(obj, what="analysis")
    characteristics = body.get("ConversationCharacteristics")
    if isinstance(characteristics, dict) and characteristics.get("Sentiment"):
        return _from_call_analytics(characteristics)
    block = body.get("sentiment_analysis")
    if isinstance(block, dict):
        return _from_comprehend(block)
    return None


def _parse_datetime(value: Any) -> datetime | None:
    raw = str(value or "").strip()
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None


def deserialize_summary(obj: Any) -> SummaryPayload:
    body = _require_dict(obj, what="summary")
    if "summary" not in body:
        raise PayloadError("summary is missing 'summary'")
    return SummaryPayload(
        summary=str(body.get("summary") or ""),
        file_name=str(body.get("fileName") or ""),
        generated_at=_parse_datetime(body.get("generatedAt")),
    )


def serialize_transcript_metrics(metrics: TranscriptMetrics) -> dict[str, Any]:
    return asdict(metrics)


def serialize_sentiment_summary(summary: SentimentSummary) -> dict[str, Any]:
    return {
        "overall_sentiment": summary.overall_sentiment,
        "percentages": summary.percentages.to_dict(),
        "duration": summary.duration,
        "insight": summary.insight,
        "key_moments": [asdict(m) for m in summary.key_moments],
    }


def serialize_summary(summary: SummaryPayload) -> dict[str, Any]:
    return {
        "summary": summary.summary,
        "file_name": summary.file_name,
        "generated_at": summary.generated_at.isoformat() if summary.generated_at else None,
    }
